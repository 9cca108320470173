import numpy as np
import warnings


class defaults:
    """
    Holds the integer and float dtypes used for every array the package allocates.
    Unpack with `INT, FLOAT = DEFAULTS` at module import.
    """
    def __init__(self, precision):
        self._set(precision)
        self.settable = True

    def update_precision(self, precision):
        if not self.settable:
            warnings.warn("Set precision must be called *before* importing other emo modules "
                          "to ensure precision is set correctly.", UserWarning)
        self._set(precision)

    def _set(self, precision):
        if not isinstance(precision, int) or isinstance(precision, bool):
            raise TypeError("'precision' must be an int (32 or 64)")
        if precision not in (32, 64):
            raise ValueError("'precision' must be 32 or 64")
        self.float = getattr(np, f"float{precision}")
        self.int = getattr(np, f"int{precision}")
        self.precision = precision

    def __iter__(self):
        self.settable = False
        return iter((self.int, self.float))

    def __repr__(self):
        return f"Default data types int and float of precision {self.precision}"


DEFAULTS = defaults(64)
