import numpy as np

from emo.utils import typing


def make_rng(seed=None):
    """
    Returns a random source for the operators.

    None draws fresh OS entropy, an integer seeds a new generator.
    A `np.random.Generator`, or any object exposing the same `integers`/`random`
    methods, is shared as is.
    """
    if seed is None or typing.is_integer(seed):
        return np.random.default_rng(seed)
    if isinstance(seed, np.random.Generator) or callable(getattr(seed, "integers", None)):
        return seed
    raise TypeError(f"'rng' expected None, an integer seed or a random generator. Got: '{type(seed)}'")
