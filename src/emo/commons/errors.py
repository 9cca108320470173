class InvalidArgumentError(ValueError):
    """Raised when an operator receives an argument it cannot work with, e.g. an empty population."""


class DimensionMismatchError(ValueError):
    """Raised when two solutions (or a solution and its problem) disagree on array lengths."""

    def __init__(self, name, expected, received):
        self.expected = expected
        self.received = received
        super().__init__(f"'{name}' expected length {expected}. Received length: {received}")
