import numpy as np
from numba import njit

from emo.commons.types import DEFAULTS
INT, FLOAT = DEFAULTS
from emo.commons.errors import InvalidArgumentError  # noqa: E402
from emo.comparators import DominanceComparator, compare  # noqa: E402
from emo.utils.random import make_rng  # noqa: E402

TIE_BREAKS = ("first", "random")


class BinaryTournamentSelection:
    """
    Returns the better of two distinct solutions drawn at random from a population.

    Ties reported by the comparator are resolved by `tie_break`:
    "first" keeps the first-drawn candidate, "random" picks either with equal probability.
    """
    def __init__(self, comparator=None, rng=None, tie_break: str = "first"):
        if tie_break not in TIE_BREAKS:
            raise ValueError(f"'tie_break' should be one of {TIE_BREAKS}. Got: {tie_break}")
        self.comparator = DominanceComparator() if comparator is None else comparator
        self.rng = make_rng(rng)
        self.tie_break = tie_break
        self.last_indices = None

    def execute(self, population):
        if population is None:
            raise InvalidArgumentError("'population' is None")
        if len(population) == 0:
            raise InvalidArgumentError("'population' is empty")

        if len(population) == 1:
            self.last_indices = None
            return population[0]

        indices = np.empty(2, INT)
        _draw_distinct_pair(indices, len(population), self.rng)
        i, j = int(indices[0]), int(indices[1])
        self.last_indices = (i, j)
        first, second = population[i], population[j]

        flag = compare(self.comparator, first, second)
        if flag < 0:
            return first
        if flag > 0:
            return second
        if self.tie_break == "random" and self.rng.random() >= 0.5:
            return second
        return first

    def __call__(self, population):
        return self.execute(population)


@njit
def _draw_distinct_pair(indices, ub, rng):
    """
    Draws two distinct indices in [0, ub) by redrawing the second until it differs
    """
    indices[0] = rng.integers(0, ub)
    indices[1] = rng.integers(0, ub)
    while indices[1] == indices[0]:
        indices[1] = rng.integers(0, ub)
