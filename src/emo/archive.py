import numpy as np
from numba import njit

from emo.commons.types import DEFAULTS
INT, FLOAT = DEFAULTS
from emo.commons.errors import DimensionMismatchError  # noqa: E402
from emo.comparators import DominanceComparator, compare  # noqa: E402
from emo.solution import Attribute  # noqa: E402
from emo.utils import typing  # noqa: E402


class NonDominatedArchive:
    """
    Keeps the mutually non-dominated solutions offered to it.

    A candidate is rejected when a member dominates it or already has the same
    objective vector. Otherwise every member it dominates is evicted and a copy of
    the candidate is stored. No locking is done; callers sharing an archive across
    threads must synchronise `add` themselves.
    """
    def __init__(self, comparator=None):
        self.comparator = DominanceComparator() if comparator is None else comparator
        self.solutions = []

    def add(self, solution) -> bool:
        if self.solutions and self.solutions[0].objectives.size != solution.objectives.size:
            raise DimensionMismatchError("objectives", self.solutions[0].objectives.size, solution.objectives.size)

        keep = []
        for member in self.solutions:
            flag = compare(self.comparator, solution, member)
            if flag > 0:
                return False
            if flag == 0 and np.array_equal(member.objectives, solution.objectives):
                return False
            if flag == 0:
                keep.append(member)
        keep.append(solution.copy())
        self.solutions = keep
        return True

    def objectives(self):
        """
        Objective vectors of the members as a (n, n_objs) array
        """
        if not self.solutions:
            return np.empty((0, 0), FLOAT)
        return np.vstack([s.objectives for s in self.solutions]).astype(FLOAT)

    def clear(self):
        self.solutions = []

    def __len__(self):
        return len(self.solutions)

    def __iter__(self):
        return iter(self.solutions)

    def __getitem__(self, index):
        return self.solutions[index]


class CrowdingDistanceArchive(NonDominatedArchive):
    """
    Bounded non-dominated archive. When an insertion overflows `max_size` the member
    in the most crowded region of objective space is dropped.
    """
    def __init__(self, max_size: int, comparator=None):
        typing.sanitize_type(max_size, "integer", "max_size")
        typing.sanitize_range(max_size, "max_size", gt=0)
        super().__init__(comparator)
        self.max_size = max_size

    def add(self, solution) -> bool:
        if not super().add(solution):
            return False
        if len(self.solutions) <= self.max_size:
            return True

        distances = _crowding_distance(self.objectives())
        for member, distance in zip(self.solutions, distances):
            member.set_attribute(Attribute.CROWDING_DISTANCE, float(distance))
        worst = int(np.argmin(distances))
        # the candidate was appended last
        inserted = worst != len(self.solutions) - 1
        del self.solutions[worst]
        return inserted


@njit
def _crowding_distance(objectives):
    """
    Crowding distance of each point of a non-dominated set; boundary points get inf
    """
    n_solutions, n_objs = objectives.shape
    distances = np.zeros(n_solutions)
    if n_solutions <= 2:
        distances[:] = np.inf
        return distances

    for obj_idx in range(n_objs):
        obj_values = objectives[:, obj_idx].copy()
        sorted_idx = np.argsort(obj_values)

        distances[sorted_idx[0]] = np.inf
        distances[sorted_idx[-1]] = np.inf

        obj_range = obj_values[sorted_idx[-1]] - obj_values[sorted_idx[0]]
        if obj_range > 0:
            for i in range(1, n_solutions - 1):
                distances[sorted_idx[i]] += (
                    obj_values[sorted_idx[i + 1]] - obj_values[sorted_idx[i - 1]]
                ) / obj_range
    return distances
