from numba import njit

from emo.commons.errors import DimensionMismatchError


class DominanceComparator:
    """
    Pareto dominance in objective space, all objectives minimized.

    Returns -1 when the first solution dominates the second, 1 when the second
    dominates the first and 0 when neither does, which includes identical
    objective vectors. Constraint violation is not considered.
    """
    def compare(self, a, b):
        if a.objectives.size != b.objectives.size:
            raise DimensionMismatchError("objectives", a.objectives.size, b.objectives.size)
        return _dominance(a.objectives, b.objectives)

    def __call__(self, a, b):
        return self.compare(a, b)


class ConstraintViolationComparator:
    """
    Orders solutions by overall constraint violation degree (smaller is better).
    Two feasible solutions, or two equally infeasible ones, tie with 0.
    """
    def compare(self, a, b):
        va = a.overall_constraint_violation_degree
        vb = b.overall_constraint_violation_degree
        if va == 0 and vb == 0:
            return 0
        if va < vb:
            return -1
        if vb < va:
            return 1
        return 0

    def __call__(self, a, b):
        return self.compare(a, b)


def compare(comparator, a, b):
    """
    Applies either a comparator object exposing `compare` or a plain two-argument callable
    """
    if hasattr(comparator, "compare"):
        return comparator.compare(a, b)
    return comparator(a, b)


@njit
def _dominance(a, b):
    """
    -1 if `a` dominates `b`, 1 if `b` dominates `a`, else 0 (minimization)
    """
    a_better = False
    b_better = False
    for n in range(a.shape[0]):
        if a[n] < b[n]:
            a_better = True
        elif a[n] > b[n]:
            b_better = True
        if a_better and b_better:
            return 0
    if a_better:
        return -1
    if b_better:
        return 1
    return 0
