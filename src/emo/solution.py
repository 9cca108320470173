import numpy as np
from copy import deepcopy
from enum import Enum
from numba import njit

from emo.commons.types import DEFAULTS
INT, FLOAT = DEFAULTS
from emo.commons.errors import DimensionMismatchError  # noqa: E402


class Attribute(str, Enum):
    """
    Documented keys for `Solution.attributes`.
    Plain strings are accepted as well for ad hoc bookkeeping.
    """
    RANK = "rank"
    CROWDING_DISTANCE = "crowding_distance"
    NUMBER_OF_VIOLATED_CONSTRAINTS = "number_of_violated_constraints"
    FITNESS = "fitness"


class Solution:
    """
    A candidate solution: decision variables, objective values, overall constraint
    violation degree and a bag of annotations.

    Integer and binary variables are stored as integer-valued floats so that every
    encoding shares one array type. Objectives are only meaningful after
    `problem.evaluate` and the violation degree after `problem.evaluate_constraints`.
    `problem` may be any object exposing the `lower_bounds`, `upper_bounds` and
    `integrality` arrays along with `number_of_variables` and `number_of_objectives`.
    """
    def __init__(self, problem, variables: np.ndarray = None):
        if problem is None:
            raise TypeError("'problem' is required to build a Solution. Got: None")
        self.problem = problem
        ndim = problem.number_of_variables

        if variables is None:
            self.variables = problem.lower_bounds.astype(FLOAT)
        else:
            variables = np.asarray(variables, dtype=FLOAT).copy()
            if variables.ndim != 1 or variables.size != ndim:
                raise DimensionMismatchError("variables", ndim, variables.size)
            if (variables < problem.lower_bounds).any() or (variables > problem.upper_bounds).any():
                raise ValueError("'variables' must lie within the problem bounds")
            self.variables = variables

        self.objectives = np.zeros(problem.number_of_objectives, dtype=FLOAT)
        self.overall_constraint_violation_degree = 0.0
        self.attributes = {}

    @classmethod
    def random(cls, problem, rng):
        """
        Creates a solution with variables drawn uniformly within the problem bounds.
        Integer variables are drawn from the integers in [lb, ub] inclusive.
        """
        solution = cls(problem)
        _populate_randomly(
            solution.variables,
            problem.lower_bounds,
            problem.upper_bounds,
            problem.integrality,
            rng,
        )
        return solution

    def copy(self):
        new = Solution.__new__(Solution)
        new.problem = self.problem
        new.variables = self.variables.copy()
        new.objectives = self.objectives.copy()
        new.overall_constraint_violation_degree = self.overall_constraint_violation_degree
        new.attributes = deepcopy(self.attributes)
        return new

    @property
    def number_of_variables(self):
        return self.variables.size

    @property
    def number_of_objectives(self):
        return self.objectives.size

    def lower_bound(self, index):
        return self.problem.lower_bound(index)

    def upper_bound(self, index):
        return self.problem.upper_bound(index)

    def is_feasible(self):
        return self.overall_constraint_violation_degree == 0

    def variable_value_string(self, index):
        value = self.variables[index]
        if self.problem.integrality[index]:
            return str(int(value))
        return str(float(value))

    def set_attribute(self, key, value):
        self.attributes[key] = value

    def has_attribute(self, key):
        return key in self.attributes

    def get_attribute(self, key, default=None, dtype=None):
        """
        Returns the annotation stored under `key`, or `default` when absent.
        When `dtype` is given the stored value must be an instance of it.
        """
        if key not in self.attributes:
            return default
        value = self.attributes[key]
        if dtype is not None and not isinstance(value, dtype):
            raise TypeError(f"Attribute '{key}' expected type: '{dtype}'. Got: '{type(value)}'")
        return value

    def __eq__(self, other):
        if not isinstance(other, Solution):
            return NotImplemented
        return (
            np.array_equal(self.variables, other.variables)
            and np.array_equal(self.objectives, other.objectives)
            and self.overall_constraint_violation_degree == other.overall_constraint_violation_degree
            and self.attributes == other.attributes
        )

    __hash__ = None

    def __repr__(self):
        return (f"Solution(variables={self.variables}, objectives={self.objectives}, "
                f"violation={self.overall_constraint_violation_degree})")


@njit
def _populate_randomly(variables, lb, ub, integrality, rng):
    for k in range(variables.shape[0]):
        if integrality[k]:
            variables[k] = rng.integers(int(lb[k]), int(ub[k]) + 1)
        else:
            variables[k] = rng.uniform(lb[k], ub[k])
