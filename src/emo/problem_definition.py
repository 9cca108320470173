import numpy as np
from collections.abc import Callable

from emo.commons.types import DEFAULTS
INT, FLOAT = DEFAULTS
from emo.commons.errors import DimensionMismatchError  # noqa: E402
from emo.solution import Attribute, Solution  # noqa: E402
from emo.utils import typing  # noqa: E402


class OptimizationProblem:
    """
    Encapsulates the definition of the optimization problem.
    This includes the objective function(s), the optional constraint function and the
    variable bounds. All objectives are minimized.
    """
    def __init__(
        self,
        objective: Callable,
        bounds: tuple[np.ndarray, np.ndarray],
        n_objs: int = 1,
        constraints: Callable | None = None,
        n_constraints: int = 0,
        integrality: bool | np.ndarray[bool] = False,
        fargs: tuple = (),
        fkwargs: dict = None,
    ):
        """
        Initializes the optimization problem definition.

        `objective(x, *fargs, **fkwargs)` returns a scalar or `n_objs` values.
        `constraints(x, *fargs, **fkwargs)` returns `n_constraints` values, where a
        positive value is the amount by which that constraint is violated.
        """
        fkwargs = {} if fkwargs is None else fkwargs
        # Sanitize inputs
        typing.sanitize_type(objective, Callable, "objective")
        typing.sanitize_type(bounds, "arraylike", "bounds")
        typing.sanitize_array_type(bounds, "arraylike", "bounds")
        if len(bounds) != 2:
            raise ValueError(f"'bounds' expected length 2 i.e. (lower, upper). Received length: {len(bounds)}")
        for i, bound in enumerate(bounds):
            name = f"bounds[{i}]"
            typing.sanitize_array_type(bound, "numeric", name)
            typing.sanitize_array_type(bound, "finite", name)
            if len(bound) == 0:
                raise ValueError(f"'{name}' must have length > 0")

        if len(bounds[0]) != len(bounds[1]):
            raise ValueError("Upper and lower bound shapes must match."
                             f"Lower: {len(bounds[0])}, Upper: {len(bounds[1])}")

        typing.sanitize_type(n_objs, "integer", "n_objs")
        typing.sanitize_range(n_objs, "n_objs", ge=1)
        typing.sanitize_type(n_constraints, "integer", "n_constraints")
        typing.sanitize_range(n_constraints, "n_constraints", ge=0)
        if n_constraints > 0:
            typing.sanitize_type(constraints, Callable, "constraints")
        elif constraints is not None:
            raise ValueError("'constraints' was supplied but 'n_constraints' is 0")

        typing.sanitize_type(fargs, tuple, "fargs")
        typing.sanitize_type(fkwargs, dict, "fkwargs")

        # instantiation
        self.objective = objective
        self.constraints = constraints

        self.lower_bounds = np.asarray(bounds[0]).astype(FLOAT)
        self.upper_bounds = np.asarray(bounds[1]).astype(FLOAT)
        if not (self.lower_bounds <= self.upper_bounds).all():
            raise ValueError("Every lower bound must be less than or equal to its upper bound")

        self.number_of_variables = len(self.lower_bounds)
        self.number_of_objectives = int(n_objs)
        self.number_of_constraints = int(n_constraints)
        self.fargs = fargs
        self.fkwargs = fkwargs

        if typing.is_boolean(integrality):
            integrality = np.full(self.number_of_variables, bool(integrality), np.bool_)
        else:
            if not typing.is_array_like(integrality) or len(integrality) != self.number_of_variables:
                raise ValueError("'integrality' must be a bool or an iterable of length "
                                 f"number_of_variables ({self.number_of_variables})")
            integrality = np.array(integrality, dtype=np.bool_)
        self.integrality = integrality
        if self.integrality.any():
            integral_bounds = np.concatenate((self.lower_bounds[self.integrality], self.upper_bounds[self.integrality]))
            if (integral_bounds % 1 != 0).any():
                raise ValueError("Integer variables must have integer-valued bounds")
        self.booleanality = (((self.upper_bounds - self.lower_bounds) == 1) & self.integrality)

    def lower_bound(self, index):
        return self.lower_bounds[index]

    def upper_bound(self, index):
        return self.upper_bounds[index]

    def is_constrained(self):
        return self.number_of_constraints > 0

    def create_solution(self, rng):
        return Solution.random(self, rng)

    def evaluate(self, solution):
        """
        Evaluates the objective function(s) and writes them into `solution.objectives`
        """
        values = np.atleast_1d(np.asarray(
            self.objective(solution.variables, *self.fargs, **self.fkwargs), dtype=FLOAT
        ))
        if values.size != self.number_of_objectives:
            raise DimensionMismatchError("objectives", self.number_of_objectives, values.size)
        solution.objectives[:] = values

    def evaluate_constraints(self, solution):
        """
        Evaluates the constraints and sets the overall violation degree of `solution`
        as the sum of the violated amounts.
        """
        if not self.is_constrained():
            raise RuntimeError("evaluate_constraints called on a problem without constraints")
        values = np.atleast_1d(np.asarray(
            self.constraints(solution.variables, *self.fargs, **self.fkwargs), dtype=FLOAT
        ))
        if values.size != self.number_of_constraints:
            raise DimensionMismatchError("constraints", self.number_of_constraints, values.size)
        violated = values > 0
        solution.overall_constraint_violation_degree = float(values[violated].sum())
        solution.set_attribute(Attribute.NUMBER_OF_VIOLATED_CONSTRAINTS, int(violated.sum()))
