import pytest
import numpy as np

from emo.solution import Solution
from mocks import MockOptimizationProblem, all_variables, second_variable


# fixtures
@pytest.fixture
def rng():
    yield np.random.default_rng()


@pytest.fixture
def mock_problem():
    """Unconstrained, single objective equal to the first variable."""
    yield MockOptimizationProblem()


@pytest.fixture
def biobjective_problem():
    """Unconstrained, objectives equal to the variables."""
    yield MockOptimizationProblem(ndim=2, n_objs=2, objective=all_variables)


@pytest.fixture
def constrained_problem():
    """Objective is the first variable, the second variable is the constraint violation."""
    yield MockOptimizationProblem(ndim=2, n_objs=1, n_constraints=1, constraints=second_variable)


@pytest.fixture
def make_solution():
    def _make(problem, variables=None, objectives=None, violation=0.0):
        solution = Solution(problem, variables)
        if objectives is not None:
            solution.objectives[:] = objectives
        solution.overall_constraint_violation_degree = violation
        return solution
    yield _make
