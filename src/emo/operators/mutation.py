from numba import njit

from emo.commons.types import DEFAULTS
INT, FLOAT = DEFAULTS
from emo.utils import typing  # noqa: E402
from emo.utils.random import make_rng  # noqa: E402


class GaussianMutation:
    """
    Mutates a solution in place, keeping every variable within the problem bounds.

    Each variable mutates with probability `probability` (1 / number of variables
    when None). Real variables receive gaussian noise with standard deviation
    `sigma * (ub - lb)`, integer variables a rounded gaussian step and binary
    variables are flipped to their other bound.
    """
    def __init__(self, probability: float | None = None, sigma: float = 0.1, rng=None):
        if probability is not None:
            typing.sanitize_type(probability, "numeric", "probability")
            typing.sanitize_range(probability, "probability", ge=0, le=1)
        typing.sanitize_type(sigma, "numeric", "sigma")
        typing.sanitize_range(sigma, "sigma", ge=0)
        self.probability = probability
        self.sigma = sigma
        self.rng = make_rng(rng)

    def execute(self, solution):
        problem = solution.problem
        indpb = 1.0 / problem.number_of_variables if self.probability is None else float(self.probability)
        sigma = (self.sigma * (problem.upper_bounds - problem.lower_bounds)).astype(FLOAT)
        if problem.integrality.any():
            mutate_gaussian_mixed(
                solution.variables,
                sigma,
                indpb,
                self.rng,
                problem.integrality,
                problem.booleanality,
                problem.lower_bounds,
                problem.upper_bounds,
            )
        else:
            mutate_gaussian_float(solution.variables, sigma, indpb, self.rng)
        _apply_bounds(solution.variables, problem.lower_bounds, problem.upper_bounds)
        return solution

    def __call__(self, solution):
        return self.execute(solution)


# API functions
@njit
def mutate_gaussian_mixed(variables, sigma, indpb, rng, integrality, booleanality, lb, ub):
    """
    Mutate the variables of a single solution
    Compatible with mixed dtypes
    """
    for k in range(variables.shape[0]):
        if rng.random() < indpb:
            if booleanality[k]:
                variables[k] = _mutate_bool(variables[k], lb[k], ub[k])
            elif integrality[k]:
                variables[k] = _mutate_int(variables[k], sigma[k], rng)
            else:
                variables[k] = _mutate_float(variables[k], sigma[k], rng)


@njit
def mutate_gaussian_float(variables, sigma, indpb, rng):
    """
    Mutate the variables of a single solution
    Compatible only with float-only
    """
    for k in range(variables.shape[0]):
        if rng.random() < indpb:
            variables[k] = _mutate_float(variables[k], sigma[k], rng)


# private helper functions


@njit
def _apply_bounds(variables, lb, ub):
    for k in range(variables.shape[0]):
        variables[k] = min(ub[k], max(lb[k], variables[k]))


@njit
def _mutate_float(item, sigma, rng):
    """gaussian mutation for single variable"""
    return rng.normal(item, sigma)


@njit
def _mutate_int(item, sigma, rng):
    """Integer mutation for single variable. Returns integer-valued float"""
    return round(rng.normal(item, sigma))


@njit
def _mutate_bool(item, lb, ub):
    """Bit flip for single variable. Returns the opposite bound"""
    return lb + ub - item
