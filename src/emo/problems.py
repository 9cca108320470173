"""
Small benchmark problems for exercising the operators.
"""
import numpy as np

from emo.commons.types import DEFAULTS
INT, FLOAT = DEFAULTS
from emo.problem_definition import OptimizationProblem  # noqa: E402


def _sphere(x):
    return np.sum(x**2)


def _one_max(x):
    # minimized: count of zero bits
    return x.size - np.sum(x)


def _schaffer(x):
    return np.array([x[0]**2, (x[0] - 2)**2])


def _srinivas(x):
    f1 = 2.0 + (x[0] - 2)**2 + (x[1] - 1)**2
    f2 = 9.0 * x[0] - (x[1] - 1)**2
    return np.array([f1, f2])


def _srinivas_constraints(x):
    # positive values are violations
    g1 = x[0]**2 + x[1]**2 - 225.0
    g2 = x[0] - 3.0 * x[1] + 10.0
    return np.array([g1, g2])


def sphere(ndim: int = 10, bound: float = 5.12):
    return OptimizationProblem(
        _sphere,
        (np.full(ndim, -bound, FLOAT), np.full(ndim, bound, FLOAT)),
    )


def one_max(bits: int = 512):
    return OptimizationProblem(
        _one_max,
        (np.zeros(bits, FLOAT), np.ones(bits, FLOAT)),
        integrality=True,
    )


def schaffer(bound: float = 1e3):
    return OptimizationProblem(
        _schaffer,
        (np.array([-bound], FLOAT), np.array([bound], FLOAT)),
        n_objs=2,
    )


def srinivas():
    return OptimizationProblem(
        _srinivas,
        (np.full(2, -20.0, FLOAT), np.full(2, 20.0, FLOAT)),
        n_objs=2,
        constraints=_srinivas_constraints,
        n_constraints=2,
    )
