import csv
import pytest
import numpy as np

from emo import problems
from emo.archive import NonDominatedArchive
from emo.localsearch import MutationLocalSearch, RoundOutcome
from emo.operators.mutation import GaussianMutation
from emo.solution import Solution
from emo.utils.logger import SearchLogger

from mocks import DecrementMutation, MockOptimizationProblem, RecordingArchive, first_two_variables, third_variable


class ShiftMutation:
    """Adds a fixed vector to the variables on every call"""
    def __init__(self, delta):
        self.delta = np.asarray(delta, dtype=float)
        self.calls = 0

    def execute(self, solution):
        self.calls += 1
        solution.variables += self.delta
        return solution


class RecordingLogger:
    def __init__(self):
        self.executions = 0
        self.rounds = []

    def new_execution(self):
        self.executions += 1

    def log_round(self, round_index, outcome, evaluations, solution):
        self.rounds.append((round_index, outcome, evaluations))


# fixtures
@pytest.fixture
def evaluated(make_solution):
    """Builds a solution and evaluates it (and its constraints, when any)"""
    def _evaluated(problem, variables):
        solution = make_solution(problem, variables)
        problem.evaluate(solution)
        if problem.number_of_constraints > 0:
            problem.evaluate_constraints(solution)
        problem.evaluate_calls = 0
        problem.constraint_calls = 0
        return solution
    yield _evaluated


# tests
def test_improving_mutation_accepted(mock_problem, evaluated):
    """
    a mutation that always lowers the objective is accepted every round
    """
    solution = evaluated(mock_problem, [10.0, 0.0])
    assert solution.objectives[0] == 10.0

    search = MutationLocalSearch(mock_problem, DecrementMutation(), improvement_rounds=3)
    result = search.execute(solution)

    assert result.objectives[0] == 7.0
    assert result.variables[0] == 7.0
    assert search.evaluations == 3
    assert search.get_evaluations() == 3
    assert search.last_outcomes == [RoundOutcome.IMPROVED] * 3


@pytest.mark.parametrize("rounds", [0, -1, -10])
def test_non_positive_rounds(mock_problem, evaluated, rounds):
    mutation = DecrementMutation()
    solution = evaluated(mock_problem, [10.0, 0.0])
    search = MutationLocalSearch(mock_problem, mutation, improvement_rounds=rounds)
    result = search.execute(solution)

    assert result == solution
    assert result is not solution
    assert search.evaluations == 0
    assert mutation.calls == 0
    assert search.last_outcomes == []


def test_more_violating_mutation_rejected(constrained_problem, evaluated):
    """
    mutants with a larger violation are discarded without evaluating objectives
    """
    solution = evaluated(constrained_problem, [10.0, 0.0])
    archive = RecordingArchive()
    search = MutationLocalSearch(constrained_problem, ShiftMutation([0.0, 1.0]), improvement_rounds=3, archive=archive)
    result = search.execute(solution)

    assert result == solution
    assert search.evaluations == 0
    assert constrained_problem.evaluate_calls == 0
    assert constrained_problem.constraint_calls == 3
    assert archive.received == []
    assert search.last_outcomes == [RoundOutcome.REJECTED] * 3


def test_less_violating_mutation_accepted(constrained_problem, evaluated):
    """
    a smaller violation wins even though the objective gets worse
    """
    solution = evaluated(constrained_problem, [10.0, 5.0])
    assert solution.overall_constraint_violation_degree == 5.0

    search = MutationLocalSearch(constrained_problem, ShiftMutation([1.0, -1.0]), improvement_rounds=3)
    result = search.execute(solution)

    assert result.overall_constraint_violation_degree == 2.0
    assert result.objectives[0] == 13.0
    assert search.evaluations == 3


def test_equal_violation_falls_back_to_dominance(constrained_problem, evaluated):
    solution = evaluated(constrained_problem, [10.0, 0.0])
    search = MutationLocalSearch(constrained_problem, DecrementMutation(), improvement_rounds=4)
    result = search.execute(solution)

    assert result.objectives[0] == 6.0
    assert search.evaluations == 4
    assert constrained_problem.constraint_calls == 4


def test_worsening_mutation_rejected(mock_problem, evaluated):
    solution = evaluated(mock_problem, [10.0, 0.0])
    search = MutationLocalSearch(mock_problem, DecrementMutation(step=-1.0), improvement_rounds=5)
    result = search.execute(solution)

    assert result.objectives[0] == 10.0
    assert search.evaluations == 5
    assert search.last_outcomes == [RoundOutcome.REJECTED] * 5


def test_non_dominated_mutants_archived(biobjective_problem, evaluated):
    solution = evaluated(biobjective_problem, [50.0, 50.0])
    archive = RecordingArchive()
    search = MutationLocalSearch(biobjective_problem, ShiftMutation([-1.0, 1.0]), improvement_rounds=3, archive=archive)
    result = search.execute(solution)

    assert result == solution
    assert len(archive.received) == 3
    for mutant in archive.received:
        assert (mutant.objectives == [49.0, 51.0]).all()
    assert search.last_outcomes == [RoundOutcome.NON_DOMINATED] * 3


def test_non_dominated_archive_deduplicates(biobjective_problem, evaluated):
    solution = evaluated(biobjective_problem, [50.0, 50.0])
    archive = NonDominatedArchive()
    search = MutationLocalSearch(biobjective_problem, ShiftMutation([-1.0, 1.0]), improvement_rounds=3, archive=archive)
    search.execute(solution)
    assert len(archive) == 1


@pytest.mark.parametrize("rounds", [1, 3])
def test_equal_violation_non_dominated_archived(evaluated, rounds):
    """
    equally infeasible mutants that neither dominate nor are dominated go to the archive
    """
    problem = MockOptimizationProblem(ndim=3, n_objs=2, n_constraints=1,
                                      objective=first_two_variables, constraints=third_variable)
    solution = evaluated(problem, [50.0, 50.0, 1.0])
    assert solution.overall_constraint_violation_degree == 1.0

    archive = RecordingArchive()
    search = MutationLocalSearch(problem, ShiftMutation([-1.0, 1.0, 0.0]), improvement_rounds=rounds, archive=archive)
    result = search.execute(solution)

    assert result == solution
    assert search.last_outcomes == [RoundOutcome.NON_DOMINATED] * rounds
    assert search.evaluations == rounds
    assert problem.constraint_calls == rounds
    assert len(archive.received) == rounds
    for mutant in archive.received:
        assert mutant.overall_constraint_violation_degree == 1.0
        assert (mutant.objectives == [49.0, 51.0]).all()


def test_non_dominated_without_archive(biobjective_problem, evaluated):
    solution = evaluated(biobjective_problem, [50.0, 50.0])
    search = MutationLocalSearch(biobjective_problem, ShiftMutation([-1.0, 1.0]), improvement_rounds=2)
    assert search.execute(solution) == solution


def test_evaluations_reset(mock_problem, evaluated):
    search = MutationLocalSearch(mock_problem, DecrementMutation(step=0.5), improvement_rounds=4)
    search.execute(evaluated(mock_problem, [50.0, 0.0]))
    assert search.evaluations == 4
    search.execute(evaluated(mock_problem, [50.0, 0.0]))
    assert search.evaluations == 4
    search.improvement_rounds = 0
    search.execute(evaluated(mock_problem, [50.0, 0.0]))
    assert search.evaluations == 0


def test_input_untouched(mock_problem, evaluated):
    solution = evaluated(mock_problem, [10.0, 0.0])
    before = solution.copy()
    MutationLocalSearch(mock_problem, DecrementMutation(), improvement_rounds=5).execute(solution)
    assert solution == before


@pytest.mark.parametrize("seed", range(5))
def test_never_regresses(seed):
    problem = problems.sphere(ndim=5)
    rng = np.random.default_rng(seed)
    solution = Solution.random(problem, rng)
    problem.evaluate(solution)

    search = MutationLocalSearch(problem, GaussianMutation(sigma=0.05, rng=rng), improvement_rounds=1)
    current = solution
    for _ in range(100):
        refined = search.execute(current)
        assert refined.objectives[0] <= current.objectives[0]
        current = refined
    assert current.objectives[0] < solution.objectives[0]


@pytest.mark.parametrize("rounds", [1, 7, 25])
def test_round_count(mock_problem, evaluated, rounds):
    mutation = DecrementMutation(step=0.1)
    search = MutationLocalSearch(mock_problem, mutation, improvement_rounds=rounds)
    search.execute(evaluated(mock_problem, [50.0, 0.0]))
    assert mutation.calls == rounds
    assert len(search.last_outcomes) == rounds


def test_execute_none(mock_problem):
    search = MutationLocalSearch(mock_problem, DecrementMutation(), improvement_rounds=1)
    with pytest.raises(TypeError):
        search.execute(None)


@pytest.mark.parametrize("kwargs", [
    {"problem": None},
    {"mutation": None},
    {"mutation": object()},
    {"improvement_rounds": "3"},
    {"improvement_rounds": 2.5},
    {"archive": object()},
    {"logger": object()},
])
def test_bad_collaborators(mock_problem, kwargs):
    arguments = {"problem": mock_problem, "mutation": DecrementMutation(), "improvement_rounds": 3}
    arguments.update(kwargs)
    with pytest.raises(TypeError):
        MutationLocalSearch(**arguments)


def test_constrained_problem_needs_constraint_evaluation():
    class NoConstraints:
        number_of_constraints = 1

        def evaluate(self, solution):
            pass

    with pytest.raises(TypeError):
        MutationLocalSearch(NoConstraints(), DecrementMutation(), improvement_rounds=1)


def test_logger_receives_rounds(mock_problem, evaluated):
    logger = RecordingLogger()
    search = MutationLocalSearch(mock_problem, DecrementMutation(), improvement_rounds=3, logger=logger)
    search.execute(evaluated(mock_problem, [10.0, 0.0]))
    search.execute(evaluated(mock_problem, [10.0, 0.0]))

    assert logger.executions == 2
    assert logger.rounds[:3] == [(0, "improved", 1), (1, "improved", 2), (2, "improved", 3)]
    assert len(logger.rounds) == 6


def test_search_logger_writes_csv(tmp_path, biobjective_problem, evaluated):
    prefix = tmp_path / "logs" / "run"
    logger = SearchLogger(str(prefix))
    archive = NonDominatedArchive()
    search = MutationLocalSearch(
        biobjective_problem, ShiftMutation([-1.0, 1.0]), improvement_rounds=2, archive=archive, logger=logger
    )
    search.execute(evaluated(biobjective_problem, [50.0, 50.0]))
    logger.finalize(archive)

    with open(f"{prefix}-localsearch.csv", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["execution", "round", "outcome", "evaluations", "violation", "f_0", "f_1"]
    assert len(rows) == 3
    assert rows[1][:4] == ["0", "0", "non_dominated", "1"]

    with open(f"{prefix}-archive.csv", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["x_0", "x_1", "f_0", "f_1", "violation"]
    assert [float(v) for v in rows[1]] == [49.0, 51.0, 49.0, 51.0, 0.0]
