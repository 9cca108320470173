from enum import Enum

from emo.comparators import ConstraintViolationComparator, DominanceComparator, compare
from emo.utils import typing


class RoundOutcome(Enum):
    IMPROVED = "improved"
    REJECTED = "rejected"
    NON_DOMINATED = "non_dominated"


class MutationLocalSearch:
    """
    Refines a single solution by repeated mutation.

    Each round mutates a copy of the current solution, evaluates it and keeps it
    if it is better. Constraint violation is compared first on constrained problems:
    a less violating mutant wins outright, a more violating one is discarded without
    evaluating its objectives. Mutants that are neither better nor worse than the
    current solution are offered to the archive, when one is given.
    The loop always runs `improvement_rounds` rounds.
    """
    def __init__(
        self,
        problem,
        mutation,
        improvement_rounds: int,
        archive=None,
        constraint_comparator=None,
        dominance_comparator=None,
        logger=None,
    ):
        typing.sanitize_collaborator(problem, "evaluate", "problem")
        typing.sanitize_collaborator(mutation, "execute", "mutation")
        typing.sanitize_type(improvement_rounds, "integer", "improvement_rounds")
        if archive is not None:
            typing.sanitize_collaborator(archive, "add", "archive")
        if logger is not None:
            typing.sanitize_collaborator(logger, ("new_execution", "log_round"), "logger")

        self.problem = problem
        self.mutation = mutation
        self.improvement_rounds = int(improvement_rounds)
        self.archive = archive
        self.constraint_comparator = (
            ConstraintViolationComparator() if constraint_comparator is None else constraint_comparator
        )
        self.dominance_comparator = DominanceComparator() if dominance_comparator is None else dominance_comparator
        self.logger = logger

        self.constrained = problem.number_of_constraints > 0
        if self.constrained:
            typing.sanitize_collaborator(problem, "evaluate_constraints", "problem")

        self._evaluations = 0
        self.last_outcomes = []

    @property
    def evaluations(self):
        """Objective evaluations performed by the latest `execute` call"""
        return self._evaluations

    def get_evaluations(self):
        return self._evaluations

    def execute(self, solution):
        """
        Returns an improved copy of `solution`. `solution` itself is left untouched.
        """
        if solution is None:
            raise TypeError("'solution' is required. Got: None")
        self._evaluations = 0
        self.last_outcomes = []

        if self.improvement_rounds <= 0:
            return solution.copy()

        if self.logger is not None:
            self.logger.new_execution()

        current = solution
        for i in range(self.improvement_rounds):
            mutated = current.copy()
            self.mutation.execute(mutated)

            best = self._compare(mutated, current)
            if best < 0:
                current = mutated
                outcome = RoundOutcome.IMPROVED
            elif best > 0:
                outcome = RoundOutcome.REJECTED
            else:
                outcome = RoundOutcome.NON_DOMINATED
                if self.archive is not None:
                    self.archive.add(mutated)

            self.last_outcomes.append(outcome)
            if self.logger is not None:
                self.logger.log_round(i, outcome.value, self._evaluations, current)

        return current.copy()

    def _compare(self, mutated, current):
        """
        Judges the mutant against the current solution: -1 mutant better, 1 current better, 0 neither.
        Objective evaluations are counted here.
        """
        if self.constrained:
            self.problem.evaluate_constraints(mutated)
            best = compare(self.constraint_comparator, mutated, current)
            if best == 0:
                self._evaluate(mutated)
                best = compare(self.dominance_comparator, mutated, current)
            elif best < 0:
                self._evaluate(mutated)
            return best

        self._evaluate(mutated)
        return compare(self.dominance_comparator, mutated, current)

    def _evaluate(self, solution):
        self.problem.evaluate(solution)
        self._evaluations += 1
