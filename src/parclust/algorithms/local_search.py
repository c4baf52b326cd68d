"""
local_search.py

First-improvement hill climbing over single-element moves.
"""

import numpy as np

from parclust.core_types import SearchResult
from parclust.partition import Partition
from parclust.problem import Problem
from parclust.registry import register_optimizer
from parclust.utils.logging import ParclustLogger

logger = ParclustLogger.get_logger(__name__)


def gen_neighbourhood(partition: Partition) -> list[tuple[int, int]]:
    """Virtual neighbourhood of ``partition`` as ``(element, new_cluster)`` moves.

    Elements that are alone in their cluster are skipped, since moving them
    would leave an empty cluster.
    """
    neighbourhood: list[tuple[int, int]] = []
    assignment = partition.assignment
    for element in sorted(assignment):
        current = assignment[element]
        if len(partition.cluster(current)) <= 1:
            continue
        for cluster in range(partition.k):
            if cluster != current:
                neighbourhood.append((element, cluster))
    return neighbourhood


@register_optimizer("local-search")
class LocalSearchOptimizer:
    """Hill climber starting from a random valid partition.

    Each step scans the neighbourhood in random order and adopts the first
    neighbour with strictly lower fitness. The search stops at a local
    optimum, or earlier when ``max_evaluations`` fitness evaluations have
    been spent.

    After ``run``, ``trace`` holds the fitness of every adopted partition
    (strictly decreasing) and ``evaluations`` the number of evaluations.
    """

    def __init__(self, max_evaluations: int | None = None):
        if max_evaluations is not None and max_evaluations < 1:
            raise ValueError(
                f"max_evaluations must be positive or None. Got: {max_evaluations}"
            )
        self.max_evaluations = max_evaluations
        self.trace: list[float] = []
        self.evaluations = 0

    def _budget_left(self) -> bool:
        return self.max_evaluations is None or self.evaluations < self.max_evaluations

    def run(self, problem: Problem, rng: np.random.Generator) -> SearchResult:
        current = Partition.random(problem, rng)
        current_fitness = current.fitness(problem)
        self.evaluations = 1
        self.trace = [current_fitness]

        improved = True
        while improved and self._budget_left():
            improved = False
            neighbourhood = gen_neighbourhood(current)

            for index in rng.permutation(len(neighbourhood)):
                if not self._budget_left():
                    logger.debug(f"Evaluation budget of {self.max_evaluations} exhausted")
                    break

                element, cluster = neighbourhood[index]
                neighbour = current.gen_neighbour(element, cluster, problem)
                if neighbour is None:
                    continue

                neighbour_fitness = neighbour.fitness(problem)
                self.evaluations += 1
                if neighbour_fitness < current_fitness:
                    current, current_fitness = neighbour, neighbour_fitness
                    self.trace.append(current_fitness)
                    improved = True
                    break

        logger.debug(
            f"Local search finished after {len(self.trace) - 1} moves and "
            f"{self.evaluations} evaluations (fitness {current_fitness:.6f})"
        )
        return SearchResult.from_partition(current, problem)
