"""
greedy.py

Constructive heuristic in the style of constrained k-means (COPKM).

Elements are visited in a shuffled order and placed in the cluster that adds
the fewest constraint violations, ties going to the nearest centroid. Passes
repeat, with centroid refinement in between, until one pass changes nothing.
A result with an empty cluster is discarded and construction restarts from
scratch, up to a fixed number of attempts.
"""

import numpy as np

from parclust.core_types import SearchResult
from parclust.exceptions import ConstructionFailedError
from parclust.partition import Partition
from parclust.problem import Problem
from parclust.registry import register_optimizer
from parclust.utils.logging import ParclustLogger

logger = ParclustLogger.get_logger(__name__)

DEFAULT_MAX_RESTARTS = 100


@register_optimizer("constructive")
class GreedyConstructor:
    """Greedy constrained assignment with iterative centroid refinement.

    Args:
        max_restarts: Construction attempts before giving up with
            :class:`ConstructionFailedError`.
        max_passes: Optional cap on assignment passes per attempt. ``None``
            runs every attempt to its fixed point.
    """

    def __init__(
        self, max_restarts: int = DEFAULT_MAX_RESTARTS, max_passes: int | None = None
    ):
        if max_restarts < 1:
            raise ValueError(f"max_restarts must be positive. Got: {max_restarts}")
        if max_passes is not None and max_passes < 1:
            raise ValueError(f"max_passes must be positive or None. Got: {max_passes}")
        self.max_restarts = max_restarts
        self.max_passes = max_passes
        self.attempts = 0

    def run(self, problem: Problem, rng: np.random.Generator) -> SearchResult:
        for attempt in range(1, self.max_restarts + 1):
            self.attempts = attempt
            partition = self.construct(problem, rng)
            if partition.is_valid():
                logger.debug(f"Greedy construction succeeded on attempt {attempt}")
                return SearchResult.from_partition(partition, problem)

            logger.debug(
                f"Attempt {attempt} left clusters {partition.empty_clusters()} empty; restarting"
            )

        raise ConstructionFailedError(self.max_restarts)

    def construct(self, problem: Problem, rng: np.random.Generator) -> Partition:
        """One construction attempt. The result may contain empty clusters."""
        partition = Partition.empty(problem.k, problem.dimension, rng)
        order = [int(e) for e in rng.permutation(problem.n)]

        passes = 0
        changed = True
        while changed:
            if self.max_passes is not None and passes >= self.max_passes:
                logger.warning(
                    f"Greedy construction stopped after {passes} passes without reaching a fixed point"
                )
                break

            changed = False
            for element in order:
                best = _best_cluster(element, partition, problem)
                if partition.cluster_of(element) != best:
                    partition.insert(element, best)
                    changed = True

            # Empty clusters get a fresh random centroid instead of a mean
            partition.refresh_centroids(problem, rng)
            passes += 1

        logger.debug(f"Greedy construction converged in {passes} passes")
        return partition


def _best_cluster(element: int, partition: Partition, problem: Problem) -> int:
    """Least-infeasible cluster for ``element``, ties by (centroid distance, index)."""
    assignment = partition.assignment
    deltas = [
        problem.infeasibility_delta(element, cluster, assignment)
        for cluster in range(partition.k)
    ]
    min_delta = min(deltas)
    candidates = [cluster for cluster, delta in enumerate(deltas) if delta == min_delta]

    return min(
        candidates,
        key=lambda c: (problem.distance_to(element, partition.cluster(c).centroid), c),
    )
