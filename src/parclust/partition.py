"""
partition.py

Solution representation shared by every optimizer.

A :class:`Partition` owns ``k`` :class:`Cluster` objects plus an
element -> cluster index that is kept synchronized with every cluster's
member set. Mutations are cheap (no centroid work); centroid recomputation
is an explicit, caller-driven step. Fitness is memoized and cleared by every
mutating method.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

import numpy as np

from parclust.core_types import Point
from parclust.utils.logging import ParclustLogger

if TYPE_CHECKING:
    from parclust.problem import Problem

logger = ParclustLogger.get_logger(__name__)

# Draws of a uniformly random assignment before falling back to repair
DEFAULT_RANDOM_ATTEMPTS = 1000


class Cluster:
    """A centroid plus the set of element indices assigned to it."""

    __slots__ = ("centroid", "members")

    def __init__(self, dimension: int, centroid: Point | None = None):
        self.centroid: Point = (
            np.zeros(dimension) if centroid is None else np.asarray(centroid, dtype=np.float64)
        )
        self.members: set[int] = set()

    @classmethod
    def with_random_centroid(cls, dimension: int, rng: np.random.Generator) -> Cluster:
        cluster = cls(dimension)
        cluster.randomize_centroid(rng)
        return cluster

    @property
    def dimension(self) -> int:
        return self.centroid.shape[0]

    def randomize_centroid(self, rng: np.random.Generator) -> None:
        """Draw every coordinate uniformly from [0, 1)."""
        self.centroid = rng.random(self.dimension)

    def add(self, element: int) -> bool:
        if element in self.members:
            return False
        self.members.add(element)
        return True

    def remove(self, element: int) -> bool:
        if element not in self.members:
            return False
        self.members.remove(element)
        return True

    def is_empty(self) -> bool:
        return not self.members

    def copy(self) -> Cluster:
        clone = Cluster(self.dimension, self.centroid.copy())
        clone.members = set(self.members)
        return clone

    def __contains__(self, element: int) -> bool:
        return element in self.members

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[int]:
        return iter(self.members)

    def __repr__(self) -> str:
        return f"Cluster(centroid={np.round(self.centroid, 4).tolist()}, members={sorted(self.members)})"


class Partition:
    """Assignment of elements to ``k`` clusters."""

    def __init__(self, clusters: list[Cluster]):
        if not clusters:
            raise ValueError("A partition needs at least one cluster")
        self._clusters = clusters
        self._assignment: dict[int, int] = {}
        self._fitness: float | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls, k: int, dimension: int, rng: np.random.Generator) -> Partition:
        """``k`` empty clusters, each with a random centroid."""
        return cls([Cluster.with_random_centroid(dimension, rng) for _ in range(k)])

    @classmethod
    def random(
        cls,
        problem: Problem,
        rng: np.random.Generator,
        max_attempts: int = DEFAULT_RANDOM_ATTEMPTS,
    ) -> Partition:
        """Uniformly random complete assignment, redrawn until no cluster is empty.

        After ``max_attempts`` invalid draws the last one is repaired instead.
        Centroids are fresh on return.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be positive. Got: {max_attempts}")
        for _ in range(max_attempts):
            partition = cls([Cluster(problem.dimension) for _ in range(problem.k)])
            labels = rng.integers(0, problem.k, size=problem.n)
            for element, cluster in enumerate(labels):
                partition.insert(element, int(cluster))
            if partition.is_valid():
                break
        else:
            logger.debug(
                f"No valid random partition in {max_attempts} draws (n={problem.n}, k={problem.k}); repairing"
            )
            partition.repair(rng)

        partition.refresh_centroids(problem)
        return partition

    @classmethod
    def random_population(
        cls, problem: Problem, size: int, rng: np.random.Generator
    ) -> list[Partition]:
        return [cls.random(problem, rng) for _ in range(size)]

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def k(self) -> int:
        return len(self._clusters)

    @property
    def size(self) -> int:
        """Number of assigned elements."""
        return len(self._assignment)

    @property
    def clusters(self) -> tuple[Cluster, ...]:
        return tuple(self._clusters)

    @property
    def assignment(self) -> Mapping[int, int]:
        return MappingProxyType(self._assignment)

    def cluster(self, index: int) -> Cluster:
        return self._clusters[index]

    def cluster_of(self, element: int) -> int | None:
        return self._assignment.get(element)

    def labels(self) -> list[int]:
        """Cluster index of every element, ordered by element index."""
        return [self._assignment[e] for e in sorted(self._assignment)]

    def empty_clusters(self) -> list[int]:
        return [i for i, c in enumerate(self._clusters) if c.is_empty()]

    def is_valid(self) -> bool:
        """A partition is valid when no cluster is empty."""
        return all(not c.is_empty() for c in self._clusters)

    def is_complete(self, n: int) -> bool:
        return len(self._assignment) == n and all(e in self._assignment for e in range(n))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, element: int, cluster: int) -> None:
        """Assign ``element`` to ``cluster``, leaving centroids untouched."""
        previous = self._assignment.get(element)
        if previous == cluster:
            return
        if previous is not None:
            self._clusters[previous].remove(element)
        self._clusters[cluster].add(element)
        self._assignment[element] = cluster
        self._fitness = None

    def gen_neighbour(
        self, element: int, cluster: int, problem: Problem
    ) -> Partition | None:
        """Copy of this partition with ``element`` moved to ``cluster``.

        Returns None when the move would empty the element's current cluster
        or when ``cluster`` already holds it. Centroids of both affected
        clusters are recomputed on the copy.
        """
        source = self._assignment[element]
        if source == cluster or len(self._clusters[source]) <= 1:
            return None

        neighbour = self.copy()
        neighbour.insert(element, cluster)
        neighbour.recompute_centroid(cluster, problem)
        neighbour.recompute_centroid(source, problem)
        return neighbour

    def repair(self, rng: np.random.Generator) -> None:
        """Give every empty cluster one random element from a cluster of size > 1.

        Candidates are probed in element order starting at a random offset so
        the last member of a cluster is never taken.
        """
        elements = sorted(self._assignment)
        for empty in self.empty_clusters():
            if not any(len(c) > 1 for c in self._clusters):
                raise ValueError(
                    f"Cannot repair partition: {len(elements)} elements for {self.k} clusters"
                )
            start = int(rng.integers(len(elements)))
            for offset in range(len(elements)):
                element = elements[(start + offset) % len(elements)]
                if len(self._clusters[self._assignment[element]]) > 1:
                    break
            self.insert(element, empty)

    def recompute_centroid(self, index: int, problem: Problem) -> None:
        self._clusters[index].centroid = problem.centroid_of(self._clusters[index])
        self._fitness = None

    def refresh_centroids(
        self, problem: Problem, rng: np.random.Generator | None = None
    ) -> None:
        """Recompute every centroid from its members.

        With ``rng`` an empty cluster gets a new random centroid; without it an
        empty cluster is an error.
        """
        for cluster in self._clusters:
            if cluster.is_empty() and rng is not None:
                cluster.randomize_centroid(rng)
            else:
                cluster.centroid = problem.centroid_of(cluster)
        self._fitness = None

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def fitness(self, problem: Problem) -> float:
        if self._fitness is None:
            self._fitness = problem.fitness(self)
        return self._fitness

    def copy(self) -> Partition:
        """Deep value copy, including the memoized fitness."""
        clone = Partition([c.copy() for c in self._clusters])
        clone._assignment = dict(self._assignment)
        clone._fitness = self._fitness
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Partition):
            return NotImplemented
        return self._assignment == other._assignment

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        sizes = [len(c) for c in self._clusters]
        return f"Partition(k={self.k}, elements={self.size}, sizes={sizes})"
