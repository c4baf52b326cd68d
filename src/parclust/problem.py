"""
problem.py

Immutable instance data for the constrained partitioning problem and the
objective function shared by every optimizer: general deviation plus
lambda-weighted constraint infeasibility. Lower fitness is better.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from sklearn.metrics import pairwise_distances

from parclust.core_types import Constraint, Point
from parclust.exceptions import DegenerateInstanceError, MalformedInputError
from parclust.utils.logging import ParclustLogger

if TYPE_CHECKING:
    from parclust.partition import Cluster, Partition

logger = ParclustLogger.get_logger(__name__)


class Problem:
    """A set of points, pairwise constraints and a target cluster count.

    Args:
        points: ``(n, d)`` array-like of coordinates.
        constraints: Mapping from index pair to +1 (must-link), -1
            (cannot-link) or 0 (no constraint). Either orientation of a pair
            may be given; diagonal pairs are ignored.
        k: Number of clusters, ``1 <= k <= n``.

    Raises:
        MalformedInputError: Ragged or non-numeric points, constraint indices
            out of range, values outside {-1, 0, 1} or conflicting duplicates.
        DegenerateInstanceError: No points, no declared constraints, or k out
            of range.
    """

    def __init__(
        self,
        points: Iterable[Iterable[float]] | np.ndarray,
        constraints: Mapping[tuple[int, int], int],
        k: int,
    ):
        try:
            data = np.array(points, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise MalformedInputError(f"Points are not a numeric matrix: {exc}") from exc

        if data.size == 0:
            raise DegenerateInstanceError("Problem has no points")
        if data.ndim != 2:
            raise MalformedInputError(
                f"Points must form a 2-dimensional matrix, got shape {data.shape}"
            )
        if not np.all(np.isfinite(data)):
            raise MalformedInputError("Points contain NaN or infinite coordinates")

        n = data.shape[0]
        if not 1 <= k <= n:
            raise DegenerateInstanceError(f"k must satisfy 1 <= k <= {n}. Got: {k}")

        adjacency: dict[int, dict[int, Constraint]] = {i: {} for i in range(n)}
        for pair, value in constraints.items():
            i, j = (int(x) for x in pair)
            if not (0 <= i < n and 0 <= j < n):
                raise MalformedInputError(
                    f"Constraint ({i}, {j}) references an element outside 0..{n - 1}"
                )
            if value not in (-1, 0, 1):
                raise MalformedInputError(
                    f"Constraint ({i}, {j}) has value {value}; expected -1, 0 or 1"
                )
            if value == 0 or i == j:
                continue

            constraint = Constraint(int(value))
            existing = adjacency[i].get(j)
            if existing is not None and existing != constraint:
                raise MalformedInputError(
                    f"Conflicting constraints declared for pair ({i}, {j})"
                )
            adjacency[i][j] = constraint
            adjacency[j][i] = constraint

        pairs = [
            (i, j, int(c)) for i, row in adjacency.items() for j, c in row.items() if i < j
        ]
        if not pairs:
            raise DegenerateInstanceError(
                "Problem declares no constraints; lambda would be undefined"
            )

        data.setflags(write=False)
        self._points = data
        self._k = int(k)
        self._adjacency = adjacency
        self._pair_i = np.array([p[0] for p in pairs], dtype=np.intp)
        self._pair_j = np.array([p[1] for p in pairs], dtype=np.intp)
        self._pair_value = np.array([p[2] for p in pairs], dtype=np.int8)

        self._distances = pairwise_distances(data, metric="euclidean")
        self._distances.setflags(write=False)
        self._lambda = float(self._distances.max()) / len(pairs)

        logger.debug(
            f"Problem created: n={n}, dimension={self.dimension}, k={self._k}, "
            f"constraints={len(pairs)}, lambda={self._lambda:.6f}"
        )

    @classmethod
    def from_files(
        cls, data_file: str | Path, constraints_file: str | Path, k: int
    ) -> Problem:
        """Read a problem from a points file and a constraint matrix file."""
        from parclust.utils.data_processing import CsvProblemLoader

        return CsvProblemLoader().load(data_file, constraints_file, k)

    # ------------------------------------------------------------------
    # Instance data
    # ------------------------------------------------------------------

    @property
    def n(self) -> int:
        return self._points.shape[0]

    @property
    def dimension(self) -> int:
        return self._points.shape[1]

    @property
    def k(self) -> int:
        return self._k

    @property
    def lambda_(self) -> float:
        return self._lambda

    @property
    def points(self) -> np.ndarray:
        return self._points

    @property
    def constraint_count(self) -> int:
        return len(self._pair_value)

    def point(self, index: int) -> Point:
        return self._points[index]

    def constraint(self, i: int, j: int) -> Constraint | None:
        return self._adjacency[i].get(j)

    def constraints_of(self, element: int) -> Mapping[int, Constraint]:
        return self._adjacency[element]

    # ------------------------------------------------------------------
    # Objective components
    # ------------------------------------------------------------------

    def distance(self, i: int, j: int) -> float:
        return float(self._distances[i, j])

    def distance_to(self, element: int, point: Point) -> float:
        """Euclidean distance from an element to an arbitrary point."""
        return float(np.linalg.norm(self._points[element] - point))

    def infeasibility_delta(
        self, element: int, cluster: int, assignment: Mapping[int, int]
    ) -> int:
        """Number of new violations incurred by placing ``element`` in ``cluster``.

        Only constraints touching ``element`` are scanned. Partners that are
        not yet assigned never count.
        """
        delta = 0
        for other, constraint in self._adjacency[element].items():
            other_cluster = assignment.get(other)
            if other_cluster is None:
                continue
            if constraint is Constraint.CANNOT_LINK and other_cluster == cluster:
                delta += 1
            elif constraint is Constraint.MUST_LINK and other_cluster != cluster:
                delta += 1
        return delta

    def total_infeasibility(self, assignment: Mapping[int, int]) -> int:
        """Count violated constraints of a complete assignment, once per pair."""
        if len(assignment) != self.n:
            raise ValueError(
                f"Infeasibility requires a complete assignment ({len(assignment)}/{self.n} elements assigned)"
            )
        labels = np.fromiter(
            (assignment[e] for e in range(self.n)), dtype=np.intp, count=self.n
        )
        same = labels[self._pair_i] == labels[self._pair_j]
        must_link = self._pair_value == int(Constraint.MUST_LINK)
        cannot_link = self._pair_value == int(Constraint.CANNOT_LINK)
        return int(np.count_nonzero(must_link & ~same) + np.count_nonzero(cannot_link & same))

    def centroid_of(self, cluster: Cluster) -> Point:
        if cluster.is_empty():
            raise ValueError("Centroid of an empty cluster is undefined")
        members = np.fromiter(sorted(cluster.members), dtype=np.intp, count=len(cluster))
        return self._points[members].mean(axis=0)

    def mean_intra_cluster_distance(self, cluster: Cluster) -> float:
        """Mean distance from the members of ``cluster`` to its centroid."""
        if cluster.is_empty():
            raise ValueError("Intra-cluster distance of an empty cluster is undefined")
        if len(cluster) == 1:
            return 0.0
        members = np.fromiter(sorted(cluster.members), dtype=np.intp, count=len(cluster))
        offsets = self._points[members] - cluster.centroid
        return float(np.linalg.norm(offsets, axis=1).mean())

    def general_deviation(self, clusters: Iterable[Cluster]) -> float:
        distances = [self.mean_intra_cluster_distance(c) for c in clusters]
        return sum(distances) / len(distances)

    def fitness(self, partition: Partition) -> float:
        return self.general_deviation(partition.clusters) + self._lambda * self.total_infeasibility(
            partition.assignment
        )

    # Shorthands for result reporting
    def infeasibility(self, partition: Partition) -> int:
        return self.total_infeasibility(partition.assignment)

    def deviation(self, partition: Partition) -> float:
        return self.general_deviation(partition.clusters)

    def __repr__(self) -> str:
        return (
            f"Problem(n={self.n}, dimension={self.dimension}, k={self.k}, "
            f"constraints={self.constraint_count}, lambda={self._lambda:.6f})"
        )
