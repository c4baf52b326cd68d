"""Shared fixtures for the parclust test suite."""

from pathlib import Path

import numpy as np
import pytest

from parclust.partition import Cluster, Partition
from parclust.problem import Problem

ASSETS_DIR = Path(__file__).parent / "_assets"

# Two well separated right triangles
TWO_GROUPS_POINTS = [
    [0.0, 0.0],
    [0.0, 1.0],
    [1.0, 0.0],
    [10.0, 10.0],
    [10.0, 11.0],
    [11.0, 10.0],
]
# Must-link inside each group, cannot-link across
TWO_GROUPS_CONSTRAINTS = {(0, 1): 1, (3, 4): 1, (0, 3): -1}
NATURAL_LABELS = [0, 0, 0, 1, 1, 1]


@pytest.fixture
def natural_deviation() -> float:
    """General deviation of the split into the two triangles."""
    triangle = np.array(TWO_GROUPS_POINTS[:3])
    spread = np.linalg.norm(triangle - triangle.mean(axis=0), axis=1).mean()
    return float(spread)


@pytest.fixture
def assets_dir() -> Path:
    return ASSETS_DIR


@pytest.fixture
def two_groups_problem() -> Problem:
    return Problem(TWO_GROUPS_POINTS, TWO_GROUPS_CONSTRAINTS, k=2)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def random_problem():
    """Factory for random instances with a chain of must-links and one cannot-link."""

    def _make(n: int = 20, k: int = 3, dimension: int = 2, seed: int = 0) -> Problem:
        gen = np.random.default_rng(seed)
        points = gen.random((n, dimension))
        constraints = {(i, i + 1): 1 for i in range(0, n - 1, 4)}
        constraints[(0, n - 1)] = -1
        return Problem(points, constraints, k)

    return _make


@pytest.fixture
def natural_labels() -> list[int]:
    return list(NATURAL_LABELS)


@pytest.fixture
def make_partition():
    """Factory building a partition with fresh centroids from a label list."""

    def _make(labels: list[int], problem: Problem, k: int | None = None) -> Partition:
        partition = Partition(
            [Cluster(problem.dimension) for _ in range(k or problem.k)]
        )
        for element, cluster in enumerate(labels):
            partition.insert(element, cluster)
        if partition.is_valid():
            partition.refresh_centroids(problem)
        return partition

    return _make
