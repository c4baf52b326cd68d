"""Protocol definitions for pluggable components in parclust."""

from pathlib import Path
from typing import Protocol

import numpy as np

from parclust.core_types import ExecutionRecord, SearchResult
from parclust.problem import Problem


class Optimizer(Protocol):
    """Protocol for search strategies.

    ``run`` must only read from ``problem`` and draw all randomness from
    ``rng`` so that two runs with equally seeded generators are identical.
    """

    def run(self, problem: Problem, rng: np.random.Generator) -> SearchResult:
        """Returns (partition, fitness, infeasibility, deviation)"""
        ...


class ProblemLoader(Protocol):
    """Protocol for reading problem instances from external storage."""

    def load(
        self, data_file: str | Path, constraints_file: str | Path, k: int
    ) -> Problem:
        ...


class ResultSink(Protocol):
    """Protocol for persisting the records of a batch of runs."""

    def write(
        self, instance: str, algorithm: str, records: list[ExecutionRecord]
    ) -> Path:
        """Returns the location the records were written to."""
        ...
