from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from parclust.partition import Partition
    from parclust.problem import Problem

# A point in the problem space; dimension is fixed per instance
Point = np.ndarray


class Constraint(IntEnum):
    """Pairwise constraint between two elements."""

    MUST_LINK = 1
    CANNOT_LINK = -1


class SearchResult(NamedTuple):
    """Outcome of one optimizer run.

    Unpacks as ``(partition, fitness, infeasibility, deviation)``.
    """

    partition: Partition
    fitness: float
    infeasibility: int
    deviation: float

    @classmethod
    def from_partition(cls, partition: Partition, problem: Problem) -> SearchResult:
        """Evaluate a final partition into its objective breakdown."""
        return cls(
            partition=partition,
            fitness=partition.fitness(problem),
            infeasibility=problem.infeasibility(partition),
            deviation=problem.deviation(partition),
        )


@dataclass(frozen=True)
class InstanceSpec:
    """Location of a problem instance on disk plus its cluster count."""

    name: str
    data_file: Path
    constraints_file: Path
    k: int

    def __post_init__(self):
        if self.k < 1:
            raise ValueError(f"Instance '{self.name}': k must be at least 1. Got: {self.k}")
        object.__setattr__(self, "data_file", Path(self.data_file))
        object.__setattr__(self, "constraints_file", Path(self.constraints_file))

    def to_dict(self) -> dict:
        return {
            "data_file": str(self.data_file),
            "constraints_file": str(self.constraints_file),
            "k": self.k,
        }


@dataclass
class ExecutionRecord:
    """One row of a results table: a single (instance, algorithm, seed) run."""

    seed: int
    fitness: float
    infeasibility: int
    general_deviation: float
    time_ms: int

    @classmethod
    def from_result(cls, seed: int, result: SearchResult, time_ms: int) -> ExecutionRecord:
        return cls(
            seed=seed,
            fitness=float(result.fitness),
            infeasibility=int(result.infeasibility),
            general_deviation=float(result.deviation),
            time_ms=int(time_ms),
        )

    def to_dict(self) -> dict:
        return asdict(self)
