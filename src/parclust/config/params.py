from __future__ import annotations

"""Parameter container dataclasses for the parclust configuration system.

Experiment definition, algorithm settings and I/O options live in separate
immutable dataclasses. A small mutable `RuntimeParams` bucket captures flags
that are never serialised to YAML but can be toggled programmatically.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from parclust.core_types import InstanceSpec

__all__ = [
    "ExperimentParams",
    "AlgorithmParams",
    "IOParams",
    "RuntimeParams",
    "ParclustParams",
]


# ---------------------------------------------------------------------------
# Experiment definition
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExperimentParams:
    """Which instances to solve, with which optimizers and seeds."""

    instances: Dict[str, InstanceSpec] = field(default_factory=dict)
    seeds: List[int] = field(default_factory=lambda: [4, 7, 2, 1, 3])
    algorithms: List[str] = field(
        default_factory=lambda: ["constructive", "local-search", "genetic"]
    )

    def __post_init__(self):  # type: ignore[override]
        if not self.seeds:
            raise ValueError("ExperimentParams.seeds cannot be empty.")
        if len(set(self.seeds)) != len(self.seeds):
            raise ValueError("ExperimentParams.seeds contains duplicate entries.")
        for seed in self.seeds:
            if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
                raise ValueError(
                    f"ExperimentParams.seeds must be non-negative integers. Got: {seed!r}"
                )

        if not self.algorithms:
            raise ValueError("ExperimentParams.algorithms cannot be empty.")

        # Imported here so the registry is populated before validating names
        from parclust.algorithms import OPTIMIZER_REGISTRY

        unknown = [a for a in self.algorithms if a not in OPTIMIZER_REGISTRY]
        if unknown:
            raise ValueError(
                f"ExperimentParams.algorithms references unknown optimizers: {unknown}. "
                f"Available: {sorted(OPTIMIZER_REGISTRY)}"
            )

        for name, spec in self.instances.items():
            if spec.name != name:
                raise ValueError(
                    f"Instance key '{name}' does not match its spec name '{spec.name}'."
                )


# ---------------------------------------------------------------------------
# Algorithm parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AlgorithmParams:
    """Optimizer configuration options."""

    # Constructive
    max_restarts: int = 100
    max_passes: Optional[int] = None

    # Local search
    max_evaluations: Optional[int] = None

    # Genetic
    population_size: int = 50
    generations: int = 100

    def __post_init__(self):  # type: ignore[override]
        if self.max_restarts <= 0:
            raise ValueError("AlgorithmParams.max_restarts must be positive.")

        for field_name in ("max_passes", "max_evaluations"):
            value = getattr(self, field_name)
            if value is not None and value <= 0:
                raise ValueError(
                    f"AlgorithmParams.{field_name} must be positive or null."
                )

        if self.population_size < 2:
            raise ValueError("AlgorithmParams.population_size must be at least 2.")
        if self.generations < 0:
            raise ValueError("AlgorithmParams.generations must be non-negative.")

    def options_for(self, algorithm: str) -> dict[str, Optional[int]]:
        """Constructor keyword arguments for the optimizer registered as ``algorithm``."""
        if algorithm == "constructive":
            return {"max_restarts": self.max_restarts, "max_passes": self.max_passes}
        if algorithm == "local-search":
            return {"max_evaluations": self.max_evaluations}
        if algorithm == "genetic":
            return {
                "population_size": self.population_size,
                "generations": self.generations,
            }
        return {}


# ---------------------------------------------------------------------------
# IO parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IOParams:
    """Settings for result output."""

    results_dir: Path = Path("results")
    format: str = "csv"  # One of: csv, json

    def __post_init__(self):  # type: ignore[override]
        if self.format not in {"csv", "json"}:
            raise ValueError("IOParams.format must be 'csv' or 'json'.")

        object.__setattr__(self, "results_dir", Path(self.results_dir))

        # Ensure results_dir is absolute
        if not self.results_dir.is_absolute():
            object.__setattr__(
                self, "results_dir", (Path.cwd() / self.results_dir).resolve()
            )


# ---------------------------------------------------------------------------
# Runtime parameters – toggles that are never serialized to yaml
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RuntimeParams:
    verbose: bool = False
    debug: bool = False


# ---------------------------------------------------------------------------
# Aggregate container
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ParclustParams:
    """Aggregate parameter object passed throughout the codebase."""

    experiment: ExperimentParams = field(default_factory=ExperimentParams)
    algorithm: AlgorithmParams = field(default_factory=AlgorithmParams)
    io: IOParams = field(default_factory=IOParams)
    runtime: RuntimeParams = field(default_factory=RuntimeParams)

    def to_dict(self) -> dict:
        """YAML-serialisable view; runtime flags are left out."""
        return {
            "instances": {
                name: spec.to_dict() for name, spec in self.experiment.instances.items()
            },
            "seeds": list(self.experiment.seeds),
            "algorithms": list(self.experiment.algorithms),
            "constructive": {
                "max_restarts": self.algorithm.max_restarts,
                "max_passes": self.algorithm.max_passes,
            },
            "local_search": {"max_evaluations": self.algorithm.max_evaluations},
            "genetic": {
                "population_size": self.algorithm.population_size,
                "generations": self.algorithm.generations,
            },
            "results_dir": str(self.io.results_dir),
            "format": self.io.format,
        }
