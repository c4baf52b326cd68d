"""parclust: constrained partitioning of points under must-link / cannot-link constraints."""

__version__ = "0.1.0"

# Main API
from .api import run_experiment, run_instance, solve

# Optimizers
from .algorithms import GeneticOptimizer, GreedyConstructor, LocalSearchOptimizer

# Core types
from .config.params import ParclustParams
from .core_types import Constraint, ExecutionRecord, InstanceSpec, SearchResult
from .exceptions import (
    ConstructionFailedError,
    DegenerateInstanceError,
    MalformedInputError,
    ParclustError,
)
from .interfaces import Optimizer, ProblemLoader, ResultSink
from .partition import Cluster, Partition
from .problem import Problem

# Extension system
from .registry import register_optimizer

__all__ = [
    # Version
    "__version__",
    # Main API
    "solve",
    "run_instance",
    "run_experiment",
    # Optimizers
    "GreedyConstructor",
    "LocalSearchOptimizer",
    "GeneticOptimizer",
    # Types
    "Problem",
    "Partition",
    "Cluster",
    "Constraint",
    "SearchResult",
    "ExecutionRecord",
    "InstanceSpec",
    "ParclustParams",
    # Errors
    "ParclustError",
    "MalformedInputError",
    "DegenerateInstanceError",
    "ConstructionFailedError",
    # Extensions
    "register_optimizer",
    "Optimizer",
    "ProblemLoader",
    "ResultSink",
]
