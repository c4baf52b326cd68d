"""Optimizers for the constrained partitioning problem.

Importing this package registers every built-in optimizer.
"""

from parclust.registry import OPTIMIZER_REGISTRY, get_optimizer

from .genetic import GeneticOptimizer
from .greedy import GreedyConstructor
from .local_search import LocalSearchOptimizer, gen_neighbourhood

__all__ = [
    "GreedyConstructor",
    "LocalSearchOptimizer",
    "GeneticOptimizer",
    "gen_neighbourhood",
    "OPTIMIZER_REGISTRY",
    "get_optimizer",
]
