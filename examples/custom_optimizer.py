"""Custom optimizer plugin example for parclust.

Demonstrates how to register a user-defined optimizer through the
`parclust.registry` decorator, then run it next to the built-in ones.

Run with:
    python examples/custom_optimizer.py
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

import parclust as pc
from parclust.algorithms.local_search import LocalSearchOptimizer
from parclust.core_types import SearchResult
from parclust.registry import register_optimizer


@register_optimizer("multistart-local-search")
class MultiStartLocalSearch:
    """Runs the local search from several random starts and keeps the best."""

    def __init__(self, starts: int = 5):
        if starts <= 0:
            raise ValueError("starts must be positive")
        self.starts = starts

    def run(self, problem: pc.Problem, rng: np.random.Generator) -> SearchResult:
        results = [LocalSearchOptimizer().run(problem, rng) for _ in range(self.starts)]
        return min(results, key=lambda r: r.fitness)


def main():
    """Main execution function."""
    assets = Path("tests/_assets")
    problem = pc.Problem.from_files(
        assets / "two_groups.dat", assets / "two_groups.const", k=2
    )

    for algorithm in ("local-search", "multistart-local-search"):
        partition, fitness, infeasibility, deviation = pc.solve(problem, algorithm, seed=4)
        print(
            f"{algorithm:>24}: fitness={fitness:.4f} infeasibility={infeasibility} "
            f"deviation={deviation:.4f} labels={partition.labels()}"
        )


if __name__ == "__main__":
    main()
