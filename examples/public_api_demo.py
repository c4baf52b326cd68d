"""
Demo of the parclust public API.

This example shows how to:
1. Build a problem in memory and solve it with each optimizer
2. Inspect the resulting partition
3. Run a configured experiment and write result tables
"""

import dataclasses
from pathlib import Path

import numpy as np

from parclust import Problem, run_experiment, solve
from parclust.config import load_parclust_params
from parclust.config.params import IOParams


def main():
    """Run a few small partitioning examples."""

    # Example 1: in-memory instance
    print("=== Example 1: Solve an in-memory instance ===")

    rng = np.random.default_rng(0)
    points = np.vstack(
        [
            rng.normal(loc=(0.0, 0.0), scale=0.3, size=(10, 2)),
            rng.normal(loc=(3.0, 3.0), scale=0.3, size=(10, 2)),
            rng.normal(loc=(0.0, 3.0), scale=0.3, size=(10, 2)),
        ]
    )
    # Must-link the first two points of each blob, cannot-link across blobs
    constraints = {(0, 1): 1, (10, 11): 1, (20, 21): 1, (0, 10): -1, (10, 20): -1}
    problem = Problem(points, constraints, k=3)
    print(problem)

    for algorithm in ("constructive", "local-search", "genetic"):
        result = solve(problem, algorithm, seed=4)
        sizes = [len(c) for c in result.partition.clusters]
        print(
            f"{algorithm:>13}: fitness={result.fitness:.4f} "
            f"infeasibility={result.infeasibility} sizes={sizes}"
        )

    # Example 2: experiment from a configuration file
    print("\n=== Example 2: Run a configured experiment ===")

    params = load_parclust_params("tests/_assets/experiment.yaml")
    params = dataclasses.replace(
        params, io=IOParams(results_dir=Path("results/demo"), format="csv")
    )
    results = run_experiment(params)

    for (instance, algorithm), records in results.items():
        best = min(records, key=lambda r: r.fitness)
        print(f"{instance}/{algorithm}: best seed {best.seed} fitness={best.fitness:.4f}")


if __name__ == "__main__":
    main()
