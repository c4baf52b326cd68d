"""
API facade for parclust - single entry points for programmatic usage.
"""

from pathlib import Path
from typing import Optional

import numpy as np

from parclust.algorithms import get_optimizer
from parclust.config.params import AlgorithmParams, ParclustParams
from parclust.core_types import ExecutionRecord, SearchResult
from parclust.exceptions import ConstructionFailedError
from parclust.interfaces import Optimizer, ProblemLoader, ResultSink
from parclust.problem import Problem
from parclust.utils.data_processing import CsvProblemLoader
from parclust.utils.logging import (
    ParclustLogger,
    ProgressTracker,
    log_detail,
    log_progress,
    log_warning,
)
from parclust.utils.save_results import TabularResultSink
from parclust.utils.time_measurement import TimeRecorder

logger = ParclustLogger.get_logger("parclust.api")


def build_optimizer(
    algorithm: str, params: Optional[AlgorithmParams] = None
) -> Optimizer:
    """Instantiate the optimizer registered as ``algorithm`` with its configured options."""
    optimizer_class = get_optimizer(algorithm)
    options = (params or AlgorithmParams()).options_for(algorithm)
    return optimizer_class(**options)


def solve(
    problem: Problem,
    algorithm: str = "genetic",
    seed: int = 0,
    params: Optional[AlgorithmParams] = None,
) -> SearchResult:
    """Run one optimizer on ``problem`` with a generator seeded by ``seed``.

    Args:
        problem: Instance to partition.
        algorithm: Registered optimizer name ("constructive", "local-search",
            "genetic" or a plugin).
        seed: Seed for ``numpy.random.default_rng``. Equal seeds give equal
            results.
        params: Optimizer options; defaults are used when omitted.

    Returns:
        SearchResult: ``(partition, fitness, infeasibility, deviation)``

    Raises:
        ValueError: If ``algorithm`` is not registered.
        ConstructionFailedError: If the constructive heuristic exhausts its
            restarts.

    Example:
        >>> problem = Problem.from_files("zoo_set.dat", "zoo_set_const_10.const", k=7)
        >>> result = solve(problem, "local-search", seed=4)
        >>> print(f"Fitness: {result.fitness:.4f}")
    """
    optimizer = build_optimizer(algorithm, params)
    rng = np.random.default_rng(seed)
    return optimizer.run(problem, rng)


def run_instance(
    problem: Problem,
    algorithm: str,
    seeds: list[int],
    params: Optional[AlgorithmParams] = None,
    time_recorder: Optional[TimeRecorder] = None,
) -> list[ExecutionRecord]:
    """Run ``algorithm`` once per seed and collect one record per successful run.

    A seed whose construction fails is logged and skipped.
    """
    time_recorder = time_recorder or TimeRecorder()
    records: list[ExecutionRecord] = []

    for seed in seeds:
        span = f"{algorithm}:{seed}"
        try:
            with time_recorder.measure(span):
                result = solve(problem, algorithm, seed, params)
        except ConstructionFailedError as exc:
            log_warning(f"{algorithm} seed {seed}: {exc}")
            continue

        record = ExecutionRecord.from_result(
            seed, result, time_recorder.last(span).wall_time_ms
        )
        records.append(record)
        log_detail(
            f"{algorithm} seed {seed}: fitness={record.fitness:.6f} "
            f"infeasibility={record.infeasibility} "
            f"deviation={record.general_deviation:.6f} time={record.time_ms}ms"
        )

    return records


def run_experiment(
    params: ParclustParams,
    sink: Optional[ResultSink] = None,
    loader: Optional[ProblemLoader] = None,
) -> dict[tuple[str, str], list[ExecutionRecord]]:
    """Run every configured instance with every configured algorithm and seed.

    Results are written through ``sink`` (a :class:`TabularResultSink` on
    ``params.io`` by default), one table per (instance, algorithm).

    Returns:
        Mapping from ``(instance, algorithm)`` to its execution records.

    Raises:
        ValueError: If no instances are configured or an instance is invalid.
        FileNotFoundError: If an instance file is missing.
    """
    experiment = params.experiment
    if not experiment.instances:
        raise ValueError("No instances configured. Add an 'instances' section to the config.")

    sink = sink or TabularResultSink(params.io.results_dir, params.io.format)
    loader = loader or CsvProblemLoader()
    time_recorder = TimeRecorder()

    steps = [
        f"{name}/{algorithm}"
        for name in experiment.instances
        for algorithm in experiment.algorithms
    ]
    tracker = ProgressTracker(steps)
    results: dict[tuple[str, str], list[ExecutionRecord]] = {}

    try:
        for name, spec in experiment.instances.items():
            with time_recorder.measure(f"load:{name}"):
                problem = loader.load(spec.data_file, spec.constraints_file, spec.k)
            log_progress(f"Loaded instance '{name}': {problem}")

            for algorithm in experiment.algorithms:
                records = run_instance(
                    problem, algorithm, experiment.seeds, params.algorithm, time_recorder
                )
                output_path = sink.write(name, algorithm, records)
                results[(name, algorithm)] = records

                failed = len(experiment.seeds) - len(records)
                tracker.advance(
                    f"{name}/{algorithm}: {len(records)} runs saved to {Path(output_path).name}",
                    status="success" if failed == 0 else "warning",
                )
    finally:
        tracker.close()

    return results
