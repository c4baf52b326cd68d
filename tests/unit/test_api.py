"""Tests for the programmatic API."""

import dataclasses

import pandas as pd
import pytest

from parclust.api import build_optimizer, run_experiment, run_instance, solve
from parclust.algorithms import GeneticOptimizer, GreedyConstructor
from parclust.config import load_parclust_params
from parclust.config.params import AlgorithmParams, IOParams
from parclust.core_types import ExecutionRecord
from parclust.problem import Problem


def test_build_optimizer_uses_configured_options():
    params = AlgorithmParams(population_size=8, generations=4, max_restarts=7)

    genetic = build_optimizer("genetic", params)
    assert isinstance(genetic, GeneticOptimizer)
    assert (genetic.population_size, genetic.generations) == (8, 4)

    greedy = build_optimizer("constructive", params)
    assert isinstance(greedy, GreedyConstructor)
    assert greedy.max_restarts == 7


def test_build_optimizer_unknown_name():
    with pytest.raises(ValueError):
        build_optimizer("does-not-exist")


def test_solve_is_reproducible(two_groups_problem):
    params = AlgorithmParams(population_size=10, generations=10)
    a = solve(two_groups_problem, "genetic", seed=5, params=params)
    b = solve(two_groups_problem, "genetic", seed=5, params=params)
    assert a.partition == b.partition
    assert a.fitness == b.fitness


def test_run_instance_records_every_seed(two_groups_problem):
    records = run_instance(two_groups_problem, "constructive", [4, 7, 2])
    assert [r.seed for r in records] == [4, 7, 2]
    assert all(isinstance(r, ExecutionRecord) for r in records)
    assert all(r.time_ms >= 0 for r in records)
    assert all(r.infeasibility == 0 for r in records)


def test_run_instance_skips_failed_construction():
    # Every element must-linked: a second cluster can never be filled
    problem = Problem([[0.0], [1.0], [2.0]], {(0, 1): 1, (1, 2): 1}, k=2)
    params = AlgorithmParams(max_restarts=2)
    assert run_instance(problem, "constructive", [1, 2], params) == []


class _MemorySink:
    def __init__(self):
        self.written = {}

    def write(self, instance, algorithm, records):
        self.written[(instance, algorithm)] = list(records)
        return f"{algorithm}/{instance}.mem"


def test_run_experiment_writes_every_table(assets_dir, tmp_path):
    params = load_parclust_params(assets_dir / "experiment.yaml")
    params = dataclasses.replace(params, io=IOParams(results_dir=tmp_path, format="csv"))

    results = run_experiment(params)

    assert set(results) == {
        ("two_groups", "constructive"),
        ("two_groups", "local-search"),
        ("two_groups", "genetic"),
    }
    for algorithm in ("constructive", "local-search", "genetic"):
        df = pd.read_csv(tmp_path / algorithm / "two_groups.csv")
        assert list(df["seed"]) == [1, 2, 3]
        assert (df["infeasibility"] == 0).all()


def test_run_experiment_with_custom_sink(assets_dir):
    params = load_parclust_params(assets_dir / "experiment.yaml")
    params = dataclasses.replace(
        params,
        experiment=dataclasses.replace(params.experiment, algorithms=["local-search"]),
    )
    sink = _MemorySink()

    run_experiment(params, sink=sink)

    assert list(sink.written) == [("two_groups", "local-search")]
    assert len(sink.written[("two_groups", "local-search")]) == 3


def test_run_experiment_requires_instances(tmp_path):
    config = tmp_path / "empty.yaml"
    config.write_text("seeds: [1]\n")
    params = load_parclust_params(config)
    with pytest.raises(ValueError, match="No instances"):
        run_experiment(params)


def test_run_experiment_missing_instance_file(tmp_path):
    config = tmp_path / "missing.yaml"
    config.write_text(
        "instances:\n"
        "  ghost:\n"
        "    data_file: nowhere.dat\n"
        "    constraints_file: nowhere.const\n"
        "    k: 2\n"
    )
    params = load_parclust_params(config)
    with pytest.raises(FileNotFoundError):
        run_experiment(params, sink=_MemorySink())
