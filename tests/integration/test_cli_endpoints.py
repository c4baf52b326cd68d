"""Test CLI endpoints and entry points."""

import pandas as pd
from typer.testing import CliRunner

from parclust import __version__
from parclust.app import app

runner = CliRunner()


def _run_args(assets_dir, output, *extra):
    return [
        "run",
        "--data",
        str(assets_dir / "two_groups.dat"),
        "--constraints",
        str(assets_dir / "two_groups.const"),
        "-k",
        "2",
        "--output",
        str(output),
        *extra,
    ]


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_algorithms_lists_builtins():
    result = runner.invoke(app, ["algorithms"])
    assert result.exit_code == 0
    for name in ("constructive", "local-search", "genetic"):
        assert name in result.stdout


def test_run_writes_results(assets_dir, tmp_path):
    result = runner.invoke(
        app,
        _run_args(
            assets_dir,
            tmp_path,
            "--algorithm",
            "local-search",
            "--seed",
            "1",
            "--seed",
            "2",
            "--name",
            "triangles",
        ),
    )
    assert result.exit_code == 0, result.stdout

    df = pd.read_csv(tmp_path / "local-search" / "triangles.csv")
    assert list(df["seed"]) == [1, 2]
    assert (df["infeasibility"] == 0).all()


def test_run_json_format_and_default_name(assets_dir, tmp_path):
    result = runner.invoke(
        app,
        _run_args(assets_dir, tmp_path, "-a", "constructive", "-s", "3", "-f", "json", "-q"),
    )
    assert result.exit_code == 0, result.stdout
    assert (tmp_path / "constructive" / "two_groups.json").exists()


def test_run_missing_data_file(assets_dir, tmp_path):
    result = runner.invoke(
        app,
        [
            "run",
            "--data",
            str(tmp_path / "absent.dat"),
            "--constraints",
            str(assets_dir / "two_groups.const"),
            "-k",
            "2",
        ],
    )
    assert result.exit_code == 1


def test_run_unknown_algorithm(assets_dir, tmp_path):
    result = runner.invoke(app, _run_args(assets_dir, tmp_path, "-a", "annealing"))
    assert result.exit_code == 1


def test_run_invalid_format(assets_dir, tmp_path):
    result = runner.invoke(app, _run_args(assets_dir, tmp_path, "-f", "xlsx"))
    assert result.exit_code == 1


def test_run_degenerate_k(assets_dir, tmp_path):
    args = _run_args(assets_dir, tmp_path)
    args[args.index("-k") + 1] = "9"
    result = runner.invoke(app, args)
    assert result.exit_code == 1


def test_run_construction_failure(tmp_path):
    data = tmp_path / "line.dat"
    data.write_text("0.0\n1.0\n2.0\n")
    constraints = tmp_path / "line.const"
    constraints.write_text("1,1,1\n1,1,1\n1,1,1\n")

    result = runner.invoke(
        app,
        [
            "run",
            "--data",
            str(data),
            "--constraints",
            str(constraints),
            "-k",
            "2",
            "-a",
            "constructive",
            "-s",
            "1",
            "--output",
            str(tmp_path),
        ],
    )
    assert result.exit_code == 1


def test_benchmark_from_config(assets_dir, tmp_path):
    result = runner.invoke(
        app,
        [
            "benchmark",
            "--config",
            str(assets_dir / "experiment.yaml"),
            "--algorithm",
            "genetic",
            "--output",
            str(tmp_path),
            "--format",
            "json",
            "--quiet",
        ],
    )
    assert result.exit_code == 0, result.stdout
    assert (tmp_path / "genetic" / "two_groups.json").exists()
    assert not (tmp_path / "constructive").exists()


def test_benchmark_missing_config(tmp_path):
    result = runner.invoke(app, ["benchmark", "--config", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 1


def test_benchmark_default_config_has_no_instances():
    result = runner.invoke(app, ["benchmark", "--quiet"])
    assert result.exit_code == 1
