"""
Command-line interface for parclust using Typer.
"""

import dataclasses
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from parclust import __version__
from parclust.algorithms import OPTIMIZER_REGISTRY
from parclust.api import run_experiment, run_instance
from parclust.config import ParclustParams, load_default, load_parclust_params
from parclust.config.params import IOParams
from parclust.core_types import ExecutionRecord
from parclust.exceptions import ConstructionFailedError
from parclust.problem import Problem
from parclust.utils.logging import (
    LogLevel,
    log_error,
    log_progress,
    log_success,
    setup_logging,
)
from parclust.utils.save_results import TabularResultSink, summarize_records

app = typer.Typer(
    help="parclust: constrained partitioning with greedy, local search and genetic optimizers",
    add_completion=False,
)
console = Console()


def _get_default_config() -> ParclustParams | None:
    """Packaged defaults, or None if they cannot be read."""
    try:
        return load_default()
    except (FileNotFoundError, ValueError):
        return None


_DEFAULT_CONFIG = _get_default_config()
_DEFAULT_SEEDS = _DEFAULT_CONFIG.experiment.seeds if _DEFAULT_CONFIG else [4, 7, 2, 1, 3]


def _results_table(title: str, records: list[ExecutionRecord]) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Seed", style="cyan", justify="right")
    table.add_column("Fitness", style="green", justify="right")
    table.add_column("Infeasibility", justify="right")
    table.add_column("General Deviation", justify="right")
    table.add_column("Time (ms)", justify="right")

    for record in records:
        table.add_row(
            str(record.seed),
            f"{record.fitness:.6f}",
            str(record.infeasibility),
            f"{record.general_deviation:.6f}",
            str(record.time_ms),
        )

    summary = summarize_records(records)
    if summary:
        table.add_section()
        table.add_row(
            "mean",
            f"{summary['fitness']:.6f}",
            f"{summary['infeasibility']:.2f}",
            f"{summary['general_deviation']:.6f}",
            f"{summary['time_ms']:.0f}",
        )
    return table


def _validate_algorithm(algorithm: str) -> None:
    if algorithm not in OPTIMIZER_REGISTRY:
        available = ", ".join(sorted(OPTIMIZER_REGISTRY))
        log_error(f"Unknown algorithm '{algorithm}'. Choose one of: {available}")
        raise typer.Exit(1)


def _validate_format(format: str) -> None:
    if format not in ["csv", "json"]:
        log_error("Invalid format. Choose 'csv' or 'json'")
        raise typer.Exit(1)


@app.command()
def run(
    data: Path = typer.Option(..., "--data", "-d", help="Path to the points file"),
    constraints: Path = typer.Option(
        ..., "--constraints", "-c", help="Path to the constraint matrix file"
    ),
    k: int = typer.Option(..., "--clusters", "-k", help="Number of clusters"),
    algorithm: str = typer.Option(
        "genetic",
        "--algorithm",
        "-a",
        help="Optimizer to run (constructive, local-search, genetic)",
    ),
    seed: list[int] | None = typer.Option(
        None, "--seed", "-s", help="Random seed; repeat for several runs"
    ),
    name: str | None = typer.Option(
        None, "--name", "-n", help="Instance name used for the results file"
    ),
    output: Path = typer.Option("results", "--output", "-o", help="Output directory"),
    format: str = typer.Option(
        _DEFAULT_CONFIG.io.format if _DEFAULT_CONFIG else "csv",
        "--format",
        "-f",
        help="Output format (csv, json)",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Partition one instance with one optimizer.

    Runs the optimizer once per seed, prints a results table and writes the
    records to <output>/<algorithm>/<name>.<format>.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    for path, label in ((data, "Data"), (constraints, "Constraints")):
        if not path.exists():
            log_error(f"{label} file not found: {path}")
            raise typer.Exit(1)

    _validate_algorithm(algorithm)
    _validate_format(format)

    seeds = list(seed) if seed else list(_DEFAULT_SEEDS)
    instance_name = name or data.stem

    try:
        problem = Problem.from_files(data, constraints, k)
        log_progress(f"Running {algorithm} on {instance_name} ({problem})")

        params = _DEFAULT_CONFIG.algorithm if _DEFAULT_CONFIG else None
        records = run_instance(problem, algorithm, seeds, params)
        if not records:
            log_error(f"No seed produced a valid partition for {instance_name}")
            raise typer.Exit(1)

        output_path = TabularResultSink(output, format).write(
            instance_name, algorithm, records
        )

        if not quiet:
            console.print(_results_table(f"{algorithm} on {instance_name}", records))
        log_success(f"Results saved to {output_path}")

    except FileNotFoundError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except ConstructionFailedError as e:
        log_error(str(e))
        raise typer.Exit(1)


@app.command()
def benchmark(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    algorithm: str | None = typer.Option(
        None,
        "--algorithm",
        "-a",
        help="Run only this optimizer instead of every configured one",
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
    format: str | None = typer.Option(
        None, "--format", "-f", help="Output format (csv, json)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Run every configured instance with every configured optimizer and seed.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    if config and not config.exists():
        log_error(f"Config file not found: {config}")
        raise typer.Exit(1)

    if algorithm is not None:
        _validate_algorithm(algorithm)
    if format is not None:
        _validate_format(format)

    try:
        params = load_parclust_params(config) if config else load_default()

        if algorithm is not None:
            params = dataclasses.replace(
                params,
                experiment=dataclasses.replace(params.experiment, algorithms=[algorithm]),
            )
        if output is not None or format is not None:
            params = dataclasses.replace(
                params,
                io=IOParams(
                    results_dir=output or params.io.results_dir,
                    format=format or params.io.format,
                ),
            )
        params.runtime.verbose = verbose
        params.runtime.debug = debug

        if not quiet:
            log_progress(
                f"Running {len(params.experiment.instances)} instances x "
                f"{len(params.experiment.algorithms)} algorithms x "
                f"{len(params.experiment.seeds)} seeds..."
            )

        results = run_experiment(params)

        if not quiet:
            for (instance_name, algorithm_name), records in results.items():
                console.print(
                    _results_table(f"{algorithm_name} on {instance_name}", records)
                )
        log_success(f"Benchmark completed. Results saved to {params.io.results_dir}/")

    except FileNotFoundError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        log_error(f"Error running benchmark: {e}")
        if debug:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def algorithms() -> None:
    """
    List the registered optimizers.
    """
    table = Table(title="Registered Optimizers", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Class", style="green")
    for registered_name, optimizer_class in sorted(OPTIMIZER_REGISTRY.items()):
        table.add_row(registered_name, optimizer_class.__name__)
    console.print(table)


@app.command()
def version() -> None:
    """
    Show the parclust version.
    """
    console.print(f"parclust version {__version__}")


def _setup_logging_from_flags(
    verbose: bool = False, quiet: bool = False, debug: bool = False
):
    """Setup logging based on CLI flags or environment variable."""
    level_from_flags: LogLevel | None = None
    if debug:
        level_from_flags = LogLevel.DEBUG
    elif verbose:
        level_from_flags = LogLevel.VERBOSE
    elif quiet:
        level_from_flags = LogLevel.QUIET

    if level_from_flags is not None:
        setup_logging(level_from_flags)
    else:
        # No flags set, let setup_logging handle it (will check env var)
        setup_logging()


if __name__ == "__main__":
    app()
