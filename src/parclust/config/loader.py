from __future__ import annotations

"""Utilities for loading parclust configuration YAML files into the
parameter dataclass hierarchy.

Expected layout::

    instances:
      zoo:
        data_file: data/zoo_set.dat
        constraints_file: data/zoo_set_const_10.const
        k: 7
    seeds: [4, 7, 2, 1, 3]
    algorithms: [constructive, local-search, genetic]
    constructive: {max_restarts: 100, max_passes: null}
    local_search: {max_evaluations: null}
    genetic: {population_size: 50, generations: 100}
    results_dir: results
    format: csv

Relative instance paths are resolved against the directory of the YAML file.
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from parclust.core_types import InstanceSpec
from parclust.utils.logging import ParclustLogger

from .params import AlgorithmParams, ExperimentParams, IOParams, ParclustParams

logger = ParclustLogger.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.yaml"

# ---------------------------------------------------------------------------
# Helper parsing routines
# ---------------------------------------------------------------------------


def _resolve(path: str | Path, base_dir: Path) -> Path:
    path = Path(path)
    return path if path.is_absolute() else (base_dir / path).resolve()


def _parse_instances(
    raw: Dict[str, Dict[str, Any]], base_dir: Path
) -> Dict[str, InstanceSpec]:
    """Convert YAML mapping of instances into `InstanceSpec` objects."""

    if not isinstance(raw, dict):
        raise ValueError("YAML key 'instances' must be a mapping of name -> instance.")

    parsed: Dict[str, InstanceSpec] = {}
    for name, details in raw.items():
        details = dict(details or {})
        try:
            data_file = details.pop("data_file")
            constraints_file = details.pop("constraints_file")
            k = details.pop("k")
        except KeyError as exc:
            raise ValueError(
                f"Instance '{name}' is missing required key {exc.args[0]!r}."
            ) from exc

        if details:
            unknown = ", ".join(sorted(details))
            raise ValueError(f"Instance '{name}' has unknown keys: {unknown}")

        parsed[str(name)] = InstanceSpec(
            name=str(name),
            data_file=_resolve(data_file, base_dir),
            constraints_file=_resolve(constraints_file, base_dir),
            k=int(k),
        )

    return parsed


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.pop(key, {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"YAML key '{key}' must be a mapping.")
    return section


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_yaml(path: str | Path) -> ParclustParams:
    """Load YAML configuration file into `ParclustParams`."""

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)

    try:
        with cfg_path.open() as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Error parsing YAML configuration {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Configuration {cfg_path} must contain a YAML mapping.")

    base_dir = cfg_path.resolve().parent

    # ---------------------------------------------------------------------
    # Experiment definition
    # ---------------------------------------------------------------------

    experiment_kwargs: Dict[str, Any] = {
        "instances": _parse_instances(data.pop("instances", {}) or {}, base_dir)
    }
    if "seeds" in data:
        experiment_kwargs["seeds"] = list(data.pop("seeds") or [])
    if "algorithms" in data:
        experiment_kwargs["algorithms"] = list(data.pop("algorithms") or [])

    experiment = ExperimentParams(**experiment_kwargs)

    # ---------------------------------------------------------------------
    # Algorithm parameters
    # ---------------------------------------------------------------------

    constructive = _section(data, "constructive")
    local_search = _section(data, "local_search")
    genetic = _section(data, "genetic")

    algorithm = AlgorithmParams(
        max_restarts=constructive.get("max_restarts", 100),
        max_passes=constructive.get("max_passes"),
        max_evaluations=local_search.get("max_evaluations"),
        population_size=genetic.get("population_size", 50),
        generations=genetic.get("generations", 100),
    )

    # ---------------------------------------------------------------------
    # IO parameters
    # ---------------------------------------------------------------------

    io_params = IOParams(
        results_dir=Path(data.pop("results_dir", "results")),
        format=data.pop("format", "csv"),
    )

    # Any remaining unknown keys will raise an error to avoid silent mistakes.
    if data:
        unknown_keys = ", ".join(sorted(data.keys()))
        raise ValueError(f"Unknown top-level configuration keys in YAML: {unknown_keys}")

    logger.debug(
        "Loaded configuration – experiment: %s algorithm: %s io: %s",
        experiment,
        algorithm,
        io_params,
    )

    return ParclustParams(experiment=experiment, algorithm=algorithm, io=io_params)


def load_default() -> ParclustParams:
    """Load the packaged `default_config.yaml`."""
    return load_yaml(DEFAULT_CONFIG_PATH)


def save_yaml(params: ParclustParams, path: str | Path) -> Path:
    """Write `params` back to YAML in the layout accepted by `load_yaml`."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w") as f:
        yaml.safe_dump(params.to_dict(), f, sort_keys=False)
    return out_path
