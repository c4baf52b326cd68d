"""
save_results.py – persistence of experiment results

Every batch of runs leaves the process through this module, one table per
(algorithm, instance) pair laid out as ``<results_dir>/<algorithm>/<instance>.<ext>``.
"""

from pathlib import Path

import pandas as pd

from parclust.core_types import ExecutionRecord
from parclust.utils.logging import ParclustLogger

logger = ParclustLogger.get_logger(__name__)

RESULT_COLUMNS = ["seed", "fitness", "infeasibility", "general_deviation", "time_ms"]

_EXTENSIONS = {"csv": ".csv", "json": ".json"}


def records_to_dataframe(records: list[ExecutionRecord]) -> pd.DataFrame:
    """Tabulate records with a fixed column order, even when empty."""
    return pd.DataFrame([r.to_dict() for r in records], columns=RESULT_COLUMNS)


def summarize_records(records: list[ExecutionRecord]) -> dict[str, float]:
    """Mean of every numeric column across seeds."""
    df = records_to_dataframe(records)
    if df.empty:
        return {}
    return {col: float(df[col].mean()) for col in RESULT_COLUMNS if col != "seed"}


class TabularResultSink:
    """Writes execution records as CSV or JSON tables under ``results_dir``."""

    def __init__(self, results_dir: str | Path, format: str = "csv"):
        if format not in _EXTENSIONS:
            raise ValueError(
                f"Unsupported results format '{format}'. Use one of: {sorted(_EXTENSIONS)}"
            )
        self.results_dir = Path(results_dir)
        self.format = format

    def path_for(self, instance: str, algorithm: str) -> Path:
        return self.results_dir / algorithm / f"{instance}{_EXTENSIONS[self.format]}"

    def write(
        self, instance: str, algorithm: str, records: list[ExecutionRecord]
    ) -> Path:
        output_path = self.path_for(instance, algorithm)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        df = records_to_dataframe(records)
        if self.format == "csv":
            df.to_csv(output_path, index=False)
        else:
            df.to_json(output_path, orient="records", indent=2)

        logger.debug(f"Wrote {len(df)} records to {output_path}")
        return output_path
