"""Loading problem instances from comma-separated text files."""

from pathlib import Path

import numpy as np
import pandas as pd

from parclust.core_types import Constraint
from parclust.exceptions import DegenerateInstanceError, MalformedInputError
from parclust.problem import Problem
from parclust.utils.logging import ParclustLogger

logger = ParclustLogger.get_logger(__name__)


def _read_matrix(path: Path, what: str) -> np.ndarray:
    """Read a headerless comma-separated numeric matrix, blank lines skipped."""
    if not path.exists():
        raise FileNotFoundError(f"{what.capitalize()} file not found: {path}")

    try:
        df = pd.read_csv(path, header=None, skip_blank_lines=True, skipinitialspace=True)
    except pd.errors.EmptyDataError:
        return np.empty((0, 0))
    except pd.errors.ParserError as exc:
        raise MalformedInputError(f"Could not parse {what} file {path}: {exc}") from exc

    try:
        df = df.apply(pd.to_numeric, errors="raise")
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(
            f"{what.capitalize()} file {path} contains non-numeric values: {exc}"
        ) from exc

    # Short rows are padded with NaN by pandas
    if df.isna().to_numpy().any():
        first_bad = int(np.flatnonzero(df.isna().any(axis=1).to_numpy())[0])
        raise MalformedInputError(
            f"{what.capitalize()} file {path} has a ragged or empty cell in row {first_bad + 1}"
        )

    return df.to_numpy(dtype=np.float64)


def load_points(path: str | Path) -> np.ndarray:
    """Points file: one comma-separated row of coordinates per point."""
    points = _read_matrix(Path(path), "data")
    if points.size == 0:
        raise DegenerateInstanceError(f"Data file {path} contains no points")
    return points


def load_constraints(path: str | Path, n: int) -> dict[tuple[int, int], int]:
    """Constraint matrix file: ``n`` rows of ``n`` values in {-1, 0, 1}.

    Only the strict upper triangle is read; the diagonal and the lower
    triangle are ignored. Zero entries are dropped.
    """
    matrix = _read_matrix(Path(path), "constraints")
    if matrix.shape != (n, n):
        raise MalformedInputError(
            f"Constraints file {path} must be a {n}x{n} matrix, got shape {matrix.shape}"
        )

    upper = np.triu(matrix, k=1)
    invalid = ~np.isin(upper, (-1, 0, 1))
    if invalid.any():
        i, j = (int(x) for x in np.argwhere(invalid)[0])
        raise MalformedInputError(
            f"Constraints file {path} has value {matrix[i, j]} at ({i}, {j}); expected -1, 0 or 1"
        )

    rows, cols = np.nonzero(upper)
    return {
        (int(i), int(j)): int(Constraint(int(upper[i, j])))
        for i, j in zip(rows, cols)
    }


class CsvProblemLoader:
    """Reads a :class:`Problem` from a points file and a constraint matrix file."""

    def load(
        self, data_file: str | Path, constraints_file: str | Path, k: int
    ) -> Problem:
        points = load_points(data_file)
        constraints = load_constraints(constraints_file, points.shape[0])
        logger.debug(
            f"Loaded {points.shape[0]} points of dimension {points.shape[1]} "
            f"and {len(constraints)} constraints from {data_file}, {constraints_file}"
        )
        return Problem(points, constraints, k)
