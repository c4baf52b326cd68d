"""Exception hierarchy for parclust."""


class ParclustError(Exception):
    """Base class for all parclust errors."""


class MalformedInputError(ParclustError, ValueError):
    """Non-numeric cells, ragged rows or inconsistent constraint data."""


class DegenerateInstanceError(ParclustError, ValueError):
    """Instance for which the objective is undefined (no constraints, bad k)."""


class ConstructionFailedError(ParclustError, RuntimeError):
    """The constructive heuristic exhausted its restarts without a valid partition."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Greedy construction produced an empty cluster in {attempts} consecutive attempts"
        )
        self.attempts = attempts
