"""Tests for the optimizer registry."""

import numpy as np
import pytest

from parclust.algorithms import (
    GeneticOptimizer,
    GreedyConstructor,
    LocalSearchOptimizer,
)
from parclust.core_types import SearchResult
from parclust.partition import Partition
from parclust.registry import OPTIMIZER_REGISTRY, get_optimizer, register_optimizer


@pytest.fixture
def clean_registry():
    """Remove any optimizer registered by a test."""
    before = dict(OPTIMIZER_REGISTRY)
    yield OPTIMIZER_REGISTRY
    OPTIMIZER_REGISTRY.clear()
    OPTIMIZER_REGISTRY.update(before)


def test_builtin_optimizers_registered():
    assert OPTIMIZER_REGISTRY["constructive"] is GreedyConstructor
    assert OPTIMIZER_REGISTRY["local-search"] is LocalSearchOptimizer
    assert OPTIMIZER_REGISTRY["genetic"] is GeneticOptimizer


def test_get_optimizer_unknown_lists_available():
    with pytest.raises(ValueError, match="constructive"):
        get_optimizer("simulated-annealing")


def test_duplicate_registration_rejected(clean_registry):
    with pytest.raises(ValueError, match="already registered"):

        @register_optimizer("genetic")
        class Impostor:
            pass

    assert clean_registry["genetic"] is GeneticOptimizer


def test_custom_optimizer_is_usable(clean_registry, two_groups_problem):
    @register_optimizer("random-valid")
    class RandomValid:
        def run(self, problem, rng):
            partition = Partition.random(problem, rng)
            return SearchResult.from_partition(partition, problem)

    optimizer = get_optimizer("random-valid")()
    result = optimizer.run(two_groups_problem, np.random.default_rng(0))
    assert result.partition.is_valid()
    assert result.fitness == pytest.approx(
        result.deviation + two_groups_problem.lambda_ * result.infeasibility
    )
