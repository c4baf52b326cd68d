# Tests for protocol declarations in parclust.interfaces
from parclust.algorithms import GeneticOptimizer, GreedyConstructor, LocalSearchOptimizer
from parclust.interfaces import Optimizer, ProblemLoader, ResultSink
from parclust.utils.data_processing import CsvProblemLoader
from parclust.utils.save_results import TabularResultSink


def test_optimizer_protocol_present():
    assert callable(Optimizer.run)


def test_problem_loader_protocol_present():
    assert callable(ProblemLoader.load)


def test_result_sink_protocol_present():
    assert callable(ResultSink.write)


def test_builtin_components_provide_protocol_methods():
    for optimizer_class in (GreedyConstructor, LocalSearchOptimizer, GeneticOptimizer):
        assert callable(getattr(optimizer_class, "run", None))
    assert callable(CsvProblemLoader().load)
    assert callable(TabularResultSink("results").write)
