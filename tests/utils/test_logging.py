"""Unit tests for the logging module."""

import logging
import os
import unittest
from unittest.mock import MagicMock, patch

from parclust.utils.logging import (
    Colors,
    LogLevel,
    ParclustLogger,
    ProgressTracker,
    SimpleFormatter,
    Symbols,
    log_debug,
    log_detail,
    log_error,
    log_info,
    log_progress,
    setup_logging,
    suppress_third_party_logs,
)


def _record(level: int, msg: str, args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="parclust.test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestSimpleFormatter(unittest.TestCase):
    def test_colour_follows_level(self):
        formatter = SimpleFormatter()
        self.assertTrue(formatter.format(_record(logging.ERROR, "boom")).startswith(Colors.RED))
        self.assertTrue(formatter.format(_record(logging.DEBUG, "pass 3")).startswith(Colors.GRAY))

    def test_arguments_are_interpolated(self):
        formatted = SimpleFormatter().format(
            _record(logging.INFO, "generation %d of %d", (4, 100))
        )
        self.assertIn("generation 4 of 100", formatted)
        self.assertTrue(formatted.endswith(Colors.RESET))


class TestParclustLogger(unittest.TestCase):
    def setUp(self):
        ParclustLogger._current_level = LogLevel.NORMAL
        ParclustLogger._loggers.clear()
        os.environ.pop("PARCLUST_EFFECTIVE_LOG_LEVEL", None)

    def tearDown(self):
        os.environ.pop("PARCLUST_EFFECTIVE_LOG_LEVEL", None)
        ParclustLogger.set_level(LogLevel.NORMAL)

    def test_loggers_are_cached(self):
        logger = ParclustLogger.get_logger("parclust.cache")
        self.assertIs(logger, ParclustLogger.get_logger("parclust.cache"))
        self.assertFalse(logger.propagate)

    def test_set_level_reconfigures_existing_loggers(self):
        logger = ParclustLogger.get_logger("parclust.levels")
        self.assertEqual(logger.level, logging.INFO)

        ParclustLogger.set_level(LogLevel.DEBUG)
        self.assertEqual(logger.level, logging.DEBUG)

        ParclustLogger.set_level(LogLevel.QUIET)
        self.assertEqual(logger.level, logging.ERROR)

    def test_effective_level_from_environment_wins(self):
        os.environ["PARCLUST_EFFECTIVE_LOG_LEVEL"] = "debug"
        ParclustLogger.set_level(LogLevel.QUIET)
        logger = ParclustLogger.get_logger("parclust.env")
        self.assertEqual(logger.level, logging.DEBUG)

    def test_invalid_environment_value_is_ignored(self):
        os.environ["PARCLUST_EFFECTIVE_LOG_LEVEL"] = "chatty"
        ParclustLogger.set_level(LogLevel.QUIET)
        logger = ParclustLogger.get_logger("parclust.bad_env")
        self.assertEqual(logger.level, logging.ERROR)

    @patch("logging.Logger.info")
    def test_detail_needs_verbose(self, mock_info):
        log_detail("seed 4: fitness=1.0")
        mock_info.assert_not_called()

        ParclustLogger.set_level(LogLevel.VERBOSE)
        log_detail("seed 4: fitness=1.0")
        mock_info.assert_called_once()
        self.assertTrue(mock_info.call_args[0][0].startswith("  "))

    @patch("logging.Logger.debug")
    def test_debug_needs_debug_level(self, mock_debug):
        ParclustLogger.set_level(LogLevel.VERBOSE)
        log_debug("generation 1")
        mock_debug.assert_not_called()

        ParclustLogger.set_level(LogLevel.DEBUG)
        log_debug("generation 1", "parclust.algorithms.genetic")
        mock_debug.assert_called_once_with("generation 1")

    @patch("logging.Logger.info")
    def test_quiet_silences_progress_and_info(self, mock_info):
        ParclustLogger.set_level(LogLevel.QUIET)
        log_progress("Loading")
        log_info("Loaded")
        mock_info.assert_not_called()

    @patch("logging.Logger.info")
    def test_progress_carries_gear_symbol(self, mock_info):
        log_progress("Loading instance")
        self.assertIn(Symbols.GEAR, mock_info.call_args[0][0])

    @patch("logging.Logger.error")
    def test_errors_always_logged(self, mock_error):
        ParclustLogger.set_level(LogLevel.QUIET)
        log_error("missing file")
        mock_error.assert_called_once()
        self.assertIn(Symbols.CROSS, mock_error.call_args[0][0])


class TestSetupLogging(unittest.TestCase):
    def tearDown(self):
        ParclustLogger.set_level(LogLevel.NORMAL)

    @patch.dict(os.environ, {}, clear=True)
    def test_default_is_normal(self):
        setup_logging()
        self.assertEqual(ParclustLogger.get_level(), LogLevel.NORMAL)
        self.assertEqual(os.environ["PARCLUST_EFFECTIVE_LOG_LEVEL"], "NORMAL")

    @patch.dict(os.environ, {"PARCLUST_LOG_LEVEL": "verbose"}, clear=True)
    def test_level_from_environment(self):
        setup_logging()
        self.assertEqual(ParclustLogger.get_level(), LogLevel.VERBOSE)

    @patch.dict(os.environ, {"PARCLUST_LOG_LEVEL": "debug"}, clear=True)
    def test_explicit_level_beats_environment(self):
        setup_logging(LogLevel.QUIET)
        self.assertEqual(ParclustLogger.get_level(), LogLevel.QUIET)
        self.assertEqual(os.environ["PARCLUST_EFFECTIVE_LOG_LEVEL"], "QUIET")

    def test_third_party_loggers_capped_at_warning(self):
        suppress_third_party_logs()
        self.assertEqual(logging.getLogger("sklearn").level, logging.WARNING)


class TestProgressTracker(unittest.TestCase):
    def tearDown(self):
        ParclustLogger.set_level(LogLevel.NORMAL)

    def test_quiet_mode_has_no_bar(self):
        ParclustLogger.set_level(LogLevel.QUIET)
        tracker = ProgressTracker(["zoo/genetic"])
        self.assertIsNone(tracker.pbar)
        tracker.advance("done")
        tracker.close()
        self.assertEqual(tracker.current, 1)

    @patch("parclust.utils.logging.tqdm")
    def test_warning_status_and_close(self, mock_tqdm):
        ParclustLogger.set_level(LogLevel.NORMAL)
        mock_pbar = MagicMock()
        mock_tqdm.return_value = mock_pbar

        tracker = ProgressTracker(["zoo/genetic", "zoo/constructive"])
        mock_tqdm.assert_called_once()
        self.assertEqual(mock_tqdm.call_args.kwargs["total"], 2)

        tracker.advance("zoo/constructive: 4 runs saved", status="warning")
        written = mock_pbar.write.call_args[0][0]
        self.assertIn(Symbols.WARNING, written)
        mock_pbar.update.assert_called_once_with(1)

        tracker.close()
        mock_pbar.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
