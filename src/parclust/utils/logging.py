"""
Logging facade for parclust.

Wraps the standard :mod:`logging` module with four verbosity levels, coloured
single-line output and a tqdm progress tracker for batch runs.
"""

import logging
import os
import sys
from enum import Enum

from tqdm import tqdm


class LogLevel(Enum):
    """Verbosity levels exposed on the command line."""

    QUIET = 0  # errors only
    NORMAL = 1  # progress and results
    VERBOSE = 2  # per-run details
    DEBUG = 3  # per-pass / per-generation internals


class Colors:
    """ANSI colour codes."""

    BLUE = "\033[34m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    CYAN = "\033[36m"
    GRAY = "\033[37m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class Symbols:
    """Unicode symbols used in log messages."""

    CHECK = "✓"
    CROSS = "✗"
    ROCKET = "🚀"
    GEAR = "⚙"
    WARNING = "⚠"
    INFO = "ℹ"
    DNA = "🧬"


_PYTHON_LEVELS = {
    LogLevel.QUIET: logging.ERROR,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


class SimpleFormatter(logging.Formatter):
    """Colour the whole message according to the record level."""

    COLORS = {
        "DEBUG": Colors.GRAY,
        "INFO": Colors.CYAN,
        "WARNING": Colors.YELLOW,
        "ERROR": Colors.RED,
        "CRITICAL": Colors.RED + Colors.BOLD,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        return f"{color}{record.getMessage()}{Colors.RESET}"


class ParclustLogger:
    """Process-wide logger registry with a shared verbosity level."""

    _current_level: LogLevel = LogLevel.NORMAL
    _loggers: dict[str, logging.Logger] = {}

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        cls._current_level = level
        for logger in cls._loggers.values():
            cls._configure_logger_level(logger, level)

    @classmethod
    def get_level(cls) -> LogLevel:
        return cls._current_level

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Return a named logger configured for the current verbosity."""
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            if not logger.handlers:
                handler = logging.StreamHandler(sys.stdout)
                handler.setFormatter(SimpleFormatter())
                logger.addHandler(handler)
            logger.propagate = False
            cls._loggers[name] = logger
        logger = cls._loggers[name]
        cls._configure_logger_level(logger, cls._current_level)
        return logger

    @classmethod
    def _configure_logger_level(cls, logger: logging.Logger, level: LogLevel) -> None:
        # Worker processes inherit the effective level through the environment
        env_level = os.getenv("PARCLUST_EFFECTIVE_LOG_LEVEL")
        if env_level:
            try:
                level = LogLevel[env_level.upper()]
            except KeyError:
                pass
        logger.setLevel(_PYTHON_LEVELS[level])

    @classmethod
    def progress(cls, message: str) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("parclust").info(f"{Symbols.GEAR} {message}")

    @classmethod
    def success(cls, message: str) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("parclust").info(
                f"{Colors.GREEN}{Symbols.CHECK} {message}{Colors.RESET}"
            )

    @classmethod
    def info(cls, message: str) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("parclust").info(message)

    @classmethod
    def detail(cls, message: str) -> None:
        if cls._current_level.value >= LogLevel.VERBOSE.value:
            cls.get_logger("parclust").info(f"  {message}")

    @classmethod
    def debug(cls, message: str, logger_name: str = "parclust") -> None:
        if cls._current_level.value >= LogLevel.DEBUG.value:
            cls.get_logger(logger_name).debug(message)

    @classmethod
    def warning(cls, message: str) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("parclust").warning(f"{Symbols.WARNING} {message}")

    @classmethod
    def error(cls, message: str) -> None:
        cls.get_logger("parclust").error(f"{Symbols.CROSS} {message}")


class ProgressTracker:
    """Step-based progress bar; silent in QUIET mode."""

    def __init__(self, steps: list[str]):
        self.steps = steps
        self.current = 0
        self.pbar = None
        if ParclustLogger.get_level() != LogLevel.QUIET:
            self.pbar = tqdm(
                total=len(steps),
                desc=f"{Colors.BLUE}{Symbols.ROCKET} Progress{Colors.RESET}",
                bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt}",
            )

    def advance(self, message: str | None = None, status: str = "success") -> None:
        if self.pbar is not None:
            if message:
                color = Colors.GREEN if status == "success" else Colors.YELLOW
                symbol = Symbols.CHECK if status == "success" else Symbols.WARNING
                self.pbar.write(f"{color}{symbol} {message}{Colors.RESET}")
            self.pbar.update(1)
        self.current += 1

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.write(
                f"\n{Colors.GREEN}{Symbols.CHECK} All steps completed{Colors.RESET}"
            )
            self.pbar.close()


def suppress_third_party_logs() -> None:
    for name in ("sklearn", "joblib", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure the global verbosity.

    Without an explicit level, ``PARCLUST_LOG_LEVEL`` is consulted and
    NORMAL is used as the fallback. The resolved level is exported as
    ``PARCLUST_EFFECTIVE_LOG_LEVEL``.
    """
    if level is None:
        env_level = os.getenv("PARCLUST_LOG_LEVEL", "").upper()
        level = LogLevel.__members__.get(env_level, LogLevel.NORMAL)

    os.environ["PARCLUST_EFFECTIVE_LOG_LEVEL"] = level.name
    ParclustLogger.set_level(level)
    suppress_third_party_logs()


def log_progress(message: str) -> None:
    ParclustLogger.progress(message)


def log_success(message: str) -> None:
    ParclustLogger.success(message)


def log_info(message: str) -> None:
    ParclustLogger.info(message)


def log_detail(message: str) -> None:
    ParclustLogger.detail(message)


def log_debug(message: str, logger_name: str = "parclust") -> None:
    ParclustLogger.debug(message, logger_name)


def log_warning(message: str) -> None:
    ParclustLogger.warning(message)


def log_error(message: str) -> None:
    ParclustLogger.error(message)
