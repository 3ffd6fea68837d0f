# ================================================================================
# Log Sink Module
# ================================================================================
#
# Pluggable string sinks for engine debug output plus the process-wide
# Loguru setup used by the runner and the test session.
#
# Fields and buttons never write to a global logger directly: each instance
# receives a sink (any callable taking one string). The default sink forwards
# to Loguru, tests pass a ListSink to capture messages.
#
# ================================================================================

import sys
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger


LogSink = Callable[[str], None]

DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "{name}:{function}:{line} | {message}"
)

_logger_initialized: bool = False


def loguru_sink(message: str) -> None:
    """Default sink: forward engine messages to Loguru at DEBUG level."""
    logger.opt(depth=1).debug(message)


class ListSink:
    """
    In-memory sink that collects messages.

    Example:
        sink = ListSink()
        field = TextField(page, "Name", "Name", sink=sink)
        await field.check_if_exist(debug=True)
        assert any("Attempt 1" in m for m in sink.messages)
    """

    def __init__(self) -> None:
        self.messages: List[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()

    def contains(self, fragment: str) -> bool:
        return any(fragment in m for m in self.messages)


def init_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_str: Optional[str] = None,
) -> None:
    """
    Initialize the global Loguru logger once per process.

    Values not passed explicitly are read from the ``logging`` section of
    the configuration file.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of a rotating log file
        format_str: Custom Loguru format string
    """
    global _logger_initialized

    if _logger_initialized:
        return

    from .config_loader import ConfigLoader

    config = ConfigLoader()
    log_level = (level or config.get("logging.level", "INFO")).upper()
    log_format = format_str or config.get("logging.format", DEFAULT_LOG_FORMAT)
    log_file = log_file or config.get("logging.file", None)

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=config.get("logging.rotation", "10 MB"),
            retention=config.get("logging.retention", "7 days"),
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


__all__ = [
    "LogSink",
    "ListSink",
    "loguru_sink",
    "init_logger",
]
