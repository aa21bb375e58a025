"""Shared utility functions."""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("clusterlaunch")

# AWS SDK loggers and the level they keep at normal verbosity
SDK_LOG_LEVELS = {
    "boto3": logging.WARNING,
    "botocore": logging.WARNING,
    "botocore.credentials": logging.ERROR,
    "urllib3": logging.WARNING,
}


def _console_handler(level: int) -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        log_time_format="[%X]",
        show_path=False,
        markup=True,
        rich_tracebacks=level <= logging.DEBUG,
    )
    handler.set_name("clusterlaunch-console")
    return handler


def setup_logging(level: int | str = logging.INFO) -> None:
    """Route all logging through one Rich handler on stderr.

    Re-running replaces the handler installed by an earlier call. At DEBUG,
    the SDK loggers are lowered to INFO so request retries and endpoint
    resolution show up; otherwise they only report warnings.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if h.get_name() == "clusterlaunch-console"]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.addHandler(_console_handler(level))
    root_logger.setLevel(level)

    for name, quiet_level in SDK_LOG_LEVELS.items():
        sdk_logger = logging.getLogger(name)
        sdk_logger.setLevel(min(quiet_level, logging.INFO) if level <= logging.DEBUG else quiet_level)
        sdk_logger.handlers.clear()


def log(msg: str) -> None:
    """Log info message."""
    logger.info(msg)


def warn(msg: str) -> None:
    """Log warning message."""
    logger.warning(msg)


def error(msg: str) -> None:
    """Log error message and exit."""
    logger.error(msg)
    sys.exit(1)


def split_list(value: str | None) -> list[str]:
    """Split a comma-delimited string into its non-empty, trimmed parts.

    Order is preserved: ``" sg-1 , sg-2,  ,sg-3 "`` gives
    ``["sg-1", "sg-2", "sg-3"]``.

    :param value: Delimited string (None is treated as empty)
    :return: List of segments
    """
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
