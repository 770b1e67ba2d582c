"""
Loguru setup for the API process.

Development gets coloured console output; every other environment logs JSON
lines so the output can be shipped as-is. Both write a rotating file under
``logs/``.
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from core.request_context import current_request_id

if TYPE_CHECKING:
    from loguru import Record

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def request_id_filter(record: "Record") -> bool:
    """Stamp the current request id on the record; never drops a message."""
    record["extra"]["request_id"] = current_request_id() or "-"
    return True


def configure_logging(environment: str = "development", log_dir: str = "logs") -> None:
    """
    Replace loguru's default sink with the application sinks.

    Args:
        environment: "development" for console output, anything else for JSON.
        log_dir: Directory for the rotating log file.
    """
    logger.remove()

    is_dev = environment == "development"

    if is_dev:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level="DEBUG",
            filter=request_id_filter,
            colorize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level="INFO",
            filter=request_id_filter,
            serialize=True,
        )

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    logger.add(
        str(Path(log_dir) / "app.log"),
        format=CONSOLE_FORMAT if is_dev else "{message}",
        level="INFO",
        filter=request_id_filter,
        rotation="10 MB",
        retention="7 days",
        serialize=not is_dev,
    )
