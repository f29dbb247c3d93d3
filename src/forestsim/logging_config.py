"""
Logging configuration for ForestSim.

All package loggers live under the ``forestsim`` namespace. Console output
goes through rich's RichHandler; an optional plain-text file handler can be
added for session transcripts.
"""
import logging
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .forest import ReapRecord

ROOT_LOGGER_NAME = "forestsim"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: Union[int, str] = "INFO",
                  log_file: Optional[Union[str, Path]] = None,
                  console: Optional[Console] = None) -> logging.Logger:
    """Configure the package logger.

    Calling this again replaces the handlers installed by a previous call.

    Args:
        level: Logging level name or number
        log_file: Optional path of a file receiving the same records
        console: Console the rich handler writes to (stderr by default)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the package namespace.

    Args:
        name: Module name, usually ``__name__``

    Returns:
        Logger named ``forestsim.<...>``
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_reap_event(logger: logging.Logger, forest_name: str,
                   record: "ReapRecord") -> None:
    """Log one tree replacement made while reaping."""
    logger.debug(
        f"[{forest_name}] Reaping the tall tree  {record.reaped.format_row()}"
    )
    logger.debug(
        f"[{forest_name}] Replaced with new tree {record.replacement.format_row()}"
    )


def log_growth_summary(logger: logging.Logger, forest_name: str, years: int,
                       height_before: float, height_after: float) -> None:
    """Log the change in average height over a growth step."""
    logger.debug(
        f"[{forest_name}] Grew {years} year(s): average height "
        f"{height_before:.2f} -> {height_after:.2f} "
        f"(+{height_after - height_before:.2f})"
    )
