"""Logging setup for the board: loguru sinks, rich console by default."""

import sys
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def setup_logger(
    level: str = "INFO",
    log_file: Path | None = None,
    rotation: str = "1 MB",
    retention: str = "2 weeks",
    use_rich: bool = True,
) -> None:
    """
    Replace loguru's default sink with the board's console and file sinks.

    Args:
        level: Minimum level, one of ``LEVELS`` (case-insensitive)
        log_file: Optional path to a log file kept alongside the board data
        rotation: When to rotate the log file (e.g., "1 MB", "1 day")
        retention: How long to keep rotated files (e.g., "2 weeks")
        use_rich: Log through a rich handler instead of plain colored stderr
    """
    level = level.upper()
    if level not in LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {LEVELS}")

    logger.remove()

    if use_rich:
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=level in {"TRACE", "DEBUG"},
            markup=False,
        )
        logger.add(handler, level=level, format="{message}")
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
                "<level>{message}</level>"
            ),
            level=level,
            colorize=True,
        )

    if log_file is not None:
        log_file = Path(log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )
        logger.info(f"Logging to file: {log_file}")
