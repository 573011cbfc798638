"""Logger configuration for BeActive.

Workout sessions are driven from the UI thread and from host delivery
threads, so every record carries the thread name and file output goes
through loguru's queue.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<magenta>{thread.name}</magenta> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "5 MB",
    retention: int | str = 3,
    diagnose: bool = False,
) -> None:
    """Configure loguru for the workout core.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; console only when None
        rotation: Size or interval at which the log file rotates
        retention: Number of rotated files (or a period such as "7 days") to keep
        diagnose: Include local variable values in file tracebacks. Off by
            default since those values include the user's health samples.
    """
    logger.remove()

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=diagnose,
        )

    logger.debug(f"Logger initialized with level={level} file={log_file or '-'}")
