"""
Unified output system using Loguru.
User-facing messages go to the log file and to the status line (or stdout
when the terminal UI is not running).
"""

import sys
import threading
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir

# Status sink registered while the terminal UI owns the screen
_status_sink: Optional[Callable[[str], None]] = None
_status_sink_lock = threading.Lock()


def get_log_file_path() -> Path:
    """Get the path to the default log file."""
    return get_data_dir() / "tapedeck.log"


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru for file logging (the terminal UI handles display).

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Rotate the file once it reaches this size
        backup_count: Number of rotated files to keep
        console_output: Also log to stderr (only useful outside the UI)
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {thread.name: <12} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def setup_logging_from_config(config: LoggingConfig) -> Path:
    """Configure loguru from the [logging] config section.

    Returns:
        Path of the log file in use
    """
    log_file = Path(config.log_file) if config.log_file else get_log_file_path()
    setup_loguru(
        log_file,
        level=config.level,
        max_file_size_mb=config.max_file_size_mb,
        backup_count=config.backup_count,
        console_output=config.console_output,
    )
    return log_file


def set_status_sink(sink: Optional[Callable[[str], None]]) -> None:
    """Route user-facing messages to ``sink`` (None restores stdout printing)."""
    global _status_sink
    with _status_sink_lock:
        _status_sink = sink
    logger.debug(f"Status sink {'enabled' if sink else 'disabled'}")


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to file AND shows the message to the user.

    While the terminal UI runs the message becomes the status line,
    otherwise it is printed to stdout.

    Args:
        message: User-facing message
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    with _status_sink_lock:
        sink = _status_sink

    if sink is not None:
        sink(message)
    else:
        print(message)
