"""
Logger Configuration
Shared rich console + optional file logging.
"""
import logging
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler
from rich.console import Console


# stderr keeps CLI JSON output on stdout clean
console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

LOG_DIR = Path(__file__).parent.parent / "logs"


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Route the package loggers (``scrapers.*``, ``orchestrator.*`` ...)
    through one Rich handler on the root logger.

    Args:
        level: logging level
        log_file: file name under ``logs/`` (optional)
    """
    root = logging.getLogger()
    root.setLevel(level)
    if any(isinstance(handler, RichHandler) for handler in root.handlers):
        return

    handler = RichHandler(console=console, show_time=True, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    root.addHandler(handler)

    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)
