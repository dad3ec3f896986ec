"""
Logging configuration for the topic graph engine.
"""
import logging
import sys
from pathlib import Path
from typing import Optional


LOG_FILE = Path("topic_graph.log")


def setup_logging(level: int = logging.INFO,
                  log_file: Optional[Path] = LOG_FILE) -> logging.Logger:
    """Configure and return the root application logger.

    Logs go to stderr at ``level`` and, when ``log_file`` is set, to a
    log file at DEBUG.
    """
    logger = logging.getLogger("topic_graph")
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(fmt)
    logger.addHandler(console)

    # File handler (DEBUG+)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the application root."""
    return logging.getLogger(f"topic_graph.{name}")
