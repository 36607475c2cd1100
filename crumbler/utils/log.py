"""
Logging setup for command-line runs.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers are installed here, once, by the CLI.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ..config import config

LOG_FORMAT = "[%(asctime)s] %(levelname)s -- %(name)s: %(message)s"

_LEVELS = {
    "production": logging.INFO,
    "test": logging.ERROR,
}


def level_for_environment(environment: str) -> int:
    """Production logs INFO, test logs ERROR, anything else DEBUG."""
    return _LEVELS.get(environment, logging.DEBUG)


def configure_logging(
    log_dir: Optional[str] = None,
    verbose: bool = False,
    console: bool = True
) -> Path:
    """
    Install a rotating file handler and, optionally, a stderr handler.

    Args:
        log_dir: Directory for log files (defaults to config)
        verbose: Force DEBUG on the console handler
        console: Also log to stderr

    Returns:
        Path of the active log file
    """
    cfg = config.logging
    directory = Path(log_dir or cfg.log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"crumbler-{datetime.now().strftime('%Y-%m-%d')}.log"

    level = level_for_environment(cfg.environment)
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = []
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=cfg.max_bytes,
        backupCount=cfg.backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(level)
    handlers.append(file_handler)

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
        handlers.append(stream_handler)

    root = logging.getLogger("crumbler")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    return log_file
