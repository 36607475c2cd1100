"""
Utility modules for the Crumbler pipeline.

- configure_logging: rotating log file + console handler for CLI runs
"""

from .log import configure_logging, level_for_environment, LOG_FORMAT

__all__ = ["configure_logging", "level_for_environment", "LOG_FORMAT"]
