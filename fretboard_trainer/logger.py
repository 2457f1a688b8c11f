"""Centralized lazy-loading logger access for the fretboard trainer."""
import logging
from typing import Dict

# Module-level cache for loggers
_logger_cache: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get a lazily initialized logger with the given name.

    Args:
        name: The full module name (e.g., 'fretboard_trainer.stats')

    Returns:
        A logger instance; levels and handlers are applied by setup_logging()
    """
    if name not in _logger_cache:
        _logger_cache[name] = logging.getLogger(name)
    return _logger_cache[name]
