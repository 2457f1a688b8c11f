"""Centralized logging configuration for the fretboard trainer.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "fretboard_trainer": logging.INFO,
    "fretboard_trainer.main": logging.INFO,
    "fretboard_trainer.core": logging.INFO,
    # Quiz components
    "fretboard_trainer.round_controller": logging.INFO,  # DEBUG shows every round
    "fretboard_trainer.scheduler": logging.INFO,
    "fretboard_trainer.settings": logging.INFO,
    "fretboard_trainer.stats": logging.INFO,
    "fretboard_trainer.storage": logging.INFO,
    "fretboard_trainer.ui": logging.WARNING,  # UI modules often noisy, keep at WARNING
    "fretboard_trainer.logger": logging.WARNING,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'fretboard_trainer' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("fretboard_trainer"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_console_handler)
        logger.propagate = False

    logging.getLogger("fretboard_trainer").info("Logging configuration complete")
