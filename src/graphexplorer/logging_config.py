"""
Logging Configuration
Sets up the 'graphexplorer' logger for the desktop app and for hosts that
embed the engine.
"""
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEBUG_LOG_FORMAT = '%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s'


def resolve_level(level: Union[int, str]) -> int:
    """
    Accept a numeric level or a level name ('debug', 'INFO', ...).

    Raises:
        ValueError: If the name is not a known logging level.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level '{level}'.")
    return resolved


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger of the 'graphexplorer' namespace.

    Every pointer move can reach the controller, so the debug format adds line
    numbers to tell the interaction paths apart.

    Args:
        level: Logging level or its name.
        log_file: Optional path to save logs to a file (overwritten per run).

    Returns:
        The configured package logger.
    """
    level = resolve_level(level)
    logger = logging.getLogger("graphexplorer")
    logger.setLevel(level)
    logger.propagate = False

    # The window may be re-created within one process
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        DEBUG_LOG_FORMAT if level <= logging.DEBUG else LOG_FORMAT,
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}.")
    return logger
