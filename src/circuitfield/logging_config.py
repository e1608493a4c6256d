"""
Logging Configuration
Sets up the package logger for command-line runs.
"""
import logging
import sys
from typing import Optional, Union

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_level(level: Union[int, str]) -> int:
    """
    Numeric logging level for `level`, given either as a number or by name.

    Raises:
        ValueError: If `level` is a name other than those in LEVEL_NAMES.
    """
    if isinstance(level, int):
        return level
    name = level.upper()
    if name not in LEVEL_NAMES:
        raise ValueError(f"Unknown log level '{level}'. Expected one of {LEVEL_NAMES}.")
    return getattr(logging, name)


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'circuitfield' namespace.

    Args:
        level: Logging level, as a number (logging.DEBUG) or a name ("debug", "INFO").
        log_file: Optional path to save logs to a file.
    """
    numeric = resolve_level(level)
    logger = logging.getLogger("circuitfield")
    logger.setLevel(numeric)

    # Re-running the CLI in one interpreter must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Solver results go to stdout, the CLI's only output channel
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(numeric)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(numeric)}.")
