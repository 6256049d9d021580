"""
Logging Configuration
Sets up the package logger for the command line entry points.
"""
import logging
import sys
from typing import Optional, Union


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'sorttrace' logger namespace.

    Args:
        level: Logging level, as a number or a name ("DEBUG", "INFO", ...).
        log_file: Optional path to also write logs to.

    Returns:
        The configured 'sorttrace' logger.
    """
    if isinstance(level, str):
        level = level.upper()
    logger = logging.getLogger("sorttrace")
    logger.setLevel(level)

    # Entry points may be called more than once in one process (tests, notebooks)
    if logger.hasHandlers():
        logger.handlers.clear()

    # stderr keeps the viewer's stdout clean for piping
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
