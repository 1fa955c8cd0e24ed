"""Logging helpers for wltrace."""
import logging

from wltrace.wltrace_config import wltrace_config

ROOT_LOGGER = "wltrace"


def configure_logger(name: str = ROOT_LOGGER, level: int | str | None = None) -> logging.Logger:
    """Configure and return the project-wide logger.

    Handlers are attached once, repeated imports (CLI, tests) only adjust the level.
    """
    if level is None:
        level = wltrace_config.log_level
    logger = logging.getLogger(name)
    if logger.handlers:
        logger.setLevel(level)
        return logger

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "[%(levelname)s] %(asctime)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the wltrace logger, or one of its children."""
    parent = logging.getLogger(ROOT_LOGGER)
    if not parent.handlers:
        configure_logger()
    if name is None:
        return parent
    return parent.getChild(name)
