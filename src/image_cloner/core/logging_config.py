"""Centralized logging configuration for the image cloner.

Only the ``image-cloner`` logger owns a handler and a level. Component
loggers such as ``image-cloner.orchestrator`` or ``image-cloner.ec2`` are
left at NOTSET and propagate to it, so changing the project logger's level
changes every component at once.
"""

import os
import sys
import logging
from typing import Optional

ROOT_LOGGER_NAME = "image-cloner"


def _is_component(name: str) -> bool:
    return name.startswith(ROOT_LOGGER_NAME + ".")


def _resolve_level(level: Optional[str]) -> int:
    if level:
        return getattr(logging, level.upper(), logging.INFO)
    env_level = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, env_level, logging.INFO)


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    The level from ``LOG_LEVEL`` is applied only when a logger is first
    configured; an explicit ``level`` argument always wins. Component
    loggers under ``image-cloner.`` get no handler or level of their own.

    Args:
        name: Logger name (defaults to "image-cloner")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    if _is_component(name):
        setup_logger(ROOT_LOGGER_NAME, format_type=format_type)
        component = logging.getLogger(name)
        if level:
            component.setLevel(_resolve_level(level))
        return component

    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(_resolve_level(level))
        handler = logging.StreamHandler(sys.stdout)

        env_format = os.getenv("LOG_FORMAT", format_type).lower()

        if env_format == "structured":
            # Thread name tells the per-region workers apart.
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | "
                "%(threadName)s | %(funcName)s() | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        logger.addHandler(handler)
    elif level:
        logger.setLevel(_resolve_level(level))

    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return setup_logger(name)


def set_debug_logging(name: str = ROOT_LOGGER_NAME) -> None:
    """Switch ``name`` and its component loggers, current and future, to DEBUG.

    ``LOG_LEVEL`` is updated so loggers configured afterwards start at DEBUG.
    Components that were given a level of their own are reset to NOTSET so
    they follow their parent again.
    """
    os.environ["LOG_LEVEL"] = "DEBUG"
    setup_logger(name, level="DEBUG")
    logging.getLogger().setLevel(logging.DEBUG)
    prefix = name + "."
    for logger_name, existing in list(logging.Logger.manager.loggerDict.items()):
        if logger_name.startswith(prefix) and isinstance(existing, logging.Logger):
            existing.setLevel(logging.NOTSET)
