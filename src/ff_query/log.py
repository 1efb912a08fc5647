"""
Structured logging for ff-query.

Mirrors the ff-logger processor chain on top of structlog, scoped to this
package. Events are rendered by structlog and written through the standard
``logging`` logger of the same name, so nothing is printed until the
application (or configure_logging) sets up a handler and level.
Supports environment variables and programmatic configuration.
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

_DEFAULT_CONFIG: dict[str, Any] = {
    "level": "INFO",
    "format": "console",
    "colors": True,
}

_CONFIG: dict[str, Any] = dict(_DEFAULT_CONFIG)

PACKAGE_LOGGER = "ff_query"

_handler: logging.Handler | None = None

_LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def configure_logging(
    level: str | None = None,
    format: str | None = None,
    colors: bool | None = None,
    use_env: bool = True,
) -> None:
    """
    Configure structlog for ff-query.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (console, json)
        colors: Whether to use colors in console output
        use_env: Whether to read FF_QUERY_LOG_* environment variables
    """
    if use_env:
        _CONFIG.update(_load_env_config())

    # Explicit arguments win over the environment
    if level is not None:
        _CONFIG["level"] = level.upper()
    if format is not None:
        _CONFIG["format"] = format.lower()
    if colors is not None:
        _CONFIG["colors"] = colors

    level_name = _CONFIG["level"]
    if level_name not in _LEVELS:
        raise ValueError(f"Unknown log level: {level_name}")

    structlog.configure(
        processors=_build_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS[level_name]),
        cache_logger_on_first_use=False,
    )
    _install_handler(_LEVELS[level_name])


def _install_handler(level: int) -> None:
    """Attach a stdout handler to the package logger, replacing any earlier one."""
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(_handler)
    package_logger.setLevel(level)


def _load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config = {}

    if level := os.getenv("FF_QUERY_LOG_LEVEL"):
        config["level"] = level.upper()

    if format := os.getenv("FF_QUERY_LOG_FORMAT"):
        config["format"] = format.lower()

    if colors := os.getenv("FF_QUERY_LOG_COLORS"):
        config["colors"] = colors.lower() in ("true", "1", "yes")

    return config


def _build_processors() -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if _CONFIG["format"] == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=_CONFIG["colors"]))

    return processors


def get_logger(name: str, **context: Any) -> Any:
    """
    Get a structlog logger bound to ``name`` and any extra context.

    Output goes to ``logging.getLogger(name)``; below its effective level
    (WARNING when nothing is configured) events are dropped.

    Example:
        logger = get_logger(__name__, database="shop")
        logger.info("connection_opened", host="db.local")
    """
    return structlog.wrap_logger(logging.getLogger(name)).bind(logger=name, **context)


def get_config() -> dict[str, Any]:
    """Get current logging configuration."""
    return _CONFIG.copy()


def reset_config() -> None:
    """Reset logging configuration to defaults."""
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)
        _handler = None
    package_logger.setLevel(logging.NOTSET)

    _CONFIG.clear()
    _CONFIG.update(_DEFAULT_CONFIG)
    structlog.reset_defaults()
