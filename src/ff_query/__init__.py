"""
ff-query: Fluent query builder over an async MySQL connection.

Features:
- Chainable table/column/where/or_where/order_by/limit accumulation
- select, insert, update and delete rendering with automatic state reset
- node-mysql style ``?`` / ``??`` placeholders, expanded for aiomysql
- Structured logging with structlog
- Connection settings from URIs, mappings or FF_MYSQL_* environment variables
"""

# Version is read from package metadata (pyproject.toml is the single source of truth)
try:
    from importlib.metadata import version

    __version__ = version("ff-query")
except Exception:
    __version__ = "0.1.0"

from .adapters import Driver, MySQLAdapter, WriteResult, format_placeholders, quote_identifier
from .conditions import Raw, raw, render_value
from .config import MySQLSettings, resolve_settings
from .exceptions import ConfigurationError, DriverError, FFQueryError, MalformedQueryError
from .log import configure_logging, get_logger
from .query_builder import ClauseState, QueryBuilder, RenderedStatement, StatementKind

__all__ = [
    # Version
    "__version__",
    # Builder
    "QueryBuilder",
    "ClauseState",
    "RenderedStatement",
    "StatementKind",
    # Values
    "Raw",
    "raw",
    "render_value",
    # Drivers
    "Driver",
    "MySQLAdapter",
    "WriteResult",
    "format_placeholders",
    "quote_identifier",
    # Configuration
    "MySQLSettings",
    "resolve_settings",
    # Logging
    "configure_logging",
    "get_logger",
    # Exceptions
    "FFQueryError",
    "DriverError",
    "MalformedQueryError",
    "ConfigurationError",
]
