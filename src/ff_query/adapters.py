"""
Driver adapters for dispatching rendered SQL.

The builder talks to a Driver: anything with ``execute(sql, params)`` and
``close()``. MySQLAdapter is the aiomysql implementation. It also translates
the placeholder conventions the builder emits into PyMySQL format:

- ``?`` binds the next parameter. A mapping expands to
  ```col` = %s, `col2` = %s``, a list to ``%s, %s`` and a list of lists
  to ``(%s, %s), (%s, %s)``.
- ``??`` inlines the next parameter as a backtick-quoted identifier.
"""

import asyncio
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import aiomysql

from .config import MySQLSettings
from .exceptions import DriverError
from .log import get_logger

Rows = List[Dict[str, Any]]

_PLACEHOLDER = re.compile(r"\?\??")


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a statement that returns no result set."""

    affected_rows: int
    insert_id: Optional[int] = None


class Driver(ABC):
    """
    Abstract base class for statement dispatch.

    Implementations own transport, authentication and result decoding.
    Failures must be raised as DriverError.
    """

    @abstractmethod
    async def execute(self, sql: str, params: List[Any]) -> Union[Rows, WriteResult]:
        """
        Execute one statement.

        Args:
            sql: SQL with ``?``/``??`` placeholders
            params: Positional parameters, one per placeholder

        Returns:
            Rows for statements with a result set, WriteResult otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        pass


def quote_identifier(identifier: Any) -> str:
    """
    Quote identifier using MySQL backticks.

    Handles schema.table by quoting each part. Embedded backticks are doubled.
    """
    if isinstance(identifier, (list, tuple)):
        return ", ".join(quote_identifier(part) for part in identifier)

    parts = str(identifier).split(".")
    return ".".join("`" + part.replace("`", "``") + "`" for part in parts)


def _expand(value: Any, args: List[Any]) -> str:
    if isinstance(value, Mapping):
        pairs = []
        for column, item in value.items():
            pairs.append(f"{quote_identifier(column)} = %s")
            args.append(item)
        return ", ".join(pairs)

    if isinstance(value, (list, tuple)):
        parts = []
        for item in value:
            if isinstance(item, (list, tuple)):
                parts.append("(" + _expand(item, args) + ")")
            else:
                parts.append("%s")
                args.append(item)
        return ", ".join(parts)

    args.append(value)
    return "%s"


def format_placeholders(sql: str, params: List[Any]) -> Tuple[str, Optional[List[Any]]]:
    """
    Convert ``?`` placeholders to PyMySQL format.

    Args:
        sql: Statement using ``?`` and ``??`` placeholders
        params: Positional parameters

    Returns:
        Tuple of (converted_sql, args); args is None when nothing was bound,
        in which case PyMySQL skips %-formatting and the SQL is untouched
    """
    if not params:
        return sql, None

    remaining = list(params)
    args: List[Any] = []
    pieces = []
    position = 0

    for match in _PLACEHOLDER.finditer(sql):
        # Placeholders beyond the supplied parameters stay as written
        if not remaining:
            break
        pieces.append(sql[position : match.start()].replace("%", "%%"))
        value = remaining.pop(0)
        if match.group() == "??":
            pieces.append(quote_identifier(value).replace("%", "%%"))
        else:
            pieces.append(_expand(value, args))
        position = match.end()

    pieces.append(sql[position:].replace("%", "%%"))
    return "".join(pieces), args


class MySQLAdapter(Driver):
    """
    Driver for MySQL using aiomysql.

    Connects lazily on first execute(), like node-mysql's createConnection,
    and keeps a single autocommit connection with a dict cursor.
    """

    def __init__(self, settings: MySQLSettings, logger=None):
        """
        Initialize adapter.

        Args:
            settings: Connection settings
            logger: Optional logger instance
        """
        self.settings = settings
        self.logger = logger or get_logger(__name__)
        self.connection = None
        self._lock = asyncio.Lock()
        # One statement at a time on the connection, in call order
        self._statement_lock = asyncio.Lock()

    async def connect(self):
        """
        Establish the connection if not already open.

        :raises DriverError: If connecting fails.
        """
        async with self._lock:
            if self.connection is not None and not self.connection.closed:
                return self.connection

            try:
                self.connection = await aiomysql.connect(
                    **self.settings.to_driver_kwargs(),
                    autocommit=True,
                    cursorclass=aiomysql.DictCursor,
                )
            except (aiomysql.MySQLError, OSError) as e:
                self.logger.error(
                    "connection_failed", error=str(e), **self.settings.describe()
                )
                raise DriverError(f"Failed to connect to MySQL: {e}", original=e) from e

            self.logger.info("connection_opened", **self.settings.describe())
            return self.connection

    async def execute(self, sql: str, params: List[Any]) -> Union[Rows, WriteResult]:
        """
        Execute one statement.

        Statements queue on the single connection, like node-mysql does, so
        several pending queries from one builder never share the stream.
        """
        query, args = format_placeholders(sql, params)

        async with self._statement_lock:
            connection = await self.connect()
            try:
                async with connection.cursor() as cursor:
                    await cursor.execute(query, args)
                    if cursor.description is not None:
                        return list(await cursor.fetchall())
                    return WriteResult(
                        affected_rows=cursor.rowcount,
                        insert_id=cursor.lastrowid or None,
                    )
            except aiomysql.MySQLError as e:
                self.logger.error("query_failed", sql=sql, error=str(e))
                raise DriverError(f"Query failed: {e}", sql=sql, original=e) from e

    async def close(self) -> None:
        """Close the connection. The next execute() reconnects."""
        if self.connection is None:
            return

        self.connection.close()
        self.connection = None
        self.logger.info("connection_closed", **self.settings.describe())
