"""
Condition and ordering fragments.

Every where()/or_where()/order_by() call shape is first classified into a
tagged variant, then rendered into a single SQL fragment:

- RawCondition: "id = 1 and id < 3" used verbatim
- KeyValueCondition: ("id", 1) -> "id = 1"
- KeyOperatorValueCondition: ("id", ">", 1) -> "id > 1"
- MappingCondition: {"id": 1, "name": "bob"} -> 'id = 1 and name = "bob"'

Values go through render_value(): anything whose text contains a period is
treated as a column reference and emitted unescaped, everything else is
emitted as a JSON literal. Wrap a value in raw() to emit it verbatim.
"""

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from .exceptions import MalformedQueryError

AND = " and "
OR = " or "

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class Raw:
    """SQL text that is always emitted verbatim."""

    sql: str

    def __str__(self) -> str:
        return self.sql


def raw(sql: str) -> Raw:
    """Mark ``sql`` as a trusted fragment that must not be quoted."""
    return Raw(sql)


def render_value(value: Any) -> str:
    """
    Render a comparison operand.

    Text containing "." is taken as a qualified column reference
    ("users.userNo") and emitted as-is. So is any number whose text contains
    a period, and, ambiguously, any string such as "3.14" or "a.b@x.com".

    Decimals are numbers, never quoted. NaN and infinities have no SQL
    literal and render as null, for floats and Decimals alike.
    """
    if isinstance(value, Raw):
        return value.sql

    if isinstance(value, Decimal):
        return str(value) if value.is_finite() else "null"
    if isinstance(value, float) and not math.isfinite(value):
        return "null"

    text = str(value)
    if "." in text:
        return text

    return json.dumps(value, ensure_ascii=False, default=str)


@dataclass(frozen=True)
class RawCondition:
    sql: str

    def render(self, connective: str) -> str:
        return self.sql


@dataclass(frozen=True)
class KeyValueCondition:
    key: str
    value: Any

    def render(self, connective: str) -> str:
        return f"{self.key} = {render_value(self.value)}"


@dataclass(frozen=True)
class KeyOperatorValueCondition:
    key: str
    operator: str
    value: Any

    def render(self, connective: str) -> str:
        return f"{self.key} {self.operator} {render_value(self.value)}"


@dataclass(frozen=True)
class MappingCondition:
    """Several equality tests from one call, joined by the caller's connective."""

    fields: tuple[tuple[str, Any], ...]

    def render(self, connective: str) -> str:
        return connective.join(f"{key} = {render_value(value)}" for key, value in self.fields)


Condition = Union[RawCondition, KeyValueCondition, KeyOperatorValueCondition, MappingCondition]


def to_condition(*args: Any, method: str = "where") -> Condition:
    """
    Classify a where()/or_where() call shape.

    Args:
        *args: The positional arguments of the call
        method: Calling method name, used in error messages

    Returns:
        One of the condition variants

    Raises:
        MalformedQueryError: If the arguments match no supported shape
    """
    if not args:
        raise MalformedQueryError("expected at least one argument", method=method)

    first, rest = args[0], args[1:]

    if isinstance(first, Mapping):
        if rest:
            raise MalformedQueryError(
                "a mapping of conditions takes no extra arguments", method=method
            )
        if not first:
            raise MalformedQueryError("empty mapping of conditions", method=method)
        return MappingCondition(fields=tuple(first.items()))

    if isinstance(first, Raw):
        first = first.sql
    if not isinstance(first, str):
        raise MalformedQueryError(
            f"expected a string or mapping, got {type(first).__name__}", method=method
        )

    if len(rest) == 0:
        return RawCondition(sql=first)
    if len(rest) == 1:
        return KeyValueCondition(key=first, value=rest[0])
    if len(rest) == 2:
        return KeyOperatorValueCondition(key=first, operator=str(rest[0]), value=rest[1])

    raise MalformedQueryError(f"expected 1 to 3 arguments, got {len(args)}", method=method)


def _check_direction(direction: Any, method: str) -> str:
    if not isinstance(direction, str) or direction.lower() not in SORT_DIRECTIONS:
        raise MalformedQueryError(
            f"sort direction must be asc or desc, got {direction!r}", method=method
        )
    return direction


def render_order(*args: Any, method: str = "order_by") -> str:
    """
    Render an order_by() call into a comma-separated ordering fragment.

    Accepts a pre-formatted string ("id asc, uid desc"), a key and direction
    ("id", "DESC"), or a mapping of key to direction. Directions keep the
    caller's case.
    """
    if len(args) == 1 and isinstance(args[0], Mapping):
        if not args[0]:
            raise MalformedQueryError("empty mapping of sort keys", method=method)
        return ",".join(
            f"{key} {_check_direction(direction, method)}" for key, direction in args[0].items()
        )

    if len(args) == 1 and isinstance(args[0], str):
        return args[0]

    if len(args) == 2 and isinstance(args[0], str):
        return f"{args[0]} {_check_direction(args[1], method)}"

    raise MalformedQueryError(
        "expected a string, a key and direction, or a mapping of key to direction",
        method=method,
    )
