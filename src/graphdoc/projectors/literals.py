"""Literal conversion: one graph value → (type tag, canonical value).

Dispatch is a closed table over the supported XSD datatypes plus two arms
outside it: language strings, and a raw fallback keyed by the datatype URI
for every datatype not in the table.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Any

import numpy as np
from rdflib.term import BNode, Literal, Node, URIRef

from graphdoc.core import graph as vocab
from graphdoc.errors import BlankNodeError, LiteralConversionError

_INTEGER = re.compile(r"^[+-]?\d+$")
_DECIMAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_SPECIAL_FLOATS = {"INF": float("inf"), "+INF": float("inf"), "-INF": float("-inf"), "NaN": float("nan")}
_DATE = re.compile(r"^(-?\d{4,})-(\d{2})-(\d{2})(Z|[+-]\d{2}:\d{2})?$")
# 24:00:00 is the end of the day, i.e. midnight of the next one
_END_OF_DAY = re.compile(r"T24:00:00(\.0+)?(?=Z|[+-]|$)")

_INT_RANGE = (-(2**31), 2**31 - 1)
_LONG_RANGE = (-(2**63), 2**63 - 1)


@dataclass(frozen=True)
class LiteralValue:
    """A converted value, ready to be placed under its tag in a document."""

    tag: str
    value: Any
    language: str | None = None

    @property
    def is_language_string(self) -> bool:
        return self.tag == vocab.LANG_STRING


# -----------------------------------------------------------------------------
# Converters: lexical form → canonical value. Raise ValueError when ill-formed.
# -----------------------------------------------------------------------------


def to_string(lexical: str) -> str:
    return lexical


def to_boolean(lexical: str) -> bool:
    value = lexical.strip()
    if value in ("true", "1"):
        return True
    if value in ("false", "0"):
        return False
    raise ValueError(f"not a boolean: {lexical!r}")


def to_date(lexical: str) -> str:
    """Calendar date as YYYY-MM-DD. A timezone suffix is accepted and dropped."""
    match = _DATE.match(lexical.strip())
    if match is None:
        raise ValueError(f"not a date: {lexical!r}")
    year, month, day = (int(g) for g in match.group(1, 2, 3))
    return date(year, month, day).isoformat()


def to_date_time(lexical: str) -> str:
    """Instant normalized to UTC, as YYYY-MM-DDTHH:MM:SS.mmmZ.

    A value without timezone is read as UTC. Raises OverflowError when the
    instant falls outside the years 1-9999 once normalized.
    """
    value, end_of_day = _END_OF_DAY.subn("T00:00:00", lexical.strip())
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    if end_of_day:
        parsed += timedelta(days=1)
    utc = parsed.astimezone(UTC)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def _bounded_integer(lexical: str, bounds: tuple[int, int]) -> int:
    value = lexical.strip()
    if not _INTEGER.match(value):
        raise ValueError(f"not an integer: {lexical!r}")
    number = int(value)
    low, high = bounds
    if not low <= number <= high:
        raise ValueError(f"{number} is out of range [{low}, {high}]")
    return number


def to_int(lexical: str) -> int:
    return _bounded_integer(lexical, _INT_RANGE)


def to_long(lexical: str) -> int:
    return _bounded_integer(lexical, _LONG_RANGE)


def to_double(lexical: str) -> float:
    value = lexical.strip()
    if value in _SPECIAL_FLOATS:
        return _SPECIAL_FLOATS[value]
    if not _DECIMAL.match(value):
        raise ValueError(f"not a floating point number: {lexical!r}")
    return float(value)


def to_float(lexical: str) -> float:
    """Single precision, emitted with the shortest repr that round-trips."""
    value = to_double(lexical)
    with np.errstate(over="ignore"):
        single = np.float32(value)
    if np.isinf(single) and not math.isinf(value):
        raise ValueError(f"{lexical!r} is out of single precision range")
    return float(str(single))


def to_any_uri(lexical: str) -> str:
    return lexical


_CONVERTERS: dict[str, Callable[[str], Any]] = {
    vocab.STRING: to_string,
    vocab.BOOLEAN: to_boolean,
    vocab.DATE: to_date,
    vocab.DATE_TIME: to_date_time,
    vocab.INT: to_int,
    vocab.LONG: to_long,
    vocab.FLOAT: to_float,
    vocab.DOUBLE: to_double,
    vocab.ANY_URI: to_any_uri,
}


def convert(
    value: Node,
    *,
    plain_as_string: bool = False,
    node: str | None = None,
    attribute: str | None = None,
) -> LiteralValue:
    """Convert one attribute value. node/attribute only feed error messages."""
    if isinstance(value, BNode):
        raise BlankNodeError(
            "blank nodes are not supported", node=node, attribute=attribute, values=[value]
        )

    if isinstance(value, URIRef):
        return LiteralValue(vocab.RESOURCE, str(value))

    if not isinstance(value, Literal):
        raise LiteralConversionError(
            f"unsupported value of type {type(value).__name__}",
            node=node,
            attribute=attribute,
            values=[value],
        )

    if value.language:
        return LiteralValue(vocab.LANG_STRING, str(value), language=value.language)

    datatype = value.datatype
    if datatype is None:
        if not plain_as_string:
            raise LiteralConversionError(
                "datatype not found", node=node, attribute=attribute, values=[value]
            )
        tag = vocab.STRING
    else:
        tag = vocab.DATATYPE_TAGS.get(str(datatype))

    if tag is None:
        if datatype == vocab.RDF_LANG_STRING:
            raise LiteralConversionError(
                "language string without language", node=node, attribute=attribute, values=[value]
            )
        # Extension arm: unknown datatypes keep their lexical form
        return LiteralValue(str(datatype), str(value))

    try:
        return LiteralValue(tag, _CONVERTERS[tag](str(value)))
    except (ValueError, OverflowError) as e:
        raise LiteralConversionError(
            f"ill-formed {tag} literal: {e}", node=node, attribute=attribute, values=[value]
        ) from e
