"""Identifier validation, keyword table, and literal escaping utilities."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from datetime import datetime, timezone

from pyquel._errors import (
    ERR_MSG_INVALID_IDENTIFIER,
    ERR_MSG_UNSUPPORTED_TYPE,
    InvalidIdentifierError,
    SQLSyntaxError,
    UnsupportedTypeError,
)

RESERVED_SQL_KEYWORDS: frozenset[str] = frozenset(
    word.upper()
    for word in (
        "all", "alter", "and", "any", "array", "as", "asc", "between",
        "by", "case", "cast", "check", "column", "constraint", "create",
        "cross", "current", "current_date", "current_time", "current_timestamp",
        "current_user", "default", "delete", "desc", "distinct", "drop",
        "else", "end", "except", "exists", "false", "for", "foreign",
        "from", "full", "grant", "group", "having", "in", "index", "inner",
        "insert", "intersect", "into", "is", "join", "left", "like", "limit",
        "not", "null", "offset", "on", "or", "order", "outer", "primary",
        "references", "right", "select", "session_user", "set", "some",
        "table", "then", "to", "true", "union", "unique", "update", "user",
        "using", "values", "when", "where", "with",
    )
)

_default_keywords: frozenset[str] = RESERVED_SQL_KEYWORDS

ARGUMENT_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

_QUOTES = ('"', "'", "`")


def default_keywords() -> frozenset[str]:
    """Return the process-wide reserved word set."""
    return _default_keywords


def set_default_keywords(words: Iterable[str]) -> None:
    """Replace the process-wide reserved word set.

    Words are matched case-insensitively. An empty iterable disables keyword
    rejection for every dialect that does not carry its own set.
    """
    global _default_keywords
    _default_keywords = normalize_keywords(words)


def normalize_keywords(words: Iterable[str]) -> frozenset[str]:
    return frozenset(w.upper() for w in words)


def is_keyword(name: str, keywords: frozenset[str] | None = None) -> bool:
    if keywords is None:
        keywords = _default_keywords
    if not keywords:
        return False
    return name.upper() in keywords


def _is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ident_char(ch: str) -> bool:
    return _is_letter(ch) or ("0" <= ch <= "9") or ch == "_" or ch == "."


def is_valid_identifier(name: str, keywords: frozenset[str] | None = None) -> bool:
    """Check a single identifier segment.

    A bare ``*`` is always accepted. A quoted form must close with the same
    quote character as the last character. An unquoted form starts with a
    letter, continues with letters, digits, underscores or dots, and must not
    be a reserved keyword.
    """
    if not name:
        return False
    if name == "*":
        return True
    first = name[0]
    if first in _QUOTES:
        closing = name.find(first, 1)
        return closing == len(name) - 1
    if not _is_letter(first):
        return False
    if not all(_is_ident_char(ch) for ch in name[1:]):
        return False
    return not is_keyword(name, keywords)


def validate_identifier(
    name: str,
    context: str = "identifier",
    keywords: frozenset[str] | None = None,
) -> None:
    """Raise InvalidIdentifierError unless ``name`` is a valid identifier."""
    if not is_valid_identifier(name, keywords):
        raise InvalidIdentifierError(
            f"{context}: {ERR_MSG_INVALID_IDENTIFIER}",
            f"{context}: {ERR_MSG_INVALID_IDENTIFIER} {name!r}",
        )


def validate_argument_name(name: str) -> None:
    if not ARGUMENT_NAME_RE.match(name):
        raise InvalidIdentifierError(
            f"argument: {ERR_MSG_INVALID_IDENTIFIER}",
            f"argument name {name!r} is not a valid placeholder name",
        )


def escape_string_literal(value: str) -> str:
    """Escape a string for use as a SQL string literal."""
    return value.replace("'", "''")


def validate_no_null_bytes(value: str, context: str = "string literals") -> None:
    """Reject strings containing null bytes."""
    if "\x00" in value:
        raise SQLSyntaxError(
            f"{context} cannot contain null bytes",
            f"null byte found in {context}: {value!r}",
        )


def format_integer(value: int) -> str:
    return str(int(value))


def format_float(value: float) -> str:
    """Render a float as the shortest text that reads back to the same value."""
    if not math.isfinite(value):
        raise UnsupportedTypeError(
            ERR_MSG_UNSUPPORTED_TYPE,
            f"non-finite float {value!r} has no SQL literal form",
        )
    return repr(float(value))


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_timestamp(value: datetime) -> str:
    """Render an RFC 3339 timestamp; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def has_own_str(value: object) -> bool:
    """Report whether the value's class defines a display form of its own."""
    if isinstance(value, (bytes, bytearray)):
        return False
    return type(value).__str__ is not object.__str__
