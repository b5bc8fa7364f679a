"""Abstract base class for SQL dialects."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from io import StringIO

from pyquel._operators import TimeUnit
from pyquel._utils import (
    default_keywords,
    escape_string_literal,
    normalize_keywords,
    validate_identifier,
    validate_no_null_bytes,
)


class DialectName(enum.StrEnum):
    DEFAULT = "default"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    DUCKDB = "duckdb"


class Dialect(ABC):
    """Abstract base class defining the SQL dialect interface.

    A dialect decides how bound parameters are spelled, how intervals and
    timestamps are written, and which words are reserved. Methods receive the
    StringIO writer shared by the whole render.
    """

    name: DialectName

    def __init__(self, keywords: Iterable[str] | None = None) -> None:
        self._keywords = None if keywords is None else normalize_keywords(keywords)

    @property
    def keywords(self) -> frozenset[str]:
        """Reserved words, falling back to the process-wide default set."""
        if self._keywords is None:
            return default_keywords()
        return self._keywords

    # --- Literals ---

    def write_string_literal(self, w: StringIO, value: str) -> None:
        validate_no_null_bytes(value)
        w.write(f"'{escape_string_literal(value)}'")

    @abstractmethod
    def write_timestamp_literal(self, w: StringIO, value: datetime) -> None: ...

    @abstractmethod
    def write_param_placeholder(self, w: StringIO, name: str, index: int) -> None:
        """Write the placeholder for the ``index``-th (1-based) parameter."""

    # --- Intervals ---

    @abstractmethod
    def write_interval(self, w: StringIO, count: int, unit: TimeUnit) -> None: ...

    # --- Validation ---

    def validate_identifier(self, name: str, context: str = "identifier") -> None:
        validate_identifier(name, context, self.keywords)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
