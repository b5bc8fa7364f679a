"""DuckDB dialect implementation."""

from __future__ import annotations

from datetime import datetime
from io import StringIO

from pyquel._operators import TimeUnit
from pyquel._utils import format_timestamp
from pyquel.dialect._base import Dialect, DialectName
from pyquel.dialect.postgres import _interval_text


class DuckDBDialect(Dialect):
    """DuckDB dialect with ``$1, $2, ...`` placeholders."""

    name = DialectName.DUCKDB

    def write_timestamp_literal(self, w: StringIO, value: datetime) -> None:
        w.write(f"CAST('{format_timestamp(value)}' AS TIMESTAMPTZ)")

    def write_param_placeholder(self, w: StringIO, name: str, index: int) -> None:
        w.write(f"${index}")

    def write_interval(self, w: StringIO, count: int, unit: TimeUnit) -> None:
        w.write(f"INTERVAL '{_interval_text(count, unit)}'")
