"""PostgreSQL dialect implementation."""

from __future__ import annotations

from datetime import datetime
from io import StringIO

from pyquel._operators import TimeUnit
from pyquel._utils import format_timestamp
from pyquel.dialect._base import Dialect, DialectName


def _interval_text(count: int, unit: TimeUnit) -> str:
    # PostgreSQL interval input has no quarter unit
    if unit == TimeUnit.QUARTER:
        return f"{count * 3} month"
    return f"{count} {unit.value}"


class PostgresDialect(Dialect):
    """PostgreSQL dialect with ``$1, $2, ...`` placeholders."""

    name = DialectName.POSTGRESQL

    def write_timestamp_literal(self, w: StringIO, value: datetime) -> None:
        w.write(f"CAST('{format_timestamp(value)}' AS TIMESTAMP WITH TIME ZONE)")

    def write_param_placeholder(self, w: StringIO, name: str, index: int) -> None:
        w.write(f"${index}")

    def write_interval(self, w: StringIO, count: int, unit: TimeUnit) -> None:
        w.write(f"INTERVAL '{_interval_text(count, unit)}'")
