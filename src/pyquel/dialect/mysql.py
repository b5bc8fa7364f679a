"""MySQL dialect implementation."""

from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO

from pyquel._operators import TimeUnit
from pyquel.dialect._base import Dialect, DialectName


class MySQLDialect(Dialect):
    """MySQL dialect with positional ``?`` placeholders."""

    name = DialectName.MYSQL

    def write_timestamp_literal(self, w: StringIO, value: datetime) -> None:
        # DATETIME carries no zone, store UTC
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        w.write(f"'{value.strftime('%Y-%m-%d %H:%M:%S')}'")

    def write_param_placeholder(self, w: StringIO, name: str, index: int) -> None:
        w.write("?")

    def write_interval(self, w: StringIO, count: int, unit: TimeUnit) -> None:
        if unit == TimeUnit.MILLISECOND:
            w.write(f"INTERVAL {count * 1000} MICROSECOND")
            return
        w.write(f"INTERVAL {count} {unit.value.upper()}")
