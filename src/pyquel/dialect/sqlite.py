"""SQLite dialect implementation."""

from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO

from pyquel._operators import TimeUnit
from pyquel.dialect._base import Dialect, DialectName


class SQLiteDialect(Dialect):
    """SQLite dialect with positional ``?`` placeholders.

    SQLite has no interval type; intervals are written as the modifier strings
    accepted by ``datetime()``, e.g. ``'+3 days'``.
    """

    name = DialectName.SQLITE

    def write_timestamp_literal(self, w: StringIO, value: datetime) -> None:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        w.write(f"'{value.strftime('%Y-%m-%d %H:%M:%S')}'")

    def write_param_placeholder(self, w: StringIO, name: str, index: int) -> None:
        w.write("?")

    def write_interval(self, w: StringIO, count: int, unit: TimeUnit) -> None:
        if unit == TimeUnit.MILLISECOND:
            amount, name = count / 1000.0, "seconds"
        elif unit == TimeUnit.MICROSECOND:
            amount, name = count / 1_000_000.0, "seconds"
        elif unit == TimeUnit.WEEK:
            amount, name = count * 7, "days"
        elif unit == TimeUnit.QUARTER:
            amount, name = count * 3, "months"
        else:
            amount, name = count, f"{unit.value}s"
        sign = "-" if amount < 0 else "+"
        w.write(f"'{sign}{abs(amount)} {name}'")
