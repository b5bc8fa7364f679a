"""Default dialect: named ``@name`` placeholders and ANSI-style intervals."""

from __future__ import annotations

from datetime import datetime
from io import StringIO

from pyquel._operators import TimeUnit
from pyquel._utils import format_timestamp
from pyquel.dialect._base import Dialect, DialectName

# TimeUnit -> interval keyword
INTERVAL_KEYWORDS: dict[str, str] = {
    TimeUnit.MICROSECOND: "MICROSECOND",
    TimeUnit.MILLISECOND: "MILLISECOND",
    TimeUnit.SECOND: "SECOND",
    TimeUnit.MINUTE: "MINUTE",
    TimeUnit.HOUR: "HOUR",
    TimeUnit.DAY: "DAY",
    TimeUnit.WEEK: "WEEK",
    TimeUnit.MONTH: "MONTH",
    TimeUnit.QUARTER: "QUARTER",
    TimeUnit.YEAR: "YEAR",
}


class DefaultDialect(Dialect):
    """Renders arguments as ``@name`` and timestamps as bare RFC 3339 text."""

    name = DialectName.DEFAULT

    def write_timestamp_literal(self, w: StringIO, value: datetime) -> None:
        w.write(format_timestamp(value))

    def write_param_placeholder(self, w: StringIO, name: str, index: int) -> None:
        w.write(f"@{name}")

    def write_interval(self, w: StringIO, count: int, unit: TimeUnit) -> None:
        w.write(f"INTERVAL {count} {INTERVAL_KEYWORDS[unit]}")
