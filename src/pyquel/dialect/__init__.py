"""SQL dialect system for statement rendering."""

from pyquel.dialect._base import Dialect, DialectName
from pyquel.dialect.default import DefaultDialect
from pyquel.dialect.duckdb import DuckDBDialect
from pyquel.dialect.mysql import MySQLDialect
from pyquel.dialect.postgres import PostgresDialect
from pyquel.dialect.sqlite import SQLiteDialect

__all__ = [
    "Dialect",
    "DialectName",
    "DefaultDialect",
    "DuckDBDialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "get_dialect",
]

_REGISTRY: dict[str, type[Dialect]] = {
    DialectName.DEFAULT: DefaultDialect,
    DialectName.POSTGRESQL: PostgresDialect,
    DialectName.DUCKDB: DuckDBDialect,
    DialectName.MYSQL: MySQLDialect,
    DialectName.SQLITE: SQLiteDialect,
}


def get_dialect(name: str) -> Dialect:
    """Get a dialect instance by name.

    Args:
        name: Dialect name (e.g., "default", "postgresql", "mysql", "sqlite", "duckdb").

    Returns:
        A Dialect instance.

    Raises:
        ValueError: If the dialect name is unknown.
    """
    cls = _REGISTRY.get(name)
    if cls is None:
        raise ValueError(
            f"unknown dialect: {name!r}. "
            f"Available: {', '.join(sorted(_REGISTRY))}"
        )
    return cls()
