"""Fixtures and helpers for integration tests against real databases."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from contextlib import contextmanager
from typing import Any

import pytest

from pyquel import Node, render
from pyquel.dialect._base import Dialect
from pyquel.dialect.duckdb import DuckDBDialect
from pyquel.dialect.mysql import MySQLDialect
from pyquel.dialect.postgres import PostgresDialect
from pyquel.dialect.sqlite import SQLiteDialect


# ---------------------------------------------------------------------------
# Container runtime detection (Docker or Podman)
# ---------------------------------------------------------------------------

def _get_podman_socket() -> str | None:
    """Get the Podman machine socket path, if available."""
    try:
        result = subprocess.run(
            ["podman", "machine", "inspect", "--format",
             "{{.ConnectionInfo.PodmanSocket.Path}}"],
            capture_output=True, text=True, check=True, timeout=5,
        )
        sock = result.stdout.strip()
        if sock and os.path.exists(sock):
            return sock
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired,
            FileNotFoundError):
        pass
    return None


def _container_runtime_available() -> bool:
    for cmd in ["docker", "podman"]:
        if shutil.which(cmd):
            try:
                subprocess.run(
                    [cmd, "info"], capture_output=True, check=True, timeout=10,
                )
                return True
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired,
                    FileNotFoundError):
                continue
    return False


def _configure_testcontainers_for_podman() -> None:
    if not shutil.which("podman"):
        return
    os.environ.setdefault("TESTCONTAINERS_RYUK_DISABLED", "true")
    if "DOCKER_HOST" not in os.environ:
        sock = _get_podman_socket()
        if sock:
            os.environ["DOCKER_HOST"] = f"unix://{sock}"


CONTAINER_RUNTIME_AVAILABLE = _container_runtime_available()

if CONTAINER_RUNTIME_AVAILABLE:
    _configure_testcontainers_for_podman()


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

USER_ROWS = [
    (1, "Alice", "Martin", "admin", 1, 10, "2024-01-15T10:00:00Z"),
    (2, "Bob", "Durand", "user", 1, 3, "2024-03-20T14:30:00Z"),
    (3, "Charlie", "Petit", "admin", 0, 8, "2023-06-01T08:00:00Z"),
    (4, "Diana", "Moreau", "viewer", 1, 1, "2024-07-10T16:45:00Z"),
    (5, "Eve", "Lamotte", "user", 0, 5, "2024-11-05T12:00:00Z"),
]

POSITION_ROWS = [
    (1, 1, "lead"),
    (2, 2, "dev"),
    (3, 1, "ops"),
]


def _naive(ts: str) -> str:
    return ts.replace("T", " ").replace("Z", "")


# ---------------------------------------------------------------------------
# Table setup per database
# ---------------------------------------------------------------------------

def _setup_postgres(conn) -> None:
    cur = conn.cursor()
    cur.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            role TEXT,
            active INTEGER NOT NULL,
            conn INTEGER NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE
        )
    """)
    cur.execute("""
        CREATE TABLE IF NOT EXISTS positions (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL,
            title TEXT NOT NULL
        )
    """)
    cur.executemany("INSERT INTO users VALUES (%s, %s, %s, %s, %s, %s, %s)", USER_ROWS)
    cur.executemany("INSERT INTO positions VALUES (%s, %s, %s)", POSITION_ROWS)
    conn.commit()
    cur.close()


def _setup_duckdb(conn) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            first_name VARCHAR NOT NULL,
            last_name VARCHAR NOT NULL,
            role VARCHAR,
            active INTEGER NOT NULL,
            conn INTEGER NOT NULL,
            created_at TIMESTAMPTZ
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS positions (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL,
            title VARCHAR NOT NULL
        )
    """)
    conn.executemany("INSERT INTO users VALUES ($1, $2, $3, $4, $5, $6, $7)", USER_ROWS)
    conn.executemany("INSERT INTO positions VALUES ($1, $2, $3)", POSITION_ROWS)


def _setup_mysql(conn) -> None:
    cur = conn.cursor()
    cur.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            first_name VARCHAR(255) NOT NULL,
            last_name VARCHAR(255) NOT NULL,
            role VARCHAR(255),
            active INTEGER NOT NULL,
            conn INTEGER NOT NULL,
            created_at DATETIME
        )
    """)
    cur.execute("""
        CREATE TABLE IF NOT EXISTS positions (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL,
            title VARCHAR(255) NOT NULL
        )
    """)
    cur.executemany(
        "INSERT INTO users VALUES (%s, %s, %s, %s, %s, %s, %s)",
        [(*row[:6], _naive(row[6])) for row in USER_ROWS],
    )
    cur.executemany("INSERT INTO positions VALUES (%s, %s, %s)", POSITION_ROWS)
    conn.commit()
    cur.close()


def _setup_sqlite(conn) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            role TEXT,
            active INTEGER NOT NULL,
            conn INTEGER NOT NULL,
            created_at TEXT
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS positions (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL,
            title TEXT NOT NULL
        )
    """)
    conn.executemany(
        "INSERT INTO users VALUES (?, ?, ?, ?, ?, ?, ?)",
        [(*row[:6], _naive(row[6])) for row in USER_ROWS],
    )
    conn.executemany("INSERT INTO positions VALUES (?, ?, ?)", POSITION_ROWS)
    conn.commit()


# ---------------------------------------------------------------------------
# Session-scoped container fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def pg_container():
    if not CONTAINER_RUNTIME_AVAILABLE:
        pytest.skip("No container runtime (Docker/Podman) available")
    from testcontainers.postgres import PostgresContainer
    with PostgresContainer("postgres:16") as pg:
        yield pg


@pytest.fixture(scope="session")
def mysql_container():
    if not CONTAINER_RUNTIME_AVAILABLE:
        pytest.skip("No container runtime (Docker/Podman) available")
    from testcontainers.mysql import MySqlContainer
    with MySqlContainer("mysql:8.4") as mysql:
        yield mysql


# ---------------------------------------------------------------------------
# Session-scoped database fixtures (connection + tables + data)
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def pg_db(pg_container):
    import psycopg
    conn = psycopg.connect(
        host=pg_container.get_container_host_ip(),
        port=pg_container.get_exposed_port(5432),
        user=pg_container.username,
        password=pg_container.password,
        dbname=pg_container.dbname,
    )
    _setup_postgres(conn)
    yield conn
    conn.close()


@pytest.fixture(scope="session")
def mysql_db(mysql_container):
    import mysql.connector
    conn = mysql.connector.connect(
        host=mysql_container.get_container_host_ip(),
        port=int(mysql_container.get_exposed_port(3306)),
        user=mysql_container.username,
        password=mysql_container.password,
        database=mysql_container.dbname,
    )
    _setup_mysql(conn)
    yield conn
    conn.close()


@pytest.fixture(scope="session")
def duckdb_db():
    import duckdb
    conn = duckdb.connect(":memory:")
    _setup_duckdb(conn)
    yield conn
    conn.close()


@pytest.fixture(scope="session")
def sqlite_db():
    import sqlite3
    conn = sqlite3.connect(":memory:")
    _setup_sqlite(conn)
    yield conn
    conn.close()


# ---------------------------------------------------------------------------
# Statement execution
# ---------------------------------------------------------------------------

def _adapt_params_for_driver(sql: str, db_name: str) -> str:
    """Adapt parameter placeholders for the database driver.

    - PostgreSQL ($1, $2): psycopg uses %s placeholders
    - DuckDB ($1, $2): native support, no change needed
    - MySQL (?): mysql-connector uses %s
    - SQLite (?): native support, no change needed
    """
    if db_name == "pg":
        return re.sub(r"\$\d+", "%s", sql)
    if db_name == "mysql":
        return sql.replace("?", "%s")
    return sql


def _rows_to_dicts(cursor) -> list[dict[str, Any]]:
    if cursor.description is None:
        return []
    columns = [d[0] for d in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


class Database:
    """A seeded connection and the dialect statements are rendered with."""

    def __init__(self, name: str, conn, dialect: Dialect) -> None:
        self.name = name
        self.conn = conn
        self.dialect = dialect

    def execute(self, node: Node) -> list[dict[str, Any]]:
        """Render ``node``, bind its parameters and return the result rows."""
        result = render(node, dialect=self.dialect)
        sql = _adapt_params_for_driver(result.sql, self.name)
        params = result.driver_parameters()

        if self.name in ("duckdb", "sqlite"):
            return _rows_to_dicts(self.conn.execute(sql, params))

        cur = self.conn.cursor()
        # Drivers skip %-interpolation entirely when no parameters are given
        cur.execute(sql, tuple(params) if params else None)
        rows = _rows_to_dicts(cur)
        cur.close()
        return rows

    @contextmanager
    def transaction(self):
        """Run statements that are rolled back afterwards."""
        if self.name == "duckdb":
            self.conn.begin()
        try:
            yield self
        finally:
            self.conn.rollback()


def get_names(rows: list[dict[str, Any]]) -> set[str]:
    return {row["first_name"] for row in rows}


# ---------------------------------------------------------------------------
# Parametrized database fixtures
# ---------------------------------------------------------------------------

ALL_DBS = ["pg", "duckdb", "mysql", "sqlite"]
NO_DOCKER_DBS = ["duckdb", "sqlite"]
RETURNING_DBS = ["pg", "duckdb", "sqlite"]

_DIALECTS: dict[str, Dialect] = {
    "pg": PostgresDialect(),
    "duckdb": DuckDBDialect(),
    "mysql": MySQLDialect(),
    "sqlite": SQLiteDialect(),
}


def _database(request) -> Database:
    name = request.param
    conn = request.getfixturevalue(f"{name}_db")
    return Database(name, conn, _DIALECTS[name])


@pytest.fixture(params=ALL_DBS)
def db(request):
    return _database(request)


@pytest.fixture(params=NO_DOCKER_DBS)
def local_db(request):
    return _database(request)


@pytest.fixture(params=RETURNING_DBS)
def returning_db(request):
    """Databases that support a RETURNING clause."""
    return _database(request)


@pytest.fixture
def names():
    return get_names
