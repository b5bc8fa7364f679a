"""Integration tests for INSERT, UPDATE and DELETE; every test rolls back."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pyquel import (
    arg,
    delete,
    delete_returning,
    delete_where,
    equal,
    greater_or_equal,
    ident,
    insert,
    insert_columns,
    insert_returning,
    insert_values,
    is_null_test,
    literal,
    select,
    select_columns,
    select_where,
    update,
    update_column,
    update_returning,
    update_where,
)


pytestmark = pytest.mark.integration

_COLUMNS = ("id", "first_name", "last_name", "role", "active", "conn", "created_at")


def _by_id(user_id):
    return select("users", select_columns(*_COLUMNS), select_where(equal(ident("id"), literal(user_id))))


class TestInsert:
    def test_literal_and_argument_rows(self, db):
        ts = datetime(2024, 12, 1, 9, 0, 0, tzinfo=timezone.utc)
        q = insert(
            "users",
            insert_columns(*_COLUMNS),
            insert_values(
                literal(6), literal("Roger"), literal("O'Neil"), literal("user"),
                literal(1), literal(0), literal(ts),
            ),
            insert_values(
                arg("id", 7), arg("first_name", "Pierre"), arg("last_name", "Dubois"),
                arg("role", "user"), arg("active", 0), arg("conn", 2), arg("created_at"),
            ),
        )
        with db.transaction():
            db.execute(q)
            roger = db.execute(_by_id(6))
            pierre = db.execute(_by_id(7))
        assert roger[0]["last_name"] == "O'Neil"
        assert pierre[0]["first_name"] == "Pierre"
        assert pierre[0]["created_at"] is None

    def test_null_argument_binds_null(self, db):
        q = insert(
            "users",
            insert_columns("id", "first_name", "last_name", "role", "active", "conn"),
            insert_values(
                arg("id", 8), arg("first_name", "Nina"), arg("last_name", "Roux"),
                arg("role"), arg("active", 1), arg("conn", 0),
            ),
        )
        with db.transaction():
            db.execute(q)
            rows = db.execute(select(
                "users", select_columns("first_name"), select_where(is_null_test(ident("role"))),
            ))
        assert [row["first_name"] for row in rows] == ["Nina"]

    def test_returning(self, returning_db):
        db = returning_db
        q = insert(
            "users",
            insert_columns("id", "first_name", "last_name", "active", "conn"),
            insert_values(arg("id", 9), arg("first_name", "Zoe"), arg("last_name", "Blanc"),
                          arg("active", 1), arg("conn", 4)),
            insert_returning(ident("id"), ident("first_name")),
        )
        with db.transaction():
            rows = db.execute(q)
        assert [(row["id"], row["first_name"]) for row in rows] == [(9, "Zoe")]


class TestUpdate:
    def test_update_where(self, db):
        q = update(
            "users",
            update_column("role", literal("guest")),
            update_column("active", arg("active", 0)),
            update_where(equal(ident("role"), arg("role", "viewer"))),
        )
        with db.transaction():
            db.execute(q)
            rows = db.execute(_by_id(4))
        assert rows[0]["role"] == "guest"
        assert rows[0]["active"] == 0

    def test_returning(self, returning_db):
        db = returning_db
        q = update(
            "users",
            update_column("conn", arg("conn", 99)),
            update_where(equal(ident("id"), arg("id", 2))),
            update_returning(ident("first_name"), ident("conn")),
        )
        with db.transaction():
            rows = db.execute(q)
        assert [(row["first_name"], row["conn"]) for row in rows] == [("Bob", 99)]


class TestDelete:
    def test_delete_where(self, db):
        q = delete("users", delete_where(greater_or_equal(ident("conn"), arg("conn", 8))))
        with db.transaction():
            db.execute(q)
            rows = db.execute(select("users", select_columns("first_name")))
        assert {row["first_name"] for row in rows} == {"Bob", "Diana", "Eve"}

    def test_returning(self, returning_db):
        db = returning_db
        q = delete(
            "users",
            delete_where(equal(ident("role"), arg("role", "user"))),
            delete_returning(ident("first_name")),
        )
        with db.transaction():
            rows = db.execute(q)
        assert {row["first_name"] for row in rows} == {"Bob", "Eve"}
