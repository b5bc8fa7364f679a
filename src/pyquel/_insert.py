"""INSERT statements."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar

from pyquel._errors import ERR_MSG_INVALID_SYNTAX, SQLSyntaxError
from pyquel._nodes import Node, ident
from pyquel._utils import validate_identifier

logger = logging.getLogger("pyquel")


@dataclass(frozen=True)
class Insert(Node):
    kind: ClassVar[str] = "insert"

    table: Node
    rows: tuple[tuple[Node, ...], ...]
    columns: tuple[Node, ...] = ()
    returning: tuple[Node, ...] = ()


@dataclass
class _InsertBuilder:
    table: Node
    columns: list[Node] = field(default_factory=list)
    rows: list[tuple[Node, ...]] = field(default_factory=list)
    returning: list[Node] = field(default_factory=list)


InsertOption = Callable[[_InsertBuilder], None]


def insert(table: str, *options: InsertOption) -> Insert:
    """Build an INSERT into ``table``.

    At least one row of values is required, and when columns are given every
    row must supply exactly one value per column.

    Raises:
        QuelError: The first error raised by an option, or SQLSyntaxError when
            the rows are missing or do not match the columns.
    """
    b = _InsertBuilder(table=ident(table))
    for opt in options:
        opt(b)
    if not b.rows:
        raise SQLSyntaxError(
            f"insert: {ERR_MSG_INVALID_SYNTAX}",
            "insert: no values given to be inserted",
        )
    if b.columns:
        for i, row in enumerate(b.rows):
            if len(row) != len(b.columns):
                raise SQLSyntaxError(
                    f"insert: {ERR_MSG_INVALID_SYNTAX}",
                    f"insert: row {i} has {len(row)} values for {len(b.columns)} columns",
                )
    logger.debug("built insert into %s with %d rows", table, len(b.rows))
    return Insert(
        table=b.table,
        rows=tuple(b.rows),
        columns=tuple(b.columns),
        returning=tuple(b.returning),
    )


def insert_columns(*columns: str) -> InsertOption:
    def apply(i: _InsertBuilder) -> None:
        for name in columns:
            validate_identifier(name, "column")
            i.columns.append(ident(name))

    return apply


def insert_values(*values: Node) -> InsertOption:
    """Append one row of values."""

    def apply(i: _InsertBuilder) -> None:
        if not values:
            raise SQLSyntaxError(
                f"values: {ERR_MSG_INVALID_SYNTAX}",
                "values: no values given",
            )
        i.rows.append(tuple(values))

    return apply


def insert_returning(*values: Node) -> InsertOption:
    def apply(i: _InsertBuilder) -> None:
        i.returning.extend(values)

    return apply
