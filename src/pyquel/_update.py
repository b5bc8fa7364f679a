"""UPDATE statements."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar

from pyquel._errors import ERR_MSG_INVALID_SYNTAX, SQLSyntaxError
from pyquel._nodes import Comparison, Node, alias, equal, ident, require_relational
from pyquel._utils import validate_identifier

logger = logging.getLogger("pyquel")


@dataclass(frozen=True)
class Update(Node):
    kind: ClassVar[str] = "update"

    table: Node
    assignments: tuple[Comparison, ...]
    where: Node | None = None
    returning: tuple[Node, ...] = ()


@dataclass
class _UpdateBuilder:
    table: Node
    assignments: list[Comparison] = field(default_factory=list)
    where: Node | None = None
    returning: list[Node] = field(default_factory=list)


UpdateOption = Callable[[_UpdateBuilder], None]


def update(table: str, *options: UpdateOption) -> Update:
    """Build an UPDATE of ``table``; at least one column assignment is required."""
    u = _UpdateBuilder(table=ident(table))
    for opt in options:
        opt(u)
    if not u.assignments:
        raise SQLSyntaxError(
            f"update: {ERR_MSG_INVALID_SYNTAX}",
            "update: no column assignment given",
        )
    logger.debug("built update of %s with %d assignments", table, len(u.assignments))
    return Update(
        table=u.table,
        assignments=tuple(u.assignments),
        where=u.where,
        returning=tuple(u.returning),
    )


def update_column(column: str, value: Node) -> UpdateOption:
    """Assign ``value`` to ``column``, rendered ``column = value``."""

    def apply(u: _UpdateBuilder) -> None:
        validate_identifier(column, "column")
        u.assignments.append(equal(ident(column), value))

    return apply


def update_where(where: Node | None) -> UpdateOption:
    def apply(u: _UpdateBuilder) -> None:
        if where is None:
            return
        require_relational(where, "where")
        u.where = where

    return apply


def update_alias(name: str) -> UpdateOption:
    def apply(u: _UpdateBuilder) -> None:
        validate_identifier(name, "alias")
        u.table = alias(name, u.table)

    return apply


def update_returning(*values: Node) -> UpdateOption:
    def apply(u: _UpdateBuilder) -> None:
        u.returning.extend(values)

    return apply
