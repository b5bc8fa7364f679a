"""DELETE statements."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar

from pyquel._nodes import Node, alias, ident, require_relational
from pyquel._utils import validate_identifier

logger = logging.getLogger("pyquel")


@dataclass(frozen=True)
class Delete(Node):
    kind: ClassVar[str] = "delete"

    table: Node
    where: Node | None = None
    returning: tuple[Node, ...] = ()


@dataclass
class _DeleteBuilder:
    table: Node
    where: Node | None = None
    returning: list[Node] = field(default_factory=list)


DeleteOption = Callable[[_DeleteBuilder], None]


def delete(table: str, *options: DeleteOption) -> Delete:
    d = _DeleteBuilder(table=ident(table))
    for opt in options:
        opt(d)
    logger.debug("built delete from %s", table)
    return Delete(table=d.table, where=d.where, returning=tuple(d.returning))


def delete_where(where: Node | None) -> DeleteOption:
    def apply(d: _DeleteBuilder) -> None:
        if where is None:
            return
        require_relational(where, "where")
        d.where = where

    return apply


def delete_alias(name: str) -> DeleteOption:
    def apply(d: _DeleteBuilder) -> None:
        validate_identifier(name, "alias")
        d.table = alias(name, d.table)

    return apply


def delete_returning(*values: Node) -> DeleteOption:
    def apply(d: _DeleteBuilder) -> None:
        d.returning.extend(values)

    return apply
