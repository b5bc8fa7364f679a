"""SELECT and UNION statements.

A Select is built by applying option functions, in order, to a mutable
builder. The first option that raises aborts the build. Joins are methods on
a finished Select and return a new Select with one more query block.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar

from pyquel._errors import (
    ERR_MSG_INVALID_SYNTAX,
    ERR_MSG_NEGATIVE_LIMIT,
    InvalidLimitError,
    SQLSyntaxError,
)
from pyquel._nodes import Node, NodeList, OrderSpec, alias, exists, ident, require_relational
from pyquel._operators import JoinType
from pyquel._utils import validate_identifier

logger = logging.getLogger("pyquel")


@dataclass(frozen=True)
class CommonTableExpr(Node):
    """``name(columns) AS (query)`` inside a WITH clause."""

    kind: ClassVar[str] = "cte"

    name: str
    query: Node
    columns: tuple[Node, ...] = ()


@dataclass(frozen=True)
class QueryBlock:
    """One FROM entry: its source, its projected columns and its join linkage."""

    table: Node
    columns: tuple[Node, ...] = ()
    join: JoinType | None = None
    condition: Node | None = None


@dataclass(frozen=True)
class Select(Node):
    kind: ClassVar[str] = "select"
    subquery: ClassVar[bool] = True

    blocks: tuple[QueryBlock, ...]
    ctes: tuple[CommonTableExpr, ...] = ()
    where: Node | None = None
    group_by: tuple[Node, ...] = ()
    having: Node | None = None
    order_by: tuple[OrderSpec, ...] = ()
    limit: int = 0
    offset: int = 0
    distinct: bool = False

    @property
    def joinable(self) -> bool:
        return True

    @property
    def column_count(self) -> int:
        """Number of explicitly projected columns across all query blocks."""
        return sum(len(b.columns) for b in self.blocks)

    def left_inner_join(self, source: Node, condition: Node, *options: SelectOption) -> Select:
        return self._join(JoinType.INNER_LEFT, source, condition, options)

    def right_inner_join(self, source: Node, condition: Node, *options: SelectOption) -> Select:
        return self._join(JoinType.INNER_RIGHT, source, condition, options)

    def left_outer_join(self, source: Node, condition: Node, *options: SelectOption) -> Select:
        return self._join(JoinType.OUTER_LEFT, source, condition, options)

    def right_outer_join(self, source: Node, condition: Node, *options: SelectOption) -> Select:
        return self._join(JoinType.OUTER_RIGHT, source, condition, options)

    def _join(
        self,
        join: JoinType,
        source: Node,
        condition: Node,
        options: tuple[SelectOption, ...],
    ) -> Select:
        if not source.joinable:
            raise SQLSyntaxError(
                f"join: {ERR_MSG_INVALID_SYNTAX}",
                f"join: {type(source).__name__} can not be joined",
            )
        if not (condition.relational or condition.kind == NodeList.kind):
            raise SQLSyntaxError(
                f"join: {ERR_MSG_INVALID_SYNTAX}",
                f"join: invalid condition type {type(condition).__name__}",
            )
        b = _SelectBuilder.from_select(self)
        b.blocks.append(_BlockBuilder(table=source, join=join, condition=condition))
        return b.apply(options).build()

    def exists(self) -> Node:
        return exists(self)


@dataclass
class _BlockBuilder:
    table: Node
    columns: list[Node] = field(default_factory=list)
    join: JoinType | None = None
    condition: Node | None = None


@dataclass
class _SelectBuilder:
    blocks: list[_BlockBuilder] = field(default_factory=list)
    ctes: list[CommonTableExpr] = field(default_factory=list)
    where: Node | None = None
    group_by: list[Node] = field(default_factory=list)
    having: Node | None = None
    order_by: list[OrderSpec] = field(default_factory=list)
    limit: int = 0
    offset: int = 0
    distinct: bool = False

    @classmethod
    def from_select(cls, s: Select) -> _SelectBuilder:
        return cls(
            blocks=[
                _BlockBuilder(b.table, list(b.columns), b.join, b.condition)
                for b in s.blocks
            ],
            ctes=list(s.ctes),
            where=s.where,
            group_by=list(s.group_by),
            having=s.having,
            order_by=list(s.order_by),
            limit=s.limit,
            offset=s.offset,
            distinct=s.distinct,
        )

    def apply(self, options: tuple[SelectOption, ...]) -> _SelectBuilder:
        for opt in options:
            opt(self)
        return self

    def build(self) -> Select:
        return Select(
            blocks=tuple(
                QueryBlock(b.table, tuple(b.columns), b.join, b.condition)
                for b in self.blocks
            ),
            ctes=tuple(self.ctes),
            where=self.where,
            group_by=tuple(self.group_by),
            having=self.having,
            order_by=tuple(self.order_by),
            limit=self.limit,
            offset=self.offset,
            distinct=self.distinct,
        )


SelectOption = Callable[[_SelectBuilder], None]


def select(table: str, *options: SelectOption) -> Select:
    """Build a SELECT over ``table``.

    Args:
        table: Name of the base table, validated as an identifier on render.
        *options: Option functions applied in order.

    Returns:
        The finished, immutable Select.

    Raises:
        QuelError: The first error raised by an option.
    """
    b = _SelectBuilder(blocks=[_BlockBuilder(table=ident(table))])
    s = b.apply(options).build()
    logger.debug("built select on %s with %d options", table, len(options))
    return s


def distinct(table: str, *options: SelectOption) -> Select:
    return select(table, *options, select_distinct())


def select_limit(limit: int) -> SelectOption:
    def apply(q: _SelectBuilder) -> None:
        if limit < 0:
            raise InvalidLimitError(
                f"limit: {ERR_MSG_NEGATIVE_LIMIT}",
                f"limit: {ERR_MSG_NEGATIVE_LIMIT}: {limit}",
            )
        q.limit = limit

    return apply


def select_offset(offset: int) -> SelectOption:
    def apply(q: _SelectBuilder) -> None:
        if offset < 0:
            raise InvalidLimitError(
                f"offset: {ERR_MSG_NEGATIVE_LIMIT}",
                f"offset: {ERR_MSG_NEGATIVE_LIMIT}: {offset}",
            )
        q.offset = offset

    return apply


def select_columns(*columns: str) -> SelectOption:
    """Project columns by name into the last query block."""

    def apply(q: _SelectBuilder) -> None:
        nodes = []
        for name in columns:
            validate_identifier(name, "column")
            nodes.append(ident(name))
        q.blocks[-1].columns.extend(nodes)

    return apply


def select_column(node: Node) -> SelectOption:
    """Project an arbitrary expression into the last query block."""

    def apply(q: _SelectBuilder) -> None:
        q.blocks[-1].columns.append(node)

    return apply


def select_alias(name: str) -> SelectOption:
    def apply(q: _SelectBuilder) -> None:
        validate_identifier(name, "alias")
        q.blocks[0].table = alias(name, q.blocks[0].table)

    return apply


def select_order_by(*specs: OrderSpec) -> SelectOption:
    def apply(q: _SelectBuilder) -> None:
        for spec in specs:
            if getattr(spec, "kind", None) != OrderSpec.kind:
                raise SQLSyntaxError(
                    f"order by: {ERR_MSG_INVALID_SYNTAX}",
                    f"order by: expected an OrderSpec, got {type(spec).__name__}",
                )
            validate_identifier(spec.column, "order by")
        q.order_by.extend(specs)

    return apply


def select_group_by(*columns: Node) -> SelectOption:
    def apply(q: _SelectBuilder) -> None:
        q.group_by.extend(columns)

    return apply


def select_having(having: Node | None) -> SelectOption:
    """Filter groups; rendered only when GROUP BY is present."""

    def apply(q: _SelectBuilder) -> None:
        if having is None:
            return
        require_relational(having, "having")
        q.having = having

    return apply


def select_where(where: Node | None) -> SelectOption:
    def apply(q: _SelectBuilder) -> None:
        if where is None:
            return
        require_relational(where, "where")
        q.where = where

    return apply


def select_distinct() -> SelectOption:
    def apply(q: _SelectBuilder) -> None:
        q.distinct = True

    return apply


def select_with(name: str, query: Node, *columns: str | Node) -> SelectOption:
    """Attach a common table expression ``name(columns) AS (query)``."""

    def apply(q: _SelectBuilder) -> None:
        validate_identifier(name, "with")
        if not query.subquery:
            raise SQLSyntaxError(
                f"with: {ERR_MSG_INVALID_SYNTAX}",
                f"with: {type(query).__name__} is not a query",
            )
        nodes = []
        for column in columns:
            if isinstance(column, str):
                validate_identifier(column, "with")
                column = ident(column)
            nodes.append(column)
        q.ctes.append(CommonTableExpr(name, query, tuple(nodes)))

    return apply


@dataclass(frozen=True)
class Union(Node):
    kind: ClassVar[str] = "union"
    subquery: ClassVar[bool] = True

    left: Select
    right: Select
    all: bool = False


def union(left: Select, right: Select) -> Union:
    return _new_union(left, right, False)


def union_all(left: Select, right: Select) -> Union:
    return _new_union(left, right, True)


def _new_union(left: Select, right: Select, all_: bool) -> Union:
    for side, s in (("left", left), ("right", right)):
        if getattr(s, "kind", None) != Select.kind:
            raise SQLSyntaxError(
                f"union: {ERR_MSG_INVALID_SYNTAX}",
                f"union({side}): {type(s).__name__} is not a select",
            )
    if left.column_count != right.column_count:
        raise SQLSyntaxError(
            f"union: {ERR_MSG_INVALID_SYNTAX}",
            f"union: columns count mismatch ({left.column_count} != {right.column_count})",
        )
    return Union(left, right, all_)
