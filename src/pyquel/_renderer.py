"""Core Renderer class - walks a node tree and writes SQL text and parameters."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from io import StringIO
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pyquel._constants import (
    DEFAULT_MAX_RECURSION_DEPTH,
    DEFAULT_MAX_SQL_OUTPUT_LENGTH,
    NULL,
)
from pyquel._errors import (
    ERR_MSG_INVALID_OPERATOR,
    ERR_MSG_INVALID_SYNTAX,
    ERR_MSG_UNSUPPORTED_TYPE,
    MaxDepthExceededError,
    MaxOutputLengthExceededError,
    SQLSyntaxError,
    UnsupportedOperatorError,
    UnsupportedTypeError,
)
from pyquel._operators import (
    COMPARISON_OPERATORS,
    JOIN_KEYWORDS,
    MATH_OPERATORS,
    UNARY_COMPARISON_OPS,
    SortOrder,
    TimeUnit,
)
from pyquel._utils import (
    format_bool,
    format_float,
    format_integer,
    has_own_str,
)
from pyquel.dialect._base import Dialect
from pyquel.dialect.default import DefaultDialect

if TYPE_CHECKING:
    from pyquel._delete import Delete
    from pyquel._insert import Insert
    from pyquel._nodes import (
        Alias,
        AllOf,
        And,
        AnyOf,
        Argument,
        Arithmetic,
        Between,
        Case,
        Comparison,
        Exists,
        Function,
        Identifier,
        Interval,
        Literal,
        Node,
        NodeList,
        Not,
        Or,
        OrderSpec,
    )
    from pyquel._select import CommonTableExpr, Select, Union
    from pyquel._update import Update

logger = logging.getLogger("pyquel")


@runtime_checkable
class SQLMarshaler(Protocol):
    """A value that knows its own SQL literal text."""

    def __sql__(self) -> str: ...


@dataclass(frozen=True)
class Result:
    """Rendered statement text and its positional parameters."""

    sql: str
    parameters: list[Any] = field(default_factory=list)

    def driver_parameters(self) -> list[Any]:
        """Parameters with the NULL sentinel replaced by ``None`` for DB-API drivers."""
        return [None if p is NULL else p for p in self.parameters]


class Renderer:
    """Renders a node tree into a SQL string and an ordered parameter list.

    Each node kind has a handler method of the same name. Handlers write to a
    single StringIO buffer and append bound values as their placeholders are
    written, so parameter order always follows placeholder order.
    """

    NODE_KINDS = frozenset({
        "identifier", "literal", "argument", "node_list", "alias",
        "arithmetic", "interval", "comparison", "between", "not_", "and_",
        "or_", "case", "any_", "all_", "exists", "function", "order_spec",
        "cte", "select", "union", "insert", "update", "delete",
    })

    def __init__(
        self,
        dialect: Dialect,
        max_depth: int = DEFAULT_MAX_RECURSION_DEPTH,
        max_output_length: int | None = DEFAULT_MAX_SQL_OUTPUT_LENGTH,
    ) -> None:
        self._w = StringIO()
        self._dialect = dialect
        self._max_depth = max_depth
        self._max_output_length = max_output_length
        self._depth = 0
        self._parameters: list[Any] = []

    @property
    def result(self) -> str:
        return self._w.getvalue()

    @property
    def parameters(self) -> list[Any]:
        return self._parameters

    def _check_limits(self) -> None:
        if self._depth > self._max_depth:
            raise MaxDepthExceededError(
                "maximum recursion depth exceeded",
                f"depth {self._depth} exceeds limit {self._max_depth}",
            )
        if self._max_output_length is not None and self._w.tell() > self._max_output_length:
            raise MaxOutputLengthExceededError(
                "maximum SQL output length exceeded",
                f"output length exceeds limit {self._max_output_length}",
            )

    def _add_param(self, value: Any) -> int:
        """Add a parameter and return its 1-based index."""
        self._parameters.append(value)
        return len(self._parameters)

    def _visit_child(self, node: Node) -> None:
        """Visit a child node, incrementing depth."""
        self._depth += 1
        try:
            self._check_limits()
            self.visit(node)
        finally:
            self._depth -= 1

    def _visit_grouped(self, node: Node) -> None:
        self._w.write("(")
        self._visit_child(node)
        self._w.write(")")

    def _visit_operand(self, node: Node) -> None:
        """Visit a node, parenthesizing it when it is a full query."""
        if node.subquery:
            self._visit_grouped(node)
        else:
            self._visit_child(node)

    def _write_list(self, nodes: Iterable[Node]) -> None:
        for i, node in enumerate(nodes):
            if i > 0:
                self._w.write(", ")
            self._visit_child(node)

    # ---- Top-level entry ----

    def visit(self, node: Node) -> None:
        kind = getattr(node, "kind", None)
        if kind not in self.NODE_KINDS:
            raise SQLSyntaxError(
                ERR_MSG_INVALID_SYNTAX,
                f"cannot render {type(node).__name__}",
            )
        getattr(self, kind)(node)

    # ---- Atoms ----

    def identifier(self, node: Identifier) -> None:
        for parent in node.parents:
            self._dialect.validate_identifier(parent, "ident")
        self._dialect.validate_identifier(node.name, "ident")
        self._w.write(".".join((*node.parents, node.name)))

    def literal(self, node: Literal) -> None:
        value = node.value
        if isinstance(value, bool):
            self._w.write(format_bool(value))
        elif isinstance(value, int):
            self._w.write(format_integer(value))
        elif isinstance(value, float):
            self._w.write(format_float(value))
        elif isinstance(value, str):
            self._dialect.write_string_literal(self._w, value)
        elif isinstance(value, datetime):
            self._dialect.write_timestamp_literal(self._w, value)
        elif isinstance(value, SQLMarshaler):
            text = value.__sql__()
            if not isinstance(text, str):
                raise UnsupportedTypeError(
                    ERR_MSG_UNSUPPORTED_TYPE,
                    f"{type(value).__name__}.__sql__ returned {type(text).__name__}",
                )
            self._w.write(text)
        elif value is not None and has_own_str(value):
            self._w.write(str(value))
        else:
            raise UnsupportedTypeError(
                ERR_MSG_UNSUPPORTED_TYPE,
                f"literal of type {type(value).__name__} cannot be encoded",
            )

    def argument(self, node: Argument) -> None:
        value = NULL if node.value is None else node.value
        index = self._add_param(value)
        self._dialect.write_param_placeholder(self._w, node.name, index)

    def node_list(self, node: NodeList) -> None:
        self._write_list(node.nodes)

    def alias(self, node: Alias) -> None:
        self._dialect.validate_identifier(node.name, "alias")
        self._visit_operand(node.node)
        self._w.write(f" AS {node.name}")

    # ---- Arithmetic ----

    def arithmetic(self, node: Arithmetic) -> None:
        op = MATH_OPERATORS.get(node.op)
        if op is None:
            raise UnsupportedOperatorError(
                ERR_MSG_INVALID_OPERATOR,
                f"unknown arithmetic operator: {node.op!r}",
            )
        for i, operand in enumerate((node.left, node.right)):
            if i > 0:
                self._w.write(f" {op} ")
            if operand.kind == node.kind:
                self._visit_grouped(operand)
            else:
                self._visit_operand(operand)

    def interval(self, node: Interval) -> None:
        if not isinstance(node.unit, TimeUnit):
            raise SQLSyntaxError(
                f"interval: {ERR_MSG_INVALID_SYNTAX}",
                f"unknown interval unit {node.unit!r}",
            )
        if isinstance(node.count, bool) or not isinstance(node.count, int):
            raise SQLSyntaxError(
                f"interval: {ERR_MSG_INVALID_SYNTAX}",
                f"interval count must be an integer, got {type(node.count).__name__}",
            )
        self._dialect.write_interval(self._w, node.count, node.unit)

    # ---- Relational ----

    def comparison(self, node: Comparison) -> None:
        op = COMPARISON_OPERATORS.get(node.op)
        if op is None:
            raise UnsupportedOperatorError(
                ERR_MSG_INVALID_OPERATOR,
                f"unknown comparison operator: {node.op!r}",
            )
        self._visit_operand(node.left)
        if node.op in UNARY_COMPARISON_OPS:
            self._w.write(f" {op}")
            return
        self._w.write(f" {op} ")
        if node.right.kind == "node_list" or node.right.subquery:
            self._visit_grouped(node.right)
        else:
            self._visit_child(node.right)

    def between(self, node: Between) -> None:
        self._visit_operand(node.value)
        self._w.write(" BETWEEN ")
        self._visit_operand(node.low)
        self._w.write(" AND ")
        self._visit_operand(node.high)

    def not_(self, node: Not) -> None:
        self._w.write("NOT ")
        if node.operand.connective:
            self._visit_grouped(node.operand)
        else:
            self._visit_child(node.operand)

    def _connective(self, node: And | Or) -> None:
        # One frame per AND/OR level.
        keyword = "AND" if node.kind == "and_" else "OR"
        for i, operand in enumerate((node.left, node.right)):
            if i > 0:
                self._w.write(f" {keyword} ")
            if operand.connective:
                self._w.write("(")
                self._visit_child(operand)
                self._w.write(")")
            else:
                self._visit_child(operand)

    and_ = _connective
    or_ = _connective

    def case(self, node: Case) -> None:
        self._w.write("CASE ")
        if node.operand is not None:
            self._visit_child(node.operand)
            self._w.write(" ")
        for i, (test, consequence) in enumerate(node.whens):
            if i > 0:
                self._w.write(" ")
            self._w.write("WHEN ")
            self._visit_child(test)
            self._w.write(" THEN ")
            self._visit_child(consequence)
        if node.default is not None:
            self._w.write(" ELSE ")
            self._visit_child(node.default)
        self._w.write(" END")

    def any_(self, node: AnyOf) -> None:
        self._w.write("ANY ")
        self._visit_grouped(node.inner)

    def all_(self, node: AllOf) -> None:
        self._w.write("ALL ")
        self._visit_grouped(node.inner)

    def exists(self, node: Exists) -> None:
        self._w.write("EXISTS ")
        self._visit_operand(node.inner)

    def function(self, node: Function) -> None:
        self._w.write(f"{node.name}(")
        self._write_list(node.args)
        self._w.write(")")

    def order_spec(self, node: OrderSpec) -> None:
        self._dialect.validate_identifier(node.column, "order by")
        if not isinstance(node.order, SortOrder):
            raise SQLSyntaxError(
                f"order by: {ERR_MSG_INVALID_SYNTAX}",
                f"unknown sort order {node.order!r}",
            )
        self._w.write(f"{node.column} {node.order.value}")

    # ---- Statements ----

    def cte(self, node: CommonTableExpr) -> None:
        self._dialect.validate_identifier(node.name, "with")
        self._w.write(node.name)
        if node.columns:
            self._w.write("(")
            self._write_list(node.columns)
            self._w.write(")")
        self._w.write(" AS ")
        self._visit_grouped(node.query)

    def select(self, node: Select) -> None:
        if node.ctes:
            self._w.write("WITH ")
            self._write_list(node.ctes)
            self._w.write(" ")
        self._w.write("SELECT ")
        if node.distinct:
            self._w.write("DISTINCT ")
        for i, block in enumerate(node.blocks):
            if i > 0:
                self._w.write(", ")
            if not block.columns:
                self._w.write("*")
                continue
            self._write_list(block.columns)
        self._w.write(" FROM ")
        for i, block in enumerate(node.blocks):
            if (block.join is None) != (i == 0):
                raise SQLSyntaxError(
                    f"join: {ERR_MSG_INVALID_SYNTAX}",
                    f"query block {i} has join type {block.join!r}",
                )
            if block.join is not None:
                self._w.write(f" {JOIN_KEYWORDS[block.join]} ")
            self._visit_operand(block.table)
            if block.join is None:
                continue
            if not isinstance(getattr(block.condition, "kind", None), str):
                raise SQLSyntaxError(
                    f"join: {ERR_MSG_INVALID_SYNTAX}",
                    f"query block {i} has no join condition",
                )
            if block.condition.kind == "node_list":
                self._w.write(" USING (")
                self._visit_child(block.condition)
                self._w.write(")")
            elif block.condition.relational:
                self._w.write(" ON ")
                self._visit_child(block.condition)
            else:
                raise SQLSyntaxError(
                    f"join: {ERR_MSG_INVALID_SYNTAX}",
                    f"join condition of type {type(block.condition).__name__}",
                )
        if node.where is not None:
            self._w.write(" WHERE ")
            self._visit_child(node.where)
        if node.group_by:
            self._w.write(" GROUP BY ")
            self._write_list(node.group_by)
            if node.having is not None:
                self._w.write(" HAVING ")
                self._visit_child(node.having)
        if node.order_by:
            self._w.write(" ORDER BY ")
            self._write_list(node.order_by)
        if node.limit > 0:
            self._w.write(f" LIMIT {node.limit}")
        if node.offset > 0:
            self._w.write(f" OFFSET {node.offset}")

    def union(self, node: Union) -> None:
        self._visit_child(node.left)
        self._w.write(" UNION ALL " if node.all else " UNION ")
        self._visit_child(node.right)

    def insert(self, node: Insert) -> None:
        self._w.write("INSERT INTO ")
        self._visit_child(node.table)
        if node.columns:
            self._w.write("(")
            self._write_list(node.columns)
            self._w.write(")")
        self._w.write(" VALUES ")
        for i, row in enumerate(node.rows):
            if node.columns and len(row) != len(node.columns):
                raise SQLSyntaxError(
                    f"insert: {ERR_MSG_INVALID_SYNTAX}",
                    f"insert: row {i} has {len(row)} values for {len(node.columns)} columns",
                )
            if i > 0:
                self._w.write(", ")
            self._w.write("(")
            self._write_list(row)
            self._w.write(")")
        self._write_returning(node.returning)

    def update(self, node: Update) -> None:
        self._w.write("UPDATE ")
        self._visit_child(node.table)
        self._w.write(" SET ")
        self._write_list(node.assignments)
        if node.where is not None:
            self._w.write(" WHERE ")
            self._visit_child(node.where)
        self._write_returning(node.returning)

    def delete(self, node: Delete) -> None:
        self._w.write("DELETE FROM ")
        self._visit_child(node.table)
        if node.where is not None:
            self._w.write(" WHERE ")
            self._visit_child(node.where)
        self._write_returning(node.returning)

    def _write_returning(self, returning: tuple[Node, ...]) -> None:
        if returning:
            self._w.write(" RETURNING ")
            self._write_list(returning)


def render(
    node: Node,
    *,
    dialect: Dialect | None = None,
    max_depth: int | None = None,
    max_output_length: int | None = None,
) -> Result:
    """Render a node tree to SQL text and positional parameters.

    Args:
        node: The root expression or statement.
        dialect: SQL dialect to use. Defaults to ``@name`` placeholders.
        max_depth: Maximum node nesting depth. Defaults to 250.
        max_output_length: Maximum SQL output length. Defaults to no cap.

    Returns:
        Result with the SQL text and one parameter per placeholder, in
        placeholder order.

    Raises:
        QuelError: If any node in the tree is invalid. No partial text is
            returned.
    """
    if dialect is None:
        dialect = DefaultDialect()

    kwargs: dict[str, Any] = {}
    if max_depth is not None:
        kwargs["max_depth"] = max_depth
    if max_output_length is not None:
        kwargs["max_output_length"] = max_output_length

    renderer = Renderer(dialect, **kwargs)
    try:
        renderer.visit(node)
    except RecursionError as e:
        raise MaxDepthExceededError(
            "maximum recursion depth exceeded",
            "interpreter recursion limit reached",
        ) from e
    renderer._check_limits()
    logger.debug("rendered %s with %d parameters", type(node).__name__, len(renderer.parameters))
    return Result(sql=renderer.result, parameters=renderer.parameters)
