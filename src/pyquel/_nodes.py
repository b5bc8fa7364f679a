"""Expression node algebra.

Every node is an immutable dataclass tagged with a ``kind``. The renderer
dispatches on that tag, and parenthesization and the structural gate are
decided from capability flags rather than from concrete classes:

- ``relational``: accepted in WHERE, HAVING, join conditions and as an
  operand of NOT, AND, OR (comparisons and the two connectives).
- ``connective``: AND or OR; wrapped in parentheses under another
  connective.
- ``subquery``: a full query (SELECT or UNION); wrapped in parentheses when
  used as an operand or aliased.
- ``joinable``: may appear as the source of a join.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from pyquel._errors import (
    ERR_MSG_INVALID_SYNTAX,
    ERR_MSG_NOT_RELATIONAL,
    SQLSyntaxError,
)
from pyquel._operators import (
    MEMBERSHIP_OPS,
    UNARY_COMPARISON_OPS,
    CompareOp,
    MathOp,
    SortOrder,
    TimeUnit,
)
from pyquel._utils import validate_argument_name, validate_identifier

if TYPE_CHECKING:
    from pyquel._renderer import Result
    from pyquel.dialect._base import Dialect

# Function names are checked for shape only, SQL function names such as
# LEFT or REPLACE would otherwise collide with reserved words.
_NO_KEYWORDS: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Node:
    """Base class of every renderable expression and statement."""

    kind: ClassVar[str] = ""
    relational: ClassVar[bool] = False
    connective: ClassVar[bool] = False
    subquery: ClassVar[bool] = False

    @property
    def joinable(self) -> bool:
        return False

    def render(
        self,
        dialect: Dialect | None = None,
        *,
        max_depth: int | None = None,
        max_output_length: int | None = None,
    ) -> Result:
        """Render this node to SQL text and its ordered parameter list."""
        from pyquel._renderer import render

        return render(
            self,
            dialect=dialect,
            max_depth=max_depth,
            max_output_length=max_output_length,
        )

    def alias(self, name: str) -> Node:
        return alias(name, self)


def is_relational(node: Node | None) -> bool:
    """Report whether a node may stand in a boolean position."""
    return node is not None and node.relational


def require_relational(node: Node | None, position: str) -> None:
    if not is_relational(node):
        raise SQLSyntaxError(
            f"{position}: {ERR_MSG_INVALID_SYNTAX}",
            f"{position}: {type(node).__name__} {ERR_MSG_NOT_RELATIONAL}",
        )


# ---- Atoms ----


@dataclass(frozen=True)
class Identifier(Node):
    """A possibly qualified name; ``parents`` render before ``name``."""

    kind: ClassVar[str] = "identifier"

    name: str
    parents: tuple[str, ...] = ()

    @property
    def joinable(self) -> bool:
        return True


@dataclass(frozen=True)
class Literal(Node):
    kind: ClassVar[str] = "literal"

    value: Any


@dataclass(frozen=True)
class Argument(Node):
    """A bound parameter contributing exactly one value to the parameter list."""

    kind: ClassVar[str] = "argument"

    name: str
    value: Any = None

    def __post_init__(self) -> None:
        validate_argument_name(self.name)


@dataclass(frozen=True)
class NodeList(Node):
    kind: ClassVar[str] = "node_list"

    nodes: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Alias(Node):
    kind: ClassVar[str] = "alias"

    name: str
    node: Node

    @property
    def joinable(self) -> bool:
        return self.node.joinable


# ---- Arithmetic ----


@dataclass(frozen=True)
class Arithmetic(Node):
    kind: ClassVar[str] = "arithmetic"

    op: MathOp | str
    left: Node
    right: Node


@dataclass(frozen=True)
class Interval(Node):
    kind: ClassVar[str] = "interval"

    count: int
    unit: TimeUnit


# ---- Relational ----


@dataclass(frozen=True)
class Comparison(Node):
    kind: ClassVar[str] = "comparison"
    relational: ClassVar[bool] = True

    op: CompareOp | str
    left: Node
    right: Node | None = None

    def __post_init__(self) -> None:
        if self.op in UNARY_COMPARISON_OPS:
            return
        if self.right is None:
            raise SQLSyntaxError(
                f"{self.op}: {ERR_MSG_INVALID_SYNTAX}",
                f"comparison {self.op!r} requires a right operand",
            )
        if not isinstance(self.right, Node):
            raise SQLSyntaxError(
                f"{self.op}: {ERR_MSG_INVALID_SYNTAX}",
                f"comparison right operand must be a node, got {type(self.right).__name__}",
            )
        if self.op in MEMBERSHIP_OPS and not (
            self.right.kind == NodeList.kind or self.right.subquery
        ):
            raise SQLSyntaxError(
                f"{self.op}: {ERR_MSG_INVALID_SYNTAX}",
                f"{self.op} requires a list or a sub-select, got {type(self.right).__name__}",
            )


@dataclass(frozen=True)
class Between(Node):
    kind: ClassVar[str] = "between"

    value: Node
    low: Node
    high: Node


@dataclass(frozen=True)
class Not(Node):
    kind: ClassVar[str] = "not_"

    operand: Node

    def __post_init__(self) -> None:
        require_relational(self.operand, "not")


@dataclass(frozen=True)
class And(Node):
    kind: ClassVar[str] = "and_"
    relational: ClassVar[bool] = True
    connective: ClassVar[bool] = True

    left: Node
    right: Node

    def __post_init__(self) -> None:
        require_relational(self.left, "and(left)")
        require_relational(self.right, "and(right)")


@dataclass(frozen=True)
class Or(Node):
    kind: ClassVar[str] = "or_"
    relational: ClassVar[bool] = True
    connective: ClassVar[bool] = True

    left: Node
    right: Node

    def __post_init__(self) -> None:
        require_relational(self.left, "or(left)")
        require_relational(self.right, "or(right)")


@dataclass(frozen=True)
class Case(Node):
    kind: ClassVar[str] = "case"

    operand: Node | None = None
    whens: tuple[tuple[Node, Node], ...] = ()
    default: Node | None = None


@dataclass(frozen=True)
class AnyOf(Node):
    kind: ClassVar[str] = "any_"

    inner: Node


@dataclass(frozen=True)
class AllOf(Node):
    kind: ClassVar[str] = "all_"

    inner: Node


@dataclass(frozen=True)
class Exists(Node):
    kind: ClassVar[str] = "exists"

    inner: Node


@dataclass(frozen=True)
class Function(Node):
    kind: ClassVar[str] = "function"

    name: str
    args: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        validate_identifier(self.name, "function", _NO_KEYWORDS)


@dataclass(frozen=True)
class OrderSpec(Node):
    kind: ClassVar[str] = "order_spec"

    column: str
    order: SortOrder = SortOrder.ASC


# ---- Factories ----


def ident(name: str, *parents: str) -> Identifier:
    """Reference a column or table; ``ident("id", "u")`` renders ``u.id``."""
    return Identifier(name, tuple(parents))


def literal(value: Any) -> Literal:
    return Literal(value)


def arg(name: str, value: Any = None) -> Argument:
    return Argument(name, value)


def node_list(*nodes: Node) -> NodeList:
    return NodeList(tuple(nodes))


def using(*columns: Node) -> NodeList:
    """Join condition listing shared columns, rendered ``USING (...)``."""
    return NodeList(tuple(columns))


def alias(name: str, node: Node) -> Node:
    """Name a node; aliasing an alias returns it unchanged."""
    if node.kind == Alias.kind:
        return node
    return Alias(name, node)


def add(left: Node, right: Node) -> Arithmetic:
    return Arithmetic(MathOp.ADD, left, right)


def subtract(left: Node, right: Node) -> Arithmetic:
    return Arithmetic(MathOp.SUBTRACT, left, right)


def multiply(left: Node, right: Node) -> Arithmetic:
    return Arithmetic(MathOp.MULTIPLY, left, right)


def divide(left: Node, right: Node) -> Arithmetic:
    return Arithmetic(MathOp.DIVIDE, left, right)


def modulo(left: Node, right: Node) -> Arithmetic:
    return Arithmetic(MathOp.MODULO, left, right)


def bit_and(left: Node, right: Node) -> Arithmetic:
    return Arithmetic(MathOp.BIT_AND, left, right)


def bit_or(left: Node, right: Node) -> Arithmetic:
    return Arithmetic(MathOp.BIT_OR, left, right)


def bit_xor(left: Node, right: Node) -> Arithmetic:
    return Arithmetic(MathOp.BIT_XOR, left, right)


def interval(count: int, unit: TimeUnit | str) -> Interval:
    try:
        unit = TimeUnit(unit)
    except ValueError as exc:
        raise SQLSyntaxError(
            f"interval: {ERR_MSG_INVALID_SYNTAX}",
            f"unknown interval unit {unit!r}",
            exc,
        ) from exc
    return Interval(count, unit)


def equal(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.EQUAL, left, right)


def not_equal(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.NOT_EQUAL, left, right)


def less_than(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.LESS, left, right)


def less_or_equal(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.LESS_OR_EQUAL, left, right)


def greater_than(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.GREATER, left, right)


def greater_or_equal(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.GREATER_OR_EQUAL, left, right)


def like(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.LIKE, left, right)


def not_like(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.NOT_LIKE, left, right)


def in_(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.IN, left, right)


def not_in(left: Node, right: Node) -> Comparison:
    return Comparison(CompareOp.NOT_IN, left, right)


def is_null_test(left: Node) -> Comparison:
    return Comparison(CompareOp.IS_NULL, left)


def is_not_null_test(left: Node) -> Comparison:
    return Comparison(CompareOp.IS_NOT_NULL, left)


def between(value: Node, low: Node, high: Node) -> Between:
    return Between(value, low, high)


def not_(operand: Node) -> Not:
    return Not(operand)


def and_(left: Node, right: Node) -> And:
    return And(left, right)


def or_(left: Node, right: Node) -> Or:
    return Or(left, right)


def any_(inner: Node) -> AnyOf:
    return AnyOf(inner)


def all_(inner: Node) -> AllOf:
    return AllOf(inner)


def exists(inner: Node) -> Exists:
    return Exists(inner)


# ---- CASE ----


@dataclass
class _CaseBuilder:
    operand: Node | None = None
    whens: list[tuple[Node, Node]] = field(default_factory=list)
    default: Node | None = None


CaseOption = Callable[[_CaseBuilder], None]


def case_operand(expr: Node | None) -> CaseOption:
    """Compare every WHEN against ``expr`` (simple CASE form)."""

    def apply(k: _CaseBuilder) -> None:
        if expr is not None:
            k.operand = expr

    return apply


def case_when(test: Node | None, consequence: Node | None) -> CaseOption:
    def apply(k: _CaseBuilder) -> None:
        if test is not None and consequence is not None:
            k.whens.append((test, consequence))

    return apply


def case_else(alternative: Node | None) -> CaseOption:
    def apply(k: _CaseBuilder) -> None:
        if alternative is not None:
            k.default = alternative

    return apply


def case(*options: CaseOption) -> Case:
    k = _CaseBuilder()
    for opt in options:
        opt(k)
    if not k.whens:
        raise SQLSyntaxError(
            f"case: {ERR_MSG_INVALID_SYNTAX}",
            "case: at least one WHEN branch is required",
        )
    return Case(k.operand, tuple(k.whens), k.default)


# ---- Functions ----


def func(name: str, *args: Node) -> Function:
    return Function(name, tuple(args))


def count(expr: Node) -> Function:
    return func("COUNT", expr)


def sum_(expr: Node) -> Function:
    return func("SUM", expr)


def avg(expr: Node) -> Function:
    return func("AVG", expr)


def coalesce(*values: Node) -> Function:
    return func("COALESCE", *values)


def now() -> Function:
    return func("NOW")


def if_(test: Node, consequence: Node, alternative: Node) -> Function:
    return func("IF", test, consequence, alternative)


def min_(column: Node) -> Function:
    return func("MIN", column)


def max_(column: Node) -> Function:
    return func("MAX", column)


def is_null(expr: Node) -> Function:
    return func("ISNULL", expr)


def date(expr: Node) -> Function:
    return func("DATE", expr)


# ---- ORDER BY ----


def asc(column: str) -> OrderSpec:
    return OrderSpec(column, SortOrder.ASC)


def desc(column: str) -> OrderSpec:
    return OrderSpec(column, SortOrder.DESC)
