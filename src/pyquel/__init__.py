"""pyquel - Build parameterized SQL statements from composable expression nodes."""

from __future__ import annotations

__version__ = "0.1.0"

from pyquel._constants import NULL, NullSentinel
from pyquel._delete import (
    Delete,
    delete,
    delete_alias,
    delete_returning,
    delete_where,
)
from pyquel._errors import (
    InvalidIdentifierError,
    InvalidLimitError,
    MaxDepthExceededError,
    MaxOutputLengthExceededError,
    QuelError,
    SQLSyntaxError,
    UnsupportedOperatorError,
    UnsupportedTypeError,
)
from pyquel._insert import (
    Insert,
    insert,
    insert_columns,
    insert_returning,
    insert_values,
)
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
    add,
    alias,
    all_,
    and_,
    any_,
    arg,
    asc,
    avg,
    between,
    bit_and,
    bit_or,
    bit_xor,
    case,
    case_else,
    case_operand,
    case_when,
    coalesce,
    count,
    date,
    desc,
    divide,
    equal,
    exists,
    func,
    greater_or_equal,
    greater_than,
    ident,
    if_,
    in_,
    interval,
    is_not_null_test,
    is_null,
    is_null_test,
    is_relational,
    less_or_equal,
    less_than,
    like,
    literal,
    max_,
    min_,
    modulo,
    multiply,
    node_list,
    not_,
    not_equal,
    not_in,
    not_like,
    now,
    or_,
    subtract,
    sum_,
    using,
)
from pyquel._operators import CompareOp, JoinType, MathOp, SortOrder, TimeUnit
from pyquel._renderer import Result, SQLMarshaler, render
from pyquel._select import (
    CommonTableExpr,
    QueryBlock,
    Select,
    Union,
    distinct,
    select,
    select_alias,
    select_column,
    select_columns,
    select_distinct,
    select_group_by,
    select_having,
    select_limit,
    select_offset,
    select_order_by,
    select_where,
    select_with,
    union,
    union_all,
)
from pyquel._update import (
    Update,
    update,
    update_alias,
    update_column,
    update_returning,
    update_where,
)
from pyquel._utils import (
    default_keywords,
    is_valid_identifier,
    set_default_keywords,
)
from pyquel.dialect import (
    DefaultDialect,
    Dialect,
    DuckDBDialect,
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    get_dialect,
)

__all__ = [
    "render",
    "Result",
    "SQLMarshaler",
    "NULL",
    "NullSentinel",
    # errors
    "QuelError",
    "InvalidIdentifierError",
    "InvalidLimitError",
    "SQLSyntaxError",
    "UnsupportedOperatorError",
    "UnsupportedTypeError",
    "MaxDepthExceededError",
    "MaxOutputLengthExceededError",
    # keywords
    "default_keywords",
    "set_default_keywords",
    "is_valid_identifier",
    # dialects
    "Dialect",
    "DefaultDialect",
    "DuckDBDialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "get_dialect",
    # operators
    "CompareOp",
    "JoinType",
    "MathOp",
    "SortOrder",
    "TimeUnit",
    # nodes
    "Node",
    "Identifier",
    "Literal",
    "Argument",
    "NodeList",
    "Alias",
    "Arithmetic",
    "Interval",
    "Comparison",
    "Between",
    "Not",
    "And",
    "Or",
    "Case",
    "AnyOf",
    "AllOf",
    "Exists",
    "Function",
    "OrderSpec",
    "is_relational",
    "ident",
    "literal",
    "arg",
    "node_list",
    "using",
    "alias",
    "add",
    "subtract",
    "multiply",
    "divide",
    "modulo",
    "bit_and",
    "bit_or",
    "bit_xor",
    "interval",
    "equal",
    "not_equal",
    "less_than",
    "less_or_equal",
    "greater_than",
    "greater_or_equal",
    "like",
    "not_like",
    "in_",
    "not_in",
    "is_null_test",
    "is_not_null_test",
    "between",
    "not_",
    "and_",
    "or_",
    "case",
    "case_operand",
    "case_when",
    "case_else",
    "any_",
    "all_",
    "exists",
    "func",
    "count",
    "sum_",
    "avg",
    "coalesce",
    "now",
    "if_",
    "min_",
    "max_",
    "is_null",
    "date",
    "asc",
    "desc",
    # statements
    "CommonTableExpr",
    "QueryBlock",
    "Select",
    "Union",
    "Insert",
    "Update",
    "Delete",
    "select",
    "distinct",
    "select_alias",
    "select_column",
    "select_columns",
    "select_distinct",
    "select_group_by",
    "select_having",
    "select_limit",
    "select_offset",
    "select_order_by",
    "select_where",
    "select_with",
    "union",
    "union_all",
    "insert",
    "insert_columns",
    "insert_values",
    "insert_returning",
    "update",
    "update_alias",
    "update_column",
    "update_where",
    "update_returning",
    "delete",
    "delete_alias",
    "delete_where",
    "delete_returning",
]
