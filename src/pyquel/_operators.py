"""Operator tables and their SQL spellings."""

import enum


class CompareOp(enum.StrEnum):
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    LESS = "less"
    LESS_OR_EQUAL = "less_or_equal"
    GREATER = "greater"
    GREATER_OR_EQUAL = "greater_or_equal"
    LIKE = "like"
    NOT_LIKE = "not_like"
    IN = "in"
    NOT_IN = "not_in"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"


COMPARISON_OPERATORS: dict[str, str] = {
    CompareOp.EQUAL: "=",
    CompareOp.NOT_EQUAL: "<>",
    CompareOp.LESS: "<",
    CompareOp.LESS_OR_EQUAL: "<=",
    CompareOp.GREATER: ">",
    CompareOp.GREATER_OR_EQUAL: ">=",
    CompareOp.LIKE: "LIKE",
    CompareOp.NOT_LIKE: "NOT LIKE",
    CompareOp.IN: "IN",
    CompareOp.NOT_IN: "NOT IN",
    CompareOp.IS_NULL: "IS NULL",
    CompareOp.IS_NOT_NULL: "IS NOT NULL",
}

# Operators that take no right operand
UNARY_COMPARISON_OPS = {CompareOp.IS_NULL, CompareOp.IS_NOT_NULL}

# Operators whose right operand must be a list or a sub-select
MEMBERSHIP_OPS = {CompareOp.IN, CompareOp.NOT_IN}


class MathOp(enum.StrEnum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULO = "modulo"
    BIT_AND = "bit_and"
    BIT_OR = "bit_or"
    BIT_XOR = "bit_xor"


MATH_OPERATORS: dict[str, str] = {
    MathOp.ADD: "+",
    MathOp.SUBTRACT: "-",
    MathOp.MULTIPLY: "*",
    MathOp.DIVIDE: "/",
    MathOp.MODULO: "%",
    MathOp.BIT_AND: "&",
    MathOp.BIT_OR: "|",
    MathOp.BIT_XOR: "^",
}


class JoinType(enum.StrEnum):
    INNER_LEFT = "inner_left"
    INNER_RIGHT = "inner_right"
    OUTER_LEFT = "outer_left"
    OUTER_RIGHT = "outer_right"


# Inner joins are symmetric, both sides spell the same keyword
JOIN_KEYWORDS: dict[str, str] = {
    JoinType.INNER_LEFT: "INNER JOIN",
    JoinType.INNER_RIGHT: "INNER JOIN",
    JoinType.OUTER_LEFT: "LEFT OUTER JOIN",
    JoinType.OUTER_RIGHT: "RIGHT OUTER JOIN",
}


class TimeUnit(enum.StrEnum):
    MICROSECOND = "microsecond"
    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class SortOrder(enum.StrEnum):
    ASC = "ASC"
    DESC = "DESC"
