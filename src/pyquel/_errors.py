"""Exception hierarchy for SQL statement building and rendering."""


class QuelError(Exception):
    """Base exception for statement building and rendering errors.

    Provides dual messaging: a sanitized user-facing message and
    internal details for logging (CWE-209 prevention).
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class InvalidIdentifierError(QuelError):
    """Raised when an identifier is malformed or a reserved keyword."""


class InvalidLimitError(QuelError):
    """Raised when LIMIT or OFFSET is negative."""


class SQLSyntaxError(QuelError):
    """Raised when a tree cannot form a syntactically valid statement."""


class UnsupportedOperatorError(SQLSyntaxError):
    """Raised when a comparison or arithmetic operator is unknown."""


class UnsupportedTypeError(SQLSyntaxError):
    """Raised when a literal value cannot be encoded as SQL."""


class MaxDepthExceededError(QuelError):
    """Raised when the tree is nested deeper than the render limit."""


class MaxOutputLengthExceededError(QuelError):
    """Raised when SQL output length limit is exceeded."""


# Sanitized user-facing error message constants
ERR_MSG_INVALID_IDENTIFIER = "invalid identifier"
ERR_MSG_NEGATIVE_LIMIT = "negative limit"
ERR_MSG_INVALID_SYNTAX = "invalid syntax"
ERR_MSG_INVALID_OPERATOR = "unsupported operator"
ERR_MSG_UNSUPPORTED_TYPE = "unsupported literal type"
ERR_MSG_NOT_RELATIONAL = "expression is not a comparison or logical connective"
