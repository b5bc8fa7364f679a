"""Resource limits and sentinel values for SQL rendering."""

DEFAULT_MAX_RECURSION_DEPTH = 250
"""Maximum node nesting depth during rendering (CWE-674 prevention).

Kept below the depth at which the interpreter's own recursion limit would
stop the renderer.
"""

DEFAULT_MAX_SQL_OUTPUT_LENGTH: int | None = None
"""Maximum generated SQL string length. ``None`` means no cap."""


class NullSentinel(str):
    """Marker substituted into the parameter list for an absent argument value.

    It compares equal to the text ``"null"`` but is a distinct singleton, so an
    execution layer can test ``value is NULL`` and bind a real SQL NULL.
    """

    _instance: "NullSentinel | None" = None

    def __new__(cls) -> "NullSentinel":
        if cls._instance is None:
            cls._instance = super().__new__(cls, "null")
        return cls._instance

    def __repr__(self) -> str:
        return "NULL"

    def __reduce__(self):
        return (NullSentinel, ())


NULL = NullSentinel()
