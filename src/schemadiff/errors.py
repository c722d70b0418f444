"""Exception taxonomy for schema comparison.

Every failure is terminal for the single comparison call that raised it.
Parser-specific exceptions are wrapped (``raise ... from exc``) so the
original error stays reachable through ``__cause__``.
"""


class SchemaDiffError(Exception):
    """Base class for all schemadiff errors."""
    pass


class ParseError(SchemaDiffError):
    """Schema content could not be parsed under its declared dialect."""

    def __init__(self, message: str, dialect: str | None = None):
        self.dialect = dialect
        prefix = f"Failed to parse {dialect} schema" if dialect else "Failed to parse schema"
        super().__init__(f"{prefix}: {message}")


class JsonError(ParseError):
    """JSON text could not be decoded."""

    def __init__(self, message: str):
        super().__init__(message, dialect="JSON")


class ProtobufError(ParseError):
    """Protobuf text-format descriptor could not be decoded."""

    def __init__(self, message: str):
        super().__init__(message, dialect="Protobuf")


class ComparisonError(SchemaDiffError):
    """Two parsed documents could not be compared.

    Part of the taxonomy; none of the built-in dialects raise it today.
    """
    pass


class InvalidFormat(SchemaDiffError):
    """A schema declared a format no analyzer handles, or formats disagree."""
    pass


class SchemaIOError(SchemaDiffError, OSError):
    """Schema content could not be read from disk."""
    pass
