"""Validation code constants for SchemaAnalyzer.validate_changes().

These constants prevent stringly-typed error codes and ensure
client code uses the correct validation codes. Codes are dialect-prefixed;
the numeric suffix is what severity is recovered from downstream.
"""

from enum import Enum


class ValidationCode(str, Enum):
    """Validation error codes, one family per dialect."""

    # OpenAPI
    API_BREAKING_REMOVAL = "API001"
    API_BREAKING_MODIFICATION = "API002"

    # SQL DDL
    SQL_ERROR = "SQL001"
    SQL_WARNING = "SQL002"
    SQL_INFO = "SQL003"

    # Protobuf
    PROTO_ERROR = "PROTO001"
    PROTO_WARNING = "PROTO002"
    PROTO_INFO = "PROTO003"
