"""Schema value passed into analyzers."""

from enum import Enum
from pydantic import BaseModel, ConfigDict


class SchemaFormat(str, Enum):
    """Supported schema dialects."""
    JSON_SCHEMA = "JsonSchema"
    PROTOBUF = "Protobuf"
    OPENAPI = "OpenAPI"
    SQL_DDL = "SqlDDL"


class Schema(BaseModel):
    """One version of a schema document.

    ``content`` is the raw dialect text; ``version`` is an opaque
    semantic-version-shaped label that is carried into migration plans
    but never ordered or interpreted.
    """
    format: SchemaFormat
    content: str
    version: str

    model_config = ConfigDict(frozen=True, extra="forbid")
