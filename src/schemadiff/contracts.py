"""Public result models for schemadiff.

Plain, serializable aggregates with no embedded behavior beyond
derivation at construction time.
"""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schemadiff.kernel.diff import SchemaChange
from schemadiff.kernel.impact import breaking_changes, compute_impact_score, detect_breaking_changes


class IssueSeverity(str, Enum):
    """Severity of a compatibility issue."""
    ERROR = "Error"  # Breaking; must be addressed
    WARNING = "Warning"  # Potentially problematic; should be reviewed
    INFO = "Info"  # Generally safe


class CompatibilityIssue(BaseModel):
    """A compatibility issue found while comparing two schema versions."""
    severity: IssueSeverity
    description: str
    location: str

    model_config = ConfigDict(extra="forbid")


class CompatibilityReport(BaseModel):
    """Compatibility report for a pair of schema versions."""
    changes: List[SchemaChange]  # discovery order
    compatibility_score: int = Field(..., ge=0, le=100)
    is_compatible: bool  # compatibility_score >= 80
    issues: List[CompatibilityIssue]  # same order as changes
    metadata: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationError(BaseModel):
    """A single breaking change recorded by validate_changes()."""
    message: str
    path: str
    code: str  # dialect-prefixed, e.g. "API001", "SQL002", "PROTO001"

    model_config = ConfigDict(extra="forbid")


class ValidationResult(BaseModel):
    """Result of classifying a change sequence."""
    is_valid: bool  # True if no errors
    errors: List[ValidationError]
    context: Dict[str, str] = Field(default_factory=dict)  # aggregate counts

    model_config = ConfigDict(extra="forbid")


class MigrationPlan(BaseModel):
    """Plan for migrating between two schema versions.

    ``impact_score`` and ``is_breaking`` are derived from ``changes`` when
    the plan is constructed; values passed in for them are ignored.
    The plan is frozen afterwards.
    """
    source_version: str
    target_version: str
    changes: List[SchemaChange]
    impact_score: int = Field(0, ge=0, le=100)
    is_breaking: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _derive_impact(cls, data: Any) -> Any:
        if isinstance(data, dict):
            changes = list(data.get("changes") or [])
            data = dict(data)
            data["changes"] = changes
            data["impact_score"] = compute_impact_score(changes)
            data["is_breaking"] = detect_breaking_changes(changes)
        return data

    def breaking_changes(self) -> List[SchemaChange]:
        """Removals and modifications, in discovery order."""
        return breaking_changes(self.changes)
