"""Analyzer contract and the generic comparison engine.

Every dialect runs the same pipeline:

    parse (external parser) -> compare (dialect diff strategy)
        -> score (dialect weight table) -> validate (dialect rules)

Subclasses supply only the dialect-specific pieces: ``parse``,
``compare``, ``weights`` (or ``change_weight``), ``validate_change`` and
the code -> severity table. Aggregation is shared so the four dialects
cannot drift apart in how they package results.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from schemadiff.contracts import (
    CompatibilityIssue,
    CompatibilityReport,
    IssueSeverity,
    MigrationPlan,
    ValidationError,
    ValidationResult,
)
from .diff import ChangeType, SchemaChange, count_by_type
from .schema import Schema, SchemaFormat
from .scoring import ScoringWeights, is_compatible, saturating_score

logger = logging.getLogger(__name__)

D = TypeVar("D")


def build_validation_context(changes: Sequence[SchemaChange]) -> Dict[str, str]:
    """Aggregate change counts, as strings."""
    counts = count_by_type(changes)
    return {
        "additions": str(counts[ChangeType.ADDITION]),
        "removals": str(counts[ChangeType.REMOVAL]),
        "modifications": str(counts[ChangeType.MODIFICATION]),
        "renames": str(counts[ChangeType.RENAME]),
        "total_changes": str(len(changes)),
    }


class SchemaAnalyzer(ABC, Generic[D]):
    """Compare two versions of a schema in one dialect.

    Analyzers are stateless; one instance may serve any number of
    concurrent comparisons.
    """

    format: SchemaFormat
    weights: ScoringWeights
    # Validation code -> issue severity; unknown codes map to Info
    severity_by_code: Dict[str, IssueSeverity] = {}

    @abstractmethod
    def parse(self, content: str) -> D:
        """Parse raw schema text, raising ParseError (or a subclass)."""

    @abstractmethod
    def compare(self, old_doc: D, new_doc: D) -> List[SchemaChange]:
        """Diff two parsed documents into an ordered change list."""

    @abstractmethod
    def validate_change(self, change: SchemaChange) -> Optional[ValidationError]:
        """Classify one change; None when it is not a validation error."""

    def change_weight(self, change: SchemaChange) -> int:
        """Score deduction for one change."""
        return self.weights.for_type(change.change_type)

    def report_metadata(self, old_doc: D, new_doc: D) -> Dict[str, str]:
        """Extra report metadata derived from the parsed documents."""
        return {}

    # Shared pipeline

    def _parse_pair(self, old: Schema, new: Schema) -> tuple[Any, Any]:
        old_doc = self.parse(old.content)
        new_doc = self.parse(new.content)
        logger.debug(
            "Parsed %s schemas %s -> %s", self.format.value, old.version, new.version
        )
        return old_doc, new_doc

    def _compare_docs(self, old_doc: D, new_doc: D) -> List[SchemaChange]:
        changes = self.compare(old_doc, new_doc)
        logger.debug("Detected %d %s changes", len(changes), self.format.value)
        return changes

    def detect_changes(self, old: Schema, new: Schema) -> List[SchemaChange]:
        """Parse both schemas and return the ordered change sequence."""
        old_doc, new_doc = self._parse_pair(old, new)
        return self._compare_docs(old_doc, new_doc)

    def compatibility_score(self, changes: Sequence[SchemaChange]) -> int:
        """Cumulative 0..100 score for a change sequence."""
        return saturating_score(self.change_weight(c) for c in changes)

    def issues_from(self, validation: ValidationResult) -> List[CompatibilityIssue]:
        """Recover severity-classified issues from validation codes."""
        return [
            CompatibilityIssue(
                severity=self.severity_by_code.get(err.code, IssueSeverity.INFO),
                description=err.message,
                location=err.path,
            )
            for err in validation.errors
        ]

    def analyze_compatibility(self, old: Schema, new: Schema) -> CompatibilityReport:
        """Compare two schema versions and score their compatibility.

        Raises:
            ParseError: If either schema's content cannot be parsed
        """
        old_doc, new_doc = self._parse_pair(old, new)
        changes = self._compare_docs(old_doc, new_doc)

        score = self.compatibility_score(changes)
        validation = self.validate_changes(changes)
        logger.debug("%s compatibility score %d", self.format.value, score)

        return CompatibilityReport(
            changes=changes,
            compatibility_score=score,
            is_compatible=is_compatible(score),
            issues=self.issues_from(validation),
            metadata=self.report_metadata(old_doc, new_doc),
        )

    def generate_migration_path(self, old: Schema, new: Schema) -> MigrationPlan:
        """Package the detected changes as a migration plan.

        Raises:
            ParseError: If either schema's content cannot be parsed
        """
        changes = self.detect_changes(old, new)
        return MigrationPlan(
            source_version=old.version,
            target_version=new.version,
            changes=changes,
        )

    def validate_changes(self, changes: Sequence[SchemaChange]) -> ValidationResult:
        """Classify an already-computed change sequence. Never parses."""
        errors: List[ValidationError] = []
        for change in changes:
            error = self.validate_change(change)
            if error is not None:
                errors.append(error)

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            context=build_validation_context(changes),
        )
