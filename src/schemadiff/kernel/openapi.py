"""OpenAPI structural diff.

Compared independently, in this order:

(a) paths: added / removed per path; shared paths compare operations
(b) the seven HTTP methods of a shared path: added / removed / compared
(c) parameters of a shared operation, matched by name regardless of "in"
(d) request body presence and equality
(e) responses per status code, presence and equality
(f) component schemas: added / removed / flat equality (no deep diff)
(g) security schemes: same flat rule as (f)

Reference-valued (``$ref``) path items and parameters are skipped, never
resolved.

A parameter that turns from optional to required is the one pattern with
its own weight: its description always contains "optional to required",
which the scorer keys on.
"""

from typing import Any, Dict, List, Optional

import yaml

from schemadiff._internal.canonical_json import json_equal
from schemadiff.codes import ValidationCode
from schemadiff.contracts import IssueSeverity, ValidationError
from schemadiff.errors import ParseError
from .analyzer import SchemaAnalyzer
from .diff import ChangeType, SchemaChange, match_by_key
from .schema import SchemaFormat
from .scoring import OPENAPI_REQUIRED_PARAMETER_WEIGHT, OPENAPI_WEIGHTS


HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")

REQUIRED_PARAMETER_MARKER = "optional to required"


def _is_reference(value: Any) -> bool:
    return isinstance(value, dict) and "$ref" in value


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _change(change_type: ChangeType, location: str, description: str, **metadata: str) -> SchemaChange:
    return SchemaChange(
        change_type=change_type,
        location=location,
        description=description,
        metadata=dict(metadata),
    )


def compare_paths(old_paths: Dict[str, Any], new_paths: Dict[str, Any]) -> List[SchemaChange]:
    """Path-level and operation-level changes."""
    changes: List[SchemaChange] = []

    for pair in match_by_key(old_paths.items(), new_paths.items(), key=lambda item: item[0]):
        path = pair.key
        old_item = pair.old[1] if pair.old is not None else None
        new_item = pair.new[1] if pair.new is not None else None
        if _is_reference(old_item) or _is_reference(new_item):
            continue

        if pair.removed:
            changes.append(_change(
                ChangeType.REMOVAL, f"/paths{path}",
                f"Path '{path}' was removed", path=path,
            ))
        elif pair.added:
            changes.append(_change(
                ChangeType.ADDITION, f"/paths{path}",
                f"New path '{path}' was added", path=path,
            ))
        else:
            changes.extend(compare_operations(path, _mapping(old_item), _mapping(new_item)))

    return changes


def compare_operations(path: str, old_item: Dict[str, Any], new_item: Dict[str, Any]) -> List[SchemaChange]:
    """Compare each HTTP method of one path independently."""
    changes: List[SchemaChange] = []

    for method in HTTP_METHODS:
        old_op = old_item.get(method)
        new_op = new_item.get(method)
        location = f"/paths{path}/{method}"

        if old_op is not None and new_op is not None:
            changes.extend(compare_operation_details(path, method, _mapping(old_op), _mapping(new_op)))
        elif old_op is not None:
            changes.append(_change(
                ChangeType.REMOVAL, location,
                f"HTTP method '{method}' was removed from '{path}'", path=path, method=method,
            ))
        elif new_op is not None:
            changes.append(_change(
                ChangeType.ADDITION, location,
                f"HTTP method '{method}' was added to '{path}'", path=path, method=method,
            ))

    return changes


def compare_operation_details(
    path: str,
    method: str,
    old_op: Dict[str, Any],
    new_op: Dict[str, Any],
) -> List[SchemaChange]:
    """Parameters, then request body, then responses."""
    changes: List[SchemaChange] = []
    changes.extend(compare_parameters(path, method, old_op.get("parameters") or [], new_op.get("parameters") or []))
    changes.extend(compare_request_bodies(path, method, old_op.get("requestBody"), new_op.get("requestBody")))
    changes.extend(compare_responses(path, method, _mapping(old_op.get("responses")), _mapping(new_op.get("responses"))))
    return changes


def _inline_parameters(params: List[Any]) -> List[Dict[str, Any]]:
    return [p for p in params if isinstance(p, dict) and not _is_reference(p)]


def compare_parameters(
    path: str,
    method: str,
    old_params: List[Any],
    new_params: List[Any],
) -> List[SchemaChange]:
    """Match parameters by name; only optional -> required is a modification.

    Required -> optional relaxes the contract and is not reported.
    """
    changes: List[SchemaChange] = []
    base = f"/paths{path}/{method}/parameters"

    pairs = match_by_key(
        _inline_parameters(old_params),
        _inline_parameters(new_params),
        key=lambda p: str(p.get("name", "")),
    )
    for pair in pairs:
        name = pair.key
        location = f"{base}/{name}"
        if pair.removed:
            changes.append(_change(
                ChangeType.REMOVAL, location,
                f"Parameter '{name}' was removed", path=path, method=method, parameter=name,
            ))
        elif pair.added:
            changes.append(_change(
                ChangeType.ADDITION, location,
                f"Parameter '{name}' was added", path=path, method=method, parameter=name,
            ))
        else:
            # Only a literal boolean true counts; "false" strings stay optional
            old_required = pair.old.get("required") is True
            new_required = pair.new.get("required") is True
            if not old_required and new_required:
                changes.append(_change(
                    ChangeType.MODIFICATION, location,
                    f"Parameter '{name}' changed from {REQUIRED_PARAMETER_MARKER}",
                    path=path, method=method, parameter=name,
                ))

    return changes


def compare_request_bodies(path: str, method: str, old_body: Any, new_body: Any) -> List[SchemaChange]:
    location = f"/paths{path}/{method}/requestBody"
    if old_body is not None and new_body is None:
        return [_change(ChangeType.REMOVAL, location, "Request body was removed", path=path, method=method)]
    if old_body is None and new_body is not None:
        return [_change(ChangeType.ADDITION, location, "Request body was added", path=path, method=method)]
    if old_body is not None and not json_equal(old_body, new_body):
        return [_change(ChangeType.MODIFICATION, location, "Request body was modified", path=path, method=method)]
    return []


def _status_codes(responses: Dict[Any, Any]) -> List[tuple]:
    # YAML turns unquoted status codes into ints; extensions are not responses
    return [
        (str(code), response)
        for code, response in responses.items()
        if not str(code).startswith("x-")
    ]


def compare_responses(
    path: str,
    method: str,
    old_responses: Dict[Any, Any],
    new_responses: Dict[Any, Any],
) -> List[SchemaChange]:
    changes: List[SchemaChange] = []
    base = f"/paths{path}/{method}/responses"

    pairs = match_by_key(
        _status_codes(old_responses),
        _status_codes(new_responses),
        key=lambda item: item[0],
        same=lambda a, b: json_equal(a[1], b[1]),
    )
    for pair in pairs:
        status = pair.key
        location = f"{base}/{status}"
        if pair.removed:
            changes.append(_change(
                ChangeType.REMOVAL, location, f"Response '{status}' was removed",
                path=path, method=method, status=status,
            ))
        elif pair.added:
            changes.append(_change(
                ChangeType.ADDITION, location, f"Response '{status}' was added",
                path=path, method=method, status=status,
            ))
        else:
            changes.append(_change(
                ChangeType.MODIFICATION, location, f"Response '{status}' was modified",
                path=path, method=method, status=status,
            ))

    return changes


def compare_component_schemas(old_schemas: Dict[str, Any], new_schemas: Dict[str, Any]) -> List[SchemaChange]:
    """Flat comparison of named component schemas."""
    changes: List[SchemaChange] = []

    pairs = match_by_key(
        old_schemas.items(),
        new_schemas.items(),
        key=lambda item: item[0],
        same=lambda a, b: json_equal(a[1], b[1]),
    )
    for pair in pairs:
        name = pair.key
        location = f"/components/schemas/{name}"
        if pair.removed:
            changes.append(_change(ChangeType.REMOVAL, location, f"Schema '{name}' was removed", schema=name))
        elif pair.added:
            changes.append(_change(ChangeType.ADDITION, location, f"Schema '{name}' was added", schema=name))
        else:
            # Any difference in the body is one flat modification
            changes.append(_change(ChangeType.MODIFICATION, location, f"Schema '{name}' was modified", schema=name))

    return changes


def compare_security_schemes(old_schemes: Dict[str, Any], new_schemes: Dict[str, Any]) -> List[SchemaChange]:
    """Flat comparison of named security schemes."""
    changes: List[SchemaChange] = []

    pairs = match_by_key(
        old_schemes.items(),
        new_schemes.items(),
        key=lambda item: item[0],
        same=lambda a, b: json_equal(a[1], b[1]),
    )
    for pair in pairs:
        name = pair.key
        location = f"/components/securitySchemes/{name}"
        if pair.removed:
            description = f"Security scheme '{name}' was removed"
            change_type = ChangeType.REMOVAL
        elif pair.added:
            description = f"Security scheme '{name}' was added"
            change_type = ChangeType.ADDITION
        else:
            description = f"Security scheme '{name}' was modified"
            change_type = ChangeType.MODIFICATION
        changes.append(_change(change_type, location, description, security_scheme=name))

    return changes


def diff_openapi(old: Dict[str, Any], new: Dict[str, Any]) -> List[SchemaChange]:
    """Full structural diff of two parsed OpenAPI documents."""
    changes = compare_paths(_mapping(old.get("paths")), _mapping(new.get("paths")))

    old_components = old.get("components")
    new_components = new.get("components")
    # Components are only compared when both documents declare them
    if isinstance(old_components, dict) and isinstance(new_components, dict):
        changes.extend(compare_component_schemas(
            _mapping(old_components.get("schemas")),
            _mapping(new_components.get("schemas")),
        ))
        changes.extend(compare_security_schemes(
            _mapping(old_components.get("securitySchemes")),
            _mapping(new_components.get("securitySchemes")),
        ))

    return changes


class OpenApiAnalyzer(SchemaAnalyzer[Dict[str, Any]]):
    """Analyzes OpenAPI changes (YAML or JSON documents)."""

    format = SchemaFormat.OPENAPI
    weights = OPENAPI_WEIGHTS
    severity_by_code = {
        ValidationCode.API_BREAKING_REMOVAL.value: IssueSeverity.ERROR,
        ValidationCode.API_BREAKING_MODIFICATION.value: IssueSeverity.ERROR,
    }

    def parse(self, content: str) -> Dict[str, Any]:
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ParseError(str(e), dialect="OpenAPI") from e

        if not isinstance(document, dict):
            raise ParseError("document root must be a mapping", dialect="OpenAPI")
        if "openapi" not in document:
            raise ParseError("missing 'openapi' version field", dialect="OpenAPI")
        if not isinstance(document.get("info"), dict):
            raise ParseError("missing or invalid 'info' object", dialect="OpenAPI")
        if "paths" in document and not isinstance(document["paths"], dict):
            raise ParseError("'paths' must be a mapping", dialect="OpenAPI")
        return document

    def compare(self, old_doc: Dict[str, Any], new_doc: Dict[str, Any]) -> List[SchemaChange]:
        return diff_openapi(old_doc, new_doc)

    def change_weight(self, change: SchemaChange) -> int:
        if change.change_type == ChangeType.MODIFICATION and REQUIRED_PARAMETER_MARKER in change.description:
            return OPENAPI_REQUIRED_PARAMETER_WEIGHT
        return super().change_weight(change)

    def report_metadata(self, old_doc: Dict[str, Any], new_doc: Dict[str, Any]) -> Dict[str, str]:
        return {
            "new_version": str(new_doc["info"].get("version", "")),
            "old_version": str(old_doc["info"].get("version", "")),
        }

    def validate_change(self, change: SchemaChange) -> Optional[ValidationError]:
        """Pattern rules on location/description text, nothing semantic.

        - every Removal -> API001
        - a Modification -> API002 when the location mentions "parameters"
          and the description "required", or the location mentions
          "schema" and the description "type"
        - everything else -> no error
        """
        if change.change_type == ChangeType.REMOVAL:
            return ValidationError(
                message=f"Breaking change: {change.description}",
                path=change.location,
                code=ValidationCode.API_BREAKING_REMOVAL.value,
            )
        if change.change_type == ChangeType.MODIFICATION:
            if ("parameters" in change.location and "required" in change.description) or (
                "schema" in change.location and "type" in change.description
            ):
                return ValidationError(
                    message=f"Breaking change: {change.description}",
                    path=change.location,
                    code=ValidationCode.API_BREAKING_MODIFICATION.value,
                )
        return None
