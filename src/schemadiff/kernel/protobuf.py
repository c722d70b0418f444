"""Protobuf structural diff over text-format FileDescriptorProto documents.

Messages are matched by name across the two descriptor sets; fields of a
matched message are matched by name. Only the declared field type is
compared: field numbers, labels, options and nested messages are not.

Renames are never produced by this dialect and have no weight; scoring or
validating one raises NotImplementedError.
"""

from typing import List, Optional

from google.protobuf import descriptor_pb2, text_format

from schemadiff.codes import ValidationCode
from schemadiff.contracts import IssueSeverity, ValidationError
from schemadiff.errors import ProtobufError
from .analyzer import SchemaAnalyzer
from .diff import ChangeType, SchemaChange, match_by_key
from .schema import SchemaFormat
from .scoring import PROTOBUF_WEIGHTS


def field_type_name(field: descriptor_pb2.FieldDescriptorProto) -> str:
    """Declared type tag, e.g. ``TYPE_STRING``."""
    return descriptor_pb2.FieldDescriptorProto.Type.Name(field.type)


def diff_descriptors(
    old: descriptor_pb2.FileDescriptorProto,
    new: descriptor_pb2.FileDescriptorProto,
    path: str = "",
) -> List[SchemaChange]:
    """Top-level message and field changes between two descriptor sets."""
    changes: List[SchemaChange] = []

    for pair in match_by_key(old.message_type, new.message_type, key=lambda m: m.name):
        name = pair.key
        if pair.removed:
            changes.append(SchemaChange(
                change_type=ChangeType.REMOVAL,
                location=f"{path}/{name}",
                description=f"Message '{name}' was removed",
                metadata={"message": name},
            ))
        elif pair.added:
            changes.append(SchemaChange(
                change_type=ChangeType.ADDITION,
                location=f"{path}/{name}",
                description=f"Message '{name}' was added",
                metadata={"message": name},
            ))
        else:
            changes.extend(diff_fields(pair.old, pair.new, path))

    return changes


def diff_fields(
    old_msg: descriptor_pb2.DescriptorProto,
    new_msg: descriptor_pb2.DescriptorProto,
    path: str = "",
) -> List[SchemaChange]:
    changes: List[SchemaChange] = []
    message = old_msg.name

    for pair in match_by_key(old_msg.field, new_msg.field, key=lambda f: f.name):
        name = pair.key
        location = f"{path}/{message}/{name}"
        if pair.removed:
            changes.append(SchemaChange(
                change_type=ChangeType.REMOVAL,
                location=location,
                description=f"Field '{name}' was removed",
                metadata={"message": message, "field": name},
            ))
        elif pair.added:
            changes.append(SchemaChange(
                change_type=ChangeType.ADDITION,
                location=location,
                description=f"New field '{name}' was added",
                metadata={"message": message, "field": name},
            ))
        else:
            old_type = field_type_name(pair.old)
            new_type = field_type_name(pair.new)
            if old_type != new_type:
                changes.append(SchemaChange(
                    change_type=ChangeType.MODIFICATION,
                    location=location,
                    description=f"Field '{name}' type changed from {old_type} to {new_type}",
                    metadata={
                        "message": message,
                        "field": name,
                        "old_type": old_type,
                        "new_type": new_type,
                    },
                ))

    return changes


class ProtobufAnalyzer(SchemaAnalyzer[descriptor_pb2.FileDescriptorProto]):
    """Analyzes Protobuf descriptor changes."""

    format = SchemaFormat.PROTOBUF
    weights = PROTOBUF_WEIGHTS
    severity_by_code = {
        ValidationCode.PROTO_ERROR.value: IssueSeverity.ERROR,
        ValidationCode.PROTO_WARNING.value: IssueSeverity.WARNING,
        ValidationCode.PROTO_INFO.value: IssueSeverity.INFO,
    }
    code_by_severity = {severity: code for code, severity in severity_by_code.items()}

    def parse(self, content: str) -> descriptor_pb2.FileDescriptorProto:
        descriptor = descriptor_pb2.FileDescriptorProto()
        try:
            text_format.Parse(content, descriptor)
        except text_format.ParseError as e:
            raise ProtobufError(str(e)) from e
        return descriptor

    def compare(
        self,
        old_doc: descriptor_pb2.FileDescriptorProto,
        new_doc: descriptor_pb2.FileDescriptorProto,
    ) -> List[SchemaChange]:
        return diff_descriptors(old_doc, new_doc)

    def validate_change(self, change: SchemaChange) -> Optional[ValidationError]:
        if change.change_type == ChangeType.REMOVAL:
            severity = IssueSeverity.ERROR
            message = f"Breaking change: {change.description}"
        elif change.change_type == ChangeType.MODIFICATION:
            severity = IssueSeverity.WARNING
            message = f"Potential compatibility issue: {change.description}"
        elif change.change_type == ChangeType.RENAME:
            raise NotImplementedError("Validation of Rename changes is not implemented for Protobuf")
        else:
            return None

        return ValidationError(
            message=message,
            path=change.location,
            code=self.code_by_severity[severity],
        )
