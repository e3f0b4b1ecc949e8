"""
Core service model for code generation.

Converts a botocore-style API description into a normalized, read-only
shape graph that the generators walk. The graph may be cyclic: structures
reference other shapes by name, never by object.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Any
from enum import Enum

from .errors import SchemaError, ShapeLookupError


class ShapeType(Enum):
    """Shape kinds understood by the generators."""

    BLOB = "blob"
    BOOLEAN = "boolean"
    DOUBLE = "double"
    FLOAT = "float"
    INTEGER = "integer"
    LONG = "long"
    STRING = "string"
    TIMESTAMP = "timestamp"
    LIST = "list"
    MAP = "map"
    STRUCTURE = "structure"


@dataclass(frozen=True)
class Member:
    """A named occurrence of a shape inside a structure."""

    shape: str
    deprecated: bool = False
    streaming: bool = False
    documentation: Optional[str] = None

    # REST protocols bind members to parts of the HTTP request
    location: Optional[str] = None
    location_name: Optional[str] = None


@dataclass
class Shape:
    """One schema type definition."""

    shape_type: ShapeType
    documentation: Optional[str] = None
    exception: bool = False
    streaming: bool = False

    # For lists
    member: Optional[str] = None

    # For maps
    key: Optional[str] = None
    value: Optional[str] = None

    # For structures
    members: Dict[str, Member] = field(default_factory=dict)
    required: Set[str] = field(default_factory=set)
    payload: Optional[str] = None

    def is_required(self, member_name: str) -> bool:
        """Check if a member is in the required set."""
        return member_name in self.required

    def live_members(self) -> Dict[str, Member]:
        """Members that survive into generated code (non-deprecated)."""
        return {
            name: member
            for name, member in self.members.items()
            if not member.deprecated
        }

    def referenced_shapes(self) -> List[str]:
        """Names of the shapes this shape points at, in declaration order.

        Deprecated structure members are not followed.
        """
        if self.shape_type == ShapeType.LIST:
            return [self.member] if self.member else []
        if self.shape_type == ShapeType.MAP:
            return [name for name in (self.key, self.value) if name]
        if self.shape_type == ShapeType.STRUCTURE:
            return [member.shape for member in self.live_members().values()]
        return []


@dataclass
class Operation:
    """One remote procedure of a service."""

    name: str
    input: Optional[str] = None
    output: Optional[str] = None
    http_method: str = "POST"
    request_uri: str = "/"
    result_wrapper: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    documentation: Optional[str] = None


@dataclass
class Service:
    """Root entity for one API: its shapes, operations and protocol."""

    name: str
    protocol: str
    shapes: Dict[str, Shape] = field(default_factory=dict)
    operations: Dict[str, Operation] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def service_type_name(self) -> str:
        """Name of the generated capability trait."""
        return "".join(char for char in self.name if char.isalnum())

    @property
    def client_type_name(self) -> str:
        """Name of the generated concrete client."""
        return f"{self.service_type_name}Client"

    @property
    def endpoint_prefix(self) -> str:
        return self.metadata.get("endpointPrefix", self.service_type_name.lower())

    @property
    def signing_name(self) -> str:
        return self.metadata.get("signingName", self.endpoint_prefix)

    def get_shape(self, name: str) -> Shape:
        """
        Look up a shape by name.

        Raises:
            ShapeLookupError: If the service has no such shape
        """
        try:
            return self.shapes[name]
        except KeyError:
            raise ShapeLookupError(name, self.name) from None

    def shape_for_member(self, member: Member) -> Shape:
        """Get the shape a member refers to."""
        return self.get_shape(member.shape)

    def shape_names(self) -> List[str]:
        """Shape names in stable generation order."""
        return sorted(self.shapes)

    def operation_names(self) -> List[str]:
        """Operation names in stable generation order."""
        return sorted(self.operations)

    def is_input_shape(self, name: str) -> bool:
        """Check if any operation takes this shape as its input."""
        return any(op.input == name for op in self.operations.values())

    def is_streaming_shape(self, name: str) -> bool:
        """Check if any structure has a streaming member referencing this shape."""
        return any(
            shape.shape_type == ShapeType.STRUCTURE
            and any(
                member.shape == name and member.streaming
                for member in shape.members.values()
            )
            for shape in self.shapes.values()
        )


def convert_service_definition(
    definition: Dict[str, Any], name: Optional[str] = None
) -> Service:
    """
    Convert a botocore service description to the internal Service model.

    Args:
        definition: Parsed botocore JSON (metadata, operations, shapes)
        name: Declared service name; defaults to the abbreviation or full
            name found in the metadata

    Returns:
        Service: Normalized, read-only shape graph

    Raises:
        SchemaError: If the description is missing required sections or
            uses an unknown shape type
    """
    if not isinstance(definition, dict):
        raise SchemaError("Service definition must be a JSON object")

    metadata = definition.get("metadata")
    if not isinstance(metadata, dict):
        raise SchemaError("Service definition has no metadata section")

    protocol = metadata.get("protocol")
    if not protocol:
        raise SchemaError("Service metadata does not declare a protocol")

    service_name = (
        name
        or metadata.get("serviceAbbreviation")
        or metadata.get("serviceId")
        or metadata.get("serviceFullName")
    )
    if not service_name:
        raise SchemaError("Cannot determine a service name from metadata")

    raw_shapes = definition.get("shapes", {})
    shapes = {
        shape_name: _convert_shape(shape_name, raw_shape, raw_shapes)
        for shape_name, raw_shape in raw_shapes.items()
    }

    operations = {
        op_name: _convert_operation(op_name, raw_op)
        for op_name, raw_op in definition.get("operations", {}).items()
    }

    return Service(
        name=service_name,
        protocol=protocol,
        shapes=shapes,
        operations=operations,
        metadata=dict(metadata),
    )


def _convert_shape(
    name: str, raw: Dict[str, Any], raw_shapes: Dict[str, Any]
) -> Shape:
    """Convert a single botocore shape entry."""
    try:
        shape_type = ShapeType(raw["type"])
    except KeyError:
        raise SchemaError(f"Shape '{name}' has no type") from None
    except ValueError:
        raise SchemaError(f"Shape '{name}' has unknown type '{raw['type']}'") from None

    shape = Shape(
        shape_type=shape_type,
        documentation=raw.get("documentation"),
        exception=bool(raw.get("exception", False)),
        streaming=bool(raw.get("streaming", False)),
    )

    if shape_type == ShapeType.LIST:
        shape.member = raw.get("member", {}).get("shape")
    elif shape_type == ShapeType.MAP:
        shape.key = raw.get("key", {}).get("shape")
        shape.value = raw.get("value", {}).get("shape")
    elif shape_type == ShapeType.STRUCTURE:
        shape.required = set(raw.get("required", []))
        shape.payload = raw.get("payload")
        for member_name, raw_member in (raw.get("members") or {}).items():
            target = raw_shapes.get(raw_member.get("shape"), {})
            shape.members[member_name] = Member(
                shape=raw_member.get("shape"),
                deprecated=bool(raw_member.get("deprecated", False)),
                streaming=bool(
                    raw_member.get("streaming", False)
                    or target.get("streaming", False)
                ),
                documentation=raw_member.get("documentation"),
                location=raw_member.get("location"),
                location_name=raw_member.get("locationName"),
            )

    return shape


def _convert_operation(name: str, raw: Dict[str, Any]) -> Operation:
    """Convert a single botocore operation entry."""
    http = raw.get("http", {})
    output = raw.get("output") or {}

    return Operation(
        name=raw.get("name", name),
        input=(raw.get("input") or {}).get("shape"),
        output=output.get("shape"),
        http_method=http.get("method", "POST"),
        request_uri=http.get("requestUri", "/"),
        result_wrapper=output.get("resultWrapper"),
        errors=[error["shape"] for error in raw.get("errors", [])],
        documentation=raw.get("documentation"),
    )
