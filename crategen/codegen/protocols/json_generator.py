"""
Plain JSON protocol backend.

Requests are POSTed with an `x-amz-target` header naming the operation;
bodies are (de)serialized with serde derives, so no hand-written
serializers are generated.
"""

from typing import List

from ..core.generator import ProtocolGenerator
from ..core.schema import Member, Operation, Service, Shape, ShapeType
from ..core.types import RustTypeMapper
from ...logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE_PREFIX = "application/x-amz-json-"
DEFAULT_JSON_VERSION = "1.1"

SERDE_BLOB_ATTRIBUTE = """#[serde(
    deserialize_with="::rusoto_core::serialization::SerdeBlob::deserialize_blob",
    serialize_with="::rusoto_core::serialization::SerdeBlob::serialize_blob",
    default,
)]"""


def serde_field_attributes(
    member_name: str, member: Member, shape: Shape, service: Service
) -> List[str]:
    """
    Serde attributes for one struct field.

    Args:
        member_name: Wire name of the member
        member: The member
        shape: Structure the member belongs to
        service: Service being generated

    Returns:
        Attribute lines in declaration order
    """
    attributes = [f'#[serde(rename="{member_name}")]']
    shape_type = service.shape_for_member(member).shape_type

    if shape_type == ShapeType.BLOB:
        attributes.append(SERDE_BLOB_ATTRIBUTE)
    elif not shape.is_required(member_name):
        attributes.append('#[serde(skip_serializing_if="Option::is_none")]')

    if shape_type == ShapeType.STRING:
        attributes.append("#[serde(borrow)]")

    return attributes


class JsonGenerator(ProtocolGenerator):
    """Backend for the `json` protocol."""

    default_timestamp_type = "f64"

    @property
    def protocol_name(self) -> str:
        return "json"

    def generate_prelude(self, service: Service) -> str:
        return "\n".join(
            [
                "use serde_json;",
                "use rusoto_core::signature::SignedRequest;",
                "use serde_json::from_str;",
                "use serde_json::Value as SerdeJsonValue;",
            ]
        )

    def generate_method_signature(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        return self.render_signature(operation, types)

    def generate_method_impl(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        return self.render(
            "json_method.rs.j2",
            {
                "operation": operation,
                "op": self.describe_operation(operation, types),
                "signing_name": service.signing_name,
                "content_type": self.content_type(service),
                "target": self.target(operation, service),
                "add_comments": self.config.add_comments,
            },
        )

    def generate_struct_attributes(self, serialized: bool, deserialized: bool) -> str:
        derived = ["Default", "Debug", "Clone"]
        if serialized:
            derived.append("Serialize")
        if deserialized:
            derived.append("Deserialize")
        return f"#[derive({', '.join(derived)})]"

    def generate_field_attributes(
        self,
        member_name: str,
        member: Member,
        shape: Shape,
        service: Service,
        serde: bool,
    ) -> List[str]:
        # Serde attributes are only valid on types deriving a serde trait
        if not serde:
            return []
        return serde_field_attributes(member_name, member, shape, service)

    def content_type(self, service: Service) -> str:
        """Request content type, versioned by the service's jsonVersion."""
        prefix = self.config.custom.get(
            "content_type_prefix", DEFAULT_CONTENT_TYPE_PREFIX
        )
        return prefix + service.metadata.get("jsonVersion", DEFAULT_JSON_VERSION)

    def target(self, operation: Operation, service: Service) -> str:
        """Value of the x-amz-target header for an operation."""
        target_prefix = service.metadata.get("targetPrefix")
        if not target_prefix:
            logger.debug(
                "Service %s declares no targetPrefix; using bare operation names",
                service.name,
            )
            return operation.name
        return f"{target_prefix}.{operation.name}"
