"""
Query protocol backend (also serves `ec2`).

Requests are form-encoded `Params` carrying `Action` and `Version`;
responses are XML documents wrapped in a `{Operation}Result` element.
"""

from typing import Any, Dict, Optional

from ..core.generator import ProtocolGenerator
from ..core.naming import field_name
from ..core.schema import Operation, Service, Shape, ShapeType
from ..core.types import RustTypeMapper
from .xml_common import DESERIALIZER_NEXT, XML_PRELUDE, generate_xml_deserializer


def param_put(shape: Shape, type_name: str, place: str, key: str) -> str:
    """
    Statement storing one value into `params`.

    Args:
        shape: Shape of the value
        type_name: Sanitized name of that shape
        place: Rust expression holding the value
        key: Rust expression for the parameter name
    """
    if shape.shape_type in (ShapeType.STRUCTURE, ShapeType.LIST, ShapeType.MAP):
        return f"{type_name}Serializer::serialize(params, {key}, &{place});"
    if shape.shape_type == ShapeType.BLOB:
        return f"params.put({key}, ::std::str::from_utf8(&{place}).unwrap());"
    if shape.shape_type == ShapeType.STRING:
        return f"params.put({key}, &{place});"
    return f"params.put({key}, &{place}.to_string());"


class QueryGenerator(ProtocolGenerator):
    """Backend for the `query` and `ec2` protocols."""

    @property
    def protocol_name(self) -> str:
        return "query"

    def generate_prelude(self, service: Service) -> str:
        imports = list(XML_PRELUDE)
        imports.insert(3, "use rusoto_core::param::{Params, ServiceParams};")
        return "\n".join(imports) + "\n\n" + DESERIALIZER_NEXT

    def generate_method_signature(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        return self.render_signature(operation, types)

    def generate_method_impl(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        return self.render(
            "query_method.rs.j2",
            {
                "operation": operation,
                "op": self.describe_operation(operation, types),
                "signing_name": service.signing_name,
                "api_version": service.metadata.get("apiVersion", ""),
                "result_wrapper": operation.result_wrapper
                or f"{operation.name}Result",
                "add_comments": self.config.add_comments,
            },
        )

    def generate_struct_attributes(self, serialized: bool, deserialized: bool) -> str:
        return "#[derive(Default, Debug, Clone)]"

    def generate_serializer(
        self, name: str, shape: Shape, service: Service, types: RustTypeMapper
    ) -> Optional[str]:
        if shape.shape_type not in (
            ShapeType.STRUCTURE,
            ShapeType.LIST,
            ShapeType.MAP,
        ):
            return None

        rust_type = types.map_definition(shape)
        context: Dict[str, Any] = {
            "name": name,
            "kind": shape.shape_type.value,
            "rust_type": rust_type.name,
            "borrowed": rust_type.is_borrowed,
        }

        if shape.shape_type == ShapeType.STRUCTURE:
            context["fields"] = self._structure_fields(shape, service)
        elif shape.shape_type == ShapeType.LIST:
            context["element_put"] = self._put(shape.member, service, "element", "&key")
        else:
            context["key_put"] = self._put(
                shape.key, service, "key", '&format!("{}.{}", prefix, "key")'
            )
            context["value_put"] = self._put(
                shape.value, service, "value", '&format!("{}.{}", prefix, "value")'
            )

        return self.render("query_serializer.rs.j2", context)

    def generate_deserializer(
        self, name: str, shape: Shape, service: Service, types: RustTypeMapper
    ) -> Optional[str]:
        return generate_xml_deserializer(name, shape, types, self.template_engine)

    def _structure_fields(self, shape: Shape, service: Service):
        fields = []
        for member_name, member in shape.live_members().items():
            # Streaming bodies are never form-encoded
            if member.streaming:
                continue

            rust_field = field_name(member_name)
            required = shape.is_required(member_name)
            key = '&format!("{}{}", prefix, "%s")' % (
                member.location_name or member_name
            )
            place = f"obj.{rust_field}" if required else "field_value"

            fields.append(
                {
                    "field": rust_field,
                    "required": required,
                    "put": self._put(member.shape, service, place, key),
                }
            )
        return fields

    def _put(self, shape_name: str, service: Service, place: str, key: str) -> str:
        return param_put(
            service.get_shape(shape_name),
            self.sanitizer.type_name(shape_name),
            place,
            key,
        )
