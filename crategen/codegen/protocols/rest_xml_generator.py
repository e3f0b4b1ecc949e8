"""
REST+XML protocol backend.

Request payload structures are written with an xml-rs `EventWriter`;
responses are parsed with the deserializers shared with the query
protocol.
"""

from typing import Any, Dict, Optional

from ..core.generator import ProtocolGenerator
from ..core.naming import field_name
from ..core.schema import Operation, Service, Shape, ShapeType
from ..core.types import RustTypeMapper
from .rest_common import request_bindings, response_bindings
from .xml_common import (
    DESERIALIZER_NEXT,
    XML_PRELUDE,
    generate_xml_deserializer,
    is_body_member,
)


def xml_write(shape: Shape, type_name: str, place: str, tag: str) -> str:
    """
    Statements writing one value as an XML element.

    Args:
        shape: Shape of the value
        type_name: Sanitized name of that shape
        place: Rust expression holding the value
        tag: Element name
    """
    if shape.shape_type in (ShapeType.STRUCTURE, ShapeType.LIST):
        return f'try!({type_name}Serializer::serialize(&mut writer, "{tag}", &{place}));'

    if shape.shape_type == ShapeType.BLOB:
        text = f"&String::from_utf8_lossy(&{place})"
    else:
        text = f'&format!("{{}}", {place})'

    return "\n".join(
        [
            f'try!(writer.write(xml::writer::XmlEvent::start_element("{tag}")));',
            f"try!(writer.write(xml::writer::XmlEvent::characters({text})));",
            "try!(writer.write(xml::writer::XmlEvent::end_element()));",
        ]
    )


class RestXmlGenerator(ProtocolGenerator):
    """Backend for the `rest-xml` protocol."""

    @property
    def protocol_name(self) -> str:
        return "rest-xml"

    def generate_prelude(self, service: Service) -> str:
        imports = list(XML_PRELUDE)
        imports[3:3] = [
            "use std::io::Write;",
            "use xml::EventWriter;",
            "use rusoto_core::param::{Params, ServiceParams};",
        ]
        return "\n".join(imports) + "\n\n" + DESERIALIZER_NEXT

    def generate_method_signature(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        return self.render_signature(operation, types)

    def generate_method_impl(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        return self.render(
            "rest_xml_method.rs.j2",
            {
                "operation": operation,
                "op": self.describe_operation(operation, types),
                "signing_name": service.signing_name,
                "request": request_bindings(operation, service, self.sanitizer),
                "response": response_bindings(operation, service, self.sanitizer),
                "add_comments": self.config.add_comments,
            },
        )

    def generate_struct_attributes(self, serialized: bool, deserialized: bool) -> str:
        return "#[derive(Default, Debug, Clone)]"

    def generate_serializer(
        self, name: str, shape: Shape, service: Service, types: RustTypeMapper
    ) -> Optional[str]:
        if shape.shape_type not in (ShapeType.STRUCTURE, ShapeType.LIST):
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
        else:
            context["element_write"] = self._write(
                shape.member, service, "element", "member"
            )

        return self.render("xml_serializer.rs.j2", context)

    def generate_deserializer(
        self, name: str, shape: Shape, service: Service, types: RustTypeMapper
    ) -> Optional[str]:
        return generate_xml_deserializer(name, shape, types, self.template_engine)

    def _structure_fields(self, shape: Shape, service: Service):
        namespace = self.config.custom.get("xml_namespace")
        fields = []
        for member_name, member in shape.live_members().items():
            if not is_body_member(member):
                continue

            rust_field = field_name(member_name)
            required = shape.is_required(member_name)
            place = f"obj.{rust_field}" if required else "value"
            tag = member.location_name or member_name
            if namespace:
                tag = f"{namespace}:{tag}"

            fields.append(
                {
                    "field": rust_field,
                    "required": required,
                    "write": self._write(member.shape, service, place, tag),
                }
            )
        return fields

    def _write(self, shape_name: str, service: Service, place: str, tag: str) -> str:
        return xml_write(
            service.get_shape(shape_name),
            self.sanitizer.type_name(shape_name),
            place,
            tag,
        )
