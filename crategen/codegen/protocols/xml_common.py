"""
XML response parsing shared by the query and rest-xml protocols.

Every deserialized type gets a `{Name}Deserializer` that walks an
`XmlResponse` event stack.
"""

from typing import Any, Dict, List

from ..core.naming import field_name
from ..core.schema import Shape, ShapeType
from ..core.templates import TemplateEngine
from ..core.types import RustTypeMapper

# Member locations that never appear in an XML body
NON_BODY_LOCATIONS = frozenset({"uri", "querystring", "header", "headers"})

XML_PRELUDE = [
    "use std::str::FromStr;",
    "use xml::EventReader;",
    "use xml::reader::ParserConfig;",
    "use xml::reader::events::XmlEvent;",
    "use rusoto_core::signature::SignedRequest;",
    "use rusoto_core::xmlutil::{Next, Peek, XmlParseError, XmlResponse};",
    "use rusoto_core::xmlutil::{characters, end_element, start_element, skip_tree, peek_at_name};",
    "use rusoto_core::xmlerror::*;",
]

DESERIALIZER_NEXT = """enum DeserializerNext {
    Close,
    Skip,
    Element(String),
}"""

_NUMERIC_PARSERS = {
    ShapeType.BOOLEAN: "bool",
    ShapeType.DOUBLE: "f64",
    ShapeType.FLOAT: "f32",
    ShapeType.INTEGER: "i64",
    ShapeType.LONG: "i64",
}


def is_body_member(member) -> bool:
    """Check if a member is carried in the XML document."""
    return not member.streaming and member.location not in NON_BODY_LOCATIONS


def primitive_parser(shape: Shape, timestamp_type: str) -> str:
    """Expression turning the current element's text into a value."""
    text = "try!(characters(stack))"

    if shape.shape_type in _NUMERIC_PARSERS:
        return f"{_NUMERIC_PARSERS[shape.shape_type]}::from_str({text}.as_ref()).unwrap()"
    if shape.shape_type == ShapeType.BLOB:
        return f"{text}.into_bytes()"
    if shape.shape_type == ShapeType.TIMESTAMP and timestamp_type != "String":
        return f"{timestamp_type}::from_str({text}.as_ref()).unwrap()"
    return text


def generate_xml_deserializer(
    name: str,
    shape: Shape,
    types: RustTypeMapper,
    engine: TemplateEngine,
) -> str:
    """
    Generate the XML deserializer for a named type.

    Args:
        name: Sanitized type name
        shape: Shape being deserialized
        types: Type mapper of the current run
        engine: Template engine used for rendering

    Returns:
        Deserializer source text
    """
    sanitizer = types.sanitizer
    context: Dict[str, Any] = {
        "name": name,
        "kind": shape.shape_type.value,
    }

    if shape.shape_type == ShapeType.STRUCTURE:
        context["fields"] = _structure_fields(shape, sanitizer)
    elif shape.shape_type == ShapeType.LIST:
        context["element"] = sanitizer.type_name(shape.member)
    elif shape.shape_type == ShapeType.MAP:
        context["key"] = sanitizer.type_name(shape.key)
        context["value"] = sanitizer.type_name(shape.value)
    else:
        context["parse"] = primitive_parser(shape, types.timestamp_type)

    context["rust_type"] = types.map_definition(shape).name
    return engine.render_template("xml_deserializer.rs.j2", context)


def _structure_fields(shape: Shape, sanitizer) -> List[Dict[str, Any]]:
    fields = []
    for member_name, member in shape.live_members().items():
        if not is_body_member(member):
            continue

        tag = member.location_name or member_name
        value = (
            f'try!({sanitizer.type_name(member.shape)}Deserializer::deserialize("{tag}", stack))'
        )
        if not shape.is_required(member_name):
            value = f"Some({value})"

        fields.append(
            {
                "field": field_name(member_name),
                "location_name": tag,
                "value": value,
            }
        )
    return fields
