"""
HTTP binding analysis shared by the rest-json and rest-xml protocols.

Sorts the members of an operation's input and output structures into the
parts of the HTTP message they travel in: URI placeholders, query string,
headers, and the payload.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.naming import TypeNameSanitizer, field_name
from ..core.schema import Member, Operation, Service, ShapeType

_KINDS = {
    ShapeType.LIST: "list",
    ShapeType.MAP: "map",
    ShapeType.BLOB: "blob",
    ShapeType.STRUCTURE: "structure",
}


@dataclass
class Binding:
    """One member bound to a part of the HTTP message."""

    field: str
    location_name: str
    required: bool
    kind: str = "scalar"
    streaming: bool = False
    type_name: Optional[str] = None
    streaming_type: Optional[str] = None
    placeholder: Optional[str] = None


@dataclass
class HttpBindings:
    """Members of one structure grouped by HTTP location."""

    path: str = "/"
    static_params: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    uri: List[Binding] = field(default_factory=list)
    querystring: List[Binding] = field(default_factory=list)
    headers: List[Binding] = field(default_factory=list)
    payload: Optional[Binding] = None


def split_request_uri(request_uri: str) -> Tuple[str, List[Tuple[str, Optional[str]]]]:
    """
    Split a request URI template into its path and constant query parameters.

    ``/{Bucket}?uploads`` gives ``("/{Bucket}", [("uploads", None)])`` and
    ``/?list-type=2`` gives ``("/", [("list-type", "2")])``.
    """
    path, _, query = request_uri.partition("?")
    params = []
    for item in filter(None, query.split("&")):
        key, separator, value = item.partition("=")
        params.append((key, value if separator else None))
    return path or "/", params


def request_bindings(
    operation: Operation, service: Service, sanitizer: TypeNameSanitizer
) -> HttpBindings:
    """Bindings of an operation's input members."""
    path, static_params = split_request_uri(operation.request_uri)
    bindings = HttpBindings(path=path, static_params=static_params)
    if operation.input:
        _bind_members(bindings, operation.input, service, sanitizer)
    return bindings


def response_bindings(
    operation: Operation, service: Service, sanitizer: TypeNameSanitizer
) -> HttpBindings:
    """Bindings of an operation's output members."""
    bindings = HttpBindings()
    if operation.output:
        _bind_members(bindings, operation.output, service, sanitizer)
    return bindings


def _bind_members(
    bindings: HttpBindings,
    shape_name: str,
    service: Service,
    sanitizer: TypeNameSanitizer,
) -> None:
    shape = service.get_shape(shape_name)

    for member_name, member in shape.live_members().items():
        binding = _binding(
            member_name, member, shape.is_required(member_name), service, sanitizer
        )

        if member.location == "uri":
            binding.placeholder = _placeholder(bindings.path, binding.location_name)
            bindings.uri.append(binding)
        elif member.location == "querystring":
            bindings.querystring.append(binding)
        elif member.location in ("header", "headers"):
            bindings.headers.append(binding)
        elif member_name == shape.payload:
            bindings.payload = binding


def _binding(
    member_name: str,
    member: Member,
    required: bool,
    service: Service,
    sanitizer: TypeNameSanitizer,
) -> Binding:
    target = service.shape_for_member(member)
    return Binding(
        field=field_name(member_name),
        location_name=member.location_name or member_name,
        required=required,
        kind=_KINDS.get(target.shape_type, "scalar"),
        streaming=member.streaming,
        type_name=sanitizer.type_name(member.shape),
        streaming_type=sanitizer.streaming_type_name(member.shape),
    )


def _placeholder(path: str, location_name: str) -> str:
    """The placeholder text of a URI member, greedy (``{Key+}``) or plain."""
    greedy = "{%s+}" % location_name
    if greedy in path:
        return greedy
    return "{%s}" % location_name
