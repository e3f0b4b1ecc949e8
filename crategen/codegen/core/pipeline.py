"""
Top-level generation pipeline.

Selects the backend pair for a service's protocol, builds the module's
declaration tree with the type and client emitters, and renders it to
Rust source in a single pass.
"""

from typing import IO, List, Optional, Set, Tuple

from .config import GeneratorConfig, load_config
from .declarations import (
    ClientDecl,
    CodeBlock,
    FieldDecl,
    ModuleDecl,
    StreamingDecl,
    StructDecl,
    TraitDecl,
)
from .errors import GeneratorError
from .generator import GenerationResult, ProtocolGenerator
from .naming import TYPE_NAME_OVERRIDES_VERSION, field_name
from .schema import Service, Shape, ShapeType
from .templates import TemplateEngine, get_default_template_engine
from .type_filter import filter_types
from .types import LIFETIME, Ownership, RustTypeMapper
from ..registry import RegistryError, get_backends
from ...logging_config import get_logger

logger = get_logger(__name__)

# Structures sanitized to this name would shadow the Rust type
RESERVED_STRUCT_NAME = "String"


class TypeEmitter:
    """Builds the type declarations of a module, one shape at a time."""

    def __init__(
        self,
        service: Service,
        protocol: ProtocolGenerator,
        types: RustTypeMapper,
        serialized: Set[str],
        deserialized: Set[str],
        config: GeneratorConfig,
    ):
        self.service = service
        self.protocol = protocol
        self.types = types
        self.sanitizer = types.sanitizer
        self.serialized = serialized
        self.deserialized = deserialized
        self.config = config

    def emit(self) -> List[object]:
        """Declarations for every shape, in shape name order."""
        declarations: List[object] = []
        for name in self.service.shape_names():
            declarations.extend(self.emit_shape(name, self.service.shapes[name]))
        return declarations

    def emit_shape(self, name: str, shape: Shape) -> List[object]:
        """Declarations generated for one shape (possibly none)."""
        # Exception shapes become error enum variants instead
        if shape.exception:
            logger.debug("Skipping exception shape %s", name)
            return []

        declarations: List[object] = []
        type_name = self.sanitizer.type_name(name)
        serialized = type_name in self.serialized
        deserialized = type_name in self.deserialized

        if shape.shape_type == ShapeType.STRUCTURE:
            if type_name != RESERVED_STRUCT_NAME:
                declarations.append(
                    self.build_struct(name, type_name, shape, serialized, deserialized)
                )
            else:
                logger.debug("Skipping structure %s: reserved type name", name)

        if self.service.is_streaming_shape(name):
            declarations.append(
                StreamingDecl(
                    name=self.sanitizer.streaming_type_name(name),
                    type_name=type_name,
                )
            )

        if deserialized:
            code = self.protocol.generate_deserializer(
                type_name, shape, self.service, self.types
            )
            if code:
                declarations.append(CodeBlock(code, "deserializer", type_name))

        if serialized:
            code = self.protocol.generate_serializer(
                type_name, shape, self.service, self.types
            )
            if code:
                declarations.append(CodeBlock(code, "serializer", type_name))

        return declarations

    def build_struct(
        self,
        name: str,
        type_name: str,
        shape: Shape,
        serialized: bool,
        deserialized: bool,
    ) -> StructDecl:
        """Build the struct declaration for a structure shape."""
        attributes = self.protocol.generate_struct_attributes(serialized, deserialized)
        serde = "Serialize" in attributes or "Deserialize" in attributes

        fields = []
        for member_name, member in shape.members.items():
            if member.deprecated:
                logger.debug("Skipping deprecated member %s.%s", name, member_name)
                continue

            rust_type = self.types.map_member(name, member)
            fields.append(
                FieldDecl(
                    name=field_name(member_name),
                    rust_type=rust_type.name,
                    required=shape.is_required(member_name),
                    borrowed=rust_type.is_borrowed,
                    attributes=self.protocol.generate_field_attributes(
                        member_name, member, shape, self.service, serde
                    ),
                    documentation=self._docs(member.documentation),
                )
            )

        return StructDecl(
            name=type_name,
            attributes=attributes,
            fields=fields,
            lifetime=self.types.structure_ownership(name) == Ownership.BORROWED,
            documentation=self._docs(shape.documentation),
        )

    def _docs(self, text: Optional[str]) -> Optional[str]:
        if self.config.add_comments and text:
            return text
        return None


class ClientEmitter:
    """Builds the capability trait and the concrete client."""

    def __init__(
        self, service: Service, protocol: ProtocolGenerator, types: RustTypeMapper
    ):
        self.service = service
        self.protocol = protocol
        self.types = types

    def emit(self) -> Tuple[TraitDecl, ClientDecl]:
        operations = [
            self.service.operations[name] for name in self.service.operation_names()
        ]

        trait = TraitDecl(
            name=self.service.service_type_name,
            service_name=self.service.name,
            signatures=[
                self.protocol.generate_method_signature(op, self.service, self.types)
                for op in operations
            ],
        )
        client = ClientDecl(
            name=self.service.client_type_name,
            trait_name=trait.name,
            service_name=self.service.name,
            methods=[
                self.protocol.generate_method_impl(op, self.service, self.types)
                for op in operations
            ],
        )
        return trait, client


def build_module(
    service: Service, config: Optional[GeneratorConfig] = None
) -> ModuleDecl:
    """
    Build the declaration tree for a service module.

    Args:
        service: Service to generate
        config: Generator configuration (default: protocol defaults)

    Returns:
        ModuleDecl holding every declaration; nothing is rendered yet

    Raises:
        UnknownProtocolError: If the service's protocol has no backends
        GeneratorError: If the shape graph cannot be generated
    """
    config = config or load_config(service.protocol)
    protocol, error_types = get_backends(service.protocol, config)
    logger.info(
        "Generating %s with the %s backend", service.name, protocol.protocol_name
    )

    types = RustTypeMapper(service, protocol.timestamp_type, protocol.sanitizer)
    serialized, deserialized = filter_types(service, protocol.sanitizer)

    module = ModuleDecl(
        service_name=service.name,
        protocol=service.protocol,
        crate_name=config.crate_name,
        prelude=protocol.generate_prelude(service),
    )
    module.declarations = TypeEmitter(
        service, protocol, types, serialized, deserialized, config
    ).emit()
    module.error_types = [
        CodeBlock(error_types.generate_error_types(service), "errors")
    ]
    module.trait, module.client = ClientEmitter(service, protocol, types).emit()

    logger.info(
        "Built %d structs, %d streaming wrappers and %d operations for %s",
        len(module.structs()),
        len(module.streaming_wrappers()),
        len(service.operations),
        service.name,
    )
    return module


def render_module(module: ModuleDecl, engine: Optional[TemplateEngine] = None) -> str:
    """
    Render a declaration tree to Rust source.

    Args:
        module: Declaration tree from build_module
        engine: Template engine (default: bundled templates)

    Returns:
        Formatted source text
    """
    engine = engine or get_default_template_engine()

    declarations = [
        engine.render_template(decl.template, {"decl": decl, "lifetime": LIFETIME})
        for decl in module.declarations
    ]
    header = engine.render_template("header.rs.j2", {"crate_name": module.crate_name})
    client = engine.render_template(
        "client.rs.j2", {"trait": module.trait, "client": module.client}
    )

    code = engine.render_template(
        "module.rs.j2",
        {
            "header": header,
            "module": module,
            "declarations": declarations,
            "client": client,
        },
    )
    return format_code(code)


def format_code(code: str) -> str:
    """
    Clean up rendered code.

    Strips trailing whitespace and allows at most two consecutive blank
    lines; the result ends with a single newline.
    """
    lines = code.split("\n")
    formatted_lines = []
    blank_count = 0

    for line in lines:
        stripped = line.rstrip()
        if not stripped:
            blank_count += 1
            if blank_count <= 2:
                formatted_lines.append("")
        else:
            blank_count = 0
            formatted_lines.append(stripped)

    return "\n".join(formatted_lines).strip("\n") + "\n"


def generate_source(
    service: Service,
    writer: Optional[IO[str]] = None,
    config: Optional[GeneratorConfig] = None,
) -> str:
    """
    Generate the complete Rust module for a service.

    The text is fully rendered before anything is written, so a failed run
    leaves the writer untouched.

    Args:
        service: Service to generate
        writer: Optional text sink receiving the module in a single write
        config: Generator configuration

    Returns:
        The generated source text
    """
    code = render_module(build_module(service, config))
    if writer is not None:
        writer.write(code)
    return code


def generate_code(
    service: Service, config: Optional[GeneratorConfig] = None
) -> GenerationResult:
    """
    Generate a service module with error handling.

    Args:
        service: Service to generate
        config: Generator configuration

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        module = build_module(service, config)
        code = render_module(module)
    except (GeneratorError, RegistryError) as e:
        logger.error("Code generation failed for %s: %s", service.name, e)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)

    warnings = []
    if not service.operations:
        warnings.append(f"Service {service.name} declares no operations")

    metadata = {
        "service": service.name,
        "protocol": service.protocol,
        "file_extension": ".rs",
        "shape_count": len(service.shapes),
        "struct_count": len(module.structs()),
        "operation_count": len(service.operations),
        "type_name_overrides_version": TYPE_NAME_OVERRIDES_VERSION,
    }

    return GenerationResult(code, warnings, metadata)
