"""
Declaration tree for a generated module.

The emitters build these objects first; text is produced in a single
rendering pass afterwards. Each declaration names the template that
renders it.
"""

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional


@dataclass
class FieldDecl:
    """A single struct field."""

    name: str
    rust_type: str
    required: bool = False
    borrowed: bool = False
    attributes: List[str] = field(default_factory=list)
    documentation: Optional[str] = None

    @property
    def declared_type(self) -> str:
        """Type as written in the struct, wrapped in Option when not required."""
        if self.required:
            return self.rust_type
        return f"Option<{self.rust_type}>"


@dataclass
class StructDecl:
    """A model struct generated for a structure shape."""

    template: ClassVar[str] = "struct.rs.j2"

    name: str
    attributes: str
    fields: List[FieldDecl] = field(default_factory=list)
    lifetime: bool = False
    documentation: Optional[str] = None

    @property
    def is_unit(self) -> bool:
        return not self.fields


@dataclass
class StreamingDecl:
    """Wrapper owning a readable byte stream for a streaming shape."""

    template: ClassVar[str] = "streaming.rs.j2"

    name: str
    type_name: str


@dataclass
class CodeBlock:
    """Opaque text supplied by a protocol or error backend."""

    template: ClassVar[str] = "block.rs.j2"

    text: str
    kind: str = "code"
    owner: Optional[str] = None


@dataclass
class TraitDecl:
    """The service capability trait."""

    name: str
    service_name: str
    signatures: List[str] = field(default_factory=list)


@dataclass
class ClientDecl:
    """The concrete client struct and its trait implementation."""

    name: str
    trait_name: str
    service_name: str
    methods: List[str] = field(default_factory=list)


@dataclass
class ModuleDecl:
    """Everything that makes up one generated service module."""

    service_name: str
    protocol: str
    crate_name: str
    prelude: str
    declarations: List[object] = field(default_factory=list)
    error_types: List[CodeBlock] = field(default_factory=list)
    trait: Optional[TraitDecl] = None
    client: Optional[ClientDecl] = None

    def structs(self) -> List[StructDecl]:
        return [decl for decl in self.declarations if isinstance(decl, StructDecl)]

    def find_struct(self, name: str) -> Optional[StructDecl]:
        """Find a generated struct by its Rust name."""
        for decl in self.structs():
            if decl.name == name:
                return decl
        return None

    def streaming_wrappers(self) -> List[StreamingDecl]:
        return [
            decl for decl in self.declarations if isinstance(decl, StreamingDecl)
        ]

    def code_blocks(self, kind: str) -> List[CodeBlock]:
        """Serializer or deserializer blocks, by kind."""
        return [
            decl
            for decl in self.declarations
            if isinstance(decl, CodeBlock) and decl.kind == kind
        ]
