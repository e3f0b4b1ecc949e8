"""
Rust type system for code generation.

Maps shapes to Rust type expressions and decides whether each generated
type borrows from the response payload (needs a lifetime) or owns its data.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Set
from enum import Enum

from .errors import GeneratorError
from .naming import TypeNameSanitizer
from .schema import Member, Service, Shape, ShapeType


class Ownership(Enum):
    """Whether a generated type owns its data or borrows from the payload."""

    OWNED = "owned"
    BORROWED = "borrowed"


LIFETIME = "'a"

PRIMITIVE_TYPES: Dict[ShapeType, str] = {
    ShapeType.BLOB: "Vec<u8>",
    ShapeType.BOOLEAN: "bool",
    ShapeType.DOUBLE: "f64",
    ShapeType.FLOAT: "f32",
    ShapeType.INTEGER: "i64",
    ShapeType.LONG: "i64",
}


@dataclass(frozen=True)
class RustType:
    """A Rust type expression together with its ownership."""

    name: str
    ownership: Ownership = Ownership.OWNED

    @property
    def is_borrowed(self) -> bool:
        return self.ownership == Ownership.BORROWED

    def as_optional(self) -> "RustType":
        """Wrap this type in Option<...>."""
        return RustType(name=f"Option<{self.name}>", ownership=self.ownership)


class RustTypeMapper:
    """
    Central engine for mapping shapes to Rust types.

    Structure ownership is solved once for the whole service as a least
    fixed point, so self-referential and mutually recursive structures are
    classified without unbounded recursion.
    """

    def __init__(
        self,
        service: Service,
        timestamp_type: str,
        sanitizer: Optional[TypeNameSanitizer] = None,
    ):
        """
        Initialize the mapper for one service.

        Args:
            service: Service whose shapes are being mapped
            timestamp_type: Rust type the protocol uses for timestamps
            sanitizer: Type name sanitizer (default: built-in overrides only)
        """
        self.service = service
        self.timestamp_type = timestamp_type
        self.sanitizer = sanitizer or TypeNameSanitizer()
        self._structure_ownership: Optional[Dict[str, Ownership]] = None
        self._type_cache: Dict[str, RustType] = {}
        self._names_by_id: Optional[Dict[int, str]] = None

    def map_shape(self, shape_name: str, streaming: bool = False) -> RustType:
        """
        Map a shape reference to a Rust type.

        Args:
            shape_name: Name of the referenced shape
            streaming: Whether the occurrence is a payload stream field

        Returns:
            RustType with type text and ownership

        Raises:
            ShapeLookupError: If the shape (or anything it references) is missing
        """
        if streaming:
            return RustType(self.sanitizer.streaming_type_name(shape_name))

        if shape_name not in self._type_cache:
            self._type_cache[shape_name] = self._map_base_type(shape_name, set())
        return self._type_cache[shape_name]

    def map_member(self, structure_name: str, member: Member) -> RustType:
        """
        Map one member occurrence inside a structure.

        Streaming members of output structures become the owning streaming
        wrapper; request bodies in operation inputs stay plain owned blobs.
        """
        if member.streaming and not self.service.is_input_shape(structure_name):
            return self.map_shape(member.shape, streaming=True)
        return self.map_shape(member.shape)

    def map_definition(self, shape: Shape) -> RustType:
        """Map a shape definition of this service, given by object rather than name."""
        if self._names_by_id is None:
            self._names_by_id = {
                id(candidate): name for name, candidate in self.service.shapes.items()
            }
        try:
            return self.map_shape(self._names_by_id[id(shape)])
        except KeyError:
            raise GeneratorError(
                f"Shape definition is not part of service '{self.service.name}'"
            ) from None

    def structure_ownership(self, shape_name: str) -> Ownership:
        """Ownership classification of a structure shape."""
        if self._structure_ownership is None:
            self._structure_ownership = self._solve_structure_ownership()
        try:
            return self._structure_ownership[shape_name]
        except KeyError:
            # Not a structure: fall back to the general mapping
            return self.map_shape(shape_name).ownership

    def _map_base_type(self, shape_name: str, visiting: Set[str]) -> RustType:
        """Map a shape without considering streaming."""
        shape = self.service.get_shape(shape_name)

        # Primitive types
        if shape.shape_type in PRIMITIVE_TYPES:
            return RustType(PRIMITIVE_TYPES[shape.shape_type])

        elif shape.shape_type == ShapeType.TIMESTAMP:
            return RustType(self.timestamp_type)

        elif shape.shape_type == ShapeType.STRING:
            return RustType(f"&{LIFETIME} str", Ownership.BORROWED)

        elif shape.shape_type == ShapeType.STRUCTURE:
            type_name = self.sanitizer.type_name(shape_name)
            if self.structure_ownership(shape_name) == Ownership.BORROWED:
                return RustType(f"{type_name}<{LIFETIME}>", Ownership.BORROWED)
            return RustType(type_name)

        # Containers recurse through their element shapes
        if shape_name in visiting:
            raise GeneratorError(
                f"Shape '{shape_name}' contains itself without an enclosing structure"
            )
        visiting = visiting | {shape_name}

        if shape.shape_type == ShapeType.LIST:
            element = self._map_base_type(shape.member, visiting)
            return RustType(f"Vec<{element.name}>", element.ownership)

        key = self._map_base_type(shape.key, visiting)
        value = self._map_base_type(shape.value, visiting)
        # Only the key decides; a borrowed value alone does not propagate
        return RustType(
            f"::std::collections::HashMap<{key.name}, {value.name}>", key.ownership
        )

    def _solve_structure_ownership(self) -> Dict[str, Ownership]:
        """
        Classify every structure in the service.

        Starts from OWNED everywhere and re-evaluates until nothing changes.
        Classifications only move from OWNED to BORROWED, so this terminates.
        """
        structures = [
            name
            for name in self.service.shape_names()
            if self.service.shapes[name].shape_type == ShapeType.STRUCTURE
        ]
        ownership = {name: Ownership.OWNED for name in structures}

        changed = True
        while changed:
            changed = False
            for name in structures:
                if ownership[name] == Ownership.BORROWED:
                    continue
                if self._any_member_borrowed(name, ownership):
                    ownership[name] = Ownership.BORROWED
                    changed = True

        return ownership

    def _any_member_borrowed(
        self, structure_name: str, ownership: Dict[str, Ownership]
    ) -> bool:
        """Check a structure's members against the current classification."""
        shape = self.service.get_shape(structure_name)
        for member in shape.live_members().values():
            # Streaming occurrences (wrapper or request blob) are always owned
            if member.streaming:
                continue
            if self._occurrence_ownership(member.shape, ownership, set()) == (
                Ownership.BORROWED
            ):
                return True
        return False

    def _occurrence_ownership(
        self, shape_name: str, ownership: Dict[str, Ownership], visiting: Set[str]
    ) -> Ownership:
        """Ownership of a shape given the in-progress structure table."""
        shape = self.service.get_shape(shape_name)

        if shape.shape_type == ShapeType.STRING:
            return Ownership.BORROWED
        if shape.shape_type == ShapeType.STRUCTURE:
            return ownership[shape_name]
        if shape.shape_type not in (ShapeType.LIST, ShapeType.MAP):
            return Ownership.OWNED

        if shape_name in visiting:
            raise GeneratorError(
                f"Shape '{shape_name}' contains itself without an enclosing structure"
            )
        visiting = visiting | {shape_name}

        if shape.shape_type == ShapeType.LIST:
            return self._occurrence_ownership(shape.member, ownership, visiting)

        # Still walk the value so container cycles are reported
        self._occurrence_ownership(shape.value, ownership, visiting)
        return self._occurrence_ownership(shape.key, ownership, visiting)
