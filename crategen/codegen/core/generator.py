"""
Base generator interfaces for all wire protocols.

Defines the contracts protocol backends and error taxonomy backends must
implement. The pipeline only ever talks to these interfaces.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Optional

from .config import GeneratorConfig
from .errors import GeneratorError
from .naming import TypeNameSanitizer, field_name
from .schema import Member, Operation, Service, Shape
from .templates import TemplateEngine, get_default_template_engine
from .types import LIFETIME, RustTypeMapper


@dataclass(frozen=True)
class OperationTypes:
    """Rust names involved in one operation's method."""

    method_name: str
    error_type: str
    input_type: Optional[str] = None
    input_type_name: Optional[str] = None
    output_type: Optional[str] = None
    output_type_name: Optional[str] = None
    lifetime: bool = False

    @property
    def signature(self) -> str:
        """Method signature without a trailing semicolon or body."""
        generics = f"<{LIFETIME}>" if self.lifetime else ""
        params = "&self"
        if self.input_type:
            params += f", input: &{self.input_type}"
        output = self.output_type or "()"
        return (
            f"fn {self.method_name}{generics}({params}) "
            f"-> Result<{output}, {self.error_type}>"
        )


class ProtocolGenerator(ABC):
    """Abstract base class for wire protocol backends."""

    default_timestamp_type = "String"

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self.sanitizer = TypeNameSanitizer(self.config.type_name_overrides)
        self._template_engine = None

    @property
    @abstractmethod
    def protocol_name(self) -> str:
        """Return the protocol tag this backend serves (e.g. 'json')."""
        pass

    @property
    def timestamp_type(self) -> str:
        """Rust type used for timestamp shapes."""
        return self.config.timestamp_type or self.default_timestamp_type

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._template_engine = get_default_template_engine()
        return self._template_engine

    @abstractmethod
    def generate_prelude(self, service: Service) -> str:
        """
        Generate the `use` statements this protocol's module needs.

        Args:
            service: Service being generated

        Returns:
            Prelude text
        """
        pass

    @abstractmethod
    def generate_method_signature(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        """
        Generate the trait method declaration for one operation.

        Returns:
            Signature text, ending with a semicolon
        """
        pass

    @abstractmethod
    def generate_method_impl(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        """
        Generate the client method executing one operation remotely.

        The result is placed inside the client's trait `impl` block.
        """
        pass

    @abstractmethod
    def generate_struct_attributes(self, serialized: bool, deserialized: bool) -> str:
        """
        Attributes decorating a generated struct (derives and such).

        Args:
            serialized: The type is reachable from an operation input
            deserialized: The type is reachable from an operation output
        """
        pass

    def generate_field_attributes(
        self,
        member_name: str,
        member: Member,
        shape: Shape,
        service: Service,
        serde: bool,
    ) -> List[str]:
        """
        Attributes decorating one struct field.

        Args:
            member_name: Original member name
            member: The member
            shape: Structure the member belongs to
            service: Service being generated
            serde: The struct derives Serialize or Deserialize

        Returns:
            List of attribute lines (can be empty)
        """
        return []

    def generate_serializer(
        self, name: str, shape: Shape, service: Service, types: RustTypeMapper
    ) -> Optional[str]:
        """If necessary, generate a serializer for the named type."""
        return None

    def generate_deserializer(
        self, name: str, shape: Shape, service: Service, types: RustTypeMapper
    ) -> Optional[str]:
        """If necessary, generate a deserializer for the named type."""
        return None

    # Helpers shared by the protocol backends

    def describe_operation(
        self, operation: Operation, types: RustTypeMapper
    ) -> OperationTypes:
        """Collect the Rust names used by an operation's method."""
        input_type = output_type = None
        if operation.input:
            input_type = types.map_shape(operation.input)
        if operation.output:
            output_type = types.map_shape(operation.output)

        return OperationTypes(
            method_name=field_name(operation.name),
            error_type=self.sanitizer.error_type_name(operation.name),
            input_type=input_type.name if input_type else None,
            input_type_name=(
                self.sanitizer.type_name(operation.input) if operation.input else None
            ),
            output_type=output_type.name if output_type else None,
            output_type_name=(
                self.sanitizer.type_name(operation.output) if operation.output else None
            ),
            lifetime=any(t is not None and t.is_borrowed for t in (input_type, output_type)),
        )

    def render_signature(self, operation: Operation, types: RustTypeMapper) -> str:
        """Render the trait method declaration shared by all protocols."""
        return self.template_engine.render_template(
            "method_signature.rs.j2",
            {
                "operation": operation,
                "op": self.describe_operation(operation, types),
                "add_comments": self.config.add_comments,
            },
        )

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render one of the bundled templates."""
        return self.template_engine.render_template(template_name, context)


class ErrorTypesGenerator(ABC):
    """Abstract base class for error taxonomy backends."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.sanitizer = TypeNameSanitizer(self.config.type_name_overrides)
        self._template_engine = None

    @property
    @abstractmethod
    def style(self) -> str:
        """Name of the error style ('json' or 'xml')."""
        pass

    @property
    def template_engine(self) -> TemplateEngine:
        if self._template_engine is None:
            self._template_engine = get_default_template_engine()
        return self._template_engine

    @abstractmethod
    def generate_error_types(self, service: Service) -> str:
        """
        Generate the error enums for every operation of the service.

        Returns:
            Error type definitions as text
        """
        pass


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result
