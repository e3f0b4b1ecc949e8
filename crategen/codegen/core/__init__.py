"""
Core code generation components.

Provides the shape graph, type mapping, naming and the base classes used by
all protocol backends. The pipeline lives in `core.pipeline`, which depends
on the backend registry.
"""

from .errors import GeneratorError, SchemaError, ShapeLookupError
from .generator import (
    ProtocolGenerator,
    ErrorTypesGenerator,
    GenerationResult,
    OperationTypes,
)
from .schema import (
    Service,
    Shape,
    Member,
    Operation,
    ShapeType,
    convert_service_definition,
)
from .naming import (
    TypeNameSanitizer,
    TYPE_NAME_OVERRIDES,
    TYPE_NAME_OVERRIDES_VERSION,
    field_name,
    type_name,
    streaming_type_name,
    error_type_name,
    to_snake_case,
)
from .types import Ownership, RustType, RustTypeMapper
from .type_filter import filter_types
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Errors
    "GeneratorError",
    "SchemaError",
    "ShapeLookupError",
    # Backend interfaces
    "ProtocolGenerator",
    "ErrorTypesGenerator",
    "GenerationResult",
    "OperationTypes",
    # Shape graph
    "Service",
    "Shape",
    "Member",
    "Operation",
    "ShapeType",
    "convert_service_definition",
    # Naming utilities
    "TypeNameSanitizer",
    "TYPE_NAME_OVERRIDES",
    "TYPE_NAME_OVERRIDES_VERSION",
    "field_name",
    "type_name",
    "streaming_type_name",
    "error_type_name",
    "to_snake_case",
    # Type system
    "Ownership",
    "RustType",
    "RustTypeMapper",
    "filter_types",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
