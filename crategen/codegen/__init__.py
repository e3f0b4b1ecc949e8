"""
crategen code generation module

Generates Rust client modules from botocore-style service definitions.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .registry import (
    ProtocolRegistry,
    RegistryError,
    UnknownProtocolError,
    get_backends,
    get_protocol_info,
    list_supported_protocols,
)
from .core.errors import GeneratorError, SchemaError, ShapeLookupError
from .core.generator import ProtocolGenerator, ErrorTypesGenerator, GenerationResult
from .core.schema import Service, Shape, Member, Operation, convert_service_definition
from .core.config import GeneratorConfig, ConfigManager, load_config
from .core.pipeline import build_module, render_module, generate_source, generate_code

# Version info
__version__ = "0.1.0"


def generate_from_definition(
    definition: Dict[str, Any],
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    name: Optional[str] = None,
) -> GenerationResult:
    """
    Generate a Rust module from a botocore service definition.

    Args:
        definition: Parsed botocore JSON
        config: Generator configuration as GeneratorConfig, dict or file path
        name: Service name (default: taken from the definition's metadata)

    Returns:
        GenerationResult with generated code
    """
    try:
        service = convert_service_definition(definition, name)
    except GeneratorError as e:
        return GenerationResult.error(f"Invalid service definition: {e}", exception=e)

    if not isinstance(config, GeneratorConfig):
        if isinstance(config, (str, Path)):
            config = load_config(service.protocol, config_file=config)
        else:
            config = load_config(service.protocol, custom_config=config)

    return generate_code(service, config)


# Export main interfaces
__all__ = [
    "ProtocolRegistry",
    "RegistryError",
    "UnknownProtocolError",
    "GeneratorError",
    "SchemaError",
    "ShapeLookupError",
    "ProtocolGenerator",
    "ErrorTypesGenerator",
    "GenerationResult",
    "Service",
    "Shape",
    "Member",
    "Operation",
    "GeneratorConfig",
    "ConfigManager",
    "convert_service_definition",
    "build_module",
    "render_module",
    "generate_source",
    "generate_code",
    "generate_from_definition",
    "get_backends",
    "get_protocol_info",
    "list_supported_protocols",
    "load_config",
]
