"""
Backend registry mapping protocol tags to backend pairs.

Each protocol tag selects exactly one (protocol generator, error taxonomy)
pair; the pairing is fixed at registration time.
"""

from typing import Dict, Type, Optional, Any, List, Tuple, Union
from pathlib import Path
from .core.generator import ErrorTypesGenerator, ProtocolGenerator
from .core.config import GeneratorConfig, load_config
from ..logging_config import get_logger

logger = get_logger(__name__)

BackendClasses = Tuple[Type[ProtocolGenerator], Type[ErrorTypesGenerator]]


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class UnknownProtocolError(RegistryError):
    """Raised when no backend is registered for a protocol tag."""

    def __init__(self, protocol: str, available: List[str]):
        self.protocol = protocol
        self.available = available
        super().__init__(
            f"Unknown protocol {protocol!r}. Available: {', '.join(available)}"
        )


class ProtocolRegistry:
    """Registry for managing protocol backend pairs."""

    def __init__(self):
        """Initialize empty registry."""
        self._backends: Dict[str, BackendClasses] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        protocol: str,
        generator_class: Type[ProtocolGenerator],
        error_class: Type[ErrorTypesGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register the backend pair for a protocol.

        Args:
            protocol: Primary protocol tag (e.g. 'json', 'rest-xml')
            generator_class: Class implementing ProtocolGenerator
            error_class: Class implementing ErrorTypesGenerator
            aliases: Alternative tags served by the same pair
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If a class is invalid or an alias conflicts
        """
        if not issubclass(generator_class, ProtocolGenerator):
            raise RegistryError("Generator class must inherit from ProtocolGenerator")
        if not issubclass(error_class, ErrorTypesGenerator):
            raise RegistryError("Error class must inherit from ErrorTypesGenerator")

        protocol_key = protocol

        # Already registered, skip silently
        if protocol_key in self._backends and not replace:
            return

        self._backends[protocol_key] = (generator_class, error_class)

        for alias in aliases or []:
            alias_key = alias
            if alias_key == protocol_key:
                continue

            if not replace:
                if alias_key in self._backends:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing primary protocol"
                    )
                if self._aliases.get(alias_key, protocol_key) != protocol_key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = protocol_key

    def unregister(self, protocol: str):
        """Unregister a protocol and its aliases."""
        protocol_key = protocol
        self._backends.pop(protocol_key, None)

        # Remove aliases pointing to this protocol
        aliases_to_remove = self.get_aliases_for_protocol(protocol_key)
        for alias in aliases_to_remove:
            del self._aliases[alias]

    def resolve(self, protocol: str) -> str:
        """
        Resolve a tag or alias to its primary protocol tag.

        Raises:
            UnknownProtocolError: If the tag is not registered
        """
        protocol_key = protocol
        if protocol_key in self._backends:
            return protocol_key
        if protocol_key in self._aliases:
            return self._aliases[protocol_key]
        raise UnknownProtocolError(protocol, self.list_protocols())

    def get_backend_classes(self, protocol: str) -> BackendClasses:
        """Get the (generator, error) classes for a tag or alias."""
        return self._backends[self.resolve(protocol)]

    def create_backends(
        self,
        protocol: str,
        config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    ) -> Tuple[ProtocolGenerator, ErrorTypesGenerator]:
        """
        Create the backend pair for a protocol.

        Args:
            protocol: Protocol tag
            config: Configuration as GeneratorConfig, dict, or file path

        Returns:
            Configured (protocol generator, error generator) instances

        Raises:
            UnknownProtocolError: If the tag is not registered
            RegistryError: If backend creation fails
        """
        generator_class, error_class = self.get_backend_classes(protocol)

        try:
            if isinstance(config, GeneratorConfig):
                final_config = config
            elif isinstance(config, (str, Path)):
                final_config = load_config(protocol, config_file=config)
            elif isinstance(config, dict):
                final_config = load_config(protocol, custom_config=config)
            elif config is None:
                final_config = load_config(protocol)
            else:
                raise RegistryError(f"Invalid config type: {type(config)}")

            backends = generator_class(final_config), error_class(final_config)
        except RegistryError:
            raise
        except Exception as e:
            raise RegistryError(f"Failed to create {protocol} backends: {e}") from e

        logger.debug(
            "Selected %s and %s for protocol %s",
            generator_class.__name__,
            error_class.__name__,
            protocol,
        )
        return backends

    def list_protocols(self) -> List[str]:
        """Get list of registered primary protocol tags."""
        return sorted(self._backends.keys())

    def get_aliases_for_protocol(self, protocol: str) -> List[str]:
        """Get all aliases for a primary protocol tag."""
        protocol_key = protocol
        return sorted(
            alias for alias, target in self._aliases.items() if target == protocol_key
        )

    def list_all_names(self) -> Dict[str, List[str]]:
        """
        Get all registered tags including aliases.

        Returns:
            Dict mapping primary tag to list of all tags (including aliases)
        """
        return {
            protocol: [protocol] + self.get_aliases_for_protocol(protocol)
            for protocol in self.list_protocols()
        }

    def is_supported(self, protocol: str) -> bool:
        """Check if a protocol tag or alias is registered."""
        protocol_key = protocol
        return protocol_key in self._backends or protocol_key in self._aliases

    def get_protocol_info(self, protocol: str) -> Dict[str, Any]:
        """
        Get information about a registered protocol.

        Raises:
            UnknownProtocolError: If the tag is not registered
        """
        protocol_key = self.resolve(protocol)
        generator_class, error_class = self._backends[protocol_key]

        # Temporary instances expose the protocol defaults
        generator = generator_class(load_config(protocol_key))
        errors = error_class(load_config(protocol_key))

        return {
            "name": protocol_key,
            "generator": generator_class.__name__,
            "error_types": error_class.__name__,
            "error_style": errors.style,
            "timestamp_type": generator.timestamp_type,
            "aliases": self.get_aliases_for_protocol(protocol_key),
            "module": generator_class.__module__,
        }


# Global registry instance - created once
_global_registry: Optional[ProtocolRegistry] = None


def get_registry() -> ProtocolRegistry:
    """Get the global protocol registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = ProtocolRegistry()
        _auto_register_backends(_global_registry)
    return _global_registry


def _auto_register_backends(registry: ProtocolRegistry):
    """
    Register the built-in backend pairs.

    This is the single source of truth for protocol selection.
    """
    from .protocols import (
        JsonErrorTypes,
        JsonGenerator,
        QueryGenerator,
        RestJsonGenerator,
        RestXmlGenerator,
        XmlErrorTypes,
    )

    registry.register("json", JsonGenerator, JsonErrorTypes)
    # ec2 differs from query only in details the generated code does not model
    registry.register("query", QueryGenerator, XmlErrorTypes, aliases=["ec2"])
    registry.register("rest-json", RestJsonGenerator, JsonErrorTypes)
    registry.register("rest-xml", RestXmlGenerator, XmlErrorTypes)


# Public API functions using the global registry


def get_backends(
    protocol: str,
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> Tuple[ProtocolGenerator, ErrorTypesGenerator]:
    """
    Get the backend pair for a protocol from the global registry.

    Args:
        protocol: Protocol tag
        config: Configuration

    Returns:
        (protocol generator, error generator)
    """
    return get_registry().create_backends(protocol, config)


def list_supported_protocols() -> List[str]:
    """List all supported primary protocol tags."""
    return get_registry().list_protocols()


def is_protocol_supported(protocol: str) -> bool:
    """Check if a protocol tag is supported by the global registry."""
    return get_registry().is_supported(protocol)


def get_protocol_info(protocol: str) -> Dict[str, Any]:
    """Get information about a supported protocol."""
    return get_registry().get_protocol_info(protocol)
