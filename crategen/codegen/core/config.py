"""
Generator settings.

Settings are layered: per-protocol defaults, then an optional JSON file,
then explicit overrides (usually from the command line). Keys that are not
GeneratorConfig fields end up in ``custom`` for the protocol backends.
"""

import copy
import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, fields, asdict

_JSON_DEFAULTS: Dict[str, Any] = {
    "custom": {"content_type_prefix": "application/x-amz-json-"},
}
_XML_DEFAULTS: Dict[str, Any] = {
    "custom": {"xml_namespace": None},
}

PROTOCOL_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "json": _JSON_DEFAULTS,
    "rest-json": _JSON_DEFAULTS,
    "query": _XML_DEFAULTS,
    "ec2": _XML_DEFAULTS,
    "rest-xml": _XML_DEFAULTS,
}


class ConfigError(Exception):
    """A configuration file is missing, unreadable, or malformed."""
    pass


@dataclass
class GeneratorConfig:
    """Configuration shared by all protocol generators."""

    output_file: Optional[str] = None
    # Named in the generated file header
    crate_name: str = "crategen"

    # Documentation comments on structs, fields and methods
    add_comments: bool = True

    # None keeps the protocol's own timestamp type
    timestamp_type: Optional[str] = None

    # Extra entries for the type name collision table
    type_name_overrides: Dict[str, str] = field(default_factory=dict)

    # Protocol-specific settings
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Builds GeneratorConfig objects from defaults, files and overrides."""

    def __init__(self, defaults: Optional[Dict[str, Dict[str, Any]]] = None):
        self._defaults = copy.deepcopy(PROTOCOL_DEFAULTS if defaults is None else defaults)

    def get_config(self, protocol: Optional[str] = None,
                   custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration for a protocol.

        Args:
            protocol: Protocol tag, or None for protocol-neutral defaults
            custom_config: Explicit overrides
            config_file: Path to a JSON configuration file

        Returns:
            Merged configuration: defaults < file < overrides
        """
        merged = copy.deepcopy(self._defaults.get(protocol or "", {}))

        for layer in (self.read_config_file(config_file) if config_file else None,
                      custom_config):
            if layer:
                self._merge(merged, layer)

        return self._to_config(merged)

    def _merge(self, base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """Merge overrides into base; nested dicts are merged key by key."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                base[key].update(value)
            else:
                base[key] = dict(value) if isinstance(value, dict) else value

    def read_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Read the settings object from a JSON file."""
        path = Path(config_path)

        if not path.is_file():
            raise ConfigError(f"Configuration file not found: {path}")
        if path.suffix.lower() != ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")
        return data

    def _to_config(self, settings: Dict[str, Any]) -> GeneratorConfig:
        """Split settings into GeneratorConfig fields and custom entries."""
        known = {f.name for f in fields(GeneratorConfig)}
        kwargs = {key: value for key, value in settings.items() if key in known}
        extra = {key: value for key, value in settings.items() if key not in known}

        if extra:
            kwargs["custom"] = {**kwargs.get("custom", {}), **extra}

        return GeneratorConfig(**kwargs)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Write a configuration as a JSON file readable by get_config."""
        path = Path(output_path)
        try:
            path.write_text(json.dumps(asdict(config), indent=2), encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot write configuration to {path}: {e}") from e

    def list_protocols(self) -> List[str]:
        """Protocol tags that have defaults."""
        return sorted(self._defaults)

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Check a configuration for values that would produce broken code.

        Returns:
            List of validation warnings
        """
        warnings = []

        for source, target in config.type_name_overrides.items():
            if not isinstance(target, str) or not target.isidentifier():
                warnings.append(
                    f"Invalid type name override for '{source}': {target!r}"
                )

        if config.timestamp_type is not None and not config.timestamp_type.strip():
            warnings.append("timestamp_type must not be empty")

        if not config.crate_name:
            warnings.append("crate_name must not be empty")

        return warnings


_config_manager = None


def get_config_manager() -> ConfigManager:
    """Shared ConfigManager with the built-in protocol defaults."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(protocol: Optional[str] = None,
                custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Load configuration with the shared manager.

    Args:
        protocol: Protocol tag
        custom_config: Explicit overrides
        config_file: Path to a JSON configuration file

    Returns:
        Merged configuration for the protocol
    """
    return get_config_manager().get_config(protocol, custom_config, config_file)
