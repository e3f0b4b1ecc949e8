"""
Naming utilities for safe code generation.

Maps schema names to Rust identifiers: type names with a curated table of
collision overrides, and snake_case field names with reserved word escaping.
"""

import re
from typing import Dict, Optional


# Bump when the table below changes so generated output diffs can be traced.
TYPE_NAME_OVERRIDES_VERSION = 1

# Sanitized names that collide with something in the generated module
TYPE_NAME_OVERRIDES: Dict[str, str] = {
    # std::error::Error
    "Error": "S3Error",
    # the CancelSpotFleetRequests operation's error enum
    "CancelSpotFleetRequests": "EC2CancelSpotFleetRequests",
    # std::option::Option
    "Option": "RDSOption",
}

# Field names that must be escaped with a trailing underscore
RESERVED_FIELD_NAMES = frozenset({"return", "type"})

STREAMING_PREFIX = "Streaming"
ERROR_SUFFIX = "Error"


def to_snake_case(name: str) -> str:
    """
    Convert a schema name to snake_case.

    Runs of capitals are treated as one word, so ``DBInstanceId`` becomes
    ``db_instance_id``.
    """
    name = re.sub(r"[-\s.]+", "_", name)
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"_+", "_", name.lower())
    return name.strip("_")


def capitalize_first(name: str) -> str:
    """Upper-case the first character only."""
    return name[:1].upper() + name[1:]


class TypeNameSanitizer:
    """Turns shape names into collision-free Rust type names."""

    def __init__(self, overrides: Optional[Dict[str, str]] = None):
        """
        Initialize type name sanitizer.

        Args:
            overrides: Extra entries layered on top of TYPE_NAME_OVERRIDES
        """
        self.overrides = dict(TYPE_NAME_OVERRIDES)
        if overrides:
            self.overrides.update(overrides)
        self._name_cache: Dict[str, str] = {}

    def type_name(self, name: str) -> str:
        """Sanitized type name for a shape or operation name."""
        if name in self._name_cache:
            return self._name_cache[name]

        without_underscores = capitalize_first(name).replace("_", "")
        final_name = self.overrides.get(without_underscores, without_underscores)

        self._name_cache[name] = final_name
        return final_name

    def streaming_type_name(self, name: str) -> str:
        """Name of the streaming wrapper generated for a shape."""
        return f"{STREAMING_PREFIX}{self.type_name(name)}"

    def error_type_name(self, name: str) -> str:
        """Name of the error enum generated for an operation."""
        return f"{self.type_name(name)}{ERROR_SUFFIX}"


def field_name(member_name: str) -> str:
    """Translate a member name to a snake_case Rust field name."""
    name = to_snake_case(member_name)
    if name in RESERVED_FIELD_NAMES:
        return f"{name}_"
    return name


_default_sanitizer = TypeNameSanitizer()


def type_name(name: str) -> str:
    """Sanitize a type name using only the built-in override table."""
    return _default_sanitizer.type_name(name)


def streaming_type_name(name: str) -> str:
    """Streaming wrapper name using only the built-in override table."""
    return _default_sanitizer.streaming_type_name(name)


def error_type_name(name: str) -> str:
    """Operation error enum name using only the built-in override table."""
    return _default_sanitizer.error_type_name(name)
