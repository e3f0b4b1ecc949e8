"""
Reachability analysis for generated types.

Decides which type names need serialization code (reachable from an
operation input) and which need deserialization code (reachable from an
operation output).
"""

from typing import Iterable, Set, Tuple

from .naming import TypeNameSanitizer
from .schema import Service


def filter_types(
    service: Service, sanitizer: TypeNameSanitizer = None
) -> Tuple[Set[str], Set[str]]:
    """
    Compute the serialized and deserialized type name sets for a service.

    Args:
        service: Service to analyze
        sanitizer: Type name sanitizer (names in the sets are sanitized)

    Returns:
        Tuple of (serialized type names, deserialized type names)
    """
    sanitizer = sanitizer or TypeNameSanitizer()
    operations = [service.operations[name] for name in service.operation_names()]

    input_shapes = [op.input for op in operations if op.input]
    output_shapes = [op.output for op in operations if op.output]

    serialized = {sanitizer.type_name(name) for name in _reachable(service, input_shapes)}
    deserialized = {
        sanitizer.type_name(name) for name in _reachable(service, output_shapes)
    }
    return serialized, deserialized


def _reachable(service: Service, roots: Iterable[str]) -> Set[str]:
    """Collect every shape name reachable from the given roots."""
    seen: Set[str] = set()
    pending = list(roots)

    while pending:
        name = pending.pop()
        if name in seen:
            continue
        seen.add(name)
        pending.extend(service.get_shape(name).referenced_shapes())

    return seen
