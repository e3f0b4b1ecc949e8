"""Exceptions raised while generating a service module."""


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class SchemaError(GeneratorError):
    """Raised when a service definition cannot be turned into a shape graph."""

    pass


class ShapeLookupError(GeneratorError):
    """Raised when a shape reference does not resolve in its service."""

    def __init__(self, shape_name: str, service_name: str = None) -> None:
        self.shape_name = shape_name
        self.service_name = service_name
        message = f"Shape '{shape_name}' not found"
        if service_name:
            message = f"{message} in service '{service_name}'"
        super().__init__(message)
