"""
Error taxonomy backends.

Each operation gets an error enum with one variant per exception shape it
declares, plus the transport, credential, validation and unknown cases.
The JSON and XML styles differ only in how `from_body` reads the error
document; both templates extend `error_enum.rs.j2`.
"""

from typing import Any, Dict, List

from ..core.generator import ErrorTypesGenerator
from ..core.schema import Operation, Service
from ...logging_config import get_logger

logger = get_logger(__name__)


class TemplatedErrorTypes(ErrorTypesGenerator):
    """Shared rendering for the error styles."""

    template_name = "error_enum.rs.j2"

    def generate_error_types(self, service: Service) -> str:
        enums = [
            self.generate_error_type(service.operations[name], service)
            for name in service.operation_names()
        ]
        return "\n\n".join(self.support_code() + enums)

    def generate_error_type(self, operation: Operation, service: Service) -> str:
        """Render the error enum of a single operation."""
        return self.template_engine.render_template(
            self.template_name,
            {
                "operation": operation,
                "error_type": self.sanitizer.error_type_name(operation.name),
                "variants": self.variants(operation, service),
            },
        )

    def variants(self, operation: Operation, service: Service) -> List[Dict[str, Any]]:
        """
        Error variants declared by an operation, in declaration order.

        Raises:
            ShapeLookupError: If a declared error shape does not exist
        """
        variants = []
        seen = set()
        for error_name in operation.errors:
            shape = service.get_shape(error_name)
            if error_name in seen:
                continue
            seen.add(error_name)

            if not shape.exception:
                logger.debug(
                    "Operation %s lists %s as an error but it is not an exception shape",
                    operation.name,
                    error_name,
                )

            variants.append(
                {
                    "name": self.sanitizer.type_name(error_name),
                    "code": error_name,
                    "documentation": (
                        shape.documentation if self.config.add_comments else None
                    ),
                }
            )
        return variants

    def support_code(self) -> List[str]:
        """Helpers emitted once, ahead of the enums."""
        return []


class JsonErrorTypes(TemplatedErrorTypes):
    """Errors reported as a JSON document with a `__type` field."""

    template_name = "json_error.rs.j2"

    @property
    def style(self) -> str:
        return "json"


class XmlErrorTypes(TemplatedErrorTypes):
    """Errors reported as an XML `<Error>` document."""

    template_name = "xml_error.rs.j2"

    @property
    def style(self) -> str:
        return "xml"

    def support_code(self) -> List[str]:
        return [
            self.template_engine.render_template("xml_error_support.rs.j2", {})
        ]
