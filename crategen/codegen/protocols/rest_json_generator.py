"""
REST+JSON protocol backend.

Shares struct and field attributes with the plain JSON backend; requests
bind members to the URI, query string and headers before the JSON body
is attached.
"""

from ..core.schema import Operation, Service
from ..core.types import RustTypeMapper
from .json_generator import JsonGenerator
from .rest_common import request_bindings, response_bindings


class RestJsonGenerator(JsonGenerator):
    """Backend for the `rest-json` protocol."""

    @property
    def protocol_name(self) -> str:
        return "rest-json"

    def generate_prelude(self, service: Service) -> str:
        return "\n".join(
            [
                "use serde_json;",
                "use rusoto_core::param::{Params, ServiceParams};",
                "use rusoto_core::signature::SignedRequest;",
                "use serde_json::from_str;",
                "use serde_json::Value as SerdeJsonValue;",
            ]
        )

    def generate_method_impl(
        self, operation: Operation, service: Service, types: RustTypeMapper
    ) -> str:
        return self.render(
            "rest_json_method.rs.j2",
            {
                "operation": operation,
                "op": self.describe_operation(operation, types),
                "signing_name": service.signing_name,
                "content_type": self.content_type(service),
                "request": request_bindings(operation, service, self.sanitizer),
                "response": response_bindings(operation, service, self.sanitizer),
                "add_comments": self.config.add_comments,
            },
        )
