"""
Wire protocol backends.

Four protocol generators and the two error taxonomy styles they pair with.
"""

from .json_generator import JsonGenerator
from .query_generator import QueryGenerator
from .rest_json_generator import RestJsonGenerator
from .rest_xml_generator import RestXmlGenerator
from .error_types import JsonErrorTypes, XmlErrorTypes

__all__ = [
    "JsonGenerator",
    "QueryGenerator",
    "RestJsonGenerator",
    "RestXmlGenerator",
    "JsonErrorTypes",
    "XmlErrorTypes",
]
