import copy
import json

import pytest

from crategen.codegen.core.schema import convert_service_definition


PRIMITIVE_SHAPES = {
    "String": {"type": "string"},
    "Integer": {"type": "integer"},
    "Long": {"type": "long"},
    "Boolean": {"type": "boolean"},
    "Double": {"type": "double"},
    "Float": {"type": "float"},
    "Blob": {"type": "blob"},
    "Timestamp": {"type": "timestamp"},
}


EXAMPLE_DEFINITION = {
    "version": "2.0",
    "metadata": {
        "apiVersion": "2017-01-01",
        "endpointPrefix": "example",
        "jsonVersion": "1.1",
        "protocol": "json",
        "serviceAbbreviation": "Example",
        "serviceFullName": "Example Service",
        "targetPrefix": "Example_20170101",
    },
    "operations": {
        "PutItem": {
            "name": "PutItem",
            "http": {"method": "POST", "requestUri": "/"},
            "input": {"shape": "PutItemInput"},
            "output": {"shape": "PutItemOutput"},
            "errors": [{"shape": "ResourceNotFoundException"}],
            "documentation": "<p>Stores an item.</p>",
        },
        "ListItems": {
            "name": "ListItems",
            "http": {"method": "POST", "requestUri": "/"},
            "input": {"shape": "ListItemsInput"},
            "output": {"shape": "ListItemsOutput"},
        },
    },
    "shapes": {
        **PRIMITIVE_SHAPES,
        "PutItemInput": {
            "type": "structure",
            "required": ["Name"],
            "members": {
                "Name": {"shape": "String", "documentation": "<p>The item name.</p>"},
                "Size": {"shape": "Integer"},
                "type": {"shape": "String"},
                "Legacy": {"shape": "String", "deprecated": True},
            },
            "documentation": "<p>Input of PutItem.</p>",
        },
        "PutItemOutput": {"type": "structure", "members": {}},
        "ListItemsInput": {
            "type": "structure",
            "members": {"Limit": {"shape": "Integer"}},
        },
        "ListItemsOutput": {
            "type": "structure",
            "members": {
                "Items": {"shape": "ItemList"},
                "Return": {"shape": "Boolean"},
            },
        },
        "ItemList": {"type": "list", "member": {"shape": "Item"}},
        "Item": {
            "type": "structure",
            "members": {
                "Id": {"shape": "String"},
                "Data": {"shape": "Blob"},
                "Created": {"shape": "Timestamp"},
            },
        },
        "ResourceNotFoundException": {
            "type": "structure",
            "members": {"message": {"shape": "String"}},
            "exception": True,
            "documentation": "<p>The item does not exist.</p>",
        },
    },
}


def _definition(protocol, shapes, operations=None, **metadata):
    meta = {
        "apiVersion": "2016-11-15",
        "endpointPrefix": "example",
        "protocol": protocol,
        "serviceAbbreviation": "Example",
    }
    meta.update(metadata)
    return {
        "metadata": meta,
        "operations": copy.deepcopy(operations or {}),
        "shapes": {**copy.deepcopy(PRIMITIVE_SHAPES), **copy.deepcopy(shapes)},
    }


@pytest.fixture
def example_definition():
    """A small json-protocol service definition."""
    return copy.deepcopy(EXAMPLE_DEFINITION)


@pytest.fixture
def example_service(example_definition):
    return convert_service_definition(example_definition)


@pytest.fixture
def make_definition():
    """Factory for definitions: make_definition(protocol, shapes, operations)."""
    return _definition


@pytest.fixture
def make_service():
    """Factory for services built from shapes (primitive shapes are added)."""

    def factory(shapes, operations=None, protocol="json", **metadata):
        return convert_service_definition(
            _definition(protocol, shapes, operations, **metadata)
        )

    return factory


@pytest.fixture
def streaming_service(make_service):
    """A rest-json service with a streaming body in and out."""
    shapes = {
        "Body": {"type": "blob", "streaming": True},
        "PutObjectRequest": {
            "type": "structure",
            "required": ["Bucket", "Key"],
            "members": {
                "Bucket": {"shape": "String", "location": "uri", "locationName": "Bucket"},
                "Key": {"shape": "String", "location": "uri", "locationName": "Key"},
                "Body": {"shape": "Body"},
            },
            "payload": "Body",
        },
        "GetObjectRequest": {
            "type": "structure",
            "required": ["Bucket", "Key"],
            "members": {
                "Bucket": {"shape": "String", "location": "uri", "locationName": "Bucket"},
                "Key": {"shape": "String", "location": "uri", "locationName": "Key"},
            },
        },
        "GetObjectOutput": {
            "type": "structure",
            "members": {
                "Body": {"shape": "Body"},
                "ETag": {"shape": "String", "location": "header", "locationName": "ETag"},
            },
            "payload": "Body",
        },
    }
    operations = {
        "PutObject": {
            "name": "PutObject",
            "http": {"method": "PUT", "requestUri": "/{Bucket}/{Key+}"},
            "input": {"shape": "PutObjectRequest"},
        },
        "GetObject": {
            "name": "GetObject",
            "http": {"method": "GET", "requestUri": "/{Bucket}/{Key+}"},
            "input": {"shape": "GetObjectRequest"},
            "output": {"shape": "GetObjectOutput"},
        },
    }
    return make_service(shapes, operations, protocol="rest-json")


@pytest.fixture
def definition_file(tmp_path, example_definition):
    path = tmp_path / "example-2017-01-01.json"
    path.write_text(json.dumps(example_definition), encoding="utf-8")
    return path
