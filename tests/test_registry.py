import pytest

from crategen.codegen.core.config import GeneratorConfig
from crategen.codegen.protocols import (
    JsonErrorTypes,
    JsonGenerator,
    QueryGenerator,
    RestJsonGenerator,
    RestXmlGenerator,
    XmlErrorTypes,
)
from crategen.codegen.registry import (
    ProtocolRegistry,
    RegistryError,
    UnknownProtocolError,
    get_backends,
    get_protocol_info,
    get_registry,
    is_protocol_supported,
    list_supported_protocols,
)


@pytest.fixture
def registry():
    return ProtocolRegistry()


class TestBuiltinBackends:
    def test_supported_protocols(self):
        assert list_supported_protocols() == ["json", "query", "rest-json", "rest-xml"]

    @pytest.mark.parametrize(
        "protocol,generator_class,error_class",
        [
            ("json", JsonGenerator, JsonErrorTypes),
            ("rest-json", RestJsonGenerator, JsonErrorTypes),
            ("query", QueryGenerator, XmlErrorTypes),
            ("ec2", QueryGenerator, XmlErrorTypes),
            ("rest-xml", RestXmlGenerator, XmlErrorTypes),
        ],
    )
    def test_fixed_pairing(self, protocol, generator_class, error_class):
        generator, errors = get_backends(protocol)
        assert type(generator) is generator_class
        assert type(errors) is error_class

    @pytest.mark.parametrize("protocol", ["JSON", "REST-XML", "EC2", "Query"])
    def test_tags_match_exactly(self, protocol):
        assert not is_protocol_supported(protocol)
        with pytest.raises(UnknownProtocolError):
            get_backends(protocol)

    @pytest.mark.parametrize("protocol", ["smithy-rpc", "rest", ""])
    def test_unknown_protocol(self, protocol):
        assert not is_protocol_supported(protocol)
        with pytest.raises(UnknownProtocolError) as exc_info:
            get_backends(protocol)
        assert exc_info.value.protocol == protocol
        assert exc_info.value.available == list_supported_protocols()

    def test_config_is_shared_by_the_pair(self):
        config = GeneratorConfig(crate_name="rusoto")
        generator, errors = get_backends("json", config)
        assert generator.config is config
        assert errors.config is config

    def test_dict_config(self):
        generator, _ = get_backends("json", {"timestamp_type": "DateTime"})
        assert generator.timestamp_type == "DateTime"
        assert generator.config.custom["content_type_prefix"] == "application/x-amz-json-"

    def test_invalid_config_type(self):
        with pytest.raises(RegistryError, match="Invalid config type"):
            get_backends("json", 42)

    def test_registry_is_a_singleton(self):
        assert get_registry() is get_registry()


class TestProtocolInfo:
    def test_alias_resolves(self):
        info = get_protocol_info("ec2")
        assert info["name"] == "query"
        assert info["generator"] == "QueryGenerator"
        assert info["error_types"] == "XmlErrorTypes"
        assert info["error_style"] == "xml"
        assert info["aliases"] == ["ec2"]

    def test_json_info(self):
        info = get_protocol_info("json")
        assert info["timestamp_type"] == "f64"
        assert info["error_style"] == "json"
        assert info["aliases"] == []
        assert info["module"] == "crategen.codegen.protocols.json_generator"

    def test_unknown(self):
        with pytest.raises(UnknownProtocolError):
            get_protocol_info("smithy-rpc")


class TestProtocolRegistry:
    def test_register_and_resolve(self, registry):
        registry.register("json", JsonGenerator, JsonErrorTypes, aliases=["json-1.1"])
        assert registry.resolve("json") == "json"
        assert registry.resolve("json-1.1") == "json"
        assert registry.list_all_names() == {"json": ["json", "json-1.1"]}

    def test_existing_registration_is_kept(self, registry):
        registry.register("json", JsonGenerator, JsonErrorTypes)
        registry.register("json", QueryGenerator, XmlErrorTypes)
        assert registry.get_backend_classes("json") == (JsonGenerator, JsonErrorTypes)

    def test_replace(self, registry):
        registry.register("json", JsonGenerator, JsonErrorTypes)
        registry.register("json", RestJsonGenerator, JsonErrorTypes, replace=True)
        assert registry.get_backend_classes("json") == (RestJsonGenerator, JsonErrorTypes)

    def test_invalid_generator_class(self, registry):
        with pytest.raises(RegistryError, match="ProtocolGenerator"):
            registry.register("json", JsonErrorTypes, JsonErrorTypes)

    def test_invalid_error_class(self, registry):
        with pytest.raises(RegistryError, match="ErrorTypesGenerator"):
            registry.register("json", JsonGenerator, JsonGenerator)

    def test_alias_conflicts_with_protocol(self, registry):
        registry.register("json", JsonGenerator, JsonErrorTypes)
        with pytest.raises(RegistryError, match="conflicts"):
            registry.register("query", QueryGenerator, XmlErrorTypes, aliases=["json"])

    def test_alias_already_taken(self, registry):
        registry.register("query", QueryGenerator, XmlErrorTypes, aliases=["ec2"])
        with pytest.raises(RegistryError, match="already points to 'query'"):
            registry.register("rest-xml", RestXmlGenerator, XmlErrorTypes, aliases=["ec2"])

    def test_unregister_removes_aliases(self, registry):
        registry.register("query", QueryGenerator, XmlErrorTypes, aliases=["ec2"])
        registry.unregister("query")
        assert not registry.is_supported("query")
        assert not registry.is_supported("ec2")
        assert registry.list_protocols() == []

    def test_empty_registry(self, registry):
        with pytest.raises(UnknownProtocolError, match="Unknown protocol 'json'"):
            registry.create_backends("json")
