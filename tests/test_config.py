import json

import pytest

from crategen.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    get_config_manager,
    load_config,
)


@pytest.fixture
def manager():
    return ConfigManager()


def write_config(tmp_path, data, name="crategen.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestDefaults:
    def test_protocol_neutral(self):
        config = load_config()
        assert config == GeneratorConfig()
        assert config.crate_name == "crategen"
        assert config.add_comments
        assert config.timestamp_type is None

    @pytest.mark.parametrize("protocol", ["json", "rest-json"])
    def test_json_protocols(self, protocol):
        config = load_config(protocol)
        assert config.custom == {"content_type_prefix": "application/x-amz-json-"}

    @pytest.mark.parametrize("protocol", ["query", "ec2", "rest-xml"])
    def test_xml_protocols(self, protocol):
        assert load_config(protocol).custom == {"xml_namespace": None}

    def test_unknown_protocol_gets_neutral_defaults(self):
        assert load_config("smithy-rpc") == GeneratorConfig()

    def test_defaults_are_not_shared(self, manager):
        first = manager.get_config("json")
        first.custom["content_type_prefix"] = "changed"
        assert manager.get_config("json").custom["content_type_prefix"] == (
            "application/x-amz-json-"
        )

    def test_list_protocols(self, manager):
        assert manager.list_protocols() == ["ec2", "json", "query", "rest-json", "rest-xml"]

    def test_global_manager(self):
        assert get_config_manager() is get_config_manager()


class TestMerging:
    def test_file_overrides_defaults(self, tmp_path):
        path = write_config(tmp_path, {"crate_name": "rusoto", "add_comments": False})
        config = load_config("json", config_file=path)
        assert config.crate_name == "rusoto"
        assert not config.add_comments
        assert config.custom["content_type_prefix"] == "application/x-amz-json-"

    def test_overrides_beat_file(self, tmp_path):
        path = write_config(tmp_path, {"crate_name": "from-file"})
        config = load_config("json", custom_config={"crate_name": "explicit"}, config_file=path)
        assert config.crate_name == "explicit"

    def test_custom_dicts_are_merged(self, tmp_path):
        path = write_config(tmp_path, {"custom": {"xml_namespace": "s3"}})
        config = load_config("rest-xml", custom_config={"custom": {"extra": 1}}, config_file=path)
        assert config.custom == {"xml_namespace": "s3", "extra": 1}

    def test_unknown_keys_go_to_custom(self, manager):
        config = manager.get_config("json", {"signature_version": "v4"})
        assert config.custom["signature_version"] == "v4"
        assert config.custom["content_type_prefix"] == "application/x-amz-json-"

    def test_type_name_overrides(self, manager):
        config = manager.get_config(None, {"type_name_overrides": {"Result": "CallResult"}})
        assert config.type_name_overrides == {"Result": "CallResult"}


class TestConfigFiles:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config("json", config_file=tmp_path / "nope.json")

    def test_wrong_suffix(self, tmp_path):
        path = tmp_path / "crategen.yaml"
        path.write_text("crate_name: x", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be JSON"):
            load_config("json", config_file=path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "crategen.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config("json", config_file=path)

    def test_not_an_object(self, tmp_path):
        path = write_config(tmp_path, ["crate_name"])
        with pytest.raises(ConfigError, match="JSON object"):
            load_config("json", config_file=path)

    def test_save_and_reload(self, manager, tmp_path):
        config = GeneratorConfig(crate_name="saved", custom={"xml_namespace": "s3"})
        path = tmp_path / "saved.json"
        manager.save_config(config, path)
        assert manager.get_config(config_file=path) == config


class TestValidation:
    def test_valid(self, manager):
        assert manager.validate_config(GeneratorConfig()) == []

    def test_invalid_override(self, manager):
        config = GeneratorConfig(type_name_overrides={"Result": "Not A Name"})
        warnings = manager.validate_config(config)
        assert warnings == ["Invalid type name override for 'Result': 'Not A Name'"]

    def test_empty_values(self, manager):
        config = GeneratorConfig(crate_name="", timestamp_type="  ")
        warnings = manager.validate_config(config)
        assert "timestamp_type must not be empty" in warnings
        assert "crate_name must not be empty" in warnings
