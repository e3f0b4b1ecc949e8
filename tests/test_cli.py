import json
from unittest.mock import MagicMock, patch

import pytest

from crategen.codegen.cli_integration import create_parser, main


@pytest.fixture
def output_file(tmp_path):
    return tmp_path / "example.rs"


class TestParser:
    def test_defaults(self):
        args = create_parser().parse_args(["service.json"])
        assert args.definition == "service.json"
        assert args.url is None
        assert args.output is None
        assert args.log_level == "WARNING"
        assert not args.no_comments

    def test_definition_and_url_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["service.json", "--url", "https://example.com/a.json"])

    def test_log_level_choices(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["service.json", "--log-level", "LOUD"])


class TestGenerate:
    def test_writes_output_file(self, definition_file, output_file):
        assert main([str(definition_file), "-o", str(output_file)]) == 0

        code = output_file.read_text(encoding="utf-8")
        assert "pub trait Example {" in code
        assert "pub struct ExampleClient<P, D>" in code
        assert code.endswith("\n")

    def test_writes_to_stdout(self, definition_file, capsys):
        assert main([str(definition_file)]) == 0
        assert "pub struct PutItemInput<'a> {" in capsys.readouterr().out

    def test_name_override(self, definition_file, output_file):
        assert main([str(definition_file), "--name", "My Service", "-o", str(output_file)]) == 0
        assert "pub trait MyService {" in output_file.read_text(encoding="utf-8")

    def test_no_comments(self, definition_file, output_file):
        assert main([str(definition_file), "--no-comments", "-o", str(output_file)]) == 0
        assert "<p>Stores an item.</p>" not in output_file.read_text(encoding="utf-8")

    def test_config_file(self, definition_file, output_file, tmp_path):
        config_path = tmp_path / "crategen.json"
        config_path.write_text(json.dumps({"crate_name": "rusoto"}), encoding="utf-8")

        result = main(
            [str(definition_file), "--config", str(config_path), "-o", str(output_file)]
        )
        assert result == 0
        assert "the rusoto project" in output_file.read_text(encoding="utf-8")

    def test_verbose_metadata(self, definition_file, output_file, capsys):
        assert main([str(definition_file), "--verbose", "-o", str(output_file)]) == 0
        assert "Struct Count" in capsys.readouterr().out

    def test_from_url(self, example_definition, output_file):
        response = MagicMock()
        response.headers = {"content-type": "application/json"}
        response.json.return_value = example_definition

        with patch("crategen.utils.requests.get", return_value=response) as mock_get:
            result = main(
                ["--url", "https://example.com/example.json", "-o", str(output_file)]
            )

        assert result == 0
        mock_get.assert_called_once_with("https://example.com/example.json", timeout=30)
        assert "pub trait Example {" in output_file.read_text(encoding="utf-8")


class TestFailures:
    def test_input_required(self):
        assert main([]) == 1

    def test_missing_definition(self, tmp_path, output_file):
        assert main([str(tmp_path / "missing.json"), "-o", str(output_file)]) == 1
        assert not output_file.exists()

    def test_invalid_definition(self, tmp_path, output_file):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"metadata": {}}), encoding="utf-8")
        assert main([str(path), "-o", str(output_file)]) == 1
        assert not output_file.exists()

    def test_unknown_protocol_writes_nothing(self, example_definition, tmp_path, output_file):
        example_definition["metadata"]["protocol"] = "smithy-rpc"
        path = tmp_path / "smithy.json"
        path.write_text(json.dumps(example_definition), encoding="utf-8")

        assert main([str(path), "-o", str(output_file)]) == 1
        assert not output_file.exists()

    def test_missing_shape_writes_nothing(self, example_definition, tmp_path, output_file):
        example_definition["operations"]["PutItem"]["errors"].append({"shape": "Gone"})
        path = tmp_path / "gone.json"
        path.write_text(json.dumps(example_definition), encoding="utf-8")

        assert main([str(path), "-o", str(output_file)]) == 1
        assert not output_file.exists()

    def test_bad_config_file(self, definition_file, output_file, tmp_path):
        assert (
            main(
                [
                    str(definition_file),
                    "--config",
                    str(tmp_path / "absent.json"),
                    "-o",
                    str(output_file),
                ]
            )
            == 1
        )
        assert not output_file.exists()


class TestInformation:
    def test_list_protocols(self, capsys):
        assert main(["--list-protocols"]) == 0
        out = capsys.readouterr().out
        for protocol in ("json", "query", "rest-json", "rest-xml"):
            assert protocol in out

    def test_protocol_info(self, capsys):
        assert main(["--protocol-info", "ec2"]) == 0
        out = capsys.readouterr().out
        assert "QueryGenerator" in out
        assert "XmlErrorTypes" in out

    def test_unknown_protocol_info(self):
        assert main(["--protocol-info", "smithy-rpc"]) == 1
