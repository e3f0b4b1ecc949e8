import logging

import pytest
from rich.logging import RichHandler

from crategen import logging_config
from crategen.logging_config import ROOT_LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def fresh_root(monkeypatch):
    root = logging.getLogger(ROOT_LOGGER_NAME)
    saved_handlers, saved_level = list(root.handlers), root.level
    root.handlers = []
    monkeypatch.setattr(logging_config, "_configured", False)
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)


class TestGetLogger:
    def test_module_names_keep_their_path(self):
        assert get_logger("crategen.codegen.registry").name == "crategen.codegen.registry"

    def test_foreign_names_are_nested(self):
        assert get_logger("plugins.extra").name == "crategen.plugins.extra"

    def test_root(self):
        assert get_logger(ROOT_LOGGER_NAME) is logging.getLogger(ROOT_LOGGER_NAME)


class TestSetupLogging:
    def test_installs_one_rich_handler(self, fresh_root):
        setup_logging("info")
        setup_logging("DEBUG")

        assert len(fresh_root.handlers) == 1
        assert isinstance(fresh_root.handlers[0], RichHandler)
        assert fresh_root.level == logging.DEBUG
