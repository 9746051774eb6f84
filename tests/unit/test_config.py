"""
Unit Tests for Configuration and Logging Setup
"""

import logging

from config.constants import FORMAT_EXTENSIONS
from config.logging_config import get_logger, setup_logger
from config.settings import Settings


class TestSettings:

    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.wrap_width == 72
        assert s.full_width_threshold == 500
        assert s.figure_workers == 1
        assert s.max_include_depth is None
        assert s.tex_document_class == "article"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("RLY_WRAP_WIDTH", "60")
        monkeypatch.setenv("RLY_FIG2DEV_PATH", "/opt/bin/fig2dev")
        monkeypatch.setenv("RLY_MAX_INCLUDE_DEPTH", "5")
        s = Settings(_env_file=None)
        assert s.wrap_width == 60
        assert s.fig2dev_path == "/opt/bin/fig2dev"
        assert s.max_include_depth == 5

    def test_doc_format_writes_docx(self):
        assert FORMAT_EXTENSIONS["doc"] == ".docx"


class TestLogging:

    def test_child_loggers_share_package_handlers(self):
        child = get_logger("rly.reader.classifier")
        root = setup_logger("rly")
        assert child.name == "rly.reader.classifier"
        assert not child.handlers
        assert root.handlers
        assert child.parent is not None

    def test_setup_is_idempotent(self):
        first = setup_logger("rly")
        count = len(first.handlers)
        assert setup_logger("rly") is first
        assert len(first.handlers) == count
        assert isinstance(first, logging.Logger)
