"""
Tests for structlog setup
"""

import logging

import structlog

from dashgraph.utils.logging import setup_logging


class TestSetupLogging:
    """setup_logging configures levels and renderers"""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_sets_root_level(self):
        """Test that the root logger level is set"""
        setup_logging("WARNING", json_logs=False)
        assert logging.getLogger().level == logging.WARNING

    def test_defaults_come_from_settings(self, monkeypatch):
        """Test that defaults come from settings"""
        monkeypatch.setenv("DASHGRAPH_LOG_LEVEL", "ERROR")
        setup_logging()
        assert logging.getLogger().level == logging.ERROR

    def test_json_renderer_is_last_processor(self):
        """Test that JSON mode renders with JSONRenderer"""
        setup_logging("INFO", json_logs=True)
        processors = structlog.get_config()["processors"]

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert structlog.processors.format_exc_info in processors

    def test_console_renderer_by_default(self):
        """Test that console rendering is the default"""
        setup_logging("INFO")
        processors = structlog.get_config()["processors"]

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert structlog.processors.format_exc_info not in processors
