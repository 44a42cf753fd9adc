"""Tests for settings and structured logging."""

import logging

from clinassess.core.config import Settings, get_settings
from clinassess.core.logging import AuditLogger, StructuredFormatter, setup_logging


class TestSettings:
    """Tests for environment-driven settings."""

    def test_test_environment(self) -> None:
        """The test suite runs with ENV=test."""
        assert get_settings().is_test is True
        assert get_settings().is_prod is False

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.storage_key == "assessmentData"
        assert settings.default_patient_name == "Patienten"
        assert settings.instruments_dir is None

    def test_environment_override(self, monkeypatch) -> None:
        monkeypatch.setenv("STORAGE_KEY", "other")
        monkeypatch.setenv("PERSIST_RESPONSES", "false")

        settings = Settings(_env_file=None)

        assert settings.storage_key == "other"
        assert settings.persist_responses is False


class TestStructuredFormatter:
    """Tests for key=value log output."""

    def test_extra_fields_are_included(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "scored", None, None)
        record.instrument = "cats2"

        line = StructuredFormatter().format(record)

        assert "level=INFO" in line
        assert "message=scored" in line
        assert "instrument=cats2" in line


class TestAuditLogger:
    """Tests for audit lines."""

    def test_audit_line_format(self, caplog) -> None:
        with caplog.at_level("INFO", logger="audit"):
            AuditLogger().log("update_text", "recommendation", "child_male/x/0", {"k": 1})

        assert (
            "AUDIT: action=update_text entity=recommendation:child_male/x/0 metadata={'k': 1}"
            in caplog.text
        )


class TestSetupLogging:
    """Tests for root logger configuration."""

    def test_single_structured_handler_outside_dev(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging()

            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
