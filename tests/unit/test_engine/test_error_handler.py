"""
Unit tests for error types, error logging and telemetry.
"""

import json
import logging

import pytest
from engine.error_handler import (
    ConfigurationError,
    GenerationError,
    PlacementExhausted,
    RuleAuthoringAmbiguity,
    ValidationFailure,
    log_error,
)
from telemetry.logger import TelemetryLogger


class TestErrors:
    """Tests for the generation error hierarchy."""

    @pytest.mark.parametrize("error", [
        ConfigurationError("bad"),
        PlacementExhausted("shop", 100),
        ValidationFailure(["No shop found"]),
        RuleAuthoringAmbiguity("no match"),
    ])
    def test_all_are_generation_errors(self, error):
        """Test every error type is a GenerationError with a user message."""
        assert isinstance(error, GenerationError)
        assert error.user_message

    def test_user_message_defaults_to_message(self):
        """Test user message defaults to message."""
        error = ConfigurationError("map too small")
        assert error.user_message == "map too small"
        assert GenerationError("x", user_message="friendly").user_message == "friendly"

    def test_validation_failure_summary(self):
        """Test validation failure summary."""
        error = ValidationFailure(["a", "b", "c", "d", "e"])
        assert str(error) == "Map validation failed: a; b; c (+2 more)"
        assert error.violations == ["a", "b", "c", "d", "e"]

    def test_log_error(self, caplog):
        """Test log_error writes the context and error type."""
        with caplog.at_level(logging.ERROR, logger="villagegen"):
            log_error(ConfigurationError("missing"), "load_settings")
        assert "Error in load_settings: ConfigurationError: missing" in caplog.text


class TestTelemetryLogger:
    """Tests for the JSON-lines event sink."""

    def test_no_path_no_file(self):
        """Test no path no file."""
        sink = TelemetryLogger(keep_in_memory=True)
        sink.log("village_generated", seed=1)
        assert sink.events[0]["event"] == "village_generated"
        assert sink.events[0]["seed"] == 1

    def test_writes_json_lines(self, tmp_path):
        """Test writes json lines."""
        path = tmp_path / "events" / "telemetry.jsonl"
        sink = TelemetryLogger()
        sink.init(path)
        sink.log("village_rejected", seed=5, violations=2)
        rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert [r["event"] for r in rows] == ["telemetry_init", "village_rejected"]
        assert rows[1]["violations"] == 2

    def test_disabled(self, tmp_path):
        """Test a disabled sink records nothing."""
        sink = TelemetryLogger(enabled=False, keep_in_memory=True)
        sink.log("anything")
        assert sink.events == []
