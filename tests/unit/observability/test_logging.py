"""Tests for structured logging."""

import json
from io import StringIO

import structlog

from docflow.observability.logging import get_logger, redact_user_text, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_json_format(self) -> None:
        setup_logging(level="INFO", format="json", redact_pii=False)
        get_logger("test").info("test_message")

    def test_setup_console_format(self) -> None:
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        get_logger("test").debug("test_message")

    def test_setup_with_pii_redaction(self) -> None:
        setup_logging(level="INFO", format="json", redact_pii=True)
        get_logger("test").info("test_message", email="user@example.com")


class TestRedactUserText:
    """Tests for the user-text redaction processor."""

    def test_redacts_user_text_keys(self) -> None:
        event_dict = {"user_response": "my budget is tight", "prompt": "draft", "session_id": "s-1"}
        result = redact_user_text(None, "info", event_dict)
        assert result["user_response"] == "[REDACTED]"
        assert result["prompt"] == "[REDACTED]"
        assert result["session_id"] == "s-1"

    def test_key_match_ignores_case(self) -> None:
        result = redact_user_text(None, "info", {"User_Input": "hello"})
        assert result["User_Input"] == "[REDACTED]"

    def test_redacts_email_pattern_in_string_value(self) -> None:
        result = redact_user_text(None, "info", {"error": "Contact user@example.com for help"})
        assert result["error"] == "Contact [EMAIL] for help"

    def test_redacts_phone_pattern_in_string_value(self) -> None:
        result = redact_user_text(None, "info", {"error": "Call me at +1-555-123-4567 please"})
        assert "+1-555-123-4567" not in result["error"]
        assert "[PHONE]" in result["error"]

    def test_handles_nested_dicts_and_lists(self) -> None:
        event_dict = {
            "owner": {"email": "user@example.com", "name": "Sam"},
            "notes": ["reach me at a@b.io", 3],
        }
        result = redact_user_text(None, "info", event_dict)
        assert result["owner"] == {"email": "[REDACTED]", "name": "Sam"}
        assert result["notes"] == ["reach me at [EMAIL]", 3]

    def test_preserves_other_data(self) -> None:
        event_dict = {
            "event": "turn_processed",
            "decision": "followup",
            "response_length": 42,
        }
        result = redact_user_text(None, "info", event_dict)
        assert result == event_dict
        assert result is not event_dict


class TestJSONLogging:
    """Tests for JSON log output format."""

    def test_json_output_includes_bound_context(self) -> None:
        output = StringIO()
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                redact_user_text,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(0),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(output),
            cache_logger_on_first_use=False,
        )
        structlog.contextvars.bind_contextvars(session_id="s-1")
        try:
            structlog.get_logger("test").info("turn_processed", user_input="hello")
        finally:
            structlog.contextvars.clear_contextvars()

        parsed = json.loads(output.getvalue().strip())
        assert parsed["event"] == "turn_processed"
        assert parsed["session_id"] == "s-1"
        assert parsed["user_input"] == "[REDACTED]"
        assert "timestamp" in parsed
        assert parsed["level"] == "info"
