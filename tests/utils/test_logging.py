"""Tests for the logging utility module."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def clear_contextvars():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.mark.parametrize("kwargs", [
        {},
        {"level": "DEBUG"},
        {"level": "warning"},
        {"json_format": True},
        {"include_timestamp": False},
        {"level": "ERROR", "json_format": True, "include_timestamp": True},
    ])
    def test_configure_logging(self, kwargs):
        """Test configure_logging accepts each option combination."""
        from qa_automation.utils.logging import configure_logging

        # Should not raise
        configure_logging(**kwargs)


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_default(self):
        from qa_automation.utils.logging import configure_logging, get_logger

        configure_logging()
        logger = get_logger()

        assert logger is not None

    def test_get_logger_with_context(self):
        """Test get_logger binds the given context."""
        from qa_automation.utils.logging import get_logger

        with structlog.testing.capture_logs() as captured:
            get_logger("planner", session_id="s-1").info("planned")

        assert captured[0]["event"] == "planned"
        assert captured[0]["session_id"] == "s-1"


class TestLogContext:
    """Tests for LogContext class."""

    def test_log_context_creation(self):
        from qa_automation.utils.logging import LogContext

        context = LogContext(session_id="123", file="src/App.tsx")

        assert context.context == {"session_id": "123", "file": "src/App.tsx"}

    def test_binds_and_unbinds(self):
        """Test keys are visible inside the block and removed afterwards."""
        from qa_automation.utils.logging import LogContext

        with LogContext(session_id="456"):
            assert structlog.contextvars.get_contextvars() == {"session_id": "456"}

        assert structlog.contextvars.get_contextvars() == {}

    def test_nested_contexts(self):
        from qa_automation.utils.logging import LogContext

        with LogContext(session_id="1"):
            with LogContext(file="a.tsx"):
                assert structlog.contextvars.get_contextvars() == {"session_id": "1", "file": "a.tsx"}
            assert structlog.contextvars.get_contextvars() == {"session_id": "1"}

    def test_unbinds_on_exception(self):
        from qa_automation.utils.logging import LogContext

        with pytest.raises(RuntimeError):
            with LogContext(session_id="789"):
                raise RuntimeError("boom")

        assert structlog.contextvars.get_contextvars() == {}


class TestLogOperation:
    """Tests for log_operation context manager."""

    def test_success(self):
        """Test a successful operation logs start and completion with result fields."""
        from qa_automation.utils.logging import log_operation

        with structlog.testing.capture_logs() as captured:
            with log_operation("apply_result", session_id="s-1") as op:
                op["applied"] = 2

        assert [entry["event"] for entry in captured] == ["apply_result started", "apply_result completed"]
        assert captured[1]["success"] is True
        assert captured[1]["applied"] == 2
        assert captured[1]["session_id"] == "s-1"

    def test_failure_is_logged_and_reraised(self):
        from qa_automation.utils.logging import log_operation

        with structlog.testing.capture_logs() as captured:
            with pytest.raises(OSError):
                with log_operation("rollback"):
                    raise OSError("disk full")

        assert captured[-1]["event"] == "rollback failed"
        assert captured[-1]["log_level"] == "error"
        assert captured[-1]["error"] == "disk full"
