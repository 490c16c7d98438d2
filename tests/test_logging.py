"""Tests for structured logging configuration."""

import pytest
import structlog

from mackerel_otel.config import Settings
from mackerel_otel.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Isolate each test: reset structlog config and clear context vars."""
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


def _test_settings(**logging_kwargs) -> Settings:
    """Build a minimal Settings instance with custom logging overrides."""
    return Settings(logging=logging_kwargs)


class TestConfigureLogging:
    def test_returns_eight_char_hex_run_id(self):
        run_id = configure_logging(_test_settings())
        assert len(run_id) == 8
        assert all(c in "0123456789abcdef" for c in run_id)

    def test_run_id_bound_to_context_vars(self):
        run_id = configure_logging(_test_settings())
        assert structlog.contextvars.get_contextvars().get("run_id") == run_id

    def test_reconfigure_replaces_run_id(self):
        first = configure_logging(_test_settings())
        second = configure_logging(_test_settings())
        ctx = structlog.contextvars.get_contextvars()
        assert ctx["run_id"] == second
        assert ctx["run_id"] != first

    def test_accepts_text_format(self):
        assert configure_logging(_test_settings(level="DEBUG", format="text"))

    def test_loads_settings_when_none_given(self):
        assert len(configure_logging(None)) == 8


class TestOutput:
    def test_json_line_on_stderr(self, capsys):
        configure_logging(_test_settings())
        get_logger(__name__).info("graph definition built", metric="a.b")
        err = capsys.readouterr().err
        assert '"event": "graph definition built"' in err
        assert '"metric": "a.b"' in err
        assert '"run_id"' in err

    def test_stdout_left_clean(self, capsys):
        configure_logging(_test_settings())
        get_logger(__name__).warning("something")
        assert capsys.readouterr().out == ""

    def test_level_filters_debug(self, capsys):
        configure_logging(_test_settings(level="INFO"))
        get_logger(__name__).debug("hidden")
        assert "hidden" not in capsys.readouterr().err


class TestGetLogger:
    def test_capture_logs_records_events(self):
        configure_logging(_test_settings())
        with structlog.testing.capture_logs() as events:
            get_logger(__name__).info("hello", answer=42)
        assert len(events) == 1
        assert events[0]["event"] == "hello"
        assert events[0]["answer"] == 42
        assert events[0]["log_level"] == "info"
