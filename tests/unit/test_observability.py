"""Unit tests for structured logging utilities in ``observability``.

Validates the null handler, trace binding, event construction, and the per-key
events the composition root emits.
"""

from __future__ import annotations

import logging

import pytest

from lib_dotenv_decoder import bind_trace_id, decode_mapping, get_logger
from lib_dotenv_decoder.observability import TRACE_ID, log_info, make_event
from tests.support import AppSettings


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="lib_dotenv_decoder")
    bind_trace_id("trace-123")
    try:
        log_info("decode_completed", source="env", path=None)
    finally:
        bind_trace_id(None)
    record = caplog.records[-1]
    assert getattr(record, "context") == {"trace_id": "trace-123", "source": "env", "path": None}


def test_bind_trace_id_clears_context() -> None:
    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    assert make_event("dotenv", "/srv/.env", {"keys": 3}) == {"source": "dotenv", "path": "/srv/.env", "keys": 3}
    assert make_event("env", None) == {"source": "env", "path": None}


def test_decode_logs_assigned_and_ignored_keys(caplog: pytest.LogCaptureFixture) -> None:
    """Each key should produce one debug event and the call one summary event."""

    caplog.set_level(logging.DEBUG, logger="lib_dotenv_decoder")
    decode_mapping({"NAME": "api", "NOPE": "x"}, AppSettings())

    events = {(record.getMessage(), getattr(record, "context").get("key")) for record in caplog.records}
    assert ("key_assigned", "NAME") in events
    assert ("key_ignored", "NOPE") in events
    summary = next(record for record in caplog.records if record.getMessage() == "decode_completed")
    context = getattr(summary, "context")
    assert (context["assigned"], context["ignored"], context["record"]) == (1, 1, "AppSettings")
