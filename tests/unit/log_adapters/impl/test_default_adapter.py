### tests/unit/log_adapters/impl/test_default_adapter.py
import json
import logging

import pytest

from verona_voice.log_adapters.impl.default_adapter import DefaultLogAdapter


@pytest.mark.asyncio
async def test_setup_configures_library_logger():
    adapter = DefaultLogAdapter()
    await adapter.setup({"log_level": "debug", "library_logger_name": "verona_voice"})
    library_logger = logging.getLogger("verona_voice")
    assert library_logger.level == logging.DEBUG
    assert len(library_logger.handlers) == 1
    await adapter.teardown()


@pytest.mark.asyncio
async def test_process_event_logs_json(caplog: pytest.LogCaptureFixture):
    adapter = DefaultLogAdapter()
    await adapter.setup({"add_console_handler_if_no_handlers": False})
    caplog.set_level(logging.INFO, logger="verona_voice")
    await adapter.process_event("turn.resolved", {"turn": 3, "intent": "ADD_TO_CART"})
    record = next(r for r in caplog.records if r.getMessage().startswith("EVENT: turn.resolved"))
    data = json.loads(record.getMessage().split(" | DATA: ", 1)[1])
    assert data == {"intent": "ADD_TO_CART", "turn": 3}


@pytest.mark.asyncio
async def test_process_event_redacts_configured_keys(caplog: pytest.LogCaptureFixture):
    adapter = DefaultLogAdapter()
    await adapter.setup({"add_console_handler_if_no_handlers": False, "redact_keys": ["text"]})
    caplog.set_level(logging.INFO, logger="verona_voice")
    await adapter.process_event("turn.user_message", {"turn": 1, "text": "my address is secret street"})
    assert "secret street" not in caplog.text
    assert "[REDACTED]" in caplog.text


@pytest.mark.asyncio
async def test_process_event_truncates_long_data(caplog: pytest.LogCaptureFixture):
    adapter = DefaultLogAdapter()
    await adapter.setup({"add_console_handler_if_no_handlers": False})
    caplog.set_level(logging.INFO, logger="verona_voice")
    await adapter.process_event("turn.dispatched", {"reply": "x" * 5000})
    message = next(r.getMessage() for r in caplog.records if "turn.dispatched" in r.getMessage())
    assert message.endswith("...")
    assert len(message.split(" | DATA: ", 1)[1]) == 2003


@pytest.mark.asyncio
async def test_process_event_before_setup_does_not_raise():
    adapter = DefaultLogAdapter()
    await adapter.process_event("session.opened", {"generation": 1})
