from __future__ import annotations

import logging
import logging.handlers

import pytest

from imcore.diagnostics.json_codec import loads
from imcore.runtime.logging import (
    CoreLoggingConfig,
    JsonFormatter,
    configure_core_logging,
    get_core_logger,
    setup_core_logging,
    shutdown_core_logging,
)


def test_setup_core_logging_adds_handler_when_missing(monkeypatch) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        root.handlers.clear()
        root.setLevel(logging.NOTSET)
        monkeypatch.setenv("IMCORE_LOG_LEVEL", "DEBUG")
        setup_core_logging()
        assert root.handlers
        assert root.level == logging.DEBUG
    finally:
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)


def test_setup_core_logging_does_not_override_existing_handlers() -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    sentinel = logging.NullHandler()
    try:
        root.handlers.clear()
        root.addHandler(sentinel)
        root.setLevel(logging.WARNING)
        setup_core_logging()
        assert root.handlers == [sentinel]
        assert root.level == logging.WARNING
    finally:
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)


def test_file_sink_goes_through_queue_listener(tmp_path) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    log_file = tmp_path / "logs" / "core.jsonl"
    try:
        configure_core_logging(CoreLoggingConfig(level_name="INFO", file_path=str(log_file)))
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.handlers.QueueHandler)
        get_core_logger("frame").info("frame_end index=%d", 7)
        shutdown_core_logging()
        record = loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["logger"] == "imcore.frame"
        assert record["msg"] == "frame_end index=7"
    finally:
        shutdown_core_logging()
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)


def test_json_formatter_keeps_extra_fields() -> None:
    record = logging.LogRecord("imcore.memory", logging.INFO, __file__, 1, "gc", None, None)
    record.dropped = 3
    payload = loads(JsonFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["fields"] == {"dropped": 3}


def test_get_core_logger_namespaces_names() -> None:
    assert get_core_logger("layout").name == "imcore.layout"
    assert get_core_logger("imcore.frame").name == "imcore.frame"
    with pytest.raises(ValueError):
        get_core_logger("  ")
