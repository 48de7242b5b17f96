from __future__ import annotations

import json
import logging

from funnel_builder.logging_config import StructuredFormatter, get_trace_id, set_trace_id


def test_formatter_emits_extra_fields():
    record = logging.makeLogRecord(
        {"name": "funnel_builder.editor", "levelname": "INFO", "msg": "Rejected edit", "operation": "remove_step"}
    )

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["message"] == "Rejected edit"
    assert payload["severity"] == "INFO"
    assert payload["operation"] == "remove_step"
    assert payload["timestamp"].endswith("+00:00")
    assert "msg" not in payload


def test_formatter_includes_trace_id():
    set_trace_id("projects/demo/traces/abc")
    try:
        payload = json.loads(StructuredFormatter().format(logging.makeLogRecord({"msg": "hi"})))
    finally:
        set_trace_id(None)

    assert payload["logging.googleapis.com/trace"] == "projects/demo/traces/abc"
    assert get_trace_id() is None
