"""Unit tests for JSON log formatting and request correlation"""

import json
import logging

from reunite.observability.logging_config import JSONFormatter, RequestIDFilter
from reunite.observability.request_id import get_request_id, request_id_var, set_request_id


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("reunite.test", logging.INFO, __file__, 10, "Match rejected", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context_fields():
    record = _record(match_id="m-1", user_id="u-1", request_id="req-1")

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Match rejected"
    assert data["level"] == "INFO"
    assert data["request_id"] == "req-1"
    assert data["match_id"] == "m-1"
    assert data["user_id"] == "u-1"
    assert "item_id" not in data


def test_request_id_filter_stamps_records():
    token = request_id_var.set(None)
    try:
        set_request_id("req-42")
        record = _record()
        assert RequestIDFilter().filter(record) is True
        assert record.request_id == "req-42"
    finally:
        request_id_var.reset(token)


def test_request_id_default_outside_requests():
    token = request_id_var.set(None)
    try:
        assert get_request_id() == "no-request-id"
    finally:
        request_id_var.reset(token)
