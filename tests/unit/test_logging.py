"""Unit tests for structured JSON logging"""

import json
import logging
from roundup_gateway.infrastructure.observability.logging import CustomJsonFormatter, request_id_var


def _format(formatter: CustomJsonFormatter, **extra) -> dict:
    record = logging.LogRecord("roundup_gateway.test", logging.INFO, __file__, 1, "Round-up batch computed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(formatter.format(record))


def test_json_log_line_has_service_metadata():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name="roundup-test")

    line = _format(formatter, step="round_up_batch")

    assert line["message"] == "Round-up batch computed"
    assert line["level"] == "INFO"
    assert line["service"] == "roundup-test"
    assert line["step"] == "round_up_batch"
    assert line["request_id"] == "-"
    assert "timestamp" in line


def test_json_log_line_carries_current_request_id():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    token = request_id_var.set("req-123")
    try:
        line = _format(formatter)
    finally:
        request_id_var.reset(token)

    assert line["request_id"] == "req-123"
