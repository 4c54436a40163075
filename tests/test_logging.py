"""Correlation ids on log records."""
import logging

from hrpay.logging import _CorrelationFilter, get_request_id, get_run_id, set_request_id


def test_set_request_id_uses_given_value():
    assert set_request_id("req-1") == "req-1"
    assert get_request_id() == "req-1"


def test_set_request_id_generates_one():
    rid = set_request_id()
    assert rid
    assert get_request_id() == rid


def test_filter_stamps_run_and_request_ids():
    set_request_id("req-2")
    record = logging.LogRecord("hrpay.test", logging.INFO, __file__, 1, "hello", None, None)
    assert _CorrelationFilter().filter(record)
    assert record.run_id == get_run_id()
    assert record.request_id == "req-2"
