import json
import logging
import sys

import pytest

from app_logging import (
    ContextFilter,
    DefaultCorrelationFilter,
    DevFormatter,
    JSONFormatter,
    LogContext,
    PIIFilter,
    log_context,
    log_ride_context,
    setup_logging,
)
from core.correlation import CorrelationFilter, get_current_correlation_id, with_correlation


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("dispatch", logging.INFO, __file__, 1, msg, args, None)


@pytest.mark.unit
class TestPIIFilter:
    def test_masks_email(self):
        record = _record("Receipt sent to jane.doe@example.com")
        PIIFilter().filter(record)
        assert record.msg == "Receipt sent to [EMAIL]"

    def test_masks_phone(self):
        record = _record("Driver phone 555-123-4567 updated")
        PIIFilter().filter(record)
        assert record.msg == "Driver phone [PHONE] updated"

    def test_masks_iban(self):
        record = _record("Payout account FR7630006000011234567890189 saved")
        PIIFilter().filter(record)
        assert record.msg == "Payout account [IBAN] saved"

    def test_leaves_ids_alone(self):
        record = _record("Ride 42 assigned to driver 7")
        PIIFilter().filter(record)
        assert record.msg == "Ride 42 assigned to driver 7"


@pytest.mark.unit
class TestContext:
    def test_log_context_nests_and_resets(self):
        with log_ride_context(12, driver_id=7):
            with log_context(topic="rides"):
                assert LogContext.get() == {"ride_id": 12, "driver_id": 7, "topic": "rides"}
            assert LogContext.get() == {"ride_id": 12, "driver_id": 7}
        assert LogContext.get() == {}

    def test_context_filter_injects_fields(self):
        record = _record("Applied assign")
        with log_ride_context(12):
            ContextFilter().filter(record)
        assert record.ride_id == 12

    def test_set_and_clear(self):
        LogContext.set(customer_id=3)
        assert LogContext.get() == {"customer_id": 3}
        LogContext.clear()
        assert LogContext.get() == {}


@pytest.mark.unit
class TestCorrelation:
    def test_filter_uses_current_id(self):
        record = _record("hello")
        with with_correlation("req-1"):
            assert get_current_correlation_id() == "req-1"
            CorrelationFilter().filter(record)
        assert record.correlation_id == "req-1"
        assert get_current_correlation_id() is None

    def test_default_filter(self):
        record = _record("hello")
        DefaultCorrelationFilter().filter(record)
        assert record.correlation_id == "-"


@pytest.mark.unit
class TestFormatters:
    def test_json_includes_context_fields(self):
        record = _record("Ride %s created", 5)
        record.ride_id = 5
        record.correlation_id = "req-9"

        data = json.loads(JSONFormatter("production").format(record))

        assert data["message"] == "Ride 5 created"
        assert data["level"] == "INFO"
        assert data["env"] == "production"
        assert data["ride_id"] == 5
        assert data["correlation_id"] == "req-9"

    def test_json_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "dispatch", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]

    def test_dev_format(self):
        record = _record("Ride created")
        record.correlation_id = "-"
        line = DevFormatter().format(record)
        assert "[corr=-] dispatch: Ride created" in line


@pytest.mark.unit
def test_setup_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(level="DEBUG", json_output=True)
        setup_logging(level="WARNING")

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, DevFormatter)
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
