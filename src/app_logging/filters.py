"""Log filters for PII masking and correlation ID defaults."""

import logging
import re


class PIIFilter(logging.Filter):
    """Masks PII (emails, phone numbers, IBANs) in log messages."""

    EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")
    PHONE_PATTERN = re.compile(r"\d{3}[-.\s]?\d{3}[-.\s]?\d{4}")
    IBAN_PATTERN = re.compile(r"\b[A-Z]{2}\d{2}[A-Z0-9]{11,30}\b")

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            msg = record.msg
            if "@" in msg:
                msg = self.EMAIL_PATTERN.sub("[EMAIL]", msg)
            msg = self.IBAN_PATTERN.sub("[IBAN]", msg)
            if any(c.isdigit() for c in msg):
                msg = self.PHONE_PATTERN.sub("[PHONE]", msg)
            record.msg = msg
        return True


class DefaultCorrelationFilter(logging.Filter):
    """Adds default correlation_id if not present.

    Note: request-scoped IDs come from core.correlation.CorrelationFilter,
    which runs first on the handler installed by setup_logging.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True
