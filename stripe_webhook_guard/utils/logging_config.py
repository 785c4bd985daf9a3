"""
Structured Logging Configuration

JSON logs for the webhook guard. Every record carries the request's
correlation ID, and webhook secrets, signatures and raw payloads are
stripped before a record is written.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "stripe_webhook_guard"

# Extra keys that must never reach the log output
SENSITIVE_FIELDS = frozenset({"secret", "signature", "payload", "body"})

correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "correlation_id", default=None
)


class CorrelationIdFilter(logging.Filter):
    """Attach the current correlation ID to each record"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "N/A"
        return True


class WebhookJsonFormatter(jsonlogger.JsonFormatter):
    """Flat JSON records: UTC timestamp, level, logger, correlation ID and extras"""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        for field in SENSITIVE_FIELDS.intersection(log_record):
            log_record[field] = "[REDACTED]"

        log_record["timestamp"] = datetime.fromtimestamp(
            record.created, tz=timezone.utc
        ).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["correlation_id"] = getattr(record, "correlation_id", "N/A")


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Send the package's logs to stdout as JSON.

    Calling it again replaces the handler, so ``create_app`` can run
    more than once in a process.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(WebhookJsonFormatter("%(message)s"))
    handler.addFilter(CorrelationIdFilter())
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger nested under the package logger"""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Set the correlation ID for this context, generating a UUID when none is given"""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def clear_correlation_id() -> None:
    correlation_id_var.set(None)
