"""Structured JSON logging for production observability"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter

# Set by the caller per inbound request so every log line can be correlated
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp, service and request metadata"""

    def __init__(self, *args: Any, service_name: str = "roundup-gateway", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name
        log_record.setdefault("request_id", request_id_var.get())


def setup_logging(level: str = "INFO", service_name: str = "roundup-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_upstream_failure(operation: str, status_code: int | None, message: str) -> None:
    """Log a failed Starling call with the extracted upstream message"""
    logging.error(
        f"Starling {operation} failed: {message}",
        extra={
            "step": operation,
            "status_code": status_code,
            "upstream_message": message,
        },
    )
