"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from customer_sync.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_customer_created(customer_id: str, account_ref: Optional[str]) -> None:
    logging.info(
        "Remote customer created",
        extra={
            "customer_id": customer_id,
            "account_ref": account_ref,
            "step": "customer_created",
        },
    )


def log_customer_recreated(stale_customer_id: str, account_ref: Optional[str]) -> None:
    """Log self-healing after the remote side lost the stored customer"""
    logging.warning(
        "Stored remote customer no longer exists, recreating",
        extra={
            "customer_id": stale_customer_id,
            "account_ref": account_ref,
            "step": "customer_recreated",
        },
    )


def log_source_added(customer_id: str, source_id: str, token_kind: str) -> None:
    logging.info(
        "Payment source attached",
        extra={
            "customer_id": customer_id,
            "source_id": source_id,
            "token_kind": token_kind,
            "step": "source_added",
        },
    )
