"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from rule37_service.config import settings


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


def log_calculation(
    request_id: str,
    ledger_count: int,
    entry_count: int,
    row_count: int,
    breached_count: int,
    at_risk_count: int,
    duration_ms: float,
) -> None:
    """Log structured calculation outcome for analysis"""
    logging.info(
        "Rule 37 calculation completed",
        extra={
            "request_id": request_id,
            "step": "calculation_complete",
            "ledger_count": ledger_count,
            "entry_count": entry_count,
            "row_count": row_count,
            "breached_count": breached_count,
            "at_risk_count": at_risk_count,
            "duration_ms": duration_ms,
        },
    )
