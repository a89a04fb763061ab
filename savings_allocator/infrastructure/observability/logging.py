"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from savings_allocator.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_allocation(
    request_id: str,
    cash_amount: Decimal,
    total_interest: Decimal,
    remaining_cash: Decimal,
    funded_tiers: int,
    duration_ms: float,
) -> None:
    """Log structured allocation outcome"""
    logging.info(
        "Allocation completed",
        extra={
            "request_id": request_id,
            "step": "allocation_complete",
            "cash_amount": str(cash_amount),
            "total_interest": str(total_interest),
            "remaining_cash": str(remaining_cash),
            "funded_tiers": funded_tiers,
            "duration_ms": duration_ms,
        },
    )


def log_status_change(request_id: str, code: str, action: str, status: str) -> None:
    """Log an account status transition request and its resulting status"""
    logging.info(
        "Account status updated",
        extra={
            "request_id": request_id,
            "step": "status_change",
            "code": code,
            "action": action,
            "status": status,
        },
    )
