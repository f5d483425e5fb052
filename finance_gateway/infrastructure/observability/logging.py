"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from finance_gateway.config import settings


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


def log_simulation(
    request_id: str,
    user_id: str,
    debt_type: str,
    success: bool,
    total_months: int | None,
    duration_ms: float,
) -> None:
    """Log payoff simulation outcome"""
    logging.info(
        "Simulation completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "simulation_complete",
            "debt_type": debt_type,
            "outcome": "payable" if success else "insufficient_payment",
            "total_months": total_months,
            "duration_ms": duration_ms,
        },
    )


def log_ledger_event(
    request_id: str,
    user_id: str,
    event: str,
    entity_id: str,
    amount: float | None = None,
) -> None:
    """Log a balance-changing write (payment, contribution, transaction)"""
    logging.info(
        "Ledger event",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": event,
            "entity_id": entity_id,
            "amount": amount,
        },
    )
