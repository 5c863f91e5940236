"""Structured JSON logging for projection runs"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from treasury_engine.config import settings
from treasury_engine.domain.models import SkippedItem


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


def log_simulation(
    request_id: str,
    as_of_date: str,
    horizon_days: int,
    insolvency_day_offset: Optional[int],
    ending_balance_cents: int,
    duration_ms: float,
) -> None:
    """Log structured simulation outcome"""
    logging.info(
        "Cash projection completed",
        extra={
            "request_id": request_id,
            "step": "cash_projection_complete",
            "as_of_date": as_of_date,
            "horizon_days": horizon_days,
            "outcome": "solvent" if insolvency_day_offset is None else "insolvent",
            "insolvency_day_offset": insolvency_day_offset,
            "ending_balance_cents": ending_balance_cents,
            "duration_ms": duration_ms,
        },
    )


def log_gap_report(
    request_id: str,
    year: int,
    gap_cents: int,
    coverage_percent: int,
    skipped_count: int,
    duration_ms: float,
) -> None:
    """Log structured year gap outcome"""
    logging.info(
        "Gap report completed",
        extra={
            "request_id": request_id,
            "step": "gap_report_complete",
            "year": year,
            "gap_cents": gap_cents,
            "coverage_percent": coverage_percent,
            "skipped_count": skipped_count,
            "duration_ms": duration_ms,
        },
    )


def log_skipped_item(request_id: str, item: SkippedItem) -> None:
    """Log a record left out of a batch"""
    logging.warning(
        f"Skipped {item.source_kind} {item.source_id}: {item.reason}",
        extra={
            "request_id": request_id,
            "step": "record_skipped",
            "source_kind": item.source_kind,
            "source_id": item.source_id,
        },
    )


def log_split(
    request_id: str,
    gross_amount_cents: int,
    commission_rate_percent: int,
    available_amount_cents: int,
    balanced: bool,
    duration_ms: float,
) -> None:
    """Log structured revenue split outcome"""
    logging.info(
        "Revenue split completed",
        extra={
            "request_id": request_id,
            "step": "split_complete",
            "gross_amount_cents": gross_amount_cents,
            "commission_rate_percent": commission_rate_percent,
            "available_amount_cents": available_amount_cents,
            "balanced": balanced,
            "duration_ms": duration_ms,
        },
    )
