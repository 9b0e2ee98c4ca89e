"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping each record with its UTC time, level and service name"""

    def __init__(self, *args: Any, service_name: str = "agency-ledger", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "agency-ledger") -> None:
    """Send every record to stdout as one JSON object per line"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Replace handlers installed by the server or a previous call
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name=service_name)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_report(request_id: str, report: str, duration_ms: float, **fields: Any) -> None:
    """Log structured report outcome for analysis"""
    logging.info(
        "Report computed",
        extra={
            "request_id": request_id,
            "step": "report_complete",
            "report": report,
            "duration_ms": duration_ms,
            **fields,
        },
    )
