"""
Structured logging for the engine and the API.

Every module logs through ``get_logger(__name__)``; keyword arguments on a
log call become structured fields, rendered as JSON in deployed
environments and as ``key=value`` pairs locally.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

NOISY_LOGGERS = ("uvicorn.access", "httpx")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, tagged with service and environment."""

    def __init__(self, service_name: str = "tms-engine", environment: str | None = None):
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if self.environment:
            entry["environment"] = self.environment

        entry.update(getattr(record, "extra_fields", None) or {})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class KeyValueFormatter(logging.Formatter):
    """Human-readable formatter that appends structured fields as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "extra_fields", None)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that turns keyword arguments into structured fields.

    Usage:
        logger.info("Shipment created", shipment_id=shipment.id)
    """

    _LOGGING_KWARGS = ("exc_info", "stack_info", "stacklevel", "extra")

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        extra = dict(kwargs.pop("extra", None) or {})

        fields = {k: kwargs.pop(k) for k in list(kwargs) if k not in self._LOGGING_KWARGS}
        if fields:
            extra["extra_fields"] = fields

        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    service_name: str = "tms-engine",
    log_level: str = "INFO",
    use_json: bool = True,
    environment: str | None = None,
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        service_name: Name of the service for log entries
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_json: JSON lines when True, key=value text otherwise
        environment: Deployment environment added to JSON entries
    """
    level = getattr(logging, log_level.upper())
    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if use_json:
        handler.setFormatter(JSONFormatter(service_name=service_name, environment=environment))
    else:
        handler.setFormatter(KeyValueFormatter())
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Structured logger wrapping ``logging.getLogger(name)``."""
    return StructuredLogger(logging.getLogger(name), {})
