"""Common utilities shared across the engine."""

from tms.common.config_loader import Config, ConfigLoader, get_config
from tms.common.errors import (
    DecodeError,
    EngineError,
    FieldError,
    ImportPayloadError,
    NotFound,
    PersistenceWarning,
    ValidationError,
)
from tms.common.identifiers import new_id, new_shipment_number
from tms.common.logging_utils import get_logger, setup_logging

__all__ = [
    "Config",
    "ConfigLoader",
    "get_config",
    "get_logger",
    "setup_logging",
    "new_id",
    "new_shipment_number",
    "EngineError",
    "NotFound",
    "ValidationError",
    "DecodeError",
    "ImportPayloadError",
    "PersistenceWarning",
    "FieldError",
]
