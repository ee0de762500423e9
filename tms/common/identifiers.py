"""
Record identifiers and human-readable shipment numbers.
"""

import secrets
import string
import uuid
from datetime import date, datetime, timezone

SHIPMENT_NUMBER_PREFIX = "TMS"
_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def new_id() -> str:
    """Return a new opaque record id (random UUID4, no registry check)."""
    return str(uuid.uuid4())


def new_shipment_number(today: date | None = None, suffix_length: int = 4) -> str:
    """
    Return a display shipment number such as ``TMS-20250605-7QXK``.

    Uniqueness is probabilistic; the record ``id`` remains the primary key.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(suffix_length))
    return f"{SHIPMENT_NUMBER_PREFIX}-{today:%Y%m%d}-{suffix}"
