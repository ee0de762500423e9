"""
Bulk shipment import from CSV.

Tolerant of bad rows: missing values fall back to defaults, rows that cannot
be placed (no origin, no resolvable customer) are skipped and reported.
Only a payload that cannot be read as CSV at all fails the whole import.
"""

import csv
import io
import json
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable

import pydantic
from pydantic import BaseModel, Field

from tms.common.config_loader import ImporterConfig
from tms.common.errors import ImportPayloadError, ValidationError
from tms.common.logging_utils import get_logger
from tms.models.entities.base import utc_now
from tms.models.entities.customer import Customer
from tms.models.entities.shipment import Priority, Shipment, ShipmentItem, ShipmentStatus
from tms.repository.repository import Repository

logger = get_logger(__name__)

IMPORT_NOTE = "Imported via CSV"

# Normalized header -> shipment field
COLUMNS: dict[str, str] = {
    "shipmentnumber": "shipment_number",
    "origin": "origin",
    "destination": "destination",
    "customerid": "customer_id",
    "status": "status",
    "priority": "priority",
    "estimatedpickupdate": "estimated_pickup_date",
    "estimateddeliverydate": "estimated_delivery_date",
    "itemsjson": "items",
    "items": "items",
}


def normalize_header(name: str) -> str:
    """``" Estimated Pickup_Date "`` -> ``"estimatedpickupdate"``."""
    return "".join(name.split()).replace("_", "").lower()


class ImportOutcome(str, Enum):
    """Overall result of a bulk import."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


class SkippedRow(BaseModel):
    """A data row that was not imported."""

    line: int = Field(..., description="1-based line number in the payload")
    reason: str = Field(..., description="Why the row was skipped")


class ParsedBatch(BaseModel):
    """Shipment field sets ready for creation, plus the rows that were dropped."""

    rows: list[dict[str, Any]] = Field(default_factory=list)
    skipped: list[SkippedRow] = Field(default_factory=list)


class ImportReport(BaseModel):
    """Result of ``ShipmentImporter.import_payload``."""

    outcome: ImportOutcome
    imported: list[Shipment] = Field(default_factory=list)
    skipped: list[SkippedRow] = Field(default_factory=list)
    error: str | None = None

    @property
    def imported_count(self) -> int:
        return len(self.imported)

    def summary(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "imported": self.imported_count,
            "skipped": [row.model_dump() for row in self.skipped],
            "error": self.error,
        }


def _lookup_enum(enum_cls: type[Enum], value: str, default: Enum) -> Any:
    wanted = value.strip().casefold()
    for member in enum_cls:
        if member.value.casefold() == wanted:
            return member
    return default


def parse_date(value: str) -> date | None:
    """ISO date or datetime; None when empty or unparsable."""
    value = value.strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


class ShipmentImporter:
    """
    Parse CSV payloads into shipments and merge them into a repository.

    Example:
        importer = ShipmentImporter(shipments, customers)
        report = importer.import_payload(open("shipments.csv", "rb").read())
    """

    def __init__(
        self,
        repository: Repository[Shipment],
        customers: Repository[Customer],
        settings: ImporterConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.customers = customers
        self.settings = settings or ImporterConfig()
        self.clock = clock

    def placeholder_items(self) -> list[ShipmentItem]:
        return [ShipmentItem(name=self.settings.placeholder_item_name, quantity=1, weight_kg=1, is_fragile=False)]

    def _decode(self, payload: bytes | str) -> str:
        if isinstance(payload, bytes):
            try:
                payload = payload.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ImportPayloadError(f"Payload is not valid UTF-8: {e}") from e
        if not payload.strip():
            raise ImportPayloadError("Payload is empty")
        return payload

    def _parse_items(self, raw: str) -> list[ShipmentItem]:
        if not raw.strip():
            return self.placeholder_items()
        try:
            data = json.loads(raw)
            if not isinstance(data, list) or not data:
                raise TypeError("items must be a non-empty JSON array")
            return [ShipmentItem.model_validate(item) for item in data]
        except (ValueError, TypeError, pydantic.ValidationError) as e:
            logger.debug("Unreadable items column, using placeholder", error=str(e))
            return self.placeholder_items()

    def _row_fields(self, values: dict[str, str], line: int) -> dict[str, Any] | SkippedRow:
        sentinel = self.settings.unavailable_sentinel
        origin = values.get("origin") or sentinel
        destination = values.get("destination") or sentinel
        if origin == sentinel:
            return SkippedRow(line=line, reason="Missing origin")

        customer_id = values.get("customer_id")
        if not customer_id:
            first = next(iter(self.customers), None)
            if first is None:
                return SkippedRow(line=line, reason="No customers exist")
            customer_id = first.id
        elif customer_id not in self.customers:
            return SkippedRow(line=line, reason=f"Unknown customer '{customer_id}'")

        today = self.clock().date()
        fields: dict[str, Any] = {
            "origin": origin,
            "destination": destination,
            "customer_id": customer_id,
            "status": _lookup_enum(ShipmentStatus, values.get("status", ""), ShipmentStatus.PENDING),
            "priority": _lookup_enum(Priority, values.get("priority", ""), Priority.MEDIUM),
            "estimated_pickup_date": parse_date(values.get("estimated_pickup_date", "")) or today,
            "estimated_delivery_date": parse_date(values.get("estimated_delivery_date", ""))
            or today + timedelta(days=self.settings.delivery_offset_days),
            "items": self._parse_items(values.get("items", "")),
        }
        if values.get("shipment_number"):
            fields["shipment_number"] = values["shipment_number"]
        return fields

    def parse(self, payload: bytes | str) -> ParsedBatch:
        """
        Read a CSV payload into shipment field sets.

        Raises:
            ImportPayloadError: if the payload cannot be read as CSV
        """
        text = self._decode(payload)
        reader = csv.reader(io.StringIO(text), strict=True)
        batch = ParsedBatch()
        try:
            header: list[str] | None = None
            for row in reader:
                if not any(cell.strip() for cell in row):
                    continue
                if header is None:
                    header = [COLUMNS.get(normalize_header(cell), "") for cell in row]
                    continue

                values = {
                    name: (row[index].strip() if index < len(row) else "")
                    for index, name in enumerate(header)
                    if name
                }
                result = self._row_fields(values, reader.line_num)
                if isinstance(result, SkippedRow):
                    batch.skipped.append(result)
                else:
                    batch.rows.append(result)
        except csv.Error as e:
            raise ImportPayloadError(f"Malformed CSV at line {reader.line_num}: {e}") from e

        if header is None:
            raise ImportPayloadError("Payload has no header row")
        return batch

    def import_payload(self, payload: bytes | str) -> ImportReport:
        """
        Parse ``payload`` and merge every well-formed row into the repository.

        Returns:
            ImportReport; on a failed outcome nothing was merged
        """
        try:
            batch = self.parse(payload)
            imported = self.repository.create_many(batch.rows, note=IMPORT_NOTE)
        except (ImportPayloadError, ValidationError) as e:
            logger.warning("Shipment import failed", error=str(e))
            return ImportReport(outcome=ImportOutcome.FAILED, error=str(e))

        outcome = ImportOutcome.PARTIAL if batch.skipped else ImportOutcome.COMPLETE
        logger.info(
            "Shipments imported",
            outcome=outcome.value,
            imported=len(imported),
            skipped=len(batch.skipped),
        )
        return ImportReport(outcome=outcome, imported=imported, skipped=batch.skipped)
