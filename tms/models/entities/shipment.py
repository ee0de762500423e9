"""Shipment entity and its owned value types."""

from datetime import date, datetime
from enum import Enum
from typing import ClassVar

from pydantic import Field, ValidationInfo, field_validator

from tms.models.entities.base import Dimensions, Entity, RecordModel, utc_now, utc_today


class ShipmentStatus(str, Enum):
    """Shipment status enumeration."""

    PENDING = "Pending"
    INFO_RECEIVED = "Info Received"
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    DELAYED = "Delayed"
    CANCELLED = "Cancelled"
    EXCEPTION = "Exception"


class Priority(str, Enum):
    """Shipment priority enumeration."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class ShipmentItem(RecordModel):
    """A line item owned by exactly one shipment."""

    name: str = Field(..., min_length=1, description="Item name")
    quantity: int = Field(..., gt=0, description="Number of units")
    weight_kg: float = Field(..., ge=0, description="Unit weight in kilograms")
    dimensions_cm: Dimensions | None = Field(default=None, description="Unit dimensions")
    is_fragile: bool = Field(default=False, description="Handle with care")

    @property
    def line_weight_kg(self) -> float:
        return self.weight_kg * self.quantity


class TrackingEvent(RecordModel):
    """An immutable audit record of a shipment's status at a point in time."""

    status: ShipmentStatus = Field(..., description="Status at the time of the event")
    timestamp: datetime = Field(default_factory=utc_now, description="When the event was recorded")
    location: str | None = Field(default=None, description="Where the shipment was")
    notes: str | None = Field(default=None, description="Free-text note")


def compute_total_weight(items: list[ShipmentItem]) -> float:
    """Sum of unit weight times quantity over all items."""
    return sum(item.line_weight_kg for item in items)


class Shipment(Entity):
    """
    A shipment moving goods for a customer.

    ``total_weight_kg`` is derived from ``items`` on every validation; any
    value supplied by the caller is overwritten. ``status`` and
    ``tracking_history`` are managed by the shipment state machine.
    """

    KIND: ClassVar[str] = "shipments"

    shipment_number: str = Field(..., min_length=1, description="Display number, e.g. TMS-20250605-7QXK")
    origin: str = Field(..., min_length=1, description="Pickup location")
    destination: str = Field(..., min_length=1, description="Delivery location")
    customer_id: str = Field(..., min_length=1, description="Customer reference")
    assigned_vehicle_id: str | None = Field(default=None, description="Vehicle reference (weak)")
    assigned_driver_id: str | None = Field(default=None, description="Driver reference (weak)")
    status: ShipmentStatus = Field(default=ShipmentStatus.PENDING, description="Current status")
    priority: Priority = Field(default=Priority.MEDIUM, description="Handling priority")

    # Scheduling
    estimated_pickup_date: date = Field(default_factory=utc_today, description="Planned pickup")
    estimated_delivery_date: date = Field(default_factory=utc_today, description="Planned delivery")
    actual_pickup_date: date | None = Field(default=None, description="Actual pickup")
    actual_delivery_date: date | None = Field(default=None, description="Actual delivery")

    # Load
    items: list[ShipmentItem] = Field(default_factory=list, description="Line items")
    total_weight_kg: float = Field(default=0.0, validate_default=True, description="Derived total weight")
    total_volume_m3: float | None = Field(default=None, ge=0, description="Total volume")

    notes: str | None = Field(default=None, description="Free-text notes")
    proof_of_delivery_image: str | None = Field(default=None, description="Proof-of-delivery image reference")

    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update timestamp")
    tracking_history: list[TrackingEvent] = Field(default_factory=list, description="Append-only audit trail")

    @field_validator("total_weight_kg")
    @classmethod
    def derive_total_weight(cls, value: float, info: ValidationInfo) -> float:
        """Recompute the total weight from the items validated before it."""
        return compute_total_weight(info.data.get("items", []))

    @property
    def current_event(self) -> TrackingEvent | None:
        """The most recent tracking event, if any."""
        return self.tracking_history[-1] if self.tracking_history else None
