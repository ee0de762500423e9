"""
Per-kind repository configuration for customers, drivers, vehicles and shipments.
"""

from datetime import datetime
from typing import Any, Callable

from tms.common.errors import FieldError, ValidationError
from tms.common.identifiers import new_shipment_number
from tms.lifecycle.state_machine import ShipmentStateMachine
from tms.models.entities.base import utc_now, utc_today
from tms.models.entities.customer import Customer
from tms.models.entities.driver import Driver
from tms.models.entities.shipment import Shipment, ShipmentStatus
from tms.models.entities.vehicle import Vehicle
from tms.repository.repository import BASE_READ_ONLY, EntityKind
from tms.repository.seed import seed_customers, seed_drivers, seed_shipments, seed_vehicles

CUSTOMERS: EntityKind[Customer] = EntityKind(model=Customer, seed=lambda: seed_customers(utc_today()))
DRIVERS: EntityKind[Driver] = EntityKind(model=Driver, seed=lambda: seed_drivers(utc_today()))
VEHICLES: EntityKind[Vehicle] = EntityKind(model=Vehicle, seed=lambda: seed_vehicles(utc_today()))
SHIPMENTS: EntityKind[Shipment] = EntityKind(
    model=Shipment,
    seed=lambda: seed_shipments(utc_today()),
    read_only=BASE_READ_ONLY | {"shipment_number", "tracking_history"},
    derived=frozenset({"total_weight_kg"}),
)

ALL_KINDS: tuple[EntityKind[Any], ...] = (SHIPMENTS, VEHICLES, DRIVERS, CUSTOMERS)


def parse_status(value: Any) -> ShipmentStatus:
    """Coerce a status value or raise ValidationError."""
    try:
        return ShipmentStatus(value)
    except ValueError:
        raise ValidationError(
            SHIPMENTS.name,
            [FieldError("status", f"Unknown shipment status: {value}", "INVALID_ENUM", value)],
        ) from None


class ShipmentPolicy:
    """
    Shipment-specific create/update rules.

    New shipments get a shipment number (unless one is supplied), creation
    timestamps and their first tracking event. Status changes on update go
    through the state machine; the customer reference must resolve when a
    customer lookup is configured.
    """

    def __init__(
        self,
        state_machine: ShipmentStateMachine,
        customer_exists: Callable[[str], bool] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.state_machine = state_machine
        self.customer_exists = customer_exists
        self.clock = clock

    def _check_customer(self, customer_id: Any) -> None:
        if self.customer_exists is None or not customer_id:
            return
        if not self.customer_exists(customer_id):
            raise ValidationError(
                SHIPMENTS.name,
                [FieldError("customer_id", f"Customer '{customer_id}' does not exist", "UNKNOWN_REFERENCE", customer_id)],
            )

    def prepare_create(self, fields: dict[str, Any], note: str | None = None) -> dict[str, Any]:
        if "tracking_history" in fields:
            raise ValidationError(
                SHIPMENTS.name,
                [FieldError("tracking_history", "Tracking history is managed by the engine", "READ_ONLY")],
            )
        self._check_customer(fields.get("customer_id"))

        status = parse_status(fields.get("status") or ShipmentStatus.PENDING)
        now = self.clock()
        prepared = dict(fields)
        if not prepared.get("shipment_number"):
            prepared["shipment_number"] = new_shipment_number(now.date())
        prepared.update(
            status=status,
            created_at=now,
            updated_at=now,
            tracking_history=self.state_machine.initial_history(status, note=note),
        )
        return prepared

    def apply_update(
        self,
        existing: Shipment,
        fields: dict[str, Any],
        note: str | None = None,
        location: str | None = None,
    ) -> dict[str, Any]:
        changes = dict(fields)
        if "customer_id" in changes and changes["customer_id"] != existing.customer_id:
            self._check_customer(changes["customer_id"])

        current = existing
        if "status" in changes:
            target = parse_status(changes.pop("status"))
            if target != existing.status:
                current = self.state_machine.transition(existing, target, note=note, location=location)

        return {**current.model_dump(), **changes, "updated_at": self.clock()}
