"""
Shipment status state machine with an append-only tracking history.
"""

from datetime import datetime
from typing import Callable

from tms.common.errors import FieldError, ValidationError
from tms.common.logging_utils import get_logger
from tms.models.entities.base import utc_now
from tms.models.entities.shipment import Shipment, ShipmentStatus, TrackingEvent

logger = get_logger(__name__)

CREATED_NOTE = "Shipment created."


class ShipmentStateMachine:
    """
    Govern the ``status`` field of shipments.

    Any status may follow any other, including leaving Delivered or
    Cancelled. What is enforced is audit completeness: every accepted status
    write appends exactly one TrackingEvent carrying the new status, and
    earlier events are never changed or removed.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock

    def can_transition(self, current: ShipmentStatus, new: ShipmentStatus) -> bool:
        """Every transition is accepted."""
        return True

    def initial_history(
        self,
        status: ShipmentStatus = ShipmentStatus.PENDING,
        note: str | None = None,
        location: str | None = None,
    ) -> list[TrackingEvent]:
        """
        Build the history of a shipment being created in ``status``.

        Creation counts as a transition into the initial status.
        """
        return [
            TrackingEvent(
                status=ShipmentStatus(status),
                timestamp=self.clock(),
                location=location,
                notes=note or CREATED_NOTE,
            )
        ]

    def transition(
        self,
        shipment: Shipment,
        new_status: ShipmentStatus | str,
        note: str | None = None,
        location: str | None = None,
    ) -> Shipment:
        """
        Move a shipment to ``new_status``.

        Args:
            shipment: Current shipment record (left unmodified)
            new_status: Target status
            note: Optional note stored on the tracking event
            location: Optional location stored on the tracking event

        Returns:
            A copy of the shipment with the new status, a refreshed
            ``updated_at`` and one more tracking event
        """
        target = ShipmentStatus(new_status)
        if not self.can_transition(shipment.status, target):
            raise ValidationError(
                "shipments",
                [FieldError("status", f"Cannot move from {shipment.status.value} to {target.value}", "INVALID_TRANSITION")],
            )

        now = self.clock()
        event = TrackingEvent(status=target, timestamp=now, location=location, notes=note)

        logger.info(
            "Shipment status changed",
            shipment_id=shipment.id,
            previous_status=shipment.status.value,
            new_status=target.value,
        )
        return shipment.model_copy(
            update={
                "status": target,
                "updated_at": now,
                "tracking_history": [*shipment.tracking_history, event],
            }
        )

    def check_history(self, shipment: Shipment) -> None:
        """Raise ValidationError if the tracking history does not end in the current status."""
        last = shipment.current_event
        if last is None:
            raise ValidationError(
                "shipments",
                [FieldError("trackingHistory", "Tracking history is empty", "MISSING_HISTORY", shipment.id)],
            )
        if last.status != shipment.status:
            raise ValidationError(
                "shipments",
                [
                    FieldError(
                        "trackingHistory",
                        f"Last tracking status {last.status.value} does not match status {shipment.status.value}",
                        "HISTORY_MISMATCH",
                        shipment.id,
                    )
                ],
            )
