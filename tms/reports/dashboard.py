"""
Dashboard statistics over the four collections.
"""

from collections import Counter
from datetime import date
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, Field

from tms.models.entities.driver import Driver, DriverStatus
from tms.models.entities.shipment import Priority, Shipment, ShipmentStatus
from tms.models.entities.vehicle import Vehicle, VehicleStatus

PENDING_STATUSES = frozenset({ShipmentStatus.PENDING, ShipmentStatus.OUT_FOR_DELIVERY})

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class OnTimeStats(BaseModel):
    """On-time delivery performance."""

    rate: float = Field(default=0.0, description="Percentage delivered on time, one decimal")
    on_time: int = 0
    delayed: int = 0


class MonthlyCount(BaseModel):
    """Shipments created in one calendar month."""

    month: str
    shipments: int


class DashboardStats(BaseModel):
    """Headline numbers and distributions shown on the dashboard."""

    total_shipments: int
    vehicles_available: int
    vehicles_in_use: int
    active_drivers: int
    pending_deliveries: int
    shipments_by_status: dict[str, int]
    shipments_by_priority: dict[str, int]
    vehicles_by_status: dict[str, int]
    on_time: OnTimeStats
    shipments_per_month: list[MonthlyCount]


def count_by(values: Iterable[Enum], members: Iterable[Enum]) -> dict[str, int]:
    """Counts per enum member in declaration order; members with no occurrences are omitted."""
    counts = Counter(values)
    return {member.value: counts[member] for member in members if counts[member] > 0}


def on_time_delivery(shipments: Iterable[Shipment]) -> OnTimeStats:
    """
    On-time rate over delivered shipments with both delivery dates set.

    A shipment is on time when it was delivered on or before its estimated
    delivery date.
    """
    completed = [
        s
        for s in shipments
        if s.status == ShipmentStatus.DELIVERED and s.actual_delivery_date and s.estimated_delivery_date
    ]
    if not completed:
        return OnTimeStats()

    on_time = sum(1 for s in completed if s.actual_delivery_date <= s.estimated_delivery_date)
    return OnTimeStats(
        rate=round(on_time / len(completed) * 100, 1),
        on_time=on_time,
        delayed=len(completed) - on_time,
    )


def shipments_per_month(shipments: Iterable[Shipment], year: int) -> list[MonthlyCount]:
    """Twelve monthly counts of shipments created in ``year``."""
    months = Counter(s.created_at.month for s in shipments if s.created_at.year == year)
    return [MonthlyCount(month=name, shipments=months[index]) for index, name in enumerate(MONTH_NAMES, start=1)]


def build_dashboard(
    shipments: Iterable[Shipment],
    vehicles: Iterable[Vehicle],
    drivers: Iterable[Driver],
    today: date,
) -> DashboardStats:
    """Compute all dashboard statistics from the current collections."""
    shipments = list(shipments)
    vehicles = list(vehicles)
    drivers = list(drivers)

    return DashboardStats(
        total_shipments=len(shipments),
        vehicles_available=sum(1 for v in vehicles if v.status == VehicleStatus.AVAILABLE),
        vehicles_in_use=sum(1 for v in vehicles if v.status == VehicleStatus.IN_USE),
        active_drivers=sum(1 for d in drivers if d.status == DriverStatus.ACTIVE),
        pending_deliveries=sum(1 for s in shipments if s.status in PENDING_STATUSES),
        shipments_by_status=count_by((s.status for s in shipments), ShipmentStatus),
        shipments_by_priority=count_by((s.priority for s in shipments), Priority),
        vehicles_by_status=count_by((v.status for v in vehicles), VehicleStatus),
        on_time=on_time_delivery(shipments),
        shipments_per_month=shipments_per_month(shipments, today.year),
    )
