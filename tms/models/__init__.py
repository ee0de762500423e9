"""Data models for the transport management engine."""

from tms.models.entities.base import Dimensions, Entity, RecordModel
from tms.models.entities.customer import Customer
from tms.models.entities.driver import Driver, DriverStatus
from tms.models.entities.shipment import (
    Priority,
    Shipment,
    ShipmentItem,
    ShipmentStatus,
    TrackingEvent,
    compute_total_weight,
)
from tms.models.entities.vehicle import Vehicle, VehicleStatus, VehicleType

__all__ = [
    "RecordModel",
    "Entity",
    "Dimensions",
    "Customer",
    "Driver",
    "DriverStatus",
    "Vehicle",
    "VehicleType",
    "VehicleStatus",
    "Shipment",
    "ShipmentItem",
    "ShipmentStatus",
    "Priority",
    "TrackingEvent",
    "compute_total_weight",
]
