"""Vehicle entity definition."""

from datetime import date
from enum import Enum
from typing import ClassVar

from pydantic import Field

from tms.models.entities.base import Entity, utc_today


class VehicleType(str, Enum):
    """Transport mode enumeration."""

    TRUCK_SEMI = "Semi-Trailer Truck"
    TRUCK_BOX = "Box Truck"
    VAN_CARGO = "Cargo Van"
    FLATBED = "Flatbed Truck"
    REEFER = "Refrigerated Truck"
    CONTAINER_SHIP = "Container Ship"
    CARGO_PLANE = "Cargo Plane"
    RAIL_CAR = "Rail Car"


class VehicleStatus(str, Enum):
    """Vehicle availability enumeration."""

    AVAILABLE = "Available"
    IN_USE = "In Use"
    MAINTENANCE = "Maintenance"
    OUT_OF_SERVICE = "Out of Service"


class Vehicle(Entity):
    """
    A vehicle in the fleet.

    ``driver_id`` mirrors ``Driver.assigned_vehicle_id`` but the two are
    independent fields and may disagree.
    """

    KIND: ClassVar[str] = "vehicles"

    name: str = Field(..., min_length=1, description="Display name, e.g. 'Truck 101'")
    type: VehicleType = Field(..., description="Transport mode")
    registration_number: str = Field(..., min_length=1, description="Registration/plate number")
    capacity_weight_kg: float = Field(..., ge=0, description="Weight capacity in kilograms")
    capacity_volume_m3: float = Field(..., ge=0, description="Volume capacity in cubic meters")
    status: VehicleStatus = Field(default=VehicleStatus.AVAILABLE, description="Availability")
    current_location: str | None = Field(default=None, description="City name or coordinates")
    fuel_level_percent: float | None = Field(default=None, ge=0, le=100, description="Fuel level 0-100")
    maintenance_date: date | None = Field(default=None, description="Next scheduled maintenance")
    driver_id: str | None = Field(default=None, description="Assigned driver id (weak reference)")
    created_at: date = Field(default_factory=utc_today, description="Creation date")
