"""Driver entity definition."""

from datetime import date
from enum import Enum
from typing import ClassVar

from pydantic import Field

from tms.models.entities.base import Entity, utc_today


class DriverStatus(str, Enum):
    """Driver status enumeration."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ON_LEAVE = "On Leave"


class Driver(Entity):
    """
    A driver in the fleet.

    ``assigned_vehicle_id`` is a weak reference: it may name a vehicle that no
    longer exists, and it is not kept in sync with ``Vehicle.driver_id``.
    """

    KIND: ClassVar[str] = "drivers"

    name: str = Field(..., min_length=1, description="Driver name")
    license_number: str = Field(..., min_length=1, description="Driving license number")
    phone: str = Field(..., min_length=1, description="Phone number")
    email: str | None = Field(default=None, description="Email address")
    assigned_vehicle_id: str | None = Field(default=None, description="Assigned vehicle id (weak reference)")
    status: DriverStatus = Field(default=DriverStatus.ACTIVE, description="Employment status")
    years_of_experience: int = Field(default=0, ge=0, description="Years of driving experience")
    created_at: date = Field(default_factory=utc_today, description="Creation date")
