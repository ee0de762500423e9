"""Customer entity definition."""

from datetime import date
from typing import ClassVar

from pydantic import Field

from tms.models.entities.base import Entity, utc_today


class Customer(Entity):
    """A shipper account. No lifecycle beyond create/update/delete."""

    KIND: ClassVar[str] = "customers"

    name: str = Field(..., min_length=1, description="Company name")
    contact_person: str = Field(..., min_length=1, description="Primary contact")
    email: str = Field(..., min_length=1, description="Contact email")
    phone: str = Field(..., min_length=1, description="Contact phone")
    address: str = Field(..., min_length=1, description="Billing/pickup address")
    notes: str | None = Field(default=None, description="Free-text notes")
    created_at: date = Field(default_factory=utc_today, description="Creation date")
