"""Base entity model and shared field helpers."""

from datetime import date, datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from tms.common.identifiers import new_id


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Current UTC calendar date."""
    return utc_now().date()


class RecordModel(BaseModel):
    """
    Base for every persisted record and value type.

    Attributes are snake_case in Python; the persisted and exported JSON
    uses camelCase names (``shipmentNumber``, ``customerId``, ...).
    Both spellings are accepted on input. Instances are frozen: changes go
    through the repository, which validates a new record.
    """

    class Config:
        """Pydantic model configuration."""

        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True
        frozen = True

    def to_record(self) -> dict[str, Any]:
        """Serialize to the JSON-safe persisted shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Entity(RecordModel):
    """
    Base class for independently persisted entities.

    Subclasses set ``KIND`` to the collection name they are stored under.
    """

    KIND: ClassVar[str] = "entity"

    id: str = Field(default_factory=new_id, min_length=1, description="Opaque unique identifier")

    @classmethod
    def get_kind(cls) -> str:
        """Get the collection name for this entity type."""
        return cls.KIND


class Dimensions(RecordModel):
    """Item dimensions in centimeters."""

    l: float = Field(..., gt=0, description="Length in centimeters")
    w: float = Field(..., gt=0, description="Width in centimeters")
    h: float = Field(..., gt=0, description="Height in centimeters")

    @property
    def volume_cubic_cm(self) -> float:
        """Calculate volume in cubic centimeters."""
        return self.l * self.w * self.h
