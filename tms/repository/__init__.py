"""Entity repositories."""

from tms.repository.kinds import (
    ALL_KINDS,
    CUSTOMERS,
    DRIVERS,
    SHIPMENTS,
    VEHICLES,
    ShipmentPolicy,
)
from tms.repository.references import DanglingReference, ReferenceResolver
from tms.repository.repository import EntityKind, EntityPolicy, MergePolicy, Repository

__all__ = [
    "Repository",
    "EntityKind",
    "EntityPolicy",
    "MergePolicy",
    "ShipmentPolicy",
    "CUSTOMERS",
    "DRIVERS",
    "VEHICLES",
    "SHIPMENTS",
    "ALL_KINDS",
    "ReferenceResolver",
    "DanglingReference",
]
