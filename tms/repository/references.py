"""
Lazy resolution of weak references between entities.
"""

from dataclasses import dataclass

from tms.models.entities.customer import Customer
from tms.models.entities.driver import Driver
from tms.models.entities.shipment import Shipment
from tms.models.entities.vehicle import Vehicle
from tms.repository.repository import Repository

UNKNOWN = "Unknown"
UNASSIGNED = "Unassigned"


@dataclass(frozen=True)
class DanglingReference:
    """A stored id that no longer resolves."""

    kind: str
    entity_id: str
    field: str
    target_id: str

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind,
            "entity_id": self.entity_id,
            "field": self.field,
            "target_id": self.target_id,
        }


class ReferenceResolver:
    """
    Resolve customer, vehicle and driver ids for display.

    Unresolvable ids are rendered as "Unknown" (customers) or "Unassigned"
    (vehicles and drivers) instead of raising.
    """

    def __init__(
        self,
        customers: Repository[Customer],
        vehicles: Repository[Vehicle],
        drivers: Repository[Driver],
    ):
        self.customers = customers
        self.vehicles = vehicles
        self.drivers = drivers

    def customer_name(self, shipment: Shipment) -> str:
        customer = self.customers.find(shipment.customer_id)
        return customer.name if customer else UNKNOWN

    def vehicle_label(self, vehicle_id: str | None) -> str:
        vehicle = self.vehicles.find(vehicle_id) if vehicle_id else None
        return f"{vehicle.name} ({vehicle.type.value})" if vehicle else UNASSIGNED

    def driver_name(self, driver_id: str | None) -> str:
        driver = self.drivers.find(driver_id) if driver_id else None
        return driver.name if driver else UNASSIGNED

    def describe_shipment(self, shipment: Shipment) -> dict[str, str]:
        """Display labels for every reference held by a shipment."""
        return {
            "customer": self.customer_name(shipment),
            "vehicle": self.vehicle_label(shipment.assigned_vehicle_id),
            "driver": self.driver_name(shipment.assigned_driver_id),
        }

    def dangling(self, shipments: Repository[Shipment]) -> list[DanglingReference]:
        """
        List every stored reference that does not resolve.

        Read-only: nothing is repaired or removed.
        """
        found: list[DanglingReference] = []
        for shipment in shipments:
            checks = (
                ("customer_id", shipment.customer_id, self.customers),
                ("assigned_vehicle_id", shipment.assigned_vehicle_id, self.vehicles),
                ("assigned_driver_id", shipment.assigned_driver_id, self.drivers),
            )
            for field, target_id, repository in checks:
                if target_id and target_id not in repository:
                    found.append(DanglingReference(shipments.name, shipment.id, field, target_id))

        for driver in self.drivers:
            if driver.assigned_vehicle_id and driver.assigned_vehicle_id not in self.vehicles:
                found.append(DanglingReference(self.drivers.name, driver.id, "assigned_vehicle_id", driver.assigned_vehicle_id))

        for vehicle in self.vehicles:
            if vehicle.driver_id and vehicle.driver_id not in self.drivers:
                found.append(DanglingReference(self.vehicles.name, vehicle.id, "driver_id", vehicle.driver_id))

        return found
