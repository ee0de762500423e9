"""Default dataset used when nothing has been stored yet."""

from datetime import date, datetime, time, timedelta, timezone

from tms.common.identifiers import new_shipment_number
from tms.models.entities.customer import Customer
from tms.models.entities.driver import Driver, DriverStatus
from tms.models.entities.shipment import (
    Priority,
    Shipment,
    ShipmentItem,
    ShipmentStatus,
    TrackingEvent,
)
from tms.models.entities.vehicle import Vehicle, VehicleStatus, VehicleType


def _at(day: date, hour: int = 9) -> datetime:
    return datetime.combine(day, time(hour=hour), tzinfo=timezone.utc)


def seed_customers(today: date) -> list[Customer]:
    return [
        Customer(
            id="cust1",
            name="Global Exports Inc.",
            contact_person="Alice Wonderland",
            email="alice@globalexports.com",
            phone="555-0101",
            address="123 Export Lane, Tradetown, USA",
            created_at=today - timedelta(days=30),
        ),
        Customer(
            id="cust2",
            name="Local Imports Co.",
            contact_person="Bob The Builder",
            email="bob@localimports.co",
            phone="555-0102",
            address="456 Import St, Commerce City, USA",
            notes="Prefers morning deliveries",
            created_at=today - timedelta(days=60),
        ),
    ]


def seed_drivers(today: date) -> list[Driver]:
    return [
        Driver(
            id="driver1",
            name="John Doe",
            license_number="DL12345XYZ",
            phone="555-0201",
            assigned_vehicle_id="vehicle1",
            status=DriverStatus.ACTIVE,
            years_of_experience=5,
            created_at=today - timedelta(days=90),
        ),
        Driver(
            id="driver2",
            name="Jane Smith",
            license_number="DL67890ABC",
            phone="555-0202",
            email="jane@example.com",
            assigned_vehicle_id="vehicle2",
            status=DriverStatus.ACTIVE,
            years_of_experience=8,
            created_at=today - timedelta(days=120),
        ),
    ]


def seed_vehicles(today: date) -> list[Vehicle]:
    return [
        Vehicle(
            id="vehicle1",
            name="Truck 101",
            type=VehicleType.TRUCK_BOX,
            registration_number="TRK101",
            capacity_weight_kg=5000,
            capacity_volume_m3=30,
            status=VehicleStatus.AVAILABLE,
            driver_id="driver1",
            fuel_level_percent=80,
            created_at=today - timedelta(days=45),
        ),
        Vehicle(
            id="vehicle2",
            name="Van 202",
            type=VehicleType.VAN_CARGO,
            registration_number="VAN202",
            capacity_weight_kg=1500,
            capacity_volume_m3=10,
            status=VehicleStatus.IN_USE,
            driver_id="driver2",
            maintenance_date=today + timedelta(days=15),
            created_at=today - timedelta(days=75),
        ),
        Vehicle(
            id="vehicle3",
            name="Big Rig 007",
            type=VehicleType.TRUCK_SEMI,
            registration_number="RIG007",
            capacity_weight_kg=20000,
            capacity_volume_m3=80,
            status=VehicleStatus.AVAILABLE,
            fuel_level_percent=60,
            created_at=today - timedelta(days=15),
        ),
    ]


def seed_shipments(today: date) -> list[Shipment]:
    return [
        Shipment(
            id="ship1",
            shipment_number=new_shipment_number(today - timedelta(days=3)),
            origin="Warehouse A, New York",
            destination="Client Hub, Chicago",
            customer_id="cust1",
            assigned_vehicle_id="vehicle1",
            assigned_driver_id="driver1",
            status=ShipmentStatus.IN_TRANSIT,
            priority=Priority.HIGH,
            estimated_pickup_date=today - timedelta(days=2),
            actual_pickup_date=today - timedelta(days=2),
            estimated_delivery_date=today + timedelta(days=1),
            items=[ShipmentItem(name="Electronics Bundle", quantity=50, weight_kg=5, is_fragile=True)],
            created_at=_at(today - timedelta(days=3)),
            updated_at=_at(today - timedelta(days=2)),
            tracking_history=[
                TrackingEvent(status=ShipmentStatus.INFO_RECEIVED, timestamp=_at(today - timedelta(days=3))),
                TrackingEvent(
                    status=ShipmentStatus.IN_TRANSIT,
                    timestamp=_at(today - timedelta(days=2)),
                    location="Departed New York",
                ),
            ],
        ),
        Shipment(
            id="ship2",
            shipment_number=new_shipment_number(today - timedelta(days=1)),
            origin="Factory Z, Los Angeles",
            destination="Retail Store Y, San Francisco",
            customer_id="cust2",
            status=ShipmentStatus.PENDING,
            priority=Priority.MEDIUM,
            estimated_pickup_date=today,
            estimated_delivery_date=today + timedelta(days=2),
            items=[ShipmentItem(name="Apparel Batch", quantity=200, weight_kg=1)],
            created_at=_at(today - timedelta(days=1)),
            updated_at=_at(today - timedelta(days=1)),
            tracking_history=[
                TrackingEvent(status=ShipmentStatus.PENDING, timestamp=_at(today - timedelta(days=1)), notes="Shipment created."),
            ],
        ),
    ]
