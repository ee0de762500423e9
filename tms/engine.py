"""
Transport engine: wires the store, repositories and services together.
"""

import threading
from datetime import datetime
from typing import Any, Callable

from tms.common.config_loader import Config
from tms.common.errors import NotFound
from tms.common.logging_utils import get_logger
from tms.importer import backup
from tms.importer.csv_import import ImportReport, ShipmentImporter
from tms.importer.template import build_template
from tms.lifecycle.state_machine import ShipmentStateMachine
from tms.models.entities.base import utc_now
from tms.models.entities.customer import Customer
from tms.models.entities.driver import Driver
from tms.models.entities.shipment import Shipment, ShipmentStatus
from tms.models.entities.vehicle import Vehicle
from tms.query.engine import Page, QueryEngine, ViewQuery
from tms.reports.dashboard import DashboardStats, build_dashboard
from tms.repository.kinds import CUSTOMERS, DRIVERS, SHIPMENTS, VEHICLES, ShipmentPolicy
from tms.repository.references import DanglingReference, ReferenceResolver
from tms.repository.repository import Repository
from tms.storage.backends import FileBackend, KeyValueBackend, MemoryBackend
from tms.storage.store import PersistentStore

logger = get_logger(__name__)

DEFAULT_TEMPLATE_CUSTOMER = "cust1"


class TransportEngine:
    """
    One operator's view of the transport data.

    Holds the four repositories sharing a single store and a single lock,
    plus the state machine, query engine, importer and reference resolver
    built on them. Operations spanning several collections hold the lock
    for their whole duration.
    """

    def __init__(
        self,
        store: PersistentStore,
        config: Config,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.config = config
        self.clock = clock
        seed = config.storage.seed_defaults
        self.lock = threading.RLock()

        self.state_machine = ShipmentStateMachine(clock=clock)
        shared = {"seed_defaults": seed, "clock": clock, "lock": self.lock}
        self.customers: Repository[Customer] = Repository(CUSTOMERS, store, **shared)
        self.drivers: Repository[Driver] = Repository(DRIVERS, store, **shared)
        self.vehicles: Repository[Vehicle] = Repository(VEHICLES, store, **shared)
        self.shipments: Repository[Shipment] = Repository(
            SHIPMENTS,
            store,
            policy=ShipmentPolicy(self.state_machine, customer_exists=lambda cid: cid in self.customers, clock=clock),
            **shared,
        )

        self.query_engine = QueryEngine(page_size=config.query.page_size)
        self.importer = ShipmentImporter(self.shipments, self.customers, settings=config.importer, clock=clock)
        self.resolver = ReferenceResolver(self.customers, self.vehicles, self.drivers)

    @property
    def repositories(self) -> dict[str, Repository[Any]]:
        """Repositories keyed by collection name, in export order."""
        return {
            self.shipments.name: self.shipments,
            self.vehicles.name: self.vehicles,
            self.drivers.name: self.drivers,
            self.customers.name: self.customers,
        }

    def repository(self, kind: str) -> Repository[Any]:
        """
        Look up a repository by collection name.

        Raises:
            NotFound: if ``kind`` is not a known collection
        """
        try:
            return self.repositories[kind]
        except KeyError:
            raise NotFound("collection", kind) from None

    def load(self) -> "TransportEngine":
        """Populate every collection from the store."""
        with self.lock:
            for repository in self.repositories.values():
                repository.load()
        logger.info("Engine loaded", **{name: len(repo) for name, repo in self.repositories.items()})
        return self

    def query(self, kind: str, query: ViewQuery | None = None) -> Page[Any]:
        """Filtered, sorted page of one collection."""
        return self.query_engine.run(self.repository(kind).list(), query)

    def transition_shipment(
        self,
        shipment_id: str,
        status: ShipmentStatus | str,
        note: str | None = None,
        location: str | None = None,
    ) -> Shipment:
        """Set a shipment's status, recording a tracking event when it changes."""
        return self.shipments.update(shipment_id, {"status": status}, note=note, location=location)

    def attach_proof_of_delivery(self, shipment_id: str, image: str) -> Shipment:
        """Store a proof-of-delivery image reference on a shipment."""
        return self.shipments.update(shipment_id, {"proof_of_delivery_image": image})

    def dangling_references(self) -> list[DanglingReference]:
        return self.resolver.dangling(self.shipments)

    def clear_all(self) -> None:
        """Empty every collection and remove its stored key."""
        with self.lock:
            for repository in self.repositories.values():
                repository.clear()
        logger.warning("All data deleted")

    def export_state(self) -> dict[str, list[dict[str, Any]]]:
        with self.lock:
            return backup.export_state(self.repositories)

    def export_json(self, indent: int = 2) -> str:
        with self.lock:
            return backup.export_json(self.repositories, indent=indent)

    def restore_state(self, document: dict[str, Any] | str | bytes) -> dict[str, int]:
        """Replace all collections from a backup document (all or nothing)."""
        with self.lock:
            return backup.restore_state(self.repositories, document, state_machine=self.state_machine)

    def import_shipments(self, payload: bytes | str) -> ImportReport:
        with self.lock:
            return self.importer.import_payload(payload)

    def template(self) -> str:
        """Import template whose example row references an existing customer."""
        first = next(iter(self.customers), None)
        return build_template(
            customer_id=first.id if first else DEFAULT_TEMPLATE_CUSTOMER,
            today=self.clock().date(),
            delivery_offset_days=self.config.importer.template_delivery_offset_days,
        )

    def dashboard(self) -> DashboardStats:
        return build_dashboard(self.shipments, self.vehicles, self.drivers, today=self.clock().date())


def build_backend(config: Config) -> KeyValueBackend:
    """Key-value backend selected by ``storage.backend``."""
    if config.storage.backend == "memory":
        return MemoryBackend()
    return FileBackend(config.storage.data_dir)


def build_engine(
    config: Config | None = None,
    backend: KeyValueBackend | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> TransportEngine:
    """
    Construct and load an engine.

    Args:
        config: Loaded configuration; defaults apply when omitted
        backend: Backend override, e.g. a prefilled MemoryBackend in tests
        clock: Source of the current time

    Returns:
        An engine with every collection loaded
    """
    config = config or Config()
    store = PersistentStore(backend or build_backend(config), prefix=config.storage.key_prefix)
    logger.info(
        "Building engine",
        environment=config.environment,
        backend=config.storage.backend if backend is None else type(backend).__name__,
    )
    return TransportEngine(store, config, clock=clock).load()
