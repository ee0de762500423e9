"""
Pytest configuration and fixtures for the test suite.
"""

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

# Set environment for testing
os.environ["ENVIRONMENT"] = "test"

FIXED_NOW = datetime(2025, 6, 5, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock; each call returns the current instant."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Return a clock frozen at 2025-06-05 12:00 UTC."""
    return FakeClock()


@pytest.fixture
def test_config():
    """Return a memory-backed configuration without seed data."""
    from tms.common.config_loader import Config, StorageConfig

    return Config(
        environment="test",
        log_level="DEBUG",
        storage=StorageConfig(backend="memory", seed_defaults=False),
    )


@pytest.fixture
def seeded_config():
    """Return a memory-backed configuration that seeds the demo dataset."""
    from tms.common.config_loader import Config, StorageConfig

    return Config(
        environment="test",
        log_level="DEBUG",
        storage=StorageConfig(backend="memory", seed_defaults=True),
    )


@pytest.fixture
def memory_backend():
    """Return an empty in-memory key-value backend."""
    from tms.storage.backends import MemoryBackend

    return MemoryBackend()


@pytest.fixture
def store(memory_backend):
    """Return a persistent store over the memory backend."""
    from tms.storage.store import PersistentStore

    return PersistentStore(memory_backend)


@pytest.fixture
def engine(test_config, memory_backend, clock):
    """Return an empty, loaded engine."""
    from tms.engine import build_engine

    return build_engine(test_config, backend=memory_backend, clock=clock)


@pytest.fixture
def seeded_engine(seeded_config, memory_backend, clock):
    """Return an engine holding the default demo dataset."""
    from tms.engine import build_engine

    return build_engine(seeded_config, backend=memory_backend, clock=clock)


@pytest.fixture
def customer_fields() -> dict[str, Any]:
    """Return camelCase fields for a new customer."""
    return {
        "name": "Acme Freight",
        "contactPerson": "Wile E. Coyote",
        "email": "wile@acme.example",
        "phone": "555-0199",
        "address": "1 Desert Road, Mesa, AZ",
    }


@pytest.fixture
def customer(engine, customer_fields):
    """Return a customer stored in the engine."""
    return engine.customers.create(customer_fields)


@pytest.fixture
def shipment_fields(customer) -> dict[str, Any]:
    """Return fields for a new shipment owned by ``customer``."""
    return {
        "origin": "Warehouse A, New York",
        "destination": "Client Hub, Chicago",
        "customerId": customer.id,
        "priority": "High",
        "estimatedPickupDate": "2025-06-06",
        "estimatedDeliveryDate": "2025-06-09",
        "items": [
            {"name": "Electronics Bundle", "quantity": 2, "weightKg": 5.0},
            {"name": "Cables", "quantity": 10, "weightKg": 0.5, "isFragile": False},
        ],
    }


@pytest.fixture
def test_config_dir(tmp_path) -> Path:
    """Create a temporary config directory with test configs."""
    import yaml

    config_dir = tmp_path / "config"
    config_dir.mkdir()

    base_config = {
        "log_level": "${TMS_TEST_LOG_LEVEL:-INFO}",
        "storage": {
            "backend": "file",
            "data_dir": "data",
            "key_prefix": "logipro_tms_",
        },
        "query": {"page_size": 10},
    }
    test_config = {
        "storage": {"backend": "memory", "seed_defaults": False},
        "query": {"page_size": 5},
    }

    with open(config_dir / "base.yaml", "w") as f:
        yaml.dump(base_config, f)
    with open(config_dir / "test.yaml", "w") as f:
        yaml.dump(test_config, f)

    return config_dir
