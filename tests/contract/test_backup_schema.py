"""
Contract tests for the full-state backup document.

These tests ensure that what the engine exports is accepted by the backup
schema, and that restore refuses documents that break it.
"""

import json
from importlib import resources

import pytest
from jsonschema import Draft7Validator

from tms.common.errors import DecodeError
from tms.importer.backup import backup_validator, load_schema, schema_errors

KINDS = ("shipments", "vehicles", "drivers", "customers")


class TestBackupSchema:
    """Test the schema file itself and exported documents."""

    @pytest.fixture
    def schema(self) -> dict:
        return load_schema()

    def test_schema_is_valid_draft7(self, schema):
        """Test the schema is itself a valid Draft 7 schema."""
        Draft7Validator.check_schema(schema)

    def test_schema_ships_with_package(self):
        """Test the schema is read from package data, not the source checkout."""
        assert resources.files("tms").joinpath("schemas").joinpath("backup.json").is_file()

    def test_requires_every_kind(self, schema):
        """Test all four collections are required."""
        assert set(schema["required"]) == set(KINDS)

    def test_seeded_export_validates(self, seeded_engine):
        """Test the demo dataset export is schema-valid."""
        errors = list(backup_validator().iter_errors(seeded_engine.export_state()))

        assert errors == []

    def test_export_after_mutations_validates(self, seeded_engine):
        """Test exports stay valid after create, update and import."""
        seeded_engine.transition_shipment("ship2", "Out for Delivery", location="Depot")
        seeded_engine.import_shipments(seeded_engine.template())
        seeded_engine.drivers.create({"name": "New", "licenseNumber": "DL-9", "phone": "555"})

        assert schema_errors(json.loads(seeded_engine.export_json())) == []

    def test_empty_export_validates(self, engine):
        """Test an empty engine exports empty arrays."""
        document = engine.export_state()

        assert document == {kind: [] for kind in KINDS}
        assert schema_errors(document) == []


class TestSchemaViolations:
    """Test documents that must be rejected."""

    def test_missing_collection(self, seeded_engine):
        """Test a document without drivers is rejected."""
        document = seeded_engine.export_state()
        del document["drivers"]

        errors = schema_errors(document)

        assert errors and errors[0].error_code == "SCHEMA_VIOLATION"

    def test_unknown_status(self, seeded_engine):
        """Test a status outside the enumeration is rejected with its path."""
        document = seeded_engine.export_state()
        document["shipments"][0]["status"] = "Lost"

        fields = {e.field for e in schema_errors(document)}

        assert "shipments.0.status" in fields

    def test_empty_tracking_history(self, seeded_engine):
        """Test shipments need at least one tracking event."""
        document = seeded_engine.export_state()
        document["shipments"][0]["trackingHistory"] = []

        assert schema_errors(document)

    def test_restore_rejects_violation(self, seeded_engine):
        """Test restore raises DecodeError carrying the violations."""
        document = seeded_engine.export_state()
        document["vehicles"] = "not a list"

        with pytest.raises(DecodeError) as exc_info:
            seeded_engine.restore_state(document)

        assert exc_info.value.errors
