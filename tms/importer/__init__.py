"""Bulk CSV import, template download, and full-state backup."""

from tms.importer.backup import export_json, export_state, restore_state
from tms.importer.csv_import import (
    IMPORT_NOTE,
    ImportOutcome,
    ImportReport,
    ParsedBatch,
    ShipmentImporter,
    SkippedRow,
)
from tms.importer.template import TEMPLATE_HEADER, build_template

__all__ = [
    "IMPORT_NOTE",
    "ImportOutcome",
    "ImportReport",
    "ParsedBatch",
    "ShipmentImporter",
    "SkippedRow",
    "TEMPLATE_HEADER",
    "build_template",
    "export_json",
    "export_state",
    "restore_state",
]
