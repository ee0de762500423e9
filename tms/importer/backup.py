"""
Full-state export and restore.

The export document has the persisted layout: one camelCase record array per
entity kind. Restore is all or nothing: the document is checked against a
JSON Schema, then every record against its model and every shipment's
tracking history, before any collection is replaced.
"""

import json
from functools import lru_cache
from importlib import resources
from typing import Any

import pydantic
from jsonschema import Draft7Validator

from tms.common.errors import DecodeError, FieldError
from tms.common.errors import ValidationError as EngineValidationError
from tms.common.logging_utils import get_logger
from tms.lifecycle.state_machine import ShipmentStateMachine
from tms.models.entities.base import Entity
from tms.repository.repository import Repository

logger = get_logger(__name__)

SCHEMA_RESOURCE = ("schemas", "backup.json")


def _schema_file():
    directory, name = SCHEMA_RESOURCE
    return resources.files("tms").joinpath(directory).joinpath(name)


def load_schema() -> dict[str, Any]:
    """The backup JSON Schema shipped inside the package."""
    return json.loads(_schema_file().read_text(encoding="utf-8"))


@lru_cache(maxsize=1)
def backup_validator() -> Draft7Validator:
    """Compiled validator for backup documents."""
    schema = load_schema()
    Draft7Validator.check_schema(schema)
    return Draft7Validator(schema)


def export_state(repositories: dict[str, Repository[Any]]) -> dict[str, list[dict[str, Any]]]:
    """Snapshot every collection in its persisted shape."""
    return {name: [record.to_record() for record in repo] for name, repo in repositories.items()}


def export_json(repositories: dict[str, Repository[Any]], indent: int = 2) -> str:
    """Serialize ``export_state`` as a JSON document."""
    return json.dumps(export_state(repositories), indent=indent)


def schema_errors(document: Any) -> list[FieldError]:
    """JSON Schema violations in ``document``; empty if it is structurally valid."""
    return [
        FieldError(
            field=".".join(str(p) for p in error.absolute_path) or "root",
            message=error.message,
            error_code="SCHEMA_VIOLATION",
            value=error.instance if not isinstance(error.instance, (dict, list)) else None,
        )
        for error in backup_validator().iter_errors(document)
    ]


def _decode_records(repository: Repository[Any], raw: list[Any], state_machine: ShipmentStateMachine) -> list[Entity]:
    model = repository.kind.model
    records = []
    errors: list[FieldError] = []
    for index, item in enumerate(raw):
        try:
            record = model.model_validate(item)
            if repository.name == "shipments":
                state_machine.check_history(record)
        except pydantic.ValidationError as e:
            for err in EngineValidationError.from_pydantic(repository.name, e).errors:
                err.field = f"{repository.name}.{index}.{err.field}"
                errors.append(err)
            continue
        except EngineValidationError as e:
            for err in e.errors:
                err.field = f"{repository.name}.{index}.{err.field}"
                errors.append(err)
            continue
        records.append(record)
    if errors:
        raise DecodeError(f"Backup contains invalid {repository.name}", errors)
    return records


def restore_state(
    repositories: dict[str, Repository[Any]],
    document: dict[str, Any] | str | bytes,
    state_machine: ShipmentStateMachine | None = None,
) -> dict[str, int]:
    """
    Replace every collection with the contents of a backup document.

    Args:
        repositories: Repositories keyed by collection name
        document: Parsed document, or its JSON text
        state_machine: Used to check shipment tracking histories

    Returns:
        Restored record count per collection

    Raises:
        DecodeError: if the document is not valid JSON, violates the backup
            schema, or holds an invalid record; no collection is changed
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError(f"Backup is not valid JSON: {e}") from e

    errors = schema_errors(document)
    if errors:
        logger.warning("Backup rejected by schema", error_count=len(errors))
        raise DecodeError("Backup does not match the expected layout", errors)

    state_machine = state_machine or ShipmentStateMachine()
    decoded = {
        name: _decode_records(repo, document[name], state_machine)
        for name, repo in repositories.items()
    }

    for name, records in decoded.items():
        repositories[name].replace_all(records)

    counts = {name: len(records) for name, records in decoded.items()}
    logger.info("Backup restored", **counts)
    return counts
