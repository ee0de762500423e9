"""
Generic repository over one entity kind.
"""

import functools
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, Iterable, Iterator, Protocol, TypeVar

import pydantic

from tms.common.errors import FieldError, NotFound, ValidationError
from tms.common.logging_utils import get_logger
from tms.models.entities.base import Entity, utc_now
from tms.storage.store import PersistentStore

logger = get_logger(__name__)

T = TypeVar("T", bound=Entity)

BASE_READ_ONLY = frozenset({"id", "created_at"})


class EntityPolicy(Protocol[T]):
    """Per-kind hooks run by the repository before a record is built."""

    def prepare_create(self, fields: dict[str, Any], note: str | None = None) -> dict[str, Any]:
        """Return the complete field set for a new record."""
        ...

    def apply_update(
        self,
        existing: T,
        fields: dict[str, Any],
        note: str | None = None,
        location: str | None = None,
    ) -> dict[str, Any]:
        """Return the complete field set of the updated record."""
        ...


class MergePolicy:
    """Default policy: new records are stamped with today's date, updates overlay supplied fields."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock

    def prepare_create(self, fields: dict[str, Any], note: str | None = None) -> dict[str, Any]:
        return {**fields, "created_at": self.clock().date()}

    def apply_update(
        self,
        existing: Entity,
        fields: dict[str, Any],
        note: str | None = None,
        location: str | None = None,
    ) -> dict[str, Any]:
        return {**existing.model_dump(), **fields}


@dataclass(frozen=True)
class EntityKind(Generic[T]):
    """
    Static configuration of one entity kind.

    Attributes:
        model: Pydantic model of the records
        seed: Factory for the default dataset used when nothing is stored
        read_only: Fields that ``update`` refuses to change
        derived: Fields recomputed by the model; supplied values are dropped
    """

    model: type[T]
    seed: Callable[[], list[T]] | None = None
    read_only: frozenset[str] = BASE_READ_ONLY
    derived: frozenset[str] = field(default_factory=frozenset)

    @property
    def name(self) -> str:
        """Collection and storage key name."""
        return self.model.get_kind()

    def normalize_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Map camelCase aliases to attribute names and reject unknown fields.

        Raises:
            ValidationError: if a key names no field of the model
        """
        by_alias = {info.alias: name for name, info in self.model.model_fields.items() if info.alias}
        normalized: dict[str, Any] = {}
        unknown: list[FieldError] = []
        for key, value in fields.items():
            if key in self.model.model_fields:
                normalized[key] = value
            elif key in by_alias:
                normalized[by_alias[key]] = value
            else:
                unknown.append(FieldError(key, "Unknown field", "UNKNOWN_FIELD", value))
        if unknown:
            raise ValidationError(self.name, unknown)
        for name in self.derived:
            normalized.pop(name, None)
        return normalized


def _is_unchanged(existing: Entity, name: str, value: Any) -> bool:
    """True if ``value`` equals the stored field in Python or JSON form."""
    if value == getattr(existing, name):
        return True
    alias = type(existing).model_fields[name].alias or name
    return (
        value == existing.model_dump(mode="json").get(name)
        or value == existing.to_record().get(alias)
    )


def _serialized(method):
    """Run a mutating repository method while holding the repository lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)

    return wrapper


class Repository(Generic[T]):
    """
    CRUD over an insertion-ordered, in-memory collection of one entity kind.

    Every successful mutation is followed by exactly one save of the whole
    collection. Failed operations leave both the collection and the store
    untouched. Mutations run under ``lock``, which the engine shares between
    its repositories so that concurrent requests are applied one at a time.
    """

    def __init__(
        self,
        kind: EntityKind[T],
        store: PersistentStore,
        policy: EntityPolicy[T] | None = None,
        seed_defaults: bool = True,
        clock: Callable[[], datetime] = utc_now,
        lock: "threading.RLock | None" = None,
    ):
        self.kind = kind
        self.store = store
        self.policy = policy or MergePolicy(clock)
        self.seed_defaults = seed_defaults
        self.clock = clock
        self.lock = lock or threading.RLock()
        self.last_save_ok = True
        self._records: list[T] = []

    @property
    def name(self) -> str:
        return self.kind.name

    @_serialized
    def load(self) -> "list[T]":
        """
        Populate the collection from the store.

        Absent data yields the seeded default dataset (or an empty
        collection when seeding is off). Data that is not a JSON array of
        valid records is logged and replaced by the same fallback.
        """
        raw = self.store.load(self.name, None)
        if raw is None:
            self._records = self._fallback()
            logger.info("No stored data, using defaults", kind=self.name, count=len(self._records))
            return list(self._records)

        try:
            if not isinstance(raw, list):
                raise TypeError(f"expected a JSON array, got {type(raw).__name__}")
            self._records = [self.kind.model.model_validate(item) for item in raw]
        except (TypeError, pydantic.ValidationError) as e:
            logger.warning("Stored data is invalid, using defaults", kind=self.name, error=str(e))
            self._records = self._fallback()
            return list(self._records)

        logger.info("Loaded stored data", kind=self.name, count=len(self._records))
        return list(self._records)

    def _fallback(self) -> "list[T]":
        if self.seed_defaults and self.kind.seed is not None:
            return list(self.kind.seed())
        return []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._records))

    def __contains__(self, entity_id: object) -> bool:
        return self.find(entity_id) is not None  # type: ignore[arg-type]

    def find(self, entity_id: str) -> T | None:
        """Return the record with ``entity_id`` or None."""
        for record in self._records:
            if record.id == entity_id:
                return record
        return None

    def get(self, entity_id: str) -> T:
        """Return the record with ``entity_id``; raise NotFound if absent."""
        record = self.find(entity_id)
        if record is None:
            raise NotFound(self.name, entity_id)
        return record

    def _index_of(self, entity_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.id == entity_id:
                return index
        raise NotFound(self.name, entity_id)

    def _build(self, fields: dict[str, Any]) -> T:
        try:
            return self.kind.model.model_validate(fields)
        except pydantic.ValidationError as e:
            raise ValidationError.from_pydantic(self.name, e) from e

    def _build_new(self, fields: dict[str, Any], note: str | None = None) -> T:
        normalized = self.kind.normalize_fields(fields)
        normalized.pop("id", None)
        normalized.pop("created_at", None)
        return self._build(self.policy.prepare_create(normalized, note=note))

    @_serialized
    def create(self, fields: dict[str, Any], note: str | None = None) -> T:
        """
        Create a record and insert it at the head of the collection.

        Args:
            fields: Field values by attribute name or camelCase alias
            note: Note for the initial tracking event (shipments only)

        Returns:
            The stored record with its generated id

        Raises:
            ValidationError: if a required field is missing or invalid
        """
        record = self._build_new(fields, note=note)
        self._records.insert(0, record)
        self._persist()
        logger.info("Entity created", kind=self.name, entity_id=record.id)
        return record

    @_serialized
    def create_many(self, fields_list: Iterable[dict[str, Any]], note: str | None = None) -> "list[T]":
        """
        Create several records with a single save.

        All records are validated before any is inserted. They are placed at
        the head of the collection in the order given.
        """
        records = [self._build_new(fields, note=note) for fields in fields_list]
        if not records:
            return []
        self._records[0:0] = records
        self._persist()
        logger.info("Entities created", kind=self.name, count=len(records))
        return records

    @_serialized
    def update(
        self,
        entity_id: str,
        fields: dict[str, Any],
        note: str | None = None,
        location: str | None = None,
    ) -> T:
        """
        Merge ``fields`` over the stored record.

        Args:
            entity_id: Id of the record to update
            fields: Partial or full replacement values
            note: Tracking note, used when the update changes a shipment's status
            location: Tracking location, used likewise

        Raises:
            NotFound: if no record has ``entity_id``
            ValidationError: if the result is invalid or a read-only field is supplied
        """
        existing = self.get(entity_id)

        normalized = self.kind.normalize_fields(fields)
        blocked = [
            FieldError(name, "Field is read-only", "READ_ONLY", normalized[name])
            for name in self.kind.read_only
            if name in normalized and not _is_unchanged(existing, name, normalized[name])
        ]
        if blocked:
            raise ValidationError(self.name, blocked)
        for name in self.kind.read_only:
            normalized.pop(name, None)

        merged = self.policy.apply_update(existing, normalized, note=note, location=location)
        record = self._build(merged)

        # Looked up again: the policy may have inserted records meanwhile.
        self._records[self._index_of(entity_id)] = record
        self._persist()
        logger.info("Entity updated", kind=self.name, entity_id=entity_id, fields=sorted(normalized))
        return record

    @_serialized
    def delete(self, entity_id: str) -> None:
        """
        Remove a record. References held by other kinds are left dangling.

        Raises:
            NotFound: if no record has ``entity_id``
        """
        index = self._index_of(entity_id)
        del self._records[index]
        self._persist()
        logger.info("Entity deleted", kind=self.name, entity_id=entity_id)

    @_serialized
    def replace_all(self, records: Iterable[T]) -> None:
        """Replace the whole collection with already-validated records."""
        self._records = list(records)
        self._persist()
        logger.info("Collection replaced", kind=self.name, count=len(self._records))

    @_serialized
    def clear(self) -> None:
        """Empty the collection and remove its stored key."""
        self._records = []
        self.store.remove(self.name)
        logger.info("Collection cleared", kind=self.name)

    def _persist(self) -> bool:
        self.last_save_ok = self.store.save(self.name, [r.to_record() for r in self._records])
        return self.last_save_ok

    # Defined last: inside the class body this name shadows the builtin.
    def list(self) -> "list[T]":
        """All records in collection order (newest first)."""
        return list(self._records)
