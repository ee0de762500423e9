"""
Error types raised by the engine.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class FieldError:
    """Details of a single invalid field."""

    field: str
    message: str
    error_code: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "field": self.field,
            "message": self.message,
            "error_code": self.error_code,
            "value": str(self.value) if self.value is not None else None,
        }


class EngineError(Exception):
    """Base class for all engine errors."""


class NotFound(EngineError):
    """An update/delete/get target does not exist in the collection."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} '{entity_id}' not found")
        self.kind = kind
        self.entity_id = entity_id


class ValidationError(EngineError):
    """A record failed validation; nothing was written."""

    def __init__(self, kind: str, errors: list[FieldError]):
        fields = ", ".join(e.field for e in errors) or "record"
        super().__init__(f"Invalid {kind}: {fields}")
        self.kind = kind
        self.errors = errors

    @classmethod
    def from_pydantic(cls, kind: str, exc: Any) -> "ValidationError":
        """Build from a pydantic ValidationError."""
        errors = [
            FieldError(
                field=".".join(str(p) for p in err.get("loc", ())) or "root",
                message=err.get("msg", "invalid value"),
                error_code=err.get("type", "value_error").upper(),
                value=err.get("input") if not isinstance(err.get("input"), dict) else None,
            )
            for err in exc.errors()
        ]
        return cls(kind, errors)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "errors": [e.to_dict() for e in self.errors]}


class DecodeError(EngineError):
    """Persisted or imported data could not be decoded."""

    def __init__(self, message: str, errors: list[FieldError] | None = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        return {"message": str(self), "errors": [e.to_dict() for e in self.errors]}


class ImportPayloadError(DecodeError):
    """A bulk import payload is unreadable as a whole."""


class PersistenceWarning(UserWarning):
    """A save to the persistent store failed; the in-memory state was kept."""
