"""
Errors raised by the coordination service and its store.
"""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict


class FieldError(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field} {self.reason}"


class CoordinationError(Exception):
    """Base class for every error this package raises."""


class ValidationError(CoordinationError):
    """
    A record failed validation at create/update time.

    `field` and `reason` describe the first failure; `errors` holds all of
    them in the order they were found.
    """

    def __init__(self, errors: Sequence[FieldError]) -> None:
        if not errors:
            raise ValueError("ValidationError needs at least one field error")
        self.errors: list[FieldError] = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

    @property
    def field(self) -> str:
        return self.errors[0].field

    @property
    def reason(self) -> str:
        return self.errors[0].reason

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]

    def to_dict(self) -> dict:
        return {
            "type": "validation",
            "field": self.field,
            "reason": self.reason,
            "errors": [e.model_dump() for e in self.errors],
        }


class RecordNotFoundError(CoordinationError, LookupError):
    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.capitalize()} not found")


class DuplicateRecordError(CoordinationError):
    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Record already exists: {key}")
