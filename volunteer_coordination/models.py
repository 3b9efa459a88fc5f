"""
Domain records for volunteer coordination.

Records are immutable; the service stores modified copies on update.
Candidate records may be incomplete (missing name or timestamps) so that
they can be built first and validated afterwards.
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    return uuid4().hex


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Organization(Record):
    name: str | None = None


class Volunteer(Record):
    name: str | None = None
    organization_id: str | None = None


class Shift(Record):
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    organization_id: str | None = None

    @field_validator("starts_at", "ends_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # naive timestamps are UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def duration(self) -> timedelta | None:
        if self.starts_at is None or self.ends_at is None:
            return None
        return self.ends_at - self.starts_at


class ShiftAssignment(BaseModel):
    """Link between a volunteer and a shift. Identity is the pair of ids."""

    model_config = ConfigDict(frozen=True)

    volunteer_id: str
    shift_id: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.volunteer_id, self.shift_id)
