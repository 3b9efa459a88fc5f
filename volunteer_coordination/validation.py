"""
Write-time validation rules.

Each function takes a candidate record and returns the list of field errors
found; an empty list means the record is valid. Organization references are
resolved by the caller and passed in (None when the lookup failed).
"""

from volunteer_coordination.errors import FieldError
from volunteer_coordination.models import Organization, Shift, Volunteer

BLANK = "can't be blank"
MUST_EXIST = "must exist"
ENDS_BEFORE_STARTS = "must be after starts_at"


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_organization(candidate: Organization) -> list[FieldError]:
    errors: list[FieldError] = []
    if is_blank(candidate.name):
        errors.append(FieldError(field="name", reason=BLANK))
    return errors


def validate_volunteer(
    candidate: Volunteer, organization: Organization | None
) -> list[FieldError]:
    errors: list[FieldError] = []
    if is_blank(candidate.name):
        errors.append(FieldError(field="name", reason=BLANK))
    if organization is None or organization.id != candidate.organization_id:
        errors.append(FieldError(field="organization", reason=MUST_EXIST))
    return errors


def validate_shift(
    candidate: Shift, organization: Organization | None
) -> list[FieldError]:
    errors: list[FieldError] = []
    if candidate.starts_at is None:
        errors.append(FieldError(field="starts_at", reason=BLANK))
    if candidate.ends_at is None:
        errors.append(FieldError(field="ends_at", reason=BLANK))

    # ordering is only checked once both timestamps are present
    if (
        candidate.starts_at is not None
        and candidate.ends_at is not None
        and candidate.ends_at <= candidate.starts_at
    ):
        errors.append(FieldError(field="ends_at", reason=ENDS_BEFORE_STARTS))

    if organization is None or organization.id != candidate.organization_id:
        errors.append(FieldError(field="organization", reason=MUST_EXIST))
    return errors
