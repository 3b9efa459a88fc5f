import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

import pydantic

from volunteer_coordination.config import CoordinationConfig
from volunteer_coordination.errors import (
    FieldError,
    RecordNotFoundError,
    ValidationError,
)
from volunteer_coordination.logging_config import PACKAGE_LOGGER
from volunteer_coordination.models import Organization, Record, Shift, Volunteer
from volunteer_coordination.store import CoordinationStore
from volunteer_coordination.validation import (
    validate_organization,
    validate_shift,
    validate_volunteer,
)

logger = logging.getLogger(__name__)

NowFn = Callable[[], datetime]

# sentinel for "argument not given" on partial updates
_UNSET: Any = object()

R = TypeVar("R", bound=Record)


def _raise_if_invalid(kind: str, errors: list[FieldError]) -> None:
    if errors:
        logger.warning(
            "%s failed validation: %s",
            kind,
            ", ".join(str(e) for e in errors),
        )
        raise ValidationError(errors)


def _build(model: type[R], data: dict[str, Any]) -> R:
    """
    Build a candidate record, reporting malformed input (wrong types,
    unparseable timestamps) as field errors.
    """
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = [
            FieldError(
                field=str(err["loc"][0]) if err["loc"] else "base",
                reason=err["msg"],
            )
            for err in exc.errors()
        ]
        logger.warning(
            "%s failed validation: %s",
            model.__name__,
            ", ".join(str(e) for e in errors),
        )
        raise ValidationError(errors) from exc


def _changes(**fields: Any) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not _UNSET}


class VolunteerCoordination:
    """
    Create/read/update/delete operations for organizations, volunteers and
    shifts, plus volunteer/shift assignment.

    Every write validates the candidate record first and runs inside a store
    transaction, so a failed write leaves nothing behind.
    """

    def __init__(
        self,
        store: CoordinationStore,
        config: CoordinationConfig | None = None,
        *,
        now_fn: NowFn | None = None,
    ) -> None:
        self.store = store
        self.config = config or CoordinationConfig()
        self.now_fn: NowFn = now_fn or (lambda: datetime.now(UTC))

    # organizations

    def create_organization(self, name: str | None) -> Organization:
        now = self.now_fn()
        candidate = _build(
            Organization, {"name": name, "created_at": now, "updated_at": now}
        )
        _raise_if_invalid("Organization", validate_organization(candidate))

        with self.store.transaction():
            self.store.add_organization(candidate)
        logger.info("Created organization %s (%s)", candidate.id, candidate.name)
        return candidate

    def get_organization(self, organization_id: str) -> Organization:
        organization = self.store.get_organization(organization_id)
        if organization is None:
            raise RecordNotFoundError("organization", organization_id)
        return organization

    def list_organizations(self) -> list[Organization]:
        return self.store.organizations()

    def update_organization(
        self, organization_id: str, *, name: str | None = _UNSET
    ) -> Organization:
        current = self.get_organization(organization_id)
        candidate = _build(
            Organization,
            {
                **current.model_dump(),
                **_changes(name=name),
                "updated_at": self.now_fn(),
            },
        )
        _raise_if_invalid("Organization", validate_organization(candidate))

        with self.store.transaction():
            self.store.save_organization(candidate)
        logger.info("Updated organization %s", organization_id)
        return candidate

    def delete_organization(self, organization_id: str) -> None:
        self.get_organization(organization_id)
        with self.store.transaction():
            volunteers, shifts = self.store.delete_organization(organization_id)
        logger.info(
            "Deleted organization %s with %d volunteer(s) and %d shift(s)",
            organization_id,
            volunteers,
            shifts,
        )

    def list_organization_volunteers(self, organization_id: str) -> list[Volunteer]:
        self.get_organization(organization_id)
        return self.store.volunteers(organization_id=organization_id)

    def list_organization_shifts(self, organization_id: str) -> list[Shift]:
        self.get_organization(organization_id)
        return self.store.shifts(organization_id=organization_id)

    # volunteers

    def create_volunteer(
        self, name: str | None, organization_id: str | None
    ) -> Volunteer:
        now = self.now_fn()
        candidate = _build(
            Volunteer,
            {
                "name": name,
                "organization_id": organization_id,
                "created_at": now,
                "updated_at": now,
            },
        )
        organization = self.store.get_organization(organization_id)
        _raise_if_invalid("Volunteer", validate_volunteer(candidate, organization))

        with self.store.transaction():
            self.store.add_volunteer(candidate)
        logger.info(
            "Created volunteer %s (%s) in organization %s",
            candidate.id,
            candidate.name,
            organization_id,
        )
        return candidate

    def get_volunteer(self, volunteer_id: str) -> Volunteer:
        volunteer = self.store.get_volunteer(volunteer_id)
        if volunteer is None:
            raise RecordNotFoundError("volunteer", volunteer_id)
        return volunteer

    def update_volunteer(
        self,
        volunteer_id: str,
        *,
        name: str | None = _UNSET,
        organization_id: str | None = _UNSET,
    ) -> Volunteer:
        current = self.get_volunteer(volunteer_id)
        candidate = _build(
            Volunteer,
            {
                **current.model_dump(),
                **_changes(name=name, organization_id=organization_id),
                "updated_at": self.now_fn(),
            },
        )
        organization = self.store.get_organization(candidate.organization_id)
        _raise_if_invalid("Volunteer", validate_volunteer(candidate, organization))

        if candidate.organization_id != current.organization_id:
            for link in self.store.assignments(volunteer_id=volunteer_id):
                shift = self.store.get_shift(link.shift_id)
                if shift is not None:
                    self._check_same_organization(
                        candidate,
                        shift,
                        field="organization",
                        reason="must match the organization of every assigned shift",
                    )

        with self.store.transaction():
            self.store.save_volunteer(candidate)
        logger.info("Updated volunteer %s", volunteer_id)
        return candidate

    def delete_volunteer(self, volunteer_id: str) -> None:
        self.get_volunteer(volunteer_id)
        with self.store.transaction():
            links = self.store.delete_volunteer(volunteer_id)
        logger.info("Deleted volunteer %s and %d assignment(s)", volunteer_id, links)

    def list_volunteer_shifts(self, volunteer_id: str) -> list[Shift]:
        self.get_volunteer(volunteer_id)
        shifts = (
            self.store.get_shift(a.shift_id)
            for a in self.store.assignments(volunteer_id=volunteer_id)
        )
        return [s for s in shifts if s is not None]

    def assign_to_shift(self, volunteer_id: str, shift_id: str) -> None:
        """
        Add the volunteer to the shift's membership set. Assigning twice has
        no further effect.
        """
        volunteer = self.get_volunteer(volunteer_id)
        shift = self.get_shift(shift_id)

        self._check_same_organization(
            volunteer,
            shift,
            field="shift",
            reason="must belong to the volunteer's organization",
        )

        with self.store.transaction():
            added = self.store.add_assignment(volunteer_id, shift_id)
        if added:
            logger.info("Assigned volunteer %s to shift %s", volunteer_id, shift_id)
        else:
            logger.debug(
                "Volunteer %s already assigned to shift %s", volunteer_id, shift_id
            )

    def _check_same_organization(
        self, volunteer: Volunteer, shift: Shift, *, field: str, reason: str
    ) -> None:
        """
        Reject a cross-organization link when the config enforces it,
        otherwise log it.
        """
        if volunteer.organization_id == shift.organization_id:
            return
        if self.config.enforce_same_organization:
            _raise_if_invalid("Assignment", [FieldError(field=field, reason=reason)])
        logger.warning(
            "Volunteer %s (organization %s) assigned to shift %s of organization %s",
            volunteer.id,
            volunteer.organization_id,
            shift.id,
            shift.organization_id,
        )

    def unassign_from_shift(self, volunteer_id: str, shift_id: str) -> None:
        with self.store.transaction():
            removed = self.store.remove_assignment(volunteer_id, shift_id)
        if removed:
            logger.info(
                "Unassigned volunteer %s from shift %s", volunteer_id, shift_id
            )

    # shifts

    def create_shift(
        self,
        starts_at: datetime | None,
        ends_at: datetime | None,
        organization_id: str | None,
    ) -> Shift:
        now = self.now_fn()
        candidate = _build(
            Shift,
            {
                "starts_at": starts_at,
                "ends_at": ends_at,
                "organization_id": organization_id,
                "created_at": now,
                "updated_at": now,
            },
        )
        organization = self.store.get_organization(organization_id)
        _raise_if_invalid("Shift", validate_shift(candidate, organization))

        with self.store.transaction():
            self.store.add_shift(candidate)
        logger.info(
            "Created shift %s (%s to %s) in organization %s",
            candidate.id,
            candidate.starts_at.isoformat(),
            candidate.ends_at.isoformat(),
            organization_id,
        )
        return candidate

    def get_shift(self, shift_id: str) -> Shift:
        shift = self.store.get_shift(shift_id)
        if shift is None:
            raise RecordNotFoundError("shift", shift_id)
        return shift

    def update_shift(
        self,
        shift_id: str,
        *,
        starts_at: datetime | None = _UNSET,
        ends_at: datetime | None = _UNSET,
        organization_id: str | None = _UNSET,
    ) -> Shift:
        current = self.get_shift(shift_id)
        candidate = _build(
            Shift,
            {
                **current.model_dump(),
                **_changes(
                    starts_at=starts_at,
                    ends_at=ends_at,
                    organization_id=organization_id,
                ),
                "updated_at": self.now_fn(),
            },
        )
        organization = self.store.get_organization(candidate.organization_id)
        _raise_if_invalid("Shift", validate_shift(candidate, organization))

        if candidate.organization_id != current.organization_id:
            for link in self.store.assignments(shift_id=shift_id):
                volunteer = self.store.get_volunteer(link.volunteer_id)
                if volunteer is not None:
                    self._check_same_organization(
                        volunteer,
                        candidate,
                        field="organization",
                        reason="must match the organization of every assigned volunteer",
                    )

        with self.store.transaction():
            self.store.save_shift(candidate)
        logger.info("Updated shift %s", shift_id)
        return candidate

    def delete_shift(self, shift_id: str) -> None:
        self.get_shift(shift_id)
        with self.store.transaction():
            links = self.store.delete_shift(shift_id)
        logger.info("Deleted shift %s and %d assignment(s)", shift_id, links)

    def list_shift_volunteers(self, shift_id: str) -> list[Volunteer]:
        self.get_shift(shift_id)
        volunteers = (
            self.store.get_volunteer(a.volunteer_id)
            for a in self.store.assignments(shift_id=shift_id)
        )
        return [v for v in volunteers if v is not None]


def create_coordination(
    config: CoordinationConfig | None = None,
    *,
    now_fn: NowFn | None = None,
) -> VolunteerCoordination:
    config = config or CoordinationConfig()
    logging.getLogger(PACKAGE_LOGGER).setLevel(config.log_level)

    store = CoordinationStore()
    return VolunteerCoordination(store, config, now_fn=now_fn)
