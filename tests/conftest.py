import itertools
from datetime import UTC, datetime, timedelta

import pytest

from volunteer_coordination.models import Organization, Shift, Volunteer
from volunteer_coordination.service import VolunteerCoordination, create_coordination


@pytest.fixture
def coordination() -> VolunteerCoordination:
    return create_coordination()


# fixture records: a fixed, named data set loaded into every test that asks


@pytest.fixture
def org_one(coordination: VolunteerCoordination) -> Organization:
    return coordination.create_organization("Habitat for Humanity")


@pytest.fixture
def alice(coordination: VolunteerCoordination, org_one: Organization) -> Volunteer:
    return coordination.create_volunteer("Alice", org_one.id)


@pytest.fixture
def bob(coordination: VolunteerCoordination, org_one: Organization) -> Volunteer:
    return coordination.create_volunteer("Bob", org_one.id)


@pytest.fixture
def morning(coordination: VolunteerCoordination, org_one: Organization) -> Shift:
    return coordination.create_shift(
        datetime(2025, 9, 1, 8, 0, 0, tzinfo=UTC),
        datetime(2025, 9, 1, 12, 0, 0, tzinfo=UTC),
        org_one.id,
    )


@pytest.fixture
def afternoon(coordination: VolunteerCoordination, org_one: Organization) -> Shift:
    return coordination.create_shift(
        datetime(2025, 9, 1, 13, 0, 0, tzinfo=UTC),
        datetime(2025, 9, 1, 17, 0, 0, tzinfo=UTC),
        org_one.id,
    )


# factories: build records on demand with sensible defaults


@pytest.fixture
def organization_factory(coordination: VolunteerCoordination):
    seq = itertools.count(1)

    def create(name: str | None = None) -> Organization:
        return coordination.create_organization(name or f"Organization{next(seq)}")

    return create


@pytest.fixture
def volunteer_factory(coordination: VolunteerCoordination, organization_factory):
    seq = itertools.count(1)

    def create(
        name: str | None = None, organization: Organization | None = None
    ) -> Volunteer:
        organization = organization or organization_factory()
        return coordination.create_volunteer(
            name or f"Volunteer{next(seq)}", organization.id
        )

    return create


@pytest.fixture
def shift_factory(coordination: VolunteerCoordination, organization_factory):
    def create(
        starts_at: datetime | None = None,
        ends_at: datetime | None = None,
        organization: Organization | None = None,
    ) -> Shift:
        now = datetime.now(UTC)
        organization = organization or organization_factory()
        return coordination.create_shift(
            starts_at or now + timedelta(days=1),
            ends_at or now + timedelta(days=2),
            organization.id,
        )

    return create
