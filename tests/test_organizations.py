from datetime import UTC, datetime

import pytest

from volunteer_coordination.errors import RecordNotFoundError, ValidationError
from volunteer_coordination.service import create_coordination


def test_create_organization(coordination) -> None:
    org = coordination.create_organization("Habitat for Humanity")

    assert org.name == "Habitat for Humanity"
    assert coordination.get_organization(org.id) == org
    assert coordination.list_organization_volunteers(org.id) == []
    assert coordination.list_organization_shifts(org.id) == []


@pytest.mark.parametrize("name", [None, "", "   "])
def test_create_organization_requires_name(coordination, name) -> None:
    with pytest.raises(ValidationError) as exc_info:
        coordination.create_organization(name)

    assert exc_info.value.field == "name"
    assert coordination.list_organizations() == []


def test_timestamps_come_from_the_clock() -> None:
    at = datetime(2025, 8, 31, 19, 0, 0, tzinfo=UTC)
    coordination = create_coordination(now_fn=lambda: at)

    org = coordination.create_organization("Habitat for Humanity")
    assert org.created_at == at
    assert org.updated_at == at


def test_update_organization(coordination, org_one) -> None:
    updated = coordination.update_organization(org_one.id, name="Habitat")

    assert updated.id == org_one.id
    assert coordination.get_organization(org_one.id).name == "Habitat"


def test_failed_update_leaves_record_unchanged(coordination, org_one) -> None:
    with pytest.raises(ValidationError):
        coordination.update_organization(org_one.id, name="")

    assert coordination.get_organization(org_one.id).name == "Habitat for Humanity"


def test_can_have_many_volunteers(coordination, org_one, volunteer_factory) -> None:
    volunteer_factory(organization=org_one)
    volunteer_factory(organization=org_one)

    assert len(coordination.list_organization_volunteers(org_one.id)) == 2


def test_can_have_many_shifts(coordination, org_one, shift_factory) -> None:
    shift_factory(organization=org_one)
    shift_factory(organization=org_one)

    assert len(coordination.list_organization_shifts(org_one.id)) == 2


def test_fixture_records_are_associated(
    coordination, org_one, alice, bob, morning, afternoon
) -> None:
    names = [v.name for v in coordination.list_organization_volunteers(org_one.id)]
    starts = [s.starts_at for s in coordination.list_organization_shifts(org_one.id)]

    assert "Alice" in names
    assert datetime(2025, 9, 1, 8, 0, 0, tzinfo=UTC) in starts


def test_listing_is_a_projection(coordination, org_one, alice) -> None:
    listed = coordination.list_organization_volunteers(org_one.id)
    listed.clear()

    assert coordination.list_organization_volunteers(org_one.id) == [alice]


def test_delete_organization_cascades(
    coordination, org_one, alice, morning, organization_factory, volunteer_factory
) -> None:
    other = organization_factory()
    outsider = volunteer_factory(organization=other)
    coordination.assign_to_shift(alice.id, morning.id)
    coordination.assign_to_shift(outsider.id, morning.id)

    coordination.delete_organization(org_one.id)

    with pytest.raises(RecordNotFoundError):
        coordination.get_organization(org_one.id)
    with pytest.raises(RecordNotFoundError, match="Volunteer not found"):
        coordination.get_volunteer(alice.id)
    with pytest.raises(RecordNotFoundError, match="Shift not found"):
        coordination.get_shift(morning.id)

    # links go with their endpoints; other organizations are untouched
    assert coordination.store.assignments() == []
    assert coordination.get_volunteer(outsider.id) == outsider
    assert coordination.list_volunteer_shifts(outsider.id) == []


def test_delete_missing_organization(coordination) -> None:
    with pytest.raises(RecordNotFoundError):
        coordination.delete_organization("missing")


def test_non_text_name_is_a_validation_error(coordination) -> None:
    with pytest.raises(ValidationError) as exc_info:
        coordination.create_organization(123)

    assert exc_info.value.field == "name"
    assert coordination.list_organizations() == []


def test_update_with_non_text_name_is_a_validation_error(coordination, org_one) -> None:
    with pytest.raises(ValidationError) as exc_info:
        coordination.update_organization(org_one.id, name=["Habitat"])

    assert exc_info.value.field == "name"
    assert coordination.get_organization(org_one.id) == org_one
