"""
Persistence collaborator for the coordination service.

Records live in an InMemoryKeyValueDatabase under prefixed keys
(`organization:<id>`, `volunteer:<id>`, `shift:<id>`), and the
volunteer/shift links under `assignment:<volunteer_id>:<shift_id>`.
"""

from contextlib import AbstractContextManager

from volunteer_coordination.database import InMemoryKeyValueDatabase
from volunteer_coordination.models import (
    Organization,
    Shift,
    ShiftAssignment,
    Volunteer,
)


StoredValue = Organization | Volunteer | Shift | ShiftAssignment


def _assignment_key(volunteer_id: str, shift_id: str) -> str:
    return f"assignment:{volunteer_id}:{shift_id}"


class CoordinationStore:
    def __init__(
        self, db: InMemoryKeyValueDatabase[str, StoredValue] | None = None
    ) -> None:
        self.db: InMemoryKeyValueDatabase[str, StoredValue] = (
            db if db is not None else InMemoryKeyValueDatabase()
        )

    def transaction(
        self,
    ) -> AbstractContextManager[InMemoryKeyValueDatabase[str, StoredValue]]:
        return self.db.transaction()

    # organizations

    def add_organization(self, organization: Organization) -> None:
        self.db.insert(f"organization:{organization.id}", organization)

    def save_organization(self, organization: Organization) -> None:
        self.db.put(f"organization:{organization.id}", organization)

    def get_organization(self, organization_id: str | None) -> Organization | None:
        value = self.db.get(f"organization:{organization_id}")
        return value if isinstance(value, Organization) else None

    def organizations(self) -> list[Organization]:
        return [v for v in self.db.all() if isinstance(v, Organization)]

    def delete_organization(self, organization_id: str) -> tuple[int, int]:
        """
        Delete an organization together with its volunteers and shifts.
        Links touching any of them go too.

        Returns (volunteers removed, shifts removed).
        """
        volunteers = self.volunteers(organization_id=organization_id)
        shifts = self.shifts(organization_id=organization_id)
        for v in volunteers:
            self.delete_volunteer(v.id)
        for s in shifts:
            self.delete_shift(s.id)
        self.db.delete(f"organization:{organization_id}")
        return len(volunteers), len(shifts)

    # volunteers

    def add_volunteer(self, volunteer: Volunteer) -> None:
        self.db.insert(f"volunteer:{volunteer.id}", volunteer)

    def save_volunteer(self, volunteer: Volunteer) -> None:
        self.db.put(f"volunteer:{volunteer.id}", volunteer)

    def get_volunteer(self, volunteer_id: str) -> Volunteer | None:
        value = self.db.get(f"volunteer:{volunteer_id}")
        return value if isinstance(value, Volunteer) else None

    def volunteers(self, *, organization_id: str | None = None) -> list[Volunteer]:
        return [
            v
            for v in self.db.all()
            if isinstance(v, Volunteer)
            and (organization_id is None or v.organization_id == organization_id)
        ]

    def delete_volunteer(self, volunteer_id: str) -> int:
        """Delete a volunteer and its links. Returns the number of links removed."""
        links = self.assignments(volunteer_id=volunteer_id)
        for link in links:
            self.db.delete(_assignment_key(link.volunteer_id, link.shift_id))
        self.db.delete(f"volunteer:{volunteer_id}")
        return len(links)

    # shifts

    def add_shift(self, shift: Shift) -> None:
        self.db.insert(f"shift:{shift.id}", shift)

    def save_shift(self, shift: Shift) -> None:
        self.db.put(f"shift:{shift.id}", shift)

    def get_shift(self, shift_id: str) -> Shift | None:
        value = self.db.get(f"shift:{shift_id}")
        return value if isinstance(value, Shift) else None

    def shifts(self, *, organization_id: str | None = None) -> list[Shift]:
        return [
            s
            for s in self.db.all()
            if isinstance(s, Shift)
            and (organization_id is None or s.organization_id == organization_id)
        ]

    def delete_shift(self, shift_id: str) -> int:
        """Delete a shift and its links. Returns the number of links removed."""
        links = self.assignments(shift_id=shift_id)
        for link in links:
            self.db.delete(_assignment_key(link.volunteer_id, link.shift_id))
        self.db.delete(f"shift:{shift_id}")
        return len(links)

    # volunteer <-> shift links

    def add_assignment(self, volunteer_id: str, shift_id: str) -> bool:
        """Link a volunteer to a shift. Returns False if the link already existed."""
        key = _assignment_key(volunteer_id, shift_id)
        if key in self.db:
            return False
        self.db.insert(
            key, ShiftAssignment(volunteer_id=volunteer_id, shift_id=shift_id)
        )
        return True

    def remove_assignment(self, volunteer_id: str, shift_id: str) -> bool:
        key = _assignment_key(volunteer_id, shift_id)
        if key not in self.db:
            return False
        self.db.delete(key)
        return True

    def assignments(
        self,
        *,
        volunteer_id: str | None = None,
        shift_id: str | None = None,
    ) -> list[ShiftAssignment]:
        return [
            a
            for a in self.db.all()
            if isinstance(a, ShiftAssignment)
            and (volunteer_id is None or a.volunteer_id == volunteer_id)
            and (shift_id is None or a.shift_id == shift_id)
        ]
