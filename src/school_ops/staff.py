"""Staff roster records shared by the procurement and payroll engines."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class StaffMember:
    """A member of staff as supplied by the application layer.

    ``manager_id`` links each member to a single parent, forming a forest.
    Payroll counters are optional; absent counters count as zero.
    """

    staff_id: str
    full_name: str = ""
    manager_id: str | None = None
    rate_card_id: str | None = None
    periods_worked: Decimal | None = None
    moderation_hours_logged: Decimal | None = None
    employee_code: str | None = None

    @property
    def display_name(self) -> str:
        """Name shown in approval history, falling back to the ID."""
        return self.full_name or self.staff_id


def index_roster(roster: Iterable[StaffMember]) -> dict[str, StaffMember]:
    """Index a roster by staff ID. Later duplicates win."""
    return {member.staff_id: member for member in roster}
