"""Demo scenario for running the API without a backing system.

Seeds a small school: a principal, a deputy, two heads of department,
three teachers on two rate cards and a contract coach, plus budgets and vendors.
"""

from __future__ import annotations

from decimal import Decimal

from school_ops.payroll import RateCard, StandardDeduction, Workload
from school_ops.procurement import Budget, Vendor
from school_ops.staff import StaffMember
from school_ops.store import Store

DEMO_STAFF = [
    StaffMember("principal", "Thandi Nkosi", employee_code="E-001"),
    StaffMember("deputy", "Pieter van Wyk", manager_id="principal", employee_code="E-002"),
    StaffMember("hod-maths", "Aisha Patel", manager_id="deputy", rate_card_id="rc-senior", employee_code="E-010"),
    StaffMember("hod-languages", "Johan Botha", manager_id="deputy", rate_card_id="rc-senior", employee_code="E-011"),
    StaffMember(
        "teacher-01",
        "Sipho Dlamini",
        manager_id="hod-maths",
        rate_card_id="rc-senior",
        moderation_hours_logged=Decimal("5"),
        employee_code="E-104",
    ),
    StaffMember("teacher-02", "Lerato Mokoena", manager_id="hod-maths", rate_card_id="rc-junior", employee_code="E-221"),
    StaffMember("teacher-03", "Naledi Mthembu", manager_id="hod-languages", rate_card_id="rc-junior", employee_code="E-222"),
    # Contract coach paid outside this system.
    StaffMember("coach-01", "Ruan Jacobs", manager_id="deputy"),
]

DEMO_RATE_CARDS = [
    RateCard(
        rate_card_id="rc-senior",
        name="Senior Educator",
        base_salary=Decimal("10000"),
        rate_per_period=Decimal("50"),
        rate_per_moderation_hour=Decimal("100"),
        tax_percentage=Decimal("25"),
        standard_deductions=(
            StandardDeduction("Medical aid", Decimal("200")),
        ),
    ),
    RateCard(
        rate_card_id="rc-junior",
        name="Junior Educator",
        base_salary=Decimal("7500.50"),
        rate_per_period=Decimal("35.25"),
        rate_per_moderation_hour=Decimal("80"),
        tax_percentage=Decimal("18"),
        standard_deductions=(
            StandardDeduction("UIF", Decimal("75.01")),
            StandardDeduction("Provident fund", Decimal("300")),
        ),
    ),
]

DEMO_BUDGETS = [
    Budget("budget-fp", Decimal("5000"), "Foundation Phase 2026", academic_year="2026"),
    Budget("budget-tech", Decimal("25000"), "Technology Refresh 2026", academic_year="2026"),
]

DEMO_VENDORS = [
    Vendor("vendor-01", "Juta Office Supplies", "Zanele Khumalo", "orders@juta.example", "021 555 0142"),
    Vendor("vendor-02", "Cape Tech Distributors", "Imran Davids", "sales@capetech.example", "021 555 0199"),
]

DEMO_WORKLOADS = {
    "hod-maths": Workload(periods_worked=Decimal("12")),
    "hod-languages": Workload(periods_worked=Decimal("14")),
    "teacher-01": Workload(periods_worked=Decimal("20")),
    "teacher-02": Workload(periods_worked=Decimal("26"), moderation_hours=Decimal("1.5")),
    "teacher-03": Workload(periods_worked=Decimal("24")),
}


def seed_demo(store: Store) -> Store:
    """Load the demo scenario into ``store``."""
    store.add_staff(DEMO_STAFF)
    store.add_rate_cards(DEMO_RATE_CARDS)
    store.add_budgets(DEMO_BUDGETS)
    store.add_vendors(DEMO_VENDORS)
    for teacher_id, workload in DEMO_WORKLOADS.items():
        store.set_workload(teacher_id, workload)
    return store
