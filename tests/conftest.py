"""Pytest fixtures for school ops engine tests."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from school_ops.payroll import RateCard, StandardDeduction
from school_ops.procurement import ApprovalWorkflowEngine, Budget, ProcurementRequest, Vendor
from school_ops.staff import StaffMember

SUBMITTED_AT = datetime(2026, 3, 2, 8, 30, tzinfo=timezone.utc)
DECIDED_AT = datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc)


@pytest.fixture
def roster() -> list[StaffMember]:
    """Principal <- deputy <- HOD <- teacher, plus a teacher with no manager."""
    return [
        StaffMember("principal", "Thandi Nkosi"),
        StaffMember("deputy", "Pieter van Wyk", manager_id="principal"),
        StaffMember("hod-maths", "Aisha Patel", manager_id="deputy"),
        StaffMember("teacher-01", "Sipho Dlamini", manager_id="hod-maths", rate_card_id="rc-senior"),
        StaffMember("teacher-02", "Lerato Mokoena", rate_card_id="rc-junior"),
    ]


@pytest.fixture
def senior_rate_card() -> RateCard:
    return RateCard(
        rate_card_id="rc-senior",
        name="Senior Educator",
        base_salary=Decimal("10000"),
        rate_per_period=Decimal("50"),
        rate_per_moderation_hour=Decimal("100"),
        tax_percentage=Decimal("25"),
        standard_deductions=(StandardDeduction("Medical aid", Decimal("200")),),
    )


@pytest.fixture
def junior_rate_card() -> RateCard:
    return RateCard(
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
    )


@pytest.fixture
def budget() -> Budget:
    return Budget(
        budget_id="budget-fp",
        total_amount=Decimal("5000"),
        name="Foundation Phase 2026",
        academic_year="2026",
    )


@pytest.fixture
def vendor() -> Vendor:
    return Vendor(
        vendor_id="vendor-01",
        name="Juta Office Supplies",
        contact_person="Zanele Khumalo",
        email="orders@juta.example",
        phone="021 555 0142",
    )


def _open_request(
    chain: list[str],
    requester_id: str = "teacher-01",
    amount: Decimal = Decimal("1000"),
    budget_id: str = "budget-fp",
    request_id: str = "pr-1",
) -> ProcurementRequest:
    """Open a Pending request over ``chain``."""
    return ApprovalWorkflowEngine.open_request(
        request_id=request_id,
        requester_id=requester_id,
        item_description="Graph paper, 20 reams",
        category="Stationery",
        amount=amount,
        vendor_id="vendor-01",
        budget_id=budget_id,
        chain=chain,
        created_at=SUBMITTED_AT,
    )


@pytest.fixture
def make_request():
    """Factory opening Pending requests over a given chain."""
    return _open_request


@pytest.fixture
def decided_at() -> datetime:
    return DECIDED_AT

