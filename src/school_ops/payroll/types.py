"""Type definitions for payroll calculation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

ZERO = Decimal("0")


@dataclass(frozen=True)
class StandardDeduction:
    """A fixed deduction applied to every payslip on a rate card."""

    name: str
    amount: Decimal


@dataclass(frozen=True)
class RateCard:
    """Pay policy template assignable to teachers.

    ``tax_percentage`` is a percentage (25 means 25%), not a fraction.
    """

    rate_card_id: str
    name: str
    base_salary: Decimal
    rate_per_period: Decimal
    rate_per_moderation_hour: Decimal
    tax_percentage: Decimal
    standard_deductions: tuple[StandardDeduction, ...] = ()


@dataclass(frozen=True)
class Workload:
    """Workload counters feeding variable pay. Absent counters are zero."""

    periods_worked: Decimal | None = None
    moderation_hours: Decimal | None = None


@dataclass(frozen=True)
class PayrollBreakdown:
    """Computed pay for one teacher in one run. Amounts are unrounded."""

    teacher_id: str
    teacher_name: str
    employee_code: str | None
    rate_card_id: str
    rate_card_name: str
    periods_worked: Decimal
    moderation_hours: Decimal
    base_salary: Decimal
    variable_pay: Decimal
    total_earnings: Decimal
    tax: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    nett_pay: Decimal
    employer_contributions: Decimal
    employer_cost: Decimal

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "teacher_id": self.teacher_id,
            "rate_card_id": self.rate_card_id,
            "periods_worked": str(self.periods_worked),
            "moderation_hours": str(self.moderation_hours),
            "base_salary": str(self.base_salary),
            "variable_pay": str(self.variable_pay),
            "total_earnings": str(self.total_earnings),
            "tax": str(self.tax),
            "other_deductions": str(self.other_deductions),
            "total_deductions": str(self.total_deductions),
            "nett_pay": str(self.nett_pay),
            "employer_contributions": str(self.employer_contributions),
            "employer_cost": str(self.employer_cost),
        }


@dataclass(frozen=True)
class PayrollRun:
    """Immutable audit record of one approved payroll run."""

    run_id: UUID
    run_at: datetime
    approved_by: str
    breakdowns: tuple[PayrollBreakdown, ...]
    total_nett_pay: Decimal
    total_cost: Decimal
    fingerprint: str

    @property
    def teacher_count(self) -> int:
        return len(self.breakdowns)

    def breakdown_for(self, teacher_id: str) -> PayrollBreakdown | None:
        """Find the breakdown recorded for ``teacher_id`` in this run."""
        for breakdown in self.breakdowns:
            if breakdown.teacher_id == teacher_id:
                return breakdown
        return None
