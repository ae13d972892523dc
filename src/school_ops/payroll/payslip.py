"""Payslip view over a payroll breakdown, rounded for display."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from school_ops.payroll.types import PayrollBreakdown, RateCard


class LineType(str, Enum):
    """Payslip line types."""

    EARNING = "EARNING"
    TAX = "TAX"
    DEDUCTION = "DEDUCTION"


@dataclass(frozen=True)
class PayslipLine:
    line_type: LineType
    description: str
    amount: Decimal
    quantity: Decimal | None = None
    rate: Decimal | None = None


@dataclass(frozen=True)
class Payslip:
    """Rounded, display-ready copy of a breakdown.

    Built from the breakdown and never written back to it.
    """

    teacher_id: str
    teacher_name: str
    employee_code: str | None
    rate_card_name: str
    earnings: tuple[PayslipLine, ...]
    deductions: tuple[PayslipLine, ...]
    total_earnings: Decimal
    total_deductions: Decimal
    nett_pay: Decimal


OUTPUT_PRECISION = Decimal("0.01")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


def build_payslip(breakdown: PayrollBreakdown, rate_card: RateCard | None = None) -> Payslip:
    """Lay a breakdown out as payslip lines.

    With the rate card at hand the variable pay is split into its period and
    moderation parts and each standard deduction gets its own line; without
    it those are shown as single aggregate lines.
    """
    earnings = [
        PayslipLine(LineType.EARNING, "Base salary", round_to_cents(breakdown.base_salary))
    ]
    deductions = [PayslipLine(LineType.TAX, "Tax", round_to_cents(breakdown.tax))]

    if rate_card is not None:
        earnings.append(
            PayslipLine(
                LineType.EARNING,
                "Periods worked",
                round_to_cents(breakdown.periods_worked * rate_card.rate_per_period),
                quantity=breakdown.periods_worked,
                rate=rate_card.rate_per_period,
            )
        )
        earnings.append(
            PayslipLine(
                LineType.EARNING,
                "Moderation hours",
                round_to_cents(
                    breakdown.moderation_hours * rate_card.rate_per_moderation_hour
                ),
                quantity=breakdown.moderation_hours,
                rate=rate_card.rate_per_moderation_hour,
            )
        )
        deductions.extend(
            PayslipLine(LineType.DEDUCTION, d.name, round_to_cents(d.amount))
            for d in rate_card.standard_deductions
        )
    else:
        earnings.append(
            PayslipLine(LineType.EARNING, "Variable pay", round_to_cents(breakdown.variable_pay))
        )
        if breakdown.other_deductions:
            deductions.append(
                PayslipLine(
                    LineType.DEDUCTION,
                    "Other deductions",
                    round_to_cents(breakdown.other_deductions),
                )
            )

    return Payslip(
        teacher_id=breakdown.teacher_id,
        teacher_name=breakdown.teacher_name,
        employee_code=breakdown.employee_code,
        rate_card_name=breakdown.rate_card_name,
        earnings=tuple(earnings),
        deductions=tuple(deductions),
        total_earnings=round_to_cents(breakdown.total_earnings),
        total_deductions=round_to_cents(breakdown.total_deductions),
        nett_pay=round_to_cents(breakdown.nett_pay),
    )
