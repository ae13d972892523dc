"""Teacher pay calculation from rate cards and workload counters."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from school_ops.payroll.types import ZERO, PayrollBreakdown, RateCard, Workload
from school_ops.staff import StaffMember

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


class MissingRateCardError(Exception):
    """Raised when a teacher references a rate card that does not exist."""

    def __init__(self, teacher_id: str, rate_card_id: str, teacher_name: str = ""):
        self.teacher_id = teacher_id
        self.rate_card_id = rate_card_id
        self.teacher_name = teacher_name
        who = f"{teacher_name} ({teacher_id})" if teacher_name else teacher_id
        super().__init__(f"Rate card '{rate_card_id}' assigned to {who} not found")


class InvalidRateCardError(Exception):
    """Raised when a rate card carries values the calculator cannot use."""

    def __init__(self, rate_card_id: str, reason: str):
        self.rate_card_id = rate_card_id
        self.reason = reason
        super().__init__(f"Invalid rate card '{rate_card_id}': {reason}")


def validate_rate_card(rate_card: RateCard) -> None:
    """Reject rate cards whose tax percentage falls outside 0-100."""
    if not ZERO <= rate_card.tax_percentage <= HUNDRED:
        raise InvalidRateCardError(
            rate_card.rate_card_id,
            f"tax percentage {rate_card.tax_percentage} is outside 0-100",
        )


class PayrollCalculator:
    """Derives a teacher's pay breakdown.

    Pipeline (fixed order, no rounding at any step):
    1) variable pay = periods * rate per period + moderation hours * rate per hour
    2) total earnings = base salary + variable pay
    3) tax = total earnings * tax percentage / 100
    4) other deductions = sum of the rate card's standard deductions
    5) nett pay = total earnings - (tax + other deductions)
    6) employer cost = total earnings + employer contributions (currently 0)
    """

    EMPLOYER_CONTRIBUTIONS = ZERO

    @staticmethod
    def resolve_counters(
        teacher: StaffMember, workload: Workload | None
    ) -> tuple[Decimal, Decimal]:
        """Pick periods worked and moderation hours, defaulting to zero."""
        periods = workload.periods_worked if workload else None
        hours = workload.moderation_hours if workload else None
        if periods is None:
            periods = teacher.periods_worked
        if hours is None:
            hours = teacher.moderation_hours_logged
        return periods or ZERO, hours or ZERO

    @classmethod
    def compute(
        cls,
        teacher: StaffMember,
        rate_card: RateCard | None,
        workload: Workload | None = None,
    ) -> PayrollBreakdown | None:
        """Compute pay for one teacher; None when they have no rate card."""
        if rate_card is None:
            return None
        validate_rate_card(rate_card)

        periods, hours = cls.resolve_counters(teacher, workload)

        variable_pay = (
            periods * rate_card.rate_per_period
            + hours * rate_card.rate_per_moderation_hour
        )
        total_earnings = rate_card.base_salary + variable_pay
        tax = total_earnings * (rate_card.tax_percentage / HUNDRED)
        other_deductions = sum(
            (d.amount for d in rate_card.standard_deductions), ZERO
        )
        total_deductions = tax + other_deductions
        nett_pay = total_earnings - total_deductions
        employer_cost = total_earnings + cls.EMPLOYER_CONTRIBUTIONS

        return PayrollBreakdown(
            teacher_id=teacher.staff_id,
            teacher_name=teacher.display_name,
            employee_code=teacher.employee_code,
            rate_card_id=rate_card.rate_card_id,
            rate_card_name=rate_card.name,
            periods_worked=periods,
            moderation_hours=hours,
            base_salary=rate_card.base_salary,
            variable_pay=variable_pay,
            total_earnings=total_earnings,
            tax=tax,
            other_deductions=other_deductions,
            total_deductions=total_deductions,
            nett_pay=nett_pay,
            employer_contributions=cls.EMPLOYER_CONTRIBUTIONS,
            employer_cost=employer_cost,
        )

    @classmethod
    def compute_all(
        cls,
        teachers: Iterable[StaffMember],
        rate_cards: Mapping[str, RateCard],
        workloads: Mapping[str, Workload] | None = None,
    ) -> list[PayrollBreakdown]:
        """Compute breakdowns for every paid teacher, in roster order.

        Teachers without a rate card are not paid through this system and are
        skipped. A rate card reference that does not resolve is a data error.
        """
        workloads = workloads or {}
        breakdowns: list[PayrollBreakdown] = []

        for teacher in teachers:
            if not teacher.rate_card_id:
                continue
            rate_card = rate_cards.get(teacher.rate_card_id)
            if rate_card is None:
                raise MissingRateCardError(
                    teacher.staff_id, teacher.rate_card_id, teacher.full_name
                )
            breakdown = cls.compute(teacher, rate_card, workloads.get(teacher.staff_id))
            if breakdown is not None:
                breakdowns.append(breakdown)

        logger.debug("Computed %d payroll breakdown(s)", len(breakdowns))
        return breakdowns
