"""Teacher payroll calculation."""

from school_ops.payroll.calculator import (
    InvalidRateCardError,
    MissingRateCardError,
    PayrollCalculator,
)
from school_ops.payroll.payslip import Payslip, PayslipLine, build_payslip, round_to_cents
from school_ops.payroll.run import PayrollRunAggregator
from school_ops.payroll.types import (
    PayrollBreakdown,
    PayrollRun,
    RateCard,
    StandardDeduction,
    Workload,
)

__all__ = [
    "InvalidRateCardError",
    "MissingRateCardError",
    "PayrollBreakdown",
    "PayrollCalculator",
    "PayrollRun",
    "PayrollRunAggregator",
    "Payslip",
    "PayslipLine",
    "RateCard",
    "StandardDeduction",
    "Workload",
    "build_payslip",
    "round_to_cents",
]
