"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from school_ops.payroll import (
    PayrollBreakdown,
    PayrollRun,
    Payslip,
    RateCard,
    StandardDeduction,
    Workload,
)
from school_ops.payroll.payslip import LineType
from school_ops.procurement import (
    ApprovalDecision,
    Budget,
    BudgetUsage,
    ProcurementRequest,
    Vendor,
)
from school_ops.staff import StaffMember


# ============================================================================
# Setup schemas
# ============================================================================


class StaffMemberCreate(BaseModel):
    """Schema for adding or replacing a staff member."""

    staff_id: str
    full_name: str = ""
    manager_id: str | None = None
    rate_card_id: str | None = None
    periods_worked: Decimal | None = Field(default=None, ge=0)
    moderation_hours_logged: Decimal | None = Field(default=None, ge=0)
    employee_code: str | None = None

    def to_staff_member(self) -> StaffMember:
        return StaffMember(**self.model_dump())


class StaffMemberResponse(BaseModel):
    """Schema for staff member response."""

    model_config = ConfigDict(from_attributes=True)

    staff_id: str
    full_name: str
    manager_id: str | None
    rate_card_id: str | None
    periods_worked: Decimal | None
    moderation_hours_logged: Decimal | None
    employee_code: str | None


class StaffListResponse(BaseModel):
    items: list[StaffMemberResponse]
    total: int


class WorkloadUpdate(BaseModel):
    """Workload counters for the next payroll run."""

    periods_worked: Decimal | None = Field(default=None, ge=0)
    moderation_hours: Decimal | None = Field(default=None, ge=0)

    def to_workload(self) -> Workload:
        return Workload(self.periods_worked, self.moderation_hours)


class WorkloadResponse(BaseModel):
    teacher_id: str
    periods_worked: Decimal | None
    moderation_hours: Decimal | None


class StandardDeductionSchema(BaseModel):
    """A fixed deduction on a rate card."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    amount: Decimal = Field(ge=0)


class RateCardCreate(BaseModel):
    """Schema for registering a rate card.

    ``tax_percentage`` is checked by the store; out-of-range values are
    reported as a data integrity error.
    """

    rate_card_id: str
    name: str
    base_salary: Decimal = Field(ge=0)
    rate_per_period: Decimal = Field(ge=0)
    rate_per_moderation_hour: Decimal = Field(ge=0)
    tax_percentage: Decimal
    standard_deductions: list[StandardDeductionSchema] = Field(default_factory=list)

    def to_rate_card(self) -> RateCard:
        return RateCard(
            rate_card_id=self.rate_card_id,
            name=self.name,
            base_salary=self.base_salary,
            rate_per_period=self.rate_per_period,
            rate_per_moderation_hour=self.rate_per_moderation_hour,
            tax_percentage=self.tax_percentage,
            standard_deductions=tuple(
                StandardDeduction(d.name, d.amount) for d in self.standard_deductions
            ),
        )


class RateCardResponse(BaseModel):
    """Schema for rate card response."""

    model_config = ConfigDict(from_attributes=True)

    rate_card_id: str
    name: str
    base_salary: Decimal
    rate_per_period: Decimal
    rate_per_moderation_hour: Decimal
    tax_percentage: Decimal
    standard_deductions: list[StandardDeductionSchema]


class RateCardListResponse(BaseModel):
    items: list[RateCardResponse]
    total: int


class BudgetCreate(BaseModel):
    """Schema for adding or replacing a budget."""

    budget_id: str
    name: str = ""
    total_amount: Decimal = Field(ge=0)
    academic_year: str = ""

    def to_budget(self) -> Budget:
        return Budget(
            budget_id=self.budget_id,
            total_amount=self.total_amount,
            name=self.name,
            academic_year=self.academic_year,
        )


class BudgetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    budget_id: str
    name: str
    total_amount: Decimal
    academic_year: str


class BudgetListResponse(BaseModel):
    items: list[BudgetResponse]
    total: int


class VendorCreate(BaseModel):
    """Schema for adding or replacing a vendor."""

    vendor_id: str
    name: str
    contact_person: str = ""
    email: str = ""
    phone: str = ""

    def to_vendor(self) -> Vendor:
        return Vendor(**self.model_dump())


class VendorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vendor_id: str
    name: str
    contact_person: str
    email: str
    phone: str


class VendorListResponse(BaseModel):
    items: list[VendorResponse]
    total: int


# ============================================================================
# Procurement schemas
# ============================================================================


class ApprovalChainResponse(BaseModel):
    """Ordered approvers for a requester."""

    staff_id: str
    approvers: list[str]


class ProcurementRequestCreate(BaseModel):
    """Schema for submitting a procurement request."""

    requester_id: str
    item_description: str
    category: str
    amount: Decimal = Field(gt=0)
    vendor_id: str
    budget_id: str


class ApprovalStepResponse(BaseModel):
    """One approval history entry."""

    model_config = ConfigDict(from_attributes=True)

    stage: str
    approver_id: str
    status: str
    timestamp: datetime
    comments: str | None = None


class ProcurementRequestResponse(BaseModel):
    """Schema for procurement request response."""

    request_id: str
    requester_id: str
    item_description: str
    category: str
    amount: Decimal
    vendor_id: str
    budget_id: str
    created_at: datetime
    status: str
    current_approver_id: str | None
    approval_history: list[ApprovalStepResponse]
    version: int
    budget_warning: str | None = None

    @classmethod
    def from_request(
        cls, request: ProcurementRequest, budget_warning: str | None = None
    ) -> ProcurementRequestResponse:
        return cls(
            request_id=request.request_id,
            requester_id=request.requester_id,
            item_description=request.item_description,
            category=request.category,
            amount=request.amount,
            vendor_id=request.vendor_id,
            budget_id=request.budget_id,
            created_at=request.created_at,
            status=request.status.value,
            current_approver_id=request.current_approver_id,
            approval_history=[
                ApprovalStepResponse(
                    stage=step.stage,
                    approver_id=step.approver_id,
                    status=step.status.value,
                    timestamp=step.timestamp,
                    comments=step.comments,
                )
                for step in request.approval_history
            ],
            version=request.version,
            budget_warning=budget_warning,
        )


class ProcurementRequestListResponse(BaseModel):
    """Schema for listing procurement requests."""

    items: list[ProcurementRequestResponse]
    total: int


class DecisionRequest(BaseModel):
    """Schema for recording an approver decision."""

    actor_id: str
    decision: ApprovalDecision
    expected_version: int | None = None
    comments: str | None = None


class BudgetUsageResponse(BaseModel):
    """Derived spend for a budget."""

    model_config = ConfigDict(from_attributes=True)

    budget_id: str
    total_amount: Decimal
    spent: Decimal
    remaining: Decimal

    @classmethod
    def from_usage(cls, usage: BudgetUsage) -> BudgetUsageResponse:
        return cls.model_validate(usage)


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollBreakdownResponse(BaseModel):
    """Unrounded pay breakdown for one teacher."""

    model_config = ConfigDict(from_attributes=True)

    teacher_id: str
    teacher_name: str
    employee_code: str | None = None
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


class PayrollPreviewResponse(BaseModel):
    """Current calculated payroll, not yet recorded."""

    breakdowns: list[PayrollBreakdownResponse]
    total_nett_pay: Decimal
    total_cost: Decimal

    @classmethod
    def from_breakdowns(cls, breakdowns: list[PayrollBreakdown]) -> PayrollPreviewResponse:
        return cls(
            breakdowns=[PayrollBreakdownResponse.model_validate(b) for b in breakdowns],
            total_nett_pay=sum((b.nett_pay for b in breakdowns), Decimal("0")),
            total_cost=sum((b.employer_cost for b in breakdowns), Decimal("0")),
        )


class PayrollRunCreate(BaseModel):
    """Schema for approving a payroll run."""

    approved_by: str


class PayrollRunResponse(BaseModel):
    """Schema for payroll run response."""

    run_id: UUID
    run_at: datetime
    approved_by: str
    breakdowns: list[PayrollBreakdownResponse]
    total_nett_pay: Decimal
    total_cost: Decimal
    fingerprint: str

    @classmethod
    def from_run(cls, run: PayrollRun) -> PayrollRunResponse:
        return cls(
            run_id=run.run_id,
            run_at=run.run_at,
            approved_by=run.approved_by,
            breakdowns=[PayrollBreakdownResponse.model_validate(b) for b in run.breakdowns],
            total_nett_pay=run.total_nett_pay,
            total_cost=run.total_cost,
            fingerprint=run.fingerprint,
        )


class PayrollRunSummary(BaseModel):
    """Payroll run without its breakdowns, for history listings."""

    run_id: UUID
    run_at: datetime
    approved_by: str
    teacher_count: int
    total_nett_pay: Decimal
    total_cost: Decimal


class PayrollRunListResponse(BaseModel):
    """Schema for listing payroll runs."""

    items: list[PayrollRunSummary]
    total: int


class PayslipLineResponse(BaseModel):
    """A rounded payslip line."""

    model_config = ConfigDict(from_attributes=True)

    line_type: LineType
    description: str
    amount: Decimal
    quantity: Decimal | None = None
    rate: Decimal | None = None


class PayslipResponse(BaseModel):
    """Display-ready payslip."""

    model_config = ConfigDict(from_attributes=True)

    teacher_id: str
    teacher_name: str
    employee_code: str | None = None
    rate_card_name: str
    currency_code: str
    earnings: list[PayslipLineResponse]
    deductions: list[PayslipLineResponse]
    total_earnings: Decimal
    total_deductions: Decimal
    nett_pay: Decimal

    @classmethod
    def from_payslip(cls, payslip: Payslip, currency_code: str) -> PayslipResponse:
        return cls(
            teacher_id=payslip.teacher_id,
            teacher_name=payslip.teacher_name,
            employee_code=payslip.employee_code,
            rate_card_name=payslip.rate_card_name,
            currency_code=currency_code,
            earnings=[PayslipLineResponse.model_validate(line) for line in payslip.earnings],
            deductions=[
                PayslipLineResponse.model_validate(line) for line in payslip.deductions
            ],
            total_earnings=payslip.total_earnings,
            total_deductions=payslip.total_deductions,
            nett_pay=payslip.nett_pay,
        )


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str | None = None
