"""Payroll API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, status

from school_ops.api.dependencies import AppSettings, AppStore
from school_ops.api.schemas import (
    ErrorResponse,
    PayrollPreviewResponse,
    PayrollRunCreate,
    PayrollRunListResponse,
    PayrollRunResponse,
    PayrollRunSummary,
    PayslipResponse,
)
from school_ops.payroll import build_payslip

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.get(
    "/preview",
    response_model=PayrollPreviewResponse,
    responses={422: {"model": ErrorResponse}},
)
async def preview_payroll(store: AppStore) -> PayrollPreviewResponse:
    """Calculate the current payroll without recording a run."""
    return PayrollPreviewResponse.from_breakdowns(store.preview_payroll())


@router.post(
    "/runs",
    response_model=PayrollRunResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_payroll_run(
    store: AppStore,
    payload: PayrollRunCreate,
) -> PayrollRunResponse:
    """Run and approve payroll, recording an immutable snapshot."""
    return PayrollRunResponse.from_run(store.run_payroll(payload.approved_by))


@router.get("/runs", response_model=PayrollRunListResponse)
async def list_payroll_runs(store: AppStore) -> PayrollRunListResponse:
    """Payroll history, newest first."""
    items = [
        PayrollRunSummary(
            run_id=run.run_id,
            run_at=run.run_at,
            approved_by=run.approved_by,
            teacher_count=run.teacher_count,
            total_nett_pay=run.total_nett_pay,
            total_cost=run.total_cost,
        )
        for run in store.payroll_runs
    ]
    return PayrollRunListResponse(items=items, total=len(items))


@router.get(
    "/runs/{run_id}",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_run(
    store: AppStore,
    run_id: Annotated[UUID, Path()],
) -> PayrollRunResponse:
    """Get a recorded payroll run."""
    return PayrollRunResponse.from_run(store.get_payroll_run(run_id))


@router.get(
    "/runs/{run_id}/payslips/{teacher_id}",
    response_model=PayslipResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payslip(
    store: AppStore,
    settings: AppSettings,
    run_id: Annotated[UUID, Path()],
    teacher_id: Annotated[str, Path()],
) -> PayslipResponse:
    """Payslip for one teacher in a recorded run, rounded to cents."""
    run = store.get_payroll_run(run_id)
    breakdown = run.breakdown_for(teacher_id)
    if breakdown is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Teacher '{teacher_id}' was not paid in run {run_id}",
        )
    payslip = build_payslip(breakdown, store.rate_cards.get(breakdown.rate_card_id))
    return PayslipResponse.from_payslip(payslip, settings.currency_code)
