"""Procurement request API endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, HTTPException, Path, Query, status

from school_ops.api.dependencies import AppSettings, AppStore
from school_ops.api.schemas import (
    ApprovalChainResponse,
    BudgetUsageResponse,
    DecisionRequest,
    ErrorResponse,
    ProcurementRequestCreate,
    ProcurementRequestListResponse,
    ProcurementRequestResponse,
)
from school_ops.procurement import (
    InvalidRequestError,
    InvalidTransitionError,
    NotCurrentApproverError,
    RequestStatus,
)
from school_ops.store import StaleVersionError

router = APIRouter(tags=["procurement"])


# ============================================================================
# Approval chains
# ============================================================================


@router.get(
    "/staff/{staff_id}/approval-chain",
    response_model=ApprovalChainResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def get_approval_chain(
    store: AppStore,
    staff_id: Annotated[str, Path()],
) -> ApprovalChainResponse:
    """Resolve who approves requests raised by a staff member."""
    return ApprovalChainResponse(staff_id=staff_id, approvers=store.approval_chain(staff_id))


@router.get(
    "/staff/{staff_id}/pending-approvals",
    response_model=ProcurementRequestListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_pending_approvals(
    store: AppStore,
    staff_id: Annotated[str, Path()],
) -> ProcurementRequestListResponse:
    """List requests waiting on a staff member's decision."""
    requests = store.pending_approvals(staff_id)
    return ProcurementRequestListResponse(
        items=[ProcurementRequestResponse.from_request(r) for r in requests],
        total=len(requests),
    )


# ============================================================================
# Procurement requests
# ============================================================================


@router.post(
    "/procurement-requests",
    response_model=ProcurementRequestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_procurement_request(
    store: AppStore,
    settings: AppSettings,
    payload: ProcurementRequestCreate,
) -> ProcurementRequestResponse:
    """Submit a request; it starts Pending with the first approver assigned."""
    usage = store.budget_usage(payload.budget_id)
    try:
        request = store.create_request(
            requester_id=payload.requester_id,
            item_description=payload.item_description,
            category=payload.category,
            amount=payload.amount,
            vendor_id=payload.vendor_id,
            budget_id=payload.budget_id,
        )
    except InvalidRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    warning = None
    if not usage.can_cover(payload.amount):
        warning = (
            f"Amount exceeds the {usage.remaining} {settings.currency_code} "
            f"remaining on budget '{payload.budget_id}'"
        )
    return ProcurementRequestResponse.from_request(request, budget_warning=warning)


@router.get(
    "/procurement-requests",
    response_model=ProcurementRequestListResponse,
)
async def list_procurement_requests(
    store: AppStore,
    status_filter: Annotated[RequestStatus | None, Query(alias="status")] = None,
    requester: Annotated[str | None, Query()] = None,
    item: Annotated[str | None, Query()] = None,
    sort_by: Annotated[
        Literal["created_at", "amount", "item", "status", "requester"], Query()
    ] = "created_at",
    descending: Annotated[bool, Query()] = True,
) -> ProcurementRequestListResponse:
    """List procurement requests, newest first unless sorted otherwise.

    ``requester`` matches part of the requester's name or ID and ``item``
    part of the item description, ignoring case.
    """
    requests = store.list_requests(
        status=status_filter,
        requester=requester,
        item=item,
        sort_by=sort_by,
        descending=descending,
    )
    return ProcurementRequestListResponse(
        items=[ProcurementRequestResponse.from_request(r) for r in requests],
        total=len(requests),
    )


@router.get(
    "/procurement-requests/{request_id}",
    response_model=ProcurementRequestResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_procurement_request(
    store: AppStore,
    request_id: Annotated[str, Path()],
) -> ProcurementRequestResponse:
    """Get a procurement request with its approval history."""
    return ProcurementRequestResponse.from_request(store.get_request(request_id))


@router.post(
    "/procurement-requests/{request_id}/decisions",
    response_model=ProcurementRequestResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def decide_procurement_request(
    store: AppStore,
    request_id: Annotated[str, Path()],
    payload: DecisionRequest,
) -> ProcurementRequestResponse:
    """Record the current approver's decision."""
    try:
        request = store.decide(
            request_id,
            payload.actor_id,
            payload.decision,
            expected_version=payload.expected_version,
            comments=payload.comments,
        )
    except NotCurrentApproverError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    except (InvalidTransitionError, StaleVersionError) as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    return ProcurementRequestResponse.from_request(request)


# ============================================================================
# Budgets
# ============================================================================


@router.get(
    "/budgets/{budget_id}/usage",
    response_model=BudgetUsageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_budget_usage(
    store: AppStore,
    budget_id: Annotated[str, Path()],
) -> BudgetUsageResponse:
    """Spent and remaining amounts, derived from current request statuses."""
    return BudgetUsageResponse.from_usage(store.budget_usage(budget_id))
