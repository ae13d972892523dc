"""Reference data endpoints: staff, workloads, rate cards, budgets and vendors."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from school_ops.api.dependencies import AppStore
from school_ops.api.schemas import (
    BudgetCreate,
    BudgetListResponse,
    BudgetResponse,
    ErrorResponse,
    RateCardCreate,
    RateCardListResponse,
    RateCardResponse,
    StaffListResponse,
    StaffMemberCreate,
    StaffMemberResponse,
    VendorCreate,
    VendorListResponse,
    VendorResponse,
    WorkloadResponse,
    WorkloadUpdate,
)
from school_ops.store import RateCardInUseError

router = APIRouter(tags=["setup"])


# ============================================================================
# Staff
# ============================================================================


@router.post(
    "/staff",
    response_model=StaffMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def put_staff_member(
    store: AppStore,
    payload: StaffMemberCreate,
) -> StaffMemberResponse:
    """Add a staff member, replacing any existing record with the same ID."""
    member = payload.to_staff_member()
    store.add_staff([member])
    return StaffMemberResponse.model_validate(member)


@router.get("/staff", response_model=StaffListResponse)
async def list_staff(store: AppStore) -> StaffListResponse:
    items = [StaffMemberResponse.model_validate(m) for m in store.staff.values()]
    return StaffListResponse(items=items, total=len(items))


@router.get(
    "/staff/{staff_id}",
    response_model=StaffMemberResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_staff_member(
    store: AppStore,
    staff_id: Annotated[str, Path()],
) -> StaffMemberResponse:
    return StaffMemberResponse.model_validate(store.get_staff(staff_id))


@router.put(
    "/staff/{staff_id}/workload",
    response_model=WorkloadResponse,
    responses={404: {"model": ErrorResponse}},
)
async def set_workload(
    store: AppStore,
    staff_id: Annotated[str, Path()],
    payload: WorkloadUpdate,
) -> WorkloadResponse:
    """Record the workload counters used by the next payroll calculation."""
    store.set_workload(staff_id, payload.to_workload())
    return WorkloadResponse(
        teacher_id=staff_id,
        periods_worked=payload.periods_worked,
        moderation_hours=payload.moderation_hours,
    )


# ============================================================================
# Rate cards
# ============================================================================


@router.post(
    "/rate-cards",
    response_model=RateCardResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def put_rate_card(
    store: AppStore,
    payload: RateCardCreate,
) -> RateCardResponse:
    """Register a rate card. Cards used by a recorded run cannot be changed."""
    card = payload.to_rate_card()
    try:
        store.add_rate_cards([card])
    except RateCardInUseError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    return RateCardResponse.model_validate(card)


@router.get("/rate-cards", response_model=RateCardListResponse)
async def list_rate_cards(store: AppStore) -> RateCardListResponse:
    items = [RateCardResponse.model_validate(c) for c in store.rate_cards.values()]
    return RateCardListResponse(items=items, total=len(items))


@router.get(
    "/rate-cards/{rate_card_id}",
    response_model=RateCardResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_rate_card(
    store: AppStore,
    rate_card_id: Annotated[str, Path()],
) -> RateCardResponse:
    return RateCardResponse.model_validate(store.get_rate_card(rate_card_id))


# ============================================================================
# Budgets
# ============================================================================


@router.post(
    "/budgets",
    response_model=BudgetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def put_budget(store: AppStore, payload: BudgetCreate) -> BudgetResponse:
    budget = payload.to_budget()
    store.add_budgets([budget])
    return BudgetResponse.model_validate(budget)


@router.get("/budgets", response_model=BudgetListResponse)
async def list_budgets(store: AppStore) -> BudgetListResponse:
    items = [BudgetResponse.model_validate(b) for b in store.budgets.values()]
    return BudgetListResponse(items=items, total=len(items))


@router.get(
    "/budgets/{budget_id}",
    response_model=BudgetResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_budget(
    store: AppStore,
    budget_id: Annotated[str, Path()],
) -> BudgetResponse:
    return BudgetResponse.model_validate(store.get_budget(budget_id))


# ============================================================================
# Vendors
# ============================================================================


@router.post(
    "/vendors",
    response_model=VendorResponse,
    status_code=status.HTTP_201_CREATED,
)
async def put_vendor(store: AppStore, payload: VendorCreate) -> VendorResponse:
    vendor = payload.to_vendor()
    store.add_vendors([vendor])
    return VendorResponse.model_validate(vendor)


@router.get("/vendors", response_model=VendorListResponse)
async def list_vendors(store: AppStore) -> VendorListResponse:
    items = [VendorResponse.model_validate(v) for v in store.vendors.values()]
    return VendorListResponse(items=items, total=len(items))


@router.get(
    "/vendors/{vendor_id}",
    response_model=VendorResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_vendor(
    store: AppStore,
    vendor_id: Annotated[str, Path()],
) -> VendorResponse:
    return VendorResponse.model_validate(store.get_vendor(vendor_id))
