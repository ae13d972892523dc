"""In-memory store owning the mutable collections behind the API.

The engines are pure; this is where their results are kept. Decisions on a
request are serialized by a per-request lock and checked against the
request's ``version`` so a stale decision cannot overwrite a newer one.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from school_ops.payroll import (
    PayrollBreakdown,
    PayrollCalculator,
    PayrollRun,
    PayrollRunAggregator,
    RateCard,
    Workload,
)
from school_ops.payroll.calculator import validate_rate_card
from school_ops.procurement import (
    ApprovalChainResolver,
    ApprovalDecision,
    ApprovalWorkflowEngine,
    Budget,
    BudgetUsage,
    ProcurementRequest,
    RequestStatus,
    Vendor,
    budget_usage,
    pending_for,
)
from school_ops.staff import StaffMember, index_roster

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when a record is not in the store."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class StaleVersionError(Exception):
    """Raised when a decision was made against an outdated request version."""

    def __init__(self, request_id: str, expected: int, actual: int):
        self.request_id = request_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Request '{request_id}' is at version {actual}, decision was made "
            f"against version {expected}"
        )


class RateCardInUseError(Exception):
    """Raised when replacing a rate card a payroll run was computed from."""

    def __init__(self, rate_card_id: str):
        self.rate_card_id = rate_card_id
        super().__init__(
            f"Rate card '{rate_card_id}' is referenced by a recorded payroll run; "
            f"create a new card instead"
        )


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Store:
    """Single authoritative owner of staff, budgets, requests and runs."""

    def __init__(self, strict_hierarchy: bool = True):
        self.strict_hierarchy = strict_hierarchy
        self.staff: dict[str, StaffMember] = {}
        self.rate_cards: dict[str, RateCard] = {}
        self.workloads: dict[str, Workload] = {}
        self.budgets: dict[str, Budget] = {}
        self.vendors: dict[str, Vendor] = {}
        self.requests: dict[str, ProcurementRequest] = {}
        self.payroll_runs: list[PayrollRun] = []
        self._lock = threading.Lock()
        self._request_locks: dict[str, threading.Lock] = {}

    # === Seeding ===

    def add_staff(self, members: Iterable[StaffMember]) -> None:
        self.staff.update(index_roster(members))

    def add_rate_cards(self, rate_cards: Iterable[RateCard]) -> None:
        """Register rate cards. Cards used by a recorded run cannot change."""
        used = {b.rate_card_id for run in self.payroll_runs for b in run.breakdowns}
        for card in rate_cards:
            validate_rate_card(card)
            existing = self.rate_cards.get(card.rate_card_id)
            if existing is not None and existing != card and card.rate_card_id in used:
                raise RateCardInUseError(card.rate_card_id)
            self.rate_cards[card.rate_card_id] = card

    def add_budgets(self, budgets: Iterable[Budget]) -> None:
        for budget in budgets:
            self.budgets[budget.budget_id] = budget

    def add_vendors(self, vendors: Iterable[Vendor]) -> None:
        for vendor in vendors:
            self.vendors[vendor.vendor_id] = vendor

    def set_workload(self, teacher_id: str, workload: Workload) -> None:
        self.get_staff(teacher_id)
        self.workloads[teacher_id] = workload

    # === Lookups ===

    def get_staff(self, staff_id: str) -> StaffMember:
        member = self.staff.get(staff_id)
        if member is None:
            raise NotFoundError("Staff member", staff_id)
        return member

    def get_budget(self, budget_id: str) -> Budget:
        budget = self.budgets.get(budget_id)
        if budget is None:
            raise NotFoundError("Budget", budget_id)
        return budget

    def get_vendor(self, vendor_id: str) -> Vendor:
        vendor = self.vendors.get(vendor_id)
        if vendor is None:
            raise NotFoundError("Vendor", vendor_id)
        return vendor

    def get_rate_card(self, rate_card_id: str) -> RateCard:
        card = self.rate_cards.get(rate_card_id)
        if card is None:
            raise NotFoundError("Rate card", rate_card_id)
        return card

    def get_request(self, request_id: str) -> ProcurementRequest:
        request = self.requests.get(request_id)
        if request is None:
            raise NotFoundError("Procurement request", request_id)
        return request

    def get_payroll_run(self, run_id: UUID) -> PayrollRun:
        for run in self.payroll_runs:
            if run.run_id == run_id:
                return run
        raise NotFoundError("Payroll run", str(run_id))

    # === Procurement ===

    def approval_chain(self, staff_id: str) -> list[str]:
        self.get_staff(staff_id)
        resolver = ApprovalChainResolver(self.staff.values(), strict=self.strict_hierarchy)
        return resolver.resolve(staff_id)

    def create_request(
        self,
        *,
        requester_id: str,
        item_description: str,
        category: str,
        amount: Decimal,
        vendor_id: str,
        budget_id: str,
        created_at: datetime | None = None,
    ) -> ProcurementRequest:
        """Submit a request with its approval chain resolved now."""
        self.get_budget(budget_id)
        self.get_vendor(vendor_id)
        chain = self.approval_chain(requester_id)
        request = ApprovalWorkflowEngine.open_request(
            request_id=f"pr-{uuid4().hex[:12]}",
            requester_id=requester_id,
            item_description=item_description,
            category=category,
            amount=amount,
            vendor_id=vendor_id,
            budget_id=budget_id,
            chain=chain,
            created_at=created_at or utcnow(),
        )
        with self._lock:
            self.requests[request.request_id] = request
            self._request_locks[request.request_id] = threading.Lock()
        logger.info(
            "Request %s submitted by %s for %s; awaiting %s",
            request.request_id,
            requester_id,
            amount,
            request.current_approver_id,
        )
        return request

    def requester_name(self, request: ProcurementRequest) -> str:
        member = self.staff.get(request.requester_id)
        return member.display_name if member else request.requester_id

    def list_requests(
        self,
        status: RequestStatus | None = None,
        requester: str | None = None,
        item: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[ProcurementRequest]:
        """Requests matching every given filter, newest first by default.

        ``requester`` matches a substring of the requester's name or ID and
        ``item`` a substring of the item description, ignoring case.
        """
        sort_keys = {
            "created_at": lambda r: r.created_at,
            "amount": lambda r: r.amount,
            "item": lambda r: r.item_description.lower(),
            "status": lambda r: r.status.value,
            "requester": lambda r: self.requester_name(r).lower(),
        }
        if sort_by not in sort_keys:
            raise ValueError(f"Cannot sort requests by '{sort_by}'")

        requests = list(self.requests.values())
        if status is not None:
            requests = [r for r in requests if r.status == status]
        if requester:
            needle = requester.lower()
            requests = [
                r
                for r in requests
                if needle in self.requester_name(r).lower() or needle in r.requester_id.lower()
            ]
        if item:
            needle = item.lower()
            requests = [r for r in requests if needle in r.item_description.lower()]
        return sorted(requests, key=sort_keys[sort_by], reverse=descending)

    def pending_approvals(self, staff_id: str) -> list[ProcurementRequest]:
        self.get_staff(staff_id)
        return pending_for(staff_id, self.list_requests())

    def _request_lock(self, request_id: str) -> threading.Lock:
        with self._lock:
            lock = self._request_locks.get(request_id)
        if lock is None:
            raise NotFoundError("Procurement request", request_id)
        return lock

    def decide(
        self,
        request_id: str,
        actor_id: str,
        decision: ApprovalDecision,
        expected_version: int | None = None,
        comments: str | None = None,
        timestamp: datetime | None = None,
    ) -> ProcurementRequest:
        """Apply one approver decision as the single writer for the request."""
        decision = ApprovalDecision(decision)
        with self._request_lock(request_id):
            request = self.get_request(request_id)
            if expected_version is not None and expected_version != request.version:
                raise StaleVersionError(request_id, expected_version, request.version)

            ApprovalWorkflowEngine.validate_decision(request, actor_id)

            # A denial ends the request without consulting the hierarchy.
            if decision == ApprovalDecision.DENIED:
                chain = []
            else:
                chain = self.approval_chain(request.requester_id)
            actor = self.staff.get(actor_id)
            updated = ApprovalWorkflowEngine.apply_decision(
                request,
                chain,
                decision,
                actor_id,
                timestamp or utcnow(),
                actor_name=actor.display_name if actor else None,
                comments=comments,
            )
            self.requests[request_id] = updated

        logger.info(
            "Request %s: %s by %s, now %s",
            request_id,
            decision.value,
            actor_id,
            updated.status.value,
        )
        return updated

    def budget_usage(self, budget_id: str) -> BudgetUsage:
        return budget_usage(self.get_budget(budget_id), list(self.requests.values()))

    # === Payroll ===

    def preview_payroll(self) -> list[PayrollBreakdown]:
        return PayrollCalculator.compute_all(
            list(self.staff.values()), self.rate_cards, self.workloads
        )

    def run_payroll(self, approved_by: str, run_at: datetime | None = None) -> PayrollRun:
        """Compute and record a payroll run over the current roster."""
        breakdowns = self.preview_payroll()
        run = PayrollRunAggregator().aggregate(breakdowns, approved_by, run_at or utcnow())
        with self._lock:
            self.payroll_runs.insert(0, run)
        return run
