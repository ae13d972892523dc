"""Procurement request state machine driven by sequential approvals."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from school_ops.procurement.types import (
    ApprovalDecision,
    ApprovalStep,
    Approved,
    Denied,
    Pending,
    ProcurementRequest,
    RequestStatus,
    WorkflowState,
)

logger = logging.getLogger(__name__)

SUBMISSION_STAGE = "Submission"


class InvalidRequestError(Exception):
    """Raised when a new request fails its entry checks."""

    def __init__(self, request_id: str, reason: str):
        self.request_id = request_id
        self.reason = reason
        super().__init__(f"Invalid procurement request '{request_id}': {reason}")


class InvalidTransitionError(Exception):
    """Raised when a decision is recorded against a terminal request."""

    def __init__(self, request_id: str, from_status: str, reason: str | None = None):
        self.request_id = request_id
        self.from_status = from_status
        self.reason = reason
        msg = f"Request '{request_id}' is '{from_status}' and accepts no further decisions"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class NotCurrentApproverError(Exception):
    """Raised when someone other than the current approver decides."""

    def __init__(self, request_id: str, actor_id: str, current_approver_id: str | None):
        self.request_id = request_id
        self.actor_id = actor_id
        self.current_approver_id = current_approver_id
        super().__init__(
            f"'{actor_id}' is not the current approver of request '{request_id}' "
            f"(awaiting '{current_approver_id}')"
        )


class ApprovalWorkflowEngine:
    """State machine for procurement request approvals.

    Allowed transitions:
    - Pending → Pending (approval handed to the next approver)
    - Pending → Approved (last approver, or an approver outside the chain)
    - Pending → Denied
    Approved and Denied are terminal.

    ``apply_decision`` is a pure function: it trusts its caller to have run
    ``validate_decision`` and never mutates its inputs.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        RequestStatus.PENDING: [
            RequestStatus.PENDING,
            RequestStatus.APPROVED,
            RequestStatus.DENIED,
        ],
        RequestStatus.APPROVED: [],
        RequestStatus.DENIED: [],
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        return to_status in cls.VALID_TRANSITIONS.get(from_status, [])

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        """Terminal statuses accept no further decisions."""
        return not cls.VALID_TRANSITIONS.get(status)

    @staticmethod
    def initial_state(chain: Sequence[str]) -> WorkflowState:
        """State of a freshly submitted request."""
        return Pending(chain[0] if chain else None)

    @classmethod
    def open_request(
        cls,
        *,
        request_id: str,
        requester_id: str,
        item_description: str,
        category: str,
        amount: Decimal,
        vendor_id: str,
        budget_id: str,
        chain: Sequence[str],
        created_at: datetime,
    ) -> ProcurementRequest:
        """Create a Pending request with its Submission history entry."""
        if amount <= 0:
            raise InvalidRequestError(request_id, f"amount must be positive, got {amount}")

        submission = ApprovalStep(
            stage=SUBMISSION_STAGE,
            approver_id=requester_id,
            status=RequestStatus.APPROVED,
            timestamp=created_at,
        )
        return ProcurementRequest(
            request_id=request_id,
            requester_id=requester_id,
            item_description=item_description,
            category=category,
            amount=amount,
            vendor_id=vendor_id,
            budget_id=budget_id,
            created_at=created_at,
            state=cls.initial_state(chain),
            approval_history=(submission,),
        )

    @classmethod
    def validate_decision(cls, request: ProcurementRequest, actor_id: str) -> None:
        """Check the preconditions of ``apply_decision`` at the call boundary."""
        if request.is_terminal:
            raise InvalidTransitionError(request.request_id, request.status.value)

        current = request.current_approver_id
        # No manager above the requester: anyone may close the request.
        if current is not None and current != actor_id:
            raise NotCurrentApproverError(request.request_id, actor_id, current)

    @staticmethod
    def next_state(
        chain: Sequence[str], decision: ApprovalDecision, actor_id: str
    ) -> WorkflowState:
        """Compute the state following ``decision`` by ``actor_id``."""
        if decision == ApprovalDecision.DENIED:
            return Denied()

        try:
            index = list(chain).index(actor_id)
        except ValueError:
            # Approvals from outside the chain close the request (fail-open).
            return Approved()

        if index == len(chain) - 1:
            return Approved()
        return Pending(chain[index + 1])

    @classmethod
    def apply_decision(
        cls,
        request: ProcurementRequest,
        chain: Sequence[str],
        decision: ApprovalDecision,
        actor_id: str,
        timestamp: datetime,
        actor_name: str | None = None,
        comments: str | None = None,
    ) -> ProcurementRequest:
        """Return ``request`` advanced by one decision, history extended by one."""
        decision = ApprovalDecision(decision)
        state = cls.next_state(chain, decision, actor_id)

        step = ApprovalStep(
            stage=f"Approval by {actor_name or actor_id}",
            approver_id=actor_id,
            status=RequestStatus(decision.value),
            timestamp=timestamp,
            comments=comments,
        )
        logger.debug(
            "Request %s: %s by %s, %s -> %s",
            request.request_id,
            decision.value,
            actor_id,
            request.status.value,
            state.status.value,
        )
        return replace(
            request,
            state=state,
            approval_history=(*request.approval_history, step),
            version=request.version + 1,
        )


def pending_for(
    actor_id: str, requests: Iterable[ProcurementRequest]
) -> list[ProcurementRequest]:
    """Requests currently waiting on ``actor_id``, in input order."""
    return [
        request
        for request in requests
        if not request.is_terminal and request.current_approver_id == actor_id
    ]
