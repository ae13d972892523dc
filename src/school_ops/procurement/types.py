"""Type definitions for the procurement approval workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class RequestStatus(str, Enum):
    """Procurement request status values."""

    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"


class ApprovalDecision(str, Enum):
    """Decisions an approver can record against a pending request."""

    APPROVED = "Approved"
    DENIED = "Denied"


@dataclass(frozen=True)
class Pending:
    """Awaiting a decision from ``approver_id``.

    ``approver_id`` is None when the requester has no manager; any actor's
    approval then closes the request.
    """

    approver_id: str | None = None

    @property
    def status(self) -> RequestStatus:
        return RequestStatus.PENDING


@dataclass(frozen=True)
class Approved:
    """Terminal: the last approver in the chain approved."""

    @property
    def status(self) -> RequestStatus:
        return RequestStatus.APPROVED

    @property
    def approver_id(self) -> None:
        return None


@dataclass(frozen=True)
class Denied:
    """Terminal: some approver denied the request."""

    @property
    def status(self) -> RequestStatus:
        return RequestStatus.DENIED

    @property
    def approver_id(self) -> None:
        return None


WorkflowState = Pending | Approved | Denied


@dataclass(frozen=True)
class ApprovalStep:
    """One entry in a request's append-only approval history."""

    stage: str
    approver_id: str
    status: RequestStatus
    timestamp: datetime
    comments: str | None = None


@dataclass(frozen=True)
class Vendor:
    """A supplier procurement requests are placed with."""

    vendor_id: str
    name: str
    contact_person: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Budget:
    """A spending budget requests are charged against."""

    budget_id: str
    total_amount: Decimal
    name: str = ""
    academic_year: str = ""


@dataclass(frozen=True)
class ProcurementRequest:
    """A procurement request and its workflow state.

    Instances are never mutated; the workflow engine returns a new value
    per transition with ``version`` incremented.
    """

    request_id: str
    requester_id: str
    item_description: str
    category: str
    amount: Decimal
    vendor_id: str
    budget_id: str
    created_at: datetime
    state: WorkflowState = field(default_factory=Pending)
    approval_history: tuple[ApprovalStep, ...] = ()
    version: int = 1

    @property
    def status(self) -> RequestStatus:
        return self.state.status

    @property
    def current_approver_id(self) -> str | None:
        return self.state.approver_id

    @property
    def is_terminal(self) -> bool:
        return not isinstance(self.state, Pending)
