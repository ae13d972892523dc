"""Procurement request approval workflow."""

from school_ops.procurement.approval_chain import (
    ApprovalChainResolver,
    CyclicHierarchyError,
    resolve_approval_chain,
)
from school_ops.procurement.budget import BudgetUsage, budget_usage
from school_ops.procurement.types import (
    ApprovalDecision,
    ApprovalStep,
    Approved,
    Budget,
    Denied,
    Pending,
    ProcurementRequest,
    RequestStatus,
    Vendor,
    WorkflowState,
)
from school_ops.procurement.workflow import (
    ApprovalWorkflowEngine,
    InvalidRequestError,
    InvalidTransitionError,
    NotCurrentApproverError,
    pending_for,
)

__all__ = [
    "ApprovalChainResolver",
    "ApprovalDecision",
    "ApprovalStep",
    "ApprovalWorkflowEngine",
    "Approved",
    "Budget",
    "BudgetUsage",
    "CyclicHierarchyError",
    "Denied",
    "InvalidRequestError",
    "InvalidTransitionError",
    "NotCurrentApproverError",
    "Pending",
    "ProcurementRequest",
    "RequestStatus",
    "Vendor",
    "WorkflowState",
    "budget_usage",
    "pending_for",
    "resolve_approval_chain",
]
