"""Budget spend projection over procurement requests."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from school_ops.procurement.types import Budget, ProcurementRequest, RequestStatus


@dataclass(frozen=True)
class BudgetUsage:
    """Spent and remaining amounts for one budget at one point in time."""

    budget_id: str
    total_amount: Decimal
    spent: Decimal
    remaining: Decimal

    def can_cover(self, amount: Decimal) -> bool:
        """Whether ``amount`` fits in what is left of the budget."""
        return amount <= self.remaining


def budget_usage(budget: Budget, requests: Iterable[ProcurementRequest]) -> BudgetUsage:
    """Project spend for ``budget`` from every request charged to it.

    Denied requests do not count; Pending and Approved ones do. Nothing is
    cached, so the result always reflects the current request statuses.
    """
    spent = sum(
        (
            request.amount
            for request in requests
            if request.budget_id == budget.budget_id
            and request.status != RequestStatus.DENIED
        ),
        Decimal("0"),
    )
    return BudgetUsage(
        budget_id=budget.budget_id,
        total_amount=budget.total_amount,
        spent=spent,
        remaining=budget.total_amount - spent,
    )
