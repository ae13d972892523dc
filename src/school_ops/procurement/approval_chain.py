"""Approval chain resolution from the management hierarchy."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from school_ops.staff import StaffMember

logger = logging.getLogger(__name__)


class CyclicHierarchyError(Exception):
    """Raised when manager links loop back on themselves."""

    def __init__(self, requester_id: str, cycle: list[str]):
        self.requester_id = requester_id
        self.cycle = cycle
        path = " -> ".join(cycle)
        super().__init__(
            f"Cyclic manager references while resolving approvers for "
            f"'{requester_id}': {path}"
        )


class ApprovalChainResolver:
    """Resolves the ordered approvers for a requester.

    The roster is reduced to an explicit ``staff_id -> manager_id`` map and
    walked upward from the requester. The walk ends at a member with no
    manager or at a manager ID missing from the roster. A visited set bounds
    the walk to the roster size; on a revisit the resolver raises
    ``CyclicHierarchyError`` unless ``strict`` is False, in which case the
    chain is cut at the revisit.
    """

    def __init__(self, roster: Iterable[StaffMember], strict: bool = True):
        self.parents: dict[str, str | None] = {
            member.staff_id: member.manager_id for member in roster
        }
        self.strict = strict

    @classmethod
    def from_parents(
        cls, parents: Mapping[str, str | None], strict: bool = True
    ) -> ApprovalChainResolver:
        """Build a resolver directly from an adjacency map."""
        resolver = cls((), strict=strict)
        resolver.parents = dict(parents)
        return resolver

    def resolve(self, requester_id: str) -> list[str]:
        """Return approver IDs from the direct manager upward."""
        chain: list[str] = []
        visited = {requester_id}
        current = requester_id

        while True:
            manager_id = self.parents.get(current)
            if not manager_id:
                break
            if manager_id not in self.parents:
                logger.warning(
                    "Manager '%s' of '%s' is not on the roster; chain for '%s' ends here",
                    manager_id,
                    current,
                    requester_id,
                )
                break
            if manager_id in visited:
                if self.strict:
                    raise CyclicHierarchyError(
                        requester_id, [requester_id, *chain, manager_id]
                    )
                logger.warning(
                    "Cycle at '%s' while resolving approvers for '%s'; chain truncated",
                    manager_id,
                    requester_id,
                )
                break

            chain.append(manager_id)
            visited.add(manager_id)
            current = manager_id

        return chain


def resolve_approval_chain(
    requester_id: str, roster: Iterable[StaffMember], strict: bool = True
) -> list[str]:
    """Resolve the approval chain for ``requester_id`` over ``roster``."""
    return ApprovalChainResolver(roster, strict=strict).resolve(requester_id)
