"""Payroll run aggregation into immutable audit snapshots."""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from school_ops.config import get_settings
from school_ops.payroll.types import ZERO, PayrollBreakdown, PayrollRun

logger = logging.getLogger(__name__)


class PayrollRunAggregator:
    """Rolls per-teacher breakdowns up into one payroll run.

    The input is treated as a frozen snapshot: breakdowns keep their input
    order and no earlier run is consulted or changed.
    """

    def __init__(self, engine_version: str | None = None):
        self.engine_version = engine_version or get_settings().engine_version

    def aggregate(
        self,
        breakdowns: Iterable[PayrollBreakdown],
        approved_by: str,
        run_at: datetime,
        run_id: UUID | None = None,
    ) -> PayrollRun:
        """Build the run record with totals over ``breakdowns``."""
        snapshot = tuple(breakdowns)
        total_nett_pay = sum((b.nett_pay for b in snapshot), ZERO)
        total_cost = sum((b.employer_cost for b in snapshot), ZERO)

        fingerprint = self.compute_fingerprint(snapshot)
        if run_id is None:
            run_id = self.generate_run_id(fingerprint, approved_by, run_at)

        logger.info(
            "Payroll run %s approved by %s: %d teacher(s), nett %s, cost %s",
            run_id,
            approved_by,
            len(snapshot),
            total_nett_pay,
            total_cost,
        )
        return PayrollRun(
            run_id=run_id,
            run_at=run_at,
            approved_by=approved_by,
            breakdowns=snapshot,
            total_nett_pay=total_nett_pay,
            total_cost=total_cost,
            fingerprint=fingerprint,
        )

    @staticmethod
    def compute_fingerprint(breakdowns: Iterable[PayrollBreakdown]) -> str:
        """Fingerprint of the breakdown set, sensitive to order and values."""
        data = [b.to_canonical_dict() for b in breakdowns]
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    def generate_run_id(
        self, fingerprint: str, approved_by: str, run_at: datetime
    ) -> UUID:
        """Generate deterministic run ID."""
        data = {
            "fingerprint": fingerprint,
            "approved_by": approved_by,
            "run_at": run_at.isoformat(),
            "engine_version": self.engine_version,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])
