"""API endpoint integration tests.

Tests the FastAPI endpoints for procurement and payroll operations.
"""

from decimal import Decimal

import pytest
from httpx import AsyncClient

from school_ops.staff import StaffMember

pytestmark = pytest.mark.asyncio


async def _submit(client: AsyncClient, amount: str = "1000", requester_id: str = "teacher-01"):
    response = await client.post(
        "/api/v1/procurement-requests",
        json={
            "requester_id": requester_id,
            "item_description": "Microscope slides",
            "category": "Science",
            "amount": amount,
            "vendor_id": "vendor-01",
            "budget_id": "budget-fp",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _decide(client: AsyncClient, request_id: str, actor_id: str, decision: str, **extra):
    return await client.post(
        f"/api/v1/procurement-requests/{request_id}/decisions",
        json={"actor_id": actor_id, "decision": decision, **extra},
    )


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert "engine_version" in data

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestApprovalChainEndpoints:
    """Test approval chain and pending-approval lookups."""

    async def test_approval_chain(self, client: AsyncClient):
        response = await client.get("/api/v1/staff/teacher-01/approval-chain")

        assert response.status_code == 200
        assert response.json()["approvers"] == ["hod-maths", "deputy", "principal"]

    async def test_unknown_staff(self, client: AsyncClient):
        response = await client.get("/api/v1/staff/ghost/approval-chain")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_cyclic_hierarchy_is_data_error(self, client: AsyncClient, seeded_store):
        seeded_store.add_staff([StaffMember("principal", manager_id="hod-maths")])

        response = await client.get("/api/v1/staff/teacher-01/approval-chain")

        assert response.status_code == 422
        assert response.json()["code"] == "DATA_INTEGRITY"
        assert "teacher-01" in response.json()["detail"]

    async def test_pending_approvals(self, client: AsyncClient):
        created = await _submit(client)

        response = await client.get("/api/v1/staff/hod-maths/pending-approvals")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["request_id"] == created["request_id"]


class TestProcurementRequests:
    """Test request submission and the decision flow."""

    async def test_create_request(self, client: AsyncClient):
        data = await _submit(client)

        assert data["status"] == "Pending"
        assert data["current_approver_id"] == "hod-maths"
        assert data["version"] == 1
        assert data["budget_warning"] is None
        assert len(data["approval_history"]) == 1
        assert data["approval_history"][0]["stage"] == "Submission"
        assert data["approval_history"][0]["approver_id"] == "teacher-01"

    async def test_create_request_rejects_non_positive_amount(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/procurement-requests",
            json={
                "requester_id": "teacher-01",
                "item_description": "Nothing",
                "category": "Stationery",
                "amount": "0",
                "vendor_id": "vendor-01",
                "budget_id": "budget-fp",
            },
        )

        assert response.status_code == 422

    async def test_create_request_unknown_budget(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/procurement-requests",
            json={
                "requester_id": "teacher-01",
                "item_description": "Chalk",
                "category": "Stationery",
                "amount": "10",
                "vendor_id": "vendor-01",
                "budget_id": "budget-missing",
            },
        )

        assert response.status_code == 404

    async def test_over_budget_warning(self, client: AsyncClient):
        await _submit(client, amount="4500")

        data = await _submit(client, amount="600")

        assert data["budget_warning"] is not None
        assert "budget-fp" in data["budget_warning"]

    async def test_full_approval(self, client: AsyncClient):
        created = await _submit(client)
        request_id = created["request_id"]

        for actor in ("hod-maths", "deputy", "principal"):
            response = await _decide(client, request_id, actor, "Approved")
            assert response.status_code == 200, response.text

        data = response.json()
        assert data["status"] == "Approved"
        assert data["current_approver_id"] is None
        assert data["version"] == 4
        assert [s["stage"] for s in data["approval_history"]][-1] == "Approval by Thandi Nkosi"

    async def test_denial(self, client: AsyncClient):
        created = await _submit(client)

        response = await _decide(client, created["request_id"], "hod-maths", "Denied", comments="Out of stock")

        data = response.json()
        assert data["status"] == "Denied"
        assert data["current_approver_id"] is None
        assert data["approval_history"][-1]["status"] == "Denied"
        assert data["approval_history"][-1]["comments"] == "Out of stock"

    async def test_not_current_approver(self, client: AsyncClient):
        created = await _submit(client)

        response = await _decide(client, created["request_id"], "principal", "Approved")

        assert response.status_code == 403

    async def test_decision_on_terminal_request(self, client: AsyncClient):
        created = await _submit(client)
        await _decide(client, created["request_id"], "hod-maths", "Denied")

        response = await _decide(client, created["request_id"], "deputy", "Approved")

        assert response.status_code == 409

    async def test_stale_version(self, client: AsyncClient):
        created = await _submit(client)
        await _decide(client, created["request_id"], "hod-maths", "Approved", expected_version=1)

        response = await _decide(
            client, created["request_id"], "deputy", "Approved", expected_version=1
        )

        assert response.status_code == 409

    async def test_invalid_decision_value(self, client: AsyncClient):
        created = await _submit(client)

        response = await _decide(client, created["request_id"], "hod-maths", "Pending")

        assert response.status_code == 422

    async def test_unknown_request(self, client: AsyncClient):
        response = await _decide(client, "pr-missing", "hod-maths", "Approved")

        assert response.status_code == 404

    async def test_list_and_get(self, client: AsyncClient):
        created = await _submit(client)

        listed = await client.get("/api/v1/procurement-requests")
        fetched = await client.get(f"/api/v1/procurement-requests/{created['request_id']}")

        assert listed.json()["total"] == 1
        assert fetched.status_code == 200
        assert fetched.json()["request_id"] == created["request_id"]

    async def test_budget_usage(self, client: AsyncClient):
        await _submit(client, amount="1000")
        denied = await _submit(client, amount="2000")
        await _decide(client, denied["request_id"], "hod-maths", "Denied")

        response = await client.get("/api/v1/budgets/budget-fp/usage")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["spent"]) == Decimal("1000")
        assert Decimal(data["remaining"]) == Decimal("4000")

    async def test_create_request_unknown_vendor(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/procurement-requests",
            json={
                "requester_id": "teacher-01",
                "item_description": "Chalk",
                "category": "Stationery",
                "amount": "10",
                "vendor_id": "vendor-missing",
                "budget_id": "budget-fp",
            },
        )

        assert response.status_code == 404
        assert "Vendor" in response.json()["detail"]

    async def test_denial_with_cyclic_roster(self, client: AsyncClient, seeded_store):
        created = await _submit(client)
        seeded_store.add_staff([StaffMember("principal", "Thandi Nkosi", manager_id="hod-maths")])

        response = await _decide(client, created["request_id"], "hod-maths", "Denied")

        assert response.status_code == 200
        assert response.json()["status"] == "Denied"

    async def test_list_filters(self, client: AsyncClient):
        first = await _submit(client, requester_id="teacher-01")
        await _submit(client, requester_id="teacher-02")
        await _decide(client, first["request_id"], "hod-maths", "Denied")

        denied = await client.get("/api/v1/procurement-requests", params={"status": "Denied"})
        by_name = await client.get("/api/v1/procurement-requests", params={"requester": "lerato"})
        by_item = await client.get("/api/v1/procurement-requests", params={"item": "telescope"})

        assert [r["request_id"] for r in denied.json()["items"]] == [first["request_id"]]
        assert [r["requester_id"] for r in by_name.json()["items"]] == ["teacher-02"]
        assert by_item.json()["total"] == 0

    async def test_list_rejects_unknown_sort(self, client: AsyncClient):
        response = await client.get("/api/v1/procurement-requests", params={"sort_by": "vendor"})

        assert response.status_code == 422


class TestPayroll:
    """Test payroll preview, runs and payslips."""

    async def test_preview(self, client: AsyncClient):
        response = await client.get("/api/v1/payroll/preview")

        assert response.status_code == 200
        data = response.json()
        assert [b["teacher_id"] for b in data["breakdowns"]] == ["teacher-01", "teacher-02"]
        assert Decimal(data["breakdowns"][0]["nett_pay"]) == Decimal("8425")
        assert Decimal(data["total_nett_pay"]) == Decimal("8425") + Decimal("6249.565")

    async def test_run_and_history(self, client: AsyncClient):
        created = await client.post("/api/v1/payroll/runs", json={"approved_by": "Thandi Nkosi"})

        assert created.status_code == 201
        run = created.json()
        assert run["approved_by"] == "Thandi Nkosi"
        assert Decimal(run["total_cost"]) == Decimal("11500") + Decimal("8078.75")

        history = await client.get("/api/v1/payroll/runs")
        assert history.json()["total"] == 1
        assert history.json()["items"][0]["teacher_count"] == 2

        fetched = await client.get(f"/api/v1/payroll/runs/{run['run_id']}")
        assert fetched.status_code == 200
        assert fetched.json()["fingerprint"] == run["fingerprint"]

    async def test_payslip(self, client: AsyncClient):
        run = (await client.post("/api/v1/payroll/runs", json={"approved_by": "x"})).json()

        response = await client.get(f"/api/v1/payroll/runs/{run['run_id']}/payslips/teacher-02")

        assert response.status_code == 200
        data = response.json()
        assert data["currency_code"]
        assert Decimal(data["nett_pay"]) == Decimal("6249.57")
        assert [line["line_type"] for line in data["deductions"]] == ["TAX", "DEDUCTION", "DEDUCTION"]

    async def test_payslip_unknown_teacher(self, client: AsyncClient):
        run = (await client.post("/api/v1/payroll/runs", json={"approved_by": "x"})).json()

        response = await client.get(f"/api/v1/payroll/runs/{run['run_id']}/payslips/principal")

        assert response.status_code == 404

    async def test_unknown_run(self, client: AsyncClient):
        response = await client.get("/api/v1/payroll/runs/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404

    async def test_missing_rate_card_names_teacher(self, client: AsyncClient, seeded_store):
        seeded_store.add_staff([StaffMember("teacher-09", "Zanele Khumalo", rate_card_id="rc-gone")])

        response = await client.post("/api/v1/payroll/runs", json={"approved_by": "x"})

        assert response.status_code == 422
        assert "Zanele Khumalo" in response.json()["detail"]


class TestSetupEndpoints:
    """Test loading reference data through the API."""

    async def test_bootstrap_empty_store(self, empty_client: AsyncClient):
        client = empty_client
        for member in (
            {"staff_id": "principal", "full_name": "Thandi Nkosi"},
            {"staff_id": "hod-maths", "full_name": "Aisha Patel", "manager_id": "principal"},
            {
                "staff_id": "teacher-01",
                "full_name": "Sipho Dlamini",
                "manager_id": "hod-maths",
                "rate_card_id": "rc-senior",
            },
        ):
            response = await client.post("/api/v1/staff", json=member)
            assert response.status_code == 201, response.text

        responses = [
            await client.post(
                "/api/v1/rate-cards",
                json={
                    "rate_card_id": "rc-senior",
                    "name": "Senior Educator",
                    "base_salary": "10000",
                    "rate_per_period": "50",
                    "rate_per_moderation_hour": "100",
                    "tax_percentage": "25",
                    "standard_deductions": [{"name": "Medical aid", "amount": "200"}],
                },
            ),
            await client.post(
                "/api/v1/budgets",
                json={
                    "budget_id": "budget-fp",
                    "name": "Foundation Phase 2026",
                    "total_amount": "5000",
                    "academic_year": "2026",
                },
            ),
            await client.post(
                "/api/v1/vendors",
                json={"vendor_id": "vendor-01", "name": "Juta Office Supplies"},
            ),
            await client.put(
                "/api/v1/staff/teacher-01/workload",
                json={"periods_worked": "20", "moderation_hours": "5"},
            ),
        ]
        assert [r.status_code for r in responses] == [201, 201, 201, 200]

        submitted = await _submit(client)
        preview = await client.get("/api/v1/payroll/preview")

        assert submitted["current_approver_id"] == "hod-maths"
        assert Decimal(preview.json()["breakdowns"][0]["nett_pay"]) == Decimal("8425")

    async def test_list_and_get_staff(self, client: AsyncClient):
        listed = await client.get("/api/v1/staff")
        fetched = await client.get("/api/v1/staff/teacher-01")
        missing = await client.get("/api/v1/staff/ghost")

        assert listed.json()["total"] == 5
        assert fetched.json()["manager_id"] == "hod-maths"
        assert missing.status_code == 404

    async def test_workload_unknown_staff(self, client: AsyncClient):
        response = await client.put(
            "/api/v1/staff/ghost/workload", json={"periods_worked": "10"}
        )

        assert response.status_code == 404

    async def test_workload_feeds_preview(self, client: AsyncClient):
        await client.put(
            "/api/v1/staff/teacher-01/workload",
            json={"periods_worked": "0", "moderation_hours": "0"},
        )

        preview = (await client.get("/api/v1/payroll/preview")).json()

        assert Decimal(preview["breakdowns"][0]["nett_pay"]) == Decimal("7300")

    async def test_rate_card_round_trip(self, client: AsyncClient):
        listed = await client.get("/api/v1/rate-cards")
        fetched = await client.get("/api/v1/rate-cards/rc-junior")

        assert listed.json()["total"] == 2
        assert [d["name"] for d in fetched.json()["standard_deductions"]] == [
            "UIF",
            "Provident fund",
        ]

    async def test_used_rate_card_is_conflict(self, client: AsyncClient):
        await client.post("/api/v1/payroll/runs", json={"approved_by": "Thandi Nkosi"})

        response = await client.post(
            "/api/v1/rate-cards",
            json={
                "rate_card_id": "rc-senior",
                "name": "Senior Educator",
                "base_salary": "12000",
                "rate_per_period": "50",
                "rate_per_moderation_hour": "100",
                "tax_percentage": "25",
            },
        )

        assert response.status_code == 409
        fetched = await client.get("/api/v1/rate-cards/rc-senior")
        assert Decimal(fetched.json()["base_salary"]) == Decimal("10000")

    async def test_invalid_tax_percentage(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/rate-cards",
            json={
                "rate_card_id": "rc-broken",
                "name": "Broken",
                "base_salary": "1000",
                "rate_per_period": "0",
                "rate_per_moderation_hour": "0",
                "tax_percentage": "150",
            },
        )

        assert response.status_code == 422
        assert response.json()["code"] == "DATA_INTEGRITY"

    async def test_budgets_carry_academic_year(self, client: AsyncClient):
        listed = await client.get("/api/v1/budgets")
        fetched = await client.get("/api/v1/budgets/budget-fp")

        assert listed.json()["total"] == 1
        assert fetched.json()["academic_year"] == "2026"

    async def test_vendors(self, client: AsyncClient):
        created = await client.post(
            "/api/v1/vendors",
            json={
                "vendor_id": "vendor-02",
                "name": "Cape Tech Distributors",
                "contact_person": "Imran Davids",
                "email": "sales@capetech.example",
                "phone": "021 555 0199",
            },
        )
        listed = await client.get("/api/v1/vendors")
        fetched = await client.get("/api/v1/vendors/vendor-01")

        assert created.status_code == 201
        assert listed.json()["total"] == 2
        assert fetched.json()["contact_person"] == "Zanele Khumalo"
