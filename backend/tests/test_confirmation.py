"""
Tests for the confirmation summary and the printable page.
"""
import asyncio
from dataclasses import replace

import pytest

from claimassist.models.enums import RejectionReason, Severity
from claimassist.services.assessment.simulator import SimulationControls
from claimassist.services.confirmation import build_summary, format_money, summary_page_context
from claimassist.services.exceptions import WorkflowError

FAST = SimulationControls(confidence=90, severity=Severity.MINOR)
SEVERE = SimulationControls(confidence=90, severity=Severity.SEVERE)


def _assessed(workflow, claim, png_bytes, controls) -> str:
    session = workflow.create_claim(claim)
    workflow.add_image(session.claim_id, "front.png", "image/png", png_bytes)
    asyncio.run(workflow.analyze(session.claim_id, controls))
    return session.claim_id


@pytest.fixture
def assessed_claim(workflow, sample_claim, png_bytes) -> str:
    claim = replace(sample_claim, accident_description="Hit by <script>alert(1)</script>")
    return _assessed(workflow, claim, png_bytes, FAST)


@pytest.fixture
def senior_claim(workflow, sample_claim, png_bytes) -> str:
    claim_id = _assessed(workflow, sample_claim, png_bytes, SEVERE)
    workflow.continue_to_review(claim_id)
    workflow.approve(claim_id, "agent-1")
    return claim_id


def _page(client, claim_id) -> str:
    response = client.get(f"/claims/{claim_id}/summary/html")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    return response.text


class TestSummary:
    def test_requires_finalized_claim(self, workflow, assessed_claim):
        with pytest.raises(WorkflowError):
            build_summary(workflow.get(assessed_claim))
        with pytest.raises(WorkflowError):
            summary_page_context(workflow.get(assessed_claim))

    def test_approved_summary(self, workflow, assessed_claim):
        session = workflow.quick_approve(assessed_claim, "agent-1")
        summary = build_summary(session)

        assert summary["status"] == "approved"
        assert summary["original_total"] == session.assessment.total_estimate
        assert summary["adjusted_total"] == session.final.adjusted_total
        assert summary["approval_level"] == "agent"
        assert summary["interaction_type"] == "quick_approved"
        assert summary["manual_baseline_seconds"] == 900
        assert 0 <= summary["time_savings_pct"] <= 100
        assert len(summary["line_items"]) == len(session.assessment.damages)

    def test_senior_level_is_pending(self, workflow, senior_claim):
        summary = build_summary(workflow.get(senior_claim))
        assert summary["approval_level"] == "senior"
        assert summary["status"] == "pending_senior_approval"

    def test_rejected_summary(self, workflow, assessed_claim):
        session = workflow.reject(assessed_claim, "agent-1", RejectionReason.POLICY_NOT_COVERED)
        summary = build_summary(session)
        assert summary["status"] == "rejected"
        assert summary["rejection"]["reason"] == "policy_not_covered"

    def test_format_money(self):
        assert format_money(12345.5) == "$12,345.50"


class TestPrintPage:
    """Test the printable confirmation page."""

    def test_escapes_claim_fields(self, client, workflow, assessed_claim):
        workflow.quick_approve(assessed_claim, "agent-1")
        html = _page(client, assessed_claim)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "Claim Approved" in html
        assert "Agent approval by agent-1" in html
        assert "faster than a 15 minute manual assessment" in html

    def test_shows_adjustments_and_removals(self, client, workflow, assessed_claim):
        session = workflow.get(assessed_claim)
        original = session.assessment.damages[0].estimated_cost
        workflow.override_item(assessed_claim, 0, cost=original + 100, reason="Paint <blend>")
        workflow.remove_item(assessed_claim, 1)
        workflow.continue_to_review(assessed_claim)
        workflow.approve(assessed_claim, "agent-1")

        html = _page(client, assessed_claim)
        assert '<span class="reason">Paint &lt;blend&gt;</span>' in html
        assert "</s> removed" in html
        assert format_money(original + 100) in html

    def test_senior_page_is_pending(self, client, senior_claim):
        html = _page(client, senior_claim)
        assert "Submitted for Senior Approval" in html
        assert "Pending Senior Review" in html
        assert "Claim Approved" not in html
        assert "Approved total" not in html

    def test_rejection_page(self, client, workflow, assessed_claim):
        workflow.reject(assessed_claim, "agent-1", RejectionReason.OTHER, "Duplicate of CLM-1")
        html = _page(client, assessed_claim)
        assert "Claim Rejected" in html
        assert "Reason: other" in html
        assert "Duplicate of CLM-1" in html

    def test_page_before_decision(self, client, assessed_claim):
        assert client.get(f"/claims/{assessed_claim}/summary/html").status_code == 409
