"""
Claim Workflow

Drives one claim through intake, photo upload, assessment, review and
approval or rejection. Each claim lives in a ClaimSession held by the
session store; every operation checks the session's current step.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from claimassist.core.config import settings
from claimassist.core.logging import get_logger, log_audit_event
from claimassist.models.assessment import AssessmentResult, FinalAssessment, RejectionRecord
from claimassist.models.claim import ClaimRecord, DamageMarker, UploadedImage
from claimassist.models.enums import InteractionType, RejectionReason, WorkflowStep
from claimassist.models.feedback import (
    AgentModifications,
    AssessmentSnapshot,
    FeedbackSubmission,
)
from claimassist.services.assessment.routing import RoutingContext, RoutingDecision, RoutingEngine
from claimassist.services.assessment.service import AssessmentService
from claimassist.services.assessment.simulator import SimulationControls
from claimassist.services.exceptions import (
    ClaimNotFoundError,
    ReviewValidationError,
    WorkflowError,
)
from claimassist.services.feedback.loop import FeedbackLoop
from claimassist.services.images import relabel, validate_upload
from claimassist.services.review import ReviewState
from claimassist.services.session_store import SessionStore

logger = get_logger("workflow")


def generate_claim_id() -> str:
    return f"CLM-{uuid.uuid4().hex[:8].upper()}"


@dataclass
class ClaimSession:
    """Working state of one claim."""
    claim_id: str
    claim: ClaimRecord
    step: WorkflowStep = WorkflowStep.UPLOAD
    images: List[UploadedImage] = field(default_factory=list)
    controls: Optional[SimulationControls] = None
    assessment: Optional[AssessmentResult] = None
    routing: Optional[RoutingDecision] = None
    needs_markers: bool = False
    markers_skipped: bool = False
    markers: List[DamageMarker] = field(default_factory=list)
    review: Optional[ReviewState] = None
    final: Optional[FinalAssessment] = None
    rejection: Optional[RejectionRecord] = None
    feedback_id: Optional[str] = None
    analysis_attempt: int = 0
    assessed_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_finalized(self) -> bool:
        return self.step in (WorkflowStep.CONFIRMATION, WorkflowStep.REJECTED)

    def to_dict(self) -> dict:
        return {
            "claim_id": self.claim_id,
            "step": self.step.value,
            "claim": self.claim.to_dict(),
            "images": [img.to_dict() for img in self.images],
            "assessment": self.assessment.to_dict() if self.assessment else None,
            "routing": self.routing.to_dict() if self.routing else None,
            "needs_markers": self.needs_markers,
            "markers": [m.to_dict() for m in self.markers],
            "review": self.review.to_dict() if self.review else None,
            "final_assessment": self.final.to_dict() if self.final else None,
            "rejection": self.rejection.to_dict() if self.rejection else None,
            "feedback_id": self.feedback_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class ClaimWorkflow:
    """Operations on claim sessions."""

    def __init__(
        self,
        store: SessionStore,
        assessment_service: AssessmentService,
        feedback_loop: FeedbackLoop,
        routing_engine: RoutingEngine,
        ttl_hours: Optional[int] = None,
    ):
        self.store = store
        self.assessment_service = assessment_service
        self.feedback_loop = feedback_loop
        self.routing_engine = routing_engine
        self.ttl_hours = ttl_hours or settings.SESSION_TTL_HOURS

    # Session helpers

    def get(self, claim_id: str) -> ClaimSession:
        session = self.store.get(claim_id)
        if session is None:
            raise ClaimNotFoundError(claim_id)
        return session

    def _save(self, session: ClaimSession) -> ClaimSession:
        session.updated_at = datetime.utcnow()
        self.store.set(session.claim_id, session, ttl_hours=self.ttl_hours)
        return session

    def _require_step(self, session: ClaimSession, *steps: WorkflowStep) -> None:
        if session.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise WorkflowError(
                f"Claim {session.claim_id} is at step '{session.step.value}'; expected {allowed}"
            )

    def _require_routed(self, session: ClaimSession) -> None:
        if session.assessment is None or session.review is None:
            raise WorkflowError(f"Claim {session.claim_id} has not been assessed")
        if session.needs_markers:
            raise WorkflowError("Damage markers requested; submit markers or skip first")

    # Intake and upload

    def create_claim(self, claim: ClaimRecord) -> ClaimSession:
        session = ClaimSession(claim_id=generate_claim_id(), claim=claim)
        log_audit_event(
            "claim_created",
            actor_id="agent",
            actor_type="agent",
            details={"claim_id": session.claim_id, "vehicle": claim.vehicle_label},
        )
        return self._save(session)

    def add_image(
        self,
        claim_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        data: bytes,
    ) -> UploadedImage:
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.UPLOAD)
        image = validate_upload(filename, content_type, data, existing_count=len(session.images))
        session.images.append(image)
        self._save(session)
        logger.info(f"Image added to {claim_id}: {image.label} ({image.size_bytes} bytes)")
        return image

    def remove_image(self, claim_id: str, index: int) -> ClaimSession:
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.UPLOAD)
        if index < 0 or index >= len(session.images):
            raise ReviewValidationError(f"No image at index {index}")
        session.images.pop(index)
        relabel(session.images)
        return self._save(session)

    def start_assessment(self, claim_id: str) -> ClaimSession:
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.UPLOAD)
        if not session.images:
            raise ReviewValidationError("Upload at least one photo before assessment")
        session.step = WorkflowStep.ASSESSMENT
        return self._save(session)

    def return_to_upload(self, claim_id: str) -> ClaimSession:
        """Discard the current assessment so different photos can be used."""
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.ASSESSMENT, WorkflowStep.REVIEW)
        session.step = WorkflowStep.UPLOAD
        session.assessment = None
        session.routing = None
        session.review = None
        session.needs_markers = False
        session.markers_skipped = False
        session.markers = []
        session.analysis_attempt += 1
        return self._save(session)

    # Assessment

    async def analyze(
        self,
        claim_id: str,
        controls: Optional[SimulationControls] = None,
    ) -> ClaimSession:
        """Run (or re-run) the assessment without markers."""
        session = self.get(claim_id)
        if session.step == WorkflowStep.UPLOAD:
            session = self.start_assessment(claim_id)
        self._require_step(session, WorkflowStep.ASSESSMENT)
        session.controls = controls
        session.markers = []
        session.markers_skipped = False
        return await self._run_analysis(session, markers=None)

    async def submit_markers(self, claim_id: str, markers: Sequence[DamageMarker]) -> ClaimSession:
        """Re-run the assessment focused on agent-marked damage locations."""
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.ASSESSMENT)
        if not session.needs_markers:
            raise WorkflowError("Damage markers were not requested for this assessment")
        if not markers:
            raise ReviewValidationError("Mark at least one damage location")
        for marker in markers:
            if marker.image_index < 0 or marker.image_index >= len(session.images):
                raise ReviewValidationError(f"Marker refers to unknown image {marker.image_index}")
            if not (0 <= marker.x <= 100 and 0 <= marker.y <= 100):
                raise ReviewValidationError("Marker coordinates must be between 0 and 100")
        session.markers = list(markers)
        return await self._run_analysis(session, markers=session.markers)

    def skip_markers(self, claim_id: str) -> ClaimSession:
        """Accept the low-confidence result as is."""
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.ASSESSMENT)
        if not session.needs_markers:
            raise WorkflowError("Damage markers were not requested for this assessment")
        session.needs_markers = False
        session.markers_skipped = True
        self._reroute(session)
        logger.info(f"Damage markers skipped for {claim_id}")
        return self._save(session)

    async def _run_analysis(
        self,
        session: ClaimSession,
        markers: Optional[List[DamageMarker]],
    ) -> ClaimSession:
        session.analysis_attempt += 1
        attempt = session.analysis_attempt
        # Nothing from the previous run is shown or editable while this one is in flight
        session.assessment = None
        session.routing = None
        session.review = None
        session.needs_markers = False
        self._save(session)

        result = await self.assessment_service.assess(
            session.claim_id,
            session.claim,
            session.images,
            markers=markers,
            controls=session.controls,
        )

        current = self.store.get(session.claim_id)
        if (
            current is None
            or current.analysis_attempt != attempt
            or current.step != WorkflowStep.ASSESSMENT
        ):
            logger.info(f"Discarding late assessment result for {session.claim_id}")
            if current is None:
                raise ClaimNotFoundError(session.claim_id)
            return current

        current.assessment = result
        current.assessed_at = datetime.utcnow()
        current.review = ReviewState(result.damages)
        self._reroute(current)
        current.needs_markers = current.routing.needs_markers

        if current.needs_markers:
            log_audit_event(
                "markers_requested",
                actor_id="system",
                actor_type="system",
                details={"claim_id": current.claim_id, "confidence": result.ai_confidence},
            )
        return self._save(current)

    def _reroute(self, session: ClaimSession) -> RoutingDecision:
        ctx = RoutingContext.from_assessment(
            session.assessment,
            total=session.review.adjusted_total(),
            markers_supplied=bool(session.markers) or session.markers_skipped,
            has_modifications=session.review.has_modifications,
        )
        session.routing = self.routing_engine.evaluate(ctx)
        return session.routing

    # Review

    def _modify_review(self, claim_id: str, change: Callable[[ReviewState], None]) -> ClaimSession:
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.ASSESSMENT, WorkflowStep.REVIEW)
        self._require_routed(session)
        change(session.review)
        self._reroute(session)
        return self._save(session)

    def override_item(
        self,
        claim_id: str,
        index: int,
        cost: Optional[float] = None,
        reason: Optional[str] = None,
    ) -> ClaimSession:
        return self._modify_review(claim_id, lambda review: review.override(index, cost, reason))

    def clear_override(self, claim_id: str, index: int) -> ClaimSession:
        return self._modify_review(claim_id, lambda review: review.disable_override(index))

    def remove_item(self, claim_id: str, index: int) -> ClaimSession:
        return self._modify_review(claim_id, lambda review: review.remove_item(index))

    def restore_item(self, claim_id: str, index: int) -> ClaimSession:
        return self._modify_review(claim_id, lambda review: review.restore_item(index))

    def set_notes(self, claim_id: str, notes: str) -> ClaimSession:
        return self._modify_review(claim_id, lambda review: review.set_notes(notes))

    def continue_to_review(self, claim_id: str) -> ClaimSession:
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.ASSESSMENT)
        self._require_routed(session)
        session.step = WorkflowStep.REVIEW
        return self._save(session)

    # Decisions

    def quick_approve(self, claim_id: str, agent_id: str, auto: bool = False) -> ClaimSession:
        """One-click approval of a fast-path assessment."""
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.ASSESSMENT)
        self._require_routed(session)
        if not session.routing.fast_path_eligible:
            raise WorkflowError(
                "Assessment is not eligible for quick approval: " + "; ".join(session.routing.reasons)
            )
        interaction = InteractionType.AUTO_APPROVED if auto else InteractionType.QUICK_APPROVED
        return self._finalize_approval(session, agent_id, interaction)

    def approve(self, claim_id: str, agent_id: str, notes: Optional[str] = None) -> ClaimSession:
        """Approve the reviewed estimate."""
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.REVIEW)
        self._require_routed(session)
        if notes is not None:
            session.review.set_notes(notes)
        session.review.validate()
        return self._finalize_approval(session, agent_id, InteractionType.AGENT_REVIEWED)

    def _finalize_approval(
        self,
        session: ClaimSession,
        agent_id: str,
        interaction: InteractionType,
    ) -> ClaimSession:
        review = session.review
        assessment = review.annotate(session.assessment)
        adjusted_total = review.adjusted_total()
        level = self.routing_engine.approval_level(adjusted_total, assessment.overall_severity)

        session.final = FinalAssessment(
            assessment=assessment,
            agent_notes=review.notes,
            adjusted_total=adjusted_total,
            adjustments=review.cost_adjustments(),
            removed_items=review.removed_items(),
            approved_by=agent_id,
            approval_level=level,
            approved_at=datetime.utcnow(),
            interaction_type=interaction,
        )
        session.step = WorkflowStep.CONFIRMATION
        session.feedback_id = self._record_feedback(session, agent_id, interaction).id

        log_audit_event(
            "claim_approved",
            actor_id=agent_id,
            actor_type="agent",
            details={
                "claim_id": session.claim_id,
                "interaction_type": interaction.value,
                "approval_level": level.value,
                "adjusted_total": adjusted_total,
            },
        )
        return self._save(session)

    def reject(
        self,
        claim_id: str,
        agent_id: str,
        reason: RejectionReason,
        details: str = "",
    ) -> ClaimSession:
        session = self.get(claim_id)
        self._require_step(session, WorkflowStep.ASSESSMENT, WorkflowStep.REVIEW)
        if session.assessment is None or session.review is None:
            raise WorkflowError(f"Claim {claim_id} has not been assessed")
        if reason == RejectionReason.OTHER and not details.strip():
            raise ReviewValidationError("Details are required when the rejection reason is 'other'")

        session.rejection = RejectionRecord(
            claim_id=claim_id,
            reason=reason,
            details=details.strip(),
            rejected_by=agent_id,
            rejected_at=datetime.utcnow(),
        )
        session.step = WorkflowStep.REJECTED
        session.needs_markers = False
        session.feedback_id = self._record_feedback(session, agent_id, InteractionType.REJECTED).id

        log_audit_event(
            "claim_rejected",
            actor_id=agent_id,
            actor_type="agent",
            details={"claim_id": claim_id, "reason": reason.value},
        )
        return self._save(session)

    def _record_feedback(self, session: ClaimSession, agent_id: str, interaction: InteractionType):
        assessment = session.assessment
        review = session.review
        started = session.assessed_at or session.created_at
        submission = FeedbackSubmission(
            claim_id=session.claim_id,
            ai_assessment=AssessmentSnapshot(
                damages=tuple(d.to_dict() for d in assessment.damages),
                total_estimate=assessment.total_estimate,
                ai_confidence=assessment.ai_confidence,
                overall_severity=assessment.overall_severity.value,
            ),
            agent_modifications=AgentModifications(
                cost_adjustments=review.cost_adjustments(),
                removed_items=review.removed_items(),
                added_notes=review.notes,
                final_total=review.adjusted_total(),
            ),
            interaction_type=interaction,
            review_time_seconds=round((datetime.utcnow() - started).total_seconds(), 1),
            agent_id=agent_id,
        )
        return self.feedback_loop.record(submission)

    def discard(self, claim_id: str) -> bool:
        """Start over: drop the claim session."""
        return self.store.delete(claim_id)
