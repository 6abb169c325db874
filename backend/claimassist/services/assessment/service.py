"""
Assessment Service

Runs one analysis attempt for a claim: calls the configured vision provider
or the simulator, falls back to a simulated result when the provider fails,
and applies the human-assist boost when the agent supplied markers.
"""
import asyncio
import time
from typing import Optional, Sequence

from claimassist.core.config import settings
from claimassist.core.logging import get_logger, log_audit_event
from claimassist.models.assessment import AssessmentResult
from claimassist.models.claim import ClaimRecord, DamageMarker, UploadedImage
from claimassist.services.assessment.aggregation import apply_human_assist
from claimassist.services.assessment.simulator import MockAssessmentGenerator, SimulationControls
from claimassist.services.exceptions import VisionServiceError
from claimassist.services.images import prepare_for_vision
from claimassist.services.vision.client import VisionClient, create_vision_client
from claimassist.services.vision.parsing import extract_json, normalize_response

logger = get_logger("assessment")


class AssessmentService:
    """Produces AssessmentResults, live or simulated."""

    def __init__(
        self,
        generator: MockAssessmentGenerator,
        vision_client: Optional[VisionClient] = None,
        no_damage_confidence: int = 95,
        assist_boost: int = 15,
        assist_cap: int = 95,
        simulated_delay: float = 0.0,
    ):
        self.generator = generator
        self.vision_client = vision_client
        self.no_damage_confidence = no_damage_confidence
        self.assist_boost = assist_boost
        self.assist_cap = assist_cap
        self.simulated_delay = simulated_delay

    @property
    def is_live(self) -> bool:
        return self.vision_client is not None

    async def assess(
        self,
        claim_id: str,
        claim: ClaimRecord,
        images: Sequence[UploadedImage],
        markers: Optional[Sequence[DamageMarker]] = None,
        controls: Optional[SimulationControls] = None,
    ) -> AssessmentResult:
        """
        Run one analysis attempt.

        Args:
            claim_id: Claim being assessed
            claim: Intake record (vehicle hints for the prompt)
            images: Uploaded damage photos, in order
            markers: Agent-marked damage locations, if this is a re-run
            controls: Test-mode overrides, honoured only in simulated mode

        Returns:
            AssessmentResult; never raises for provider failures
        """
        started = time.perf_counter()

        if self.is_live:
            result = await self._assess_live(claim_id, claim, images, markers)
        else:
            if self.simulated_delay > 0:
                await asyncio.sleep(self.simulated_delay)
            result = self.generator.generate(claim_id, len(images), controls)

        if markers:
            apply_human_assist(result, len(markers), self.assist_boost, self.assist_cap)

        result.processing_time = round(time.perf_counter() - started, 2)

        log_audit_event(
            "assessment_degraded" if result.degraded else "assessment_completed",
            actor_id="system",
            actor_type="system",
            details={
                "claim_id": claim_id,
                "mode": result.mode.value,
                "confidence": result.ai_confidence,
                "total_estimate": result.total_estimate,
                "human_assisted": result.human_assisted,
            },
        )
        return result

    async def _assess_live(
        self,
        claim_id: str,
        claim: ClaimRecord,
        images: Sequence[UploadedImage],
        markers: Optional[Sequence[DamageMarker]],
    ) -> AssessmentResult:
        try:
            encoded = prepare_for_vision(images)
            content = await self.vision_client.analyze(encoded, claim.vehicle_hints(), markers)
            data = extract_json(content)
            return normalize_response(data, claim_id, self.no_damage_confidence)
        except VisionServiceError as exc:
            logger.warning(f"Vision assessment failed for {claim_id}, using simulated data: {exc.message}")
            return self._fallback(claim_id, len(images), exc.message)

    def _fallback(self, claim_id: str, image_count: int, message: str) -> AssessmentResult:
        result = self.generator.generate(claim_id, image_count)
        result.degraded = True
        result.error = message
        result.summary = f"[API Error] {message} - using simulated data"
        return result


# Singleton instance
_assessment_service: Optional[AssessmentService] = None


def get_assessment_service() -> AssessmentService:
    """Get or create the assessment service singleton from settings."""
    global _assessment_service
    if _assessment_service is None:
        generator = MockAssessmentGenerator(
            labor_rate=settings.LABOR_RATE,
            low_confidence_threshold=settings.LOW_CONFIDENCE_THRESHOLD,
            senior_approval_threshold=settings.SENIOR_APPROVAL_THRESHOLD,
            no_damage_confidence=settings.NO_DAMAGE_CONFIDENCE,
            seed=settings.MOCK_SEED,
        )
        _assessment_service = AssessmentService(
            generator=generator,
            vision_client=create_vision_client(),
            no_damage_confidence=settings.NO_DAMAGE_CONFIDENCE,
            assist_boost=settings.HUMAN_ASSIST_CONFIDENCE_BOOST,
            assist_cap=settings.HUMAN_ASSIST_CONFIDENCE_CAP,
            simulated_delay=settings.SIMULATED_DELAY_SECONDS,
        )
        logger.info(
            f"Assessment service ready (provider={settings.VISION_PROVIDER})"
        )
    return _assessment_service
