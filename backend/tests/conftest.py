"""
Test configuration and fixtures for ClaimAssist backend tests.
"""
import io
from datetime import date
from typing import Generator, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from claimassist.main import app
from claimassist.models.claim import ClaimRecord, DamageMarker, UploadedImage
from claimassist.models.assessment import DamageItem
from claimassist.models.enums import Severity
from claimassist.services.assessment.routing import RoutingEngine, RoutingThresholds, get_routing_engine
from claimassist.services.assessment.service import AssessmentService, get_assessment_service
from claimassist.services.assessment.simulator import MockAssessmentGenerator
from claimassist.services.exceptions import VisionServiceError
from claimassist.services.feedback.loop import FeedbackCutoffs, FeedbackLoop, get_feedback_loop
from claimassist.services.feedback.store import InMemoryFeedbackStore
from claimassist.services.images import EncodedImage
from claimassist.services.session_store import InMemorySessionStore, get_session_store
from claimassist.services.vision.client import VisionClient
from claimassist.services.workflow import ClaimWorkflow


class FailingVisionClient(VisionClient):
    """Vision client whose provider is always down."""

    name = "failing"

    def __init__(self, message: str = "Connection refused"):
        self.message = message
        self.calls = 0

    async def analyze(self, images, vehicle_hints=None, markers=None) -> str:
        self.calls += 1
        raise VisionServiceError(self.message)


class StubVisionClient(VisionClient):
    """Vision client returning a canned model response."""

    name = "stub"

    def __init__(self, content: str):
        self.content = content
        self.requests: List[dict] = []

    async def analyze(
        self,
        images: Sequence[EncodedImage],
        vehicle_hints: Optional[dict] = None,
        markers: Optional[Sequence[DamageMarker]] = None,
    ) -> str:
        self.requests.append({"images": list(images), "vehicle_hints": vehicle_hints, "markers": markers})
        return self.content


def make_damage(
    severity: Severity = Severity.MODERATE,
    cost: float = 1000.0,
    confidence: int = 90,
    area: str = "Front Bumper",
) -> DamageItem:
    return DamageItem(
        area=area,
        damage_type="Dent",
        severity=severity,
        estimated_cost=cost,
        confidence=confidence,
    )


def make_png(color: str = "red", size=(8, 8), fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def sample_claim() -> ClaimRecord:
    return ClaimRecord(
        policy_number="POL-2024-001234",
        vehicle_make="Honda",
        vehicle_model="Accord",
        vehicle_year="2021",
        accident_date=date(2024, 3, 15),
        accident_description="Rear-ended at a stop light",
        vehicle_trim="EX-L",
        vehicle_value=28000,
        vin="1HGBH41JXMN109186",
    )


@pytest.fixture
def sample_images(png_bytes: bytes) -> List[UploadedImage]:
    return [UploadedImage("front.png", "image/png", png_bytes, "Damage photo 1")]


@pytest.fixture
def claim_payload() -> dict:
    return {
        "policy_number": "POL-2024-001234",
        "vehicle_make": "Honda",
        "vehicle_model": "Accord",
        "vehicle_year": "2021",
        "accident_date": "2024-03-15",
        "accident_description": "Rear-ended at a stop light",
        "vin": "1HGBH41JXMN109186",
    }


@pytest.fixture
def thresholds() -> RoutingThresholds:
    return RoutingThresholds(low_confidence=70, high_confidence=85, senior_approval=5000.0)


@pytest.fixture
def routing_engine(thresholds: RoutingThresholds) -> RoutingEngine:
    return RoutingEngine(thresholds)


@pytest.fixture
def generator() -> MockAssessmentGenerator:
    return MockAssessmentGenerator(
        labor_rate=115.0,
        low_confidence_threshold=70,
        senior_approval_threshold=5000.0,
        no_damage_confidence=95,
        seed=42,
    )


@pytest.fixture
def assessment_service(generator: MockAssessmentGenerator) -> AssessmentService:
    """Simulated-mode assessment service."""
    return AssessmentService(generator=generator)


@pytest.fixture
def feedback_loop() -> FeedbackLoop:
    return FeedbackLoop(InMemoryFeedbackStore(), FeedbackCutoffs())


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def workflow(
    session_store: InMemorySessionStore,
    assessment_service: AssessmentService,
    feedback_loop: FeedbackLoop,
    routing_engine: RoutingEngine,
) -> ClaimWorkflow:
    return ClaimWorkflow(session_store, assessment_service, feedback_loop, routing_engine)


@pytest.fixture(scope="function")
def client(
    session_store: InMemorySessionStore,
    assessment_service: AssessmentService,
    feedback_loop: FeedbackLoop,
    routing_engine: RoutingEngine,
) -> Generator[TestClient, None, None]:
    """Create a test client with fresh stores."""
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_assessment_service] = lambda: assessment_service
    app.dependency_overrides[get_feedback_loop] = lambda: feedback_loop
    app.dependency_overrides[get_routing_engine] = lambda: routing_engine
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
