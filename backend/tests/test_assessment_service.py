"""
Tests for the assessment service: live, simulated and fallback paths.
"""
import asyncio
import json

import httpx
import pytest

from claimassist.models.claim import DamageMarker
from claimassist.models.enums import AssessmentMode, Severity
from claimassist.services.assessment.service import AssessmentService
from claimassist.services.assessment.simulator import SimulationControls
from claimassist.services.vision.client import OllamaVisionClient
from conftest import FailingVisionClient, StubVisionClient


LIVE_RESPONSE = json.dumps({
    "hasDamage": True,
    "damages": [
        {"area": "Rear Bumper", "type": "Dent", "severity": "Moderate", "estimatedCost": 900, "confidence": 62},
    ],
    "recommendations": ["Replace bumper cover"],
    "summary": "Rear impact damage",
})


class TestSimulatedMode:
    def test_generates_simulated_result(self, assessment_service, sample_claim, sample_images):
        result = asyncio.run(assessment_service.assess("CLM-TEST0001", sample_claim, sample_images))
        assert result.mode == AssessmentMode.SIMULATED
        assert result.degraded is False
        assert result.processing_time >= 0
        assert not assessment_service.is_live

    def test_controls_honoured(self, assessment_service, sample_claim, sample_images):
        controls = SimulationControls(confidence=90, severity=Severity.MINOR)
        result = asyncio.run(
            assessment_service.assess("CLM-TEST0001", sample_claim, sample_images, controls=controls)
        )
        assert result.ai_confidence == 90
        assert result.overall_severity == Severity.MINOR

    def test_markers_boost_confidence(self, assessment_service, sample_claim, sample_images):
        markers = [DamageMarker(x=40, y=50, image_index=0)]
        controls = SimulationControls(confidence=60)
        result = asyncio.run(
            assessment_service.assess("CLM-TEST0001", sample_claim, sample_images, markers, controls)
        )
        assert result.ai_confidence == 75
        assert result.human_assisted is True
        assert "1 marked location" in result.summary

    def test_boost_capped(self, assessment_service, sample_claim, sample_images):
        markers = [DamageMarker(x=40, y=50, image_index=0)]
        result = asyncio.run(
            assessment_service.assess(
                "CLM-TEST0001", sample_claim, sample_images, markers, SimulationControls(confidence=90)
            )
        )
        assert result.ai_confidence == 95


class TestLiveMode:
    """Test the vision provider path."""

    def test_live_result(self, generator, sample_claim, sample_images):
        client = StubVisionClient(LIVE_RESPONSE)
        service = AssessmentService(generator, vision_client=client)
        result = asyncio.run(service.assess("CLM-TEST0001", sample_claim, sample_images))

        assert result.mode == AssessmentMode.LIVE
        assert result.total_estimate == 900.0
        assert result.ai_confidence == 62
        assert result.summary == "Rear impact damage"
        request = client.requests[0]
        assert request["vehicle_hints"] == {"make": "Honda", "model": "Accord", "year": "2021"}
        assert request["images"][0].media_type == "image/png"

    def test_live_markers_forwarded_and_boosted(self, generator, sample_claim, sample_images):
        client = StubVisionClient(LIVE_RESPONSE)
        service = AssessmentService(generator, vision_client=client)
        markers = [DamageMarker(x=10, y=20, image_index=0)]
        result = asyncio.run(service.assess("CLM-TEST0001", sample_claim, sample_images, markers))

        assert client.requests[0]["markers"] == markers
        assert result.ai_confidence == 77
        assert result.summary == "Rear impact damage"

    def test_controls_ignored_when_live(self, generator, sample_claim, sample_images):
        service = AssessmentService(generator, vision_client=StubVisionClient(LIVE_RESPONSE))
        result = asyncio.run(
            service.assess(
                "CLM-TEST0001", sample_claim, sample_images, controls=SimulationControls(confidence=99)
            )
        )
        assert result.ai_confidence == 62


class TestFallback:
    """Provider failures degrade to a simulated result instead of raising."""

    def test_provider_failure(self, generator, sample_claim, sample_images):
        client = FailingVisionClient("Connection refused")
        service = AssessmentService(generator, vision_client=client)
        result = asyncio.run(service.assess("CLM-TEST0001", sample_claim, sample_images))

        assert client.calls == 1
        assert result.degraded is True
        assert result.error == "Connection refused"
        assert result.summary == "[API Error] Connection refused - using simulated data"
        assert result.mode == AssessmentMode.SIMULATED
        assert result.damages

    def test_unparseable_response(self, generator, sample_claim, sample_images):
        service = AssessmentService(generator, vision_client=StubVisionClient("no json here"))
        result = asyncio.run(service.assess("CLM-TEST0001", sample_claim, sample_images))
        assert result.degraded is True
        assert result.summary.startswith("[API Error]")

    @pytest.mark.parametrize(
        "damage",
        [
            '{"area": "Hood", "severity": "Minor", "estimatedCost": 300, "confidence": NaN}',
            '{"area": "Hood", "severity": "Minor", "estimatedCost": Infinity, "confidence": 80}',
        ],
    )
    def test_non_finite_literals_degrade(self, generator, sample_claim, sample_images, damage):
        content = '{"hasDamage": true, "damages": [' + damage + "]}"
        service = AssessmentService(generator, vision_client=StubVisionClient(content))
        result = asyncio.run(service.assess("CLM-TEST0001", sample_claim, sample_images))
        assert result.degraded is True
        assert result.mode == AssessmentMode.SIMULATED

    def test_overflowing_confidence_is_not_fatal(self, generator, sample_claim, sample_images):
        content = '{"hasDamage": true, "damages": [{"area": "Hood", "estimatedCost": 300, "confidence": 1e400}]}'
        service = AssessmentService(generator, vision_client=StubVisionClient(content))
        result = asyncio.run(service.assess("CLM-TEST0001", sample_claim, sample_images))
        assert result.mode == AssessmentMode.LIVE
        assert result.damages[0].confidence == 0
        assert result.total_estimate == 300.0

    def test_malformed_ollama_body_degrades(self, generator, sample_claim, sample_images):
        client = OllamaVisionClient(
            base_url="http://ollama.test",
            model="llava",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"message": None})),
        )
        service = AssessmentService(generator, vision_client=client)
        result = asyncio.run(service.assess("CLM-TEST0001", sample_claim, sample_images))
        assert result.degraded is True
        assert result.error == "Invalid response from Ollama"

    def test_degraded_summary_survives_markers(self, generator, sample_claim, sample_images):
        service = AssessmentService(generator, vision_client=FailingVisionClient())
        markers = [DamageMarker(x=10, y=20, image_index=0)]
        result = asyncio.run(service.assess("CLM-TEST0001", sample_claim, sample_images, markers))
        assert result.human_assisted is True
        assert result.summary.startswith("[API Error]")
