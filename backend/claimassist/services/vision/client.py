"""
Vision provider clients.

Each client sends the damage photos with the assessment prompt and returns
the model's raw text. Any provider failure is raised as VisionServiceError
so the assessment service can fall back to a simulated result.
"""
import asyncio
import json
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError

from claimassist.core.config import settings
from claimassist.core.logging import get_logger
from claimassist.models.claim import DamageMarker
from claimassist.services.exceptions import VisionServiceError
from claimassist.services.images import EncodedImage
from claimassist.services.vision.prompts import SYSTEM_PROMPT, build_user_prompt

logger = get_logger("vision")


class VisionClient(ABC):
    """Abstract vision provider."""

    name: str = "abstract"

    @abstractmethod
    async def analyze(
        self,
        images: Sequence[EncodedImage],
        vehicle_hints: Optional[dict] = None,
        markers: Optional[Sequence[DamageMarker]] = None,
    ) -> str:
        """Return the model's raw text response."""
        pass


class BedrockVisionClient(VisionClient):
    """Anthropic models on AWS Bedrock."""

    name = "bedrock"

    def __init__(
        self,
        model_id: Optional[str] = None,
        region: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        self.model_id = model_id or settings.BEDROCK_MODEL_ID
        self.region = region or settings.AWS_REGION
        self.max_tokens = max_tokens or settings.VISION_MAX_TOKENS
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                service_name="bedrock-runtime",
                region_name=self.region,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            )
        return self._client

    def build_payload(
        self,
        images: Sequence[EncodedImage],
        vehicle_hints: Optional[dict] = None,
        markers: Optional[Sequence[DamageMarker]] = None,
    ) -> dict:
        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": image.data,
                },
            }
            for image in images
        ]
        content.append({"type": "text", "text": build_user_prompt(vehicle_hints, markers)})
        return {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": self.max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": content}],
        }

    def _invoke(self, payload: dict) -> str:
        response = self._get_client().invoke_model(
            modelId=self.model_id,
            body=json.dumps(payload),
        )
        response_body = json.loads(response.get("body").read())
        for block in response_body.get("content", []):
            if block.get("type") == "text":
                return block.get("text", "")
        raise VisionServiceError("No text response from vision model")

    async def analyze(
        self,
        images: Sequence[EncodedImage],
        vehicle_hints: Optional[dict] = None,
        markers: Optional[Sequence[DamageMarker]] = None,
    ) -> str:
        payload = self.build_payload(images, vehicle_hints, markers)
        try:
            return await asyncio.to_thread(self._invoke, payload)
        except (BotoCoreError, ClientError) as exc:
            logger.error(f"Bedrock vision request failed: {exc}")
            raise VisionServiceError(f"Bedrock request failed: {exc}", exc)
        except (ValueError, AttributeError) as exc:
            logger.error(f"Bedrock vision response unreadable: {exc}")
            raise VisionServiceError("Invalid response from Bedrock", exc)


class OllamaVisionClient(VisionClient):
    """Local vision model served by Ollama."""

    name = "ollama"

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 90.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.OLLAMA_BASE_URL).rstrip("/")
        self.model = model or settings.OLLAMA_VISION_MODEL
        self.timeout = timeout
        self.transport = transport

    def build_payload(
        self,
        images: Sequence[EncodedImage],
        vehicle_hints: Optional[dict] = None,
        markers: Optional[Sequence[DamageMarker]] = None,
    ) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": build_user_prompt(vehicle_hints, markers),
                    "images": [image.data for image in images],
                },
            ],
            "stream": False,
            "format": "json",
        }

    async def analyze(
        self,
        images: Sequence[EncodedImage],
        vehicle_hints: Optional[dict] = None,
        markers: Optional[Sequence[DamageMarker]] = None,
    ) -> str:
        payload = self.build_payload(images, vehicle_hints, markers)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/api/chat", json=payload)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(f"Ollama vision request failed: {exc}")
            raise VisionServiceError(f"Ollama request failed: {exc}", exc)

        try:
            data = response.json()
        except ValueError as exc:
            raise VisionServiceError("Invalid response from Ollama", exc)

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            logger.error(f"Ollama vision response has no message content: {str(data)[:200]}")
            raise VisionServiceError("Invalid response from Ollama")
        return message["content"]


def create_vision_client(provider: Optional[str] = None) -> Optional[VisionClient]:
    """
    Build the client for the configured provider.

    Returns None in simulated mode.
    """
    provider = provider or settings.VISION_PROVIDER
    if provider == "bedrock":
        return BedrockVisionClient()
    if provider == "ollama":
        return OllamaVisionClient()
    return None
