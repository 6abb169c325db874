"""
Vision provider integration
"""
from claimassist.services.vision.client import (
    VisionClient,
    BedrockVisionClient,
    OllamaVisionClient,
    create_vision_client,
)
from claimassist.services.vision.parsing import extract_json, normalize_response
from claimassist.services.vision.prompts import SYSTEM_PROMPT, build_user_prompt

__all__ = [
    "VisionClient",
    "BedrockVisionClient",
    "OllamaVisionClient",
    "create_vision_client",
    "extract_json",
    "normalize_response",
    "SYSTEM_PROMPT",
    "build_user_prompt",
]
