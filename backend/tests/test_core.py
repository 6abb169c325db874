"""
Tests for settings validation and log masking.
"""
import logging

import pytest
from pydantic import ValidationError

from claimassist.core.config import Settings
from claimassist.core.logging import MaskingFormatter, get_logger


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.VISION_PROVIDER == "simulated"
        assert settings.SENIOR_APPROVAL_THRESHOLD == 5000.0
        assert settings.LOW_CONFIDENCE_THRESHOLD < settings.HIGH_CONFIDENCE_THRESHOLD

    def test_bedrock_requires_credentials(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, VISION_PROVIDER="bedrock", AWS_ACCESS_KEY_ID="", AWS_SECRET_ACCESS_KEY="")

    def test_threshold_order(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOW_CONFIDENCE_THRESHOLD=90, HIGH_CONFIDENCE_THRESHOLD=85)

    def test_confidence_range(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, NO_DAMAGE_CONFIDENCE=120)


class TestMaskingFormatter:
    """Sensitive claim fields never reach the log output."""

    def _format(self, message: str) -> str:
        record = logging.LogRecord("claimassist", logging.INFO, __file__, 1, message, None, None)
        return MaskingFormatter("%(message)s").format(record)

    def test_masks_policy_number_and_vin(self):
        output = self._format("details={'policy_number': 'POL-123', 'vin': '1HGBH41JXMN109186'}")
        assert "POL-123" not in output
        assert "1HGBH41JXMN109186" not in output
        assert "'policy_number': '***'" in output

    def test_masks_base64_payloads(self):
        output = self._format('{"data": "' + "A" * 100 + '"}')
        assert output == '{"data": "<base64>"}'

    def test_plain_message_untouched(self):
        assert self._format("Claim CLM-1234ABCD approved") == "Claim CLM-1234ABCD approved"


def test_child_loggers_share_handlers():
    assert get_logger("workflow").name == "claimassist.workflow"
    assert get_logger("claimassist.vision").name == "claimassist.vision"
