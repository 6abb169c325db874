"""
Application Configuration
"""
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings
from pydantic import model_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "ClaimAssist"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Vision provider
    VISION_PROVIDER: Literal["bedrock", "ollama", "simulated"] = "simulated"
    VISION_MAX_TOKENS: int = 1500

    # AWS Bedrock
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    BEDROCK_MODEL_ID: str = "anthropic.claude-3-5-sonnet-20240620-v1:0"

    # Ollama
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_VISION_MODEL: str = "llava"

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = 10
    MAX_IMAGES_PER_CLAIM: int = 10

    # Routing thresholds (confidence in percent, money in USD)
    LOW_CONFIDENCE_THRESHOLD: int = 70
    HIGH_CONFIDENCE_THRESHOLD: int = 85
    SENIOR_APPROVAL_THRESHOLD: float = 5000.0
    HUMAN_ASSIST_CONFIDENCE_BOOST: int = 15
    HUMAN_ASSIST_CONFIDENCE_CAP: int = 95
    NO_DAMAGE_CONFIDENCE: int = 95

    # Simulated assessments
    LABOR_RATE: float = 115.0
    MOCK_SEED: Optional[int] = None
    SIMULATED_DELAY_SECONDS: float = 0.0

    # Feedback loop
    CALIBRATION_CONFIDENCE_CUTOFF: int = 85
    SIGNIFICANT_CHANGE_PCT: float = 15.0
    TRAINING_CANDIDATE_DELTA_PCT: float = 20.0
    RECENT_FEEDBACK_LIMIT: int = 10

    # Claim sessions
    SESSION_TTL_HOURS: int = 24

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate provider credentials and threshold ordering."""
        if self.VISION_PROVIDER == "bedrock":
            if not self.AWS_ACCESS_KEY_ID or not self.AWS_SECRET_ACCESS_KEY:
                raise ValueError(
                    "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY are required when VISION_PROVIDER is 'bedrock'. "
                    "Set these in your .env file or environment variables."
                )

        for name in (
            "LOW_CONFIDENCE_THRESHOLD",
            "HIGH_CONFIDENCE_THRESHOLD",
            "HUMAN_ASSIST_CONFIDENCE_CAP",
            "NO_DAMAGE_CONFIDENCE",
            "CALIBRATION_CONFIDENCE_CUTOFF",
        ):
            value = getattr(self, name)
            if value < 0 or value > 100:
                raise ValueError(f"{name} must be between 0 and 100")

        if self.LOW_CONFIDENCE_THRESHOLD >= self.HIGH_CONFIDENCE_THRESHOLD:
            raise ValueError("LOW_CONFIDENCE_THRESHOLD must be below HIGH_CONFIDENCE_THRESHOLD")

        if self.DEBUG and self.APP_ENV != "development":
            import warnings
            warnings.warn(
                "DEBUG mode is enabled in a non-development environment. "
                "This is not recommended for production.",
                UserWarning,
            )

        return self

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


settings = get_settings()
