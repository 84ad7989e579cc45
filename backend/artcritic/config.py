"""
ArtCritic Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Values are read from environment variables (or a .env file), coerced and
       range-checked once, and exposed through the `settings` singleton.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "your-super-secret-jwt-key-change-this-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Production deployments MUST override GEMINI_API_KEY and JWT_SECRET.
    Attributes are grouped by concern.
    """

    # ── Google Gemini ─────────────────────────────────────────────────────
    # Vision model used for artwork critique
    gemini_api_key: str = Field(
        default="",
        description="Google Gemini API key for artwork analysis",
    )
    gemini_model: str = Field(default="gemini-1.5-flash")
    gemini_max_output_tokens: int = Field(default=3000, ge=256, le=8192)

    # Remote images are downloaded and sent inline; this bounds the download only
    image_fetch_timeout: float = Field(default=30.0, gt=0, le=300)

    # ── Uploads & Image Preprocessing ─────────────────────────────────────
    # Uploaded images are kept here and served back under /uploads
    uploads_dir: str = Field(default="./temp/uploads")

    # 10MB = 10 * 1024 * 1024
    max_file_size: int = Field(default=10_485_760, ge=1_048_576, le=52_428_800)

    # Images larger than this (either side) are downscaled before analysis
    max_image_dimension: int = Field(default=1024, ge=256, le=4096)
    jpeg_quality: int = Field(default=85, ge=30, le=100)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list of allowed origins
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=5000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Data Service (persistence) ────────────────────────────────────────
    # Base URL of the artwork/analysis storage service
    data_service_url: str = Field(default="http://localhost:5001/api")
    data_service_timeout: float = Field(default=10.0, gt=0, le=120)

    # Transport-level failures only; HTTP error statuses are never retried
    persistence_retry_attempts: int = Field(default=2, ge=1, le=5)
    persistence_retry_wait: float = Field(default=0.5, ge=0, le=10)

    # ── Authentication ────────────────────────────────────────────────────
    # Must match the secret of the service that issues the bearer tokens
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        Validates that critical settings are configured.

        Called during app startup (lifespan). Raises ValueError listing every
        problem so the log shows the full picture in one go.
        """
        errors = []
        if not self.gemini_api_key or self.gemini_api_key == "your_gemini_api_key_here":
            errors.append(
                "GEMINI_API_KEY is not set. "
                "Get a key at https://aistudio.google.com/app/apikey"
            )
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append(
                "JWT_SECRET is using the development default. "
                "Set it to the secret used by the authentication service."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
