import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _optional_int(raw: Optional[str]) -> Optional[int]:
    """Parse an optional integer env value. Empty, 'none' or 'off' disables it."""
    if raw is None or raw.strip().lower() in ("", "none", "off", "disabled"):
        return None
    return int(raw)


class AISettings(BaseModel):
    openrouter_api_key: Optional[str] = Field(default_factory=lambda: os.getenv("OPENROUTER_API_KEY"))
    model_name: str = Field(default_factory=lambda: os.getenv("AI_MODEL_NAME", "google/gemini-2.0-flash-001"))
    # OCR needs a vision-capable model; defaults to the analysis model
    vision_model_name: str = Field(
        default_factory=lambda: os.getenv("AI_VISION_MODEL_NAME", os.getenv("AI_MODEL_NAME", "google/gemini-2.0-flash-001"))
    )
    kill_switch: bool = Field(default_factory=lambda: os.getenv("AI_KILL_SWITCH", "false").lower() == "true")
    timeout_seconds: int = Field(default_factory=lambda: int(os.getenv("AI_TIMEOUT_SECONDS", "60")))
    temperature: float = 0.2


class PipelineSettings(BaseModel):
    # "sequential" or "concurrent"
    processing_mode: str = Field(default_factory=lambda: os.getenv("PROCESSING_MODE", "sequential").lower())
    max_workers: int = Field(default_factory=lambda: int(os.getenv("MAX_WORKERS", "4")))
    # Detail rows are written only above this ATS score. None writes them unconditionally.
    detail_score_threshold: Optional[int] = Field(
        default_factory=lambda: _optional_int(os.getenv("DETAIL_SCORE_THRESHOLD", "65"))
    )


class Config(BaseModel):
    app_name: str = "CV Screener"
    environment: str = Field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    api_prefix: str = "/api"
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "3000")))

    # Database
    database_url: str = Field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///./database.db"))

    # Auth
    require_auth: bool = Field(default_factory=lambda: os.getenv("REQUIRE_AUTH", "false").lower() == "true")
    default_credits: int = Field(default_factory=lambda: int(os.getenv("DEFAULT_CREDITS", "10")))

    # AI Components
    ai: AISettings = Field(default_factory=AISettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,"
                "http://127.0.0.1:3000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )


settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    _critical_missing = []
    if not settings.ai.openrouter_api_key:
        _critical_missing.append("OPENROUTER_API_KEY")
    if not os.getenv("DATABASE_URL"):
        _critical_missing.append("DATABASE_URL")
    if _critical_missing:
        raise RuntimeError(
            f"FATAL: The following settings must be set for non-development environments: "
            f"{', '.join(_critical_missing)}. Set them as environment variables."
        )
else:
    if not settings.ai.openrouter_api_key:
        _logger.warning("⚠ OPENROUTER_API_KEY is not set; AI extraction and analysis will fail.")
