# ========================================
# config.py - Environment driven settings
# ========================================

from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GEMINI_MODELS = [
    "gemini-pro",
    "gemini-1.5-pro",
    "gemini-1.5-flash",
    "gemini-1.5-pro-latest",
    "gemini-1.5-flash-latest",
    "gemini-1.0-pro",
    "gemini-1.0-pro-latest",
    "gemini-1.5-flash-8b",
    "gemini-1.5-flash-8b-latest",
]


class AIConfig(BaseModel):
    """Provider selection and credentials handed to the AI services."""

    provider: str = "openai"
    require_ai: bool = False

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None

    gemini_api_key: str = ""
    gemini_model: str = "gemini-pro"
    gemini_fallback_models: List[str] = list(DEFAULT_GEMINI_MODELS)

    groq_api_key: str = ""
    groq_model: str = "llama-3.1-8b-instant"

    question_temperature: float = 0.3
    scoring_temperature: float = 0.2

    def gemini_candidates(self) -> List[str]:
        """Preferred model first, then the fallback list without duplicates."""
        ordered = [self.gemini_model, *self.gemini_fallback_models]
        return list(dict.fromkeys(m for m in ordered if m))


def _truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value or "").strip().lower()
    return text == "1" or text.startswith("t") or text.startswith("y")


class Settings(BaseSettings):
    # ---------- AI providers ------------------------------------------- #
    ai_provider: str = "openai"
    require_ai: bool = False
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None
    gemini_api_key: str = ""
    gemini_model: str = "gemini-pro"
    groq_api_key: str = ""
    groq_model: str = "llama-3.1-8b-instant"

    # ---------- Storage ------------------------------------------------ #
    redis_url: str = "redis://localhost:6379/0"

    # ---------- Security ----------------------------------------------- #
    jwt_secret_key: str = "change-this-in-production"
    jwt_algorithm: str = "HS256"

    # ---------- CORS --------------------------------------------------- #
    frontend_origin: str = "http://localhost:3000"
    allowed_origins: str = "http://localhost:5173"

    # ---------- Interview Settings ------------------------------------- #
    max_resume_bytes: int = 10 * 1024 * 1024
    upload_rate_limit: int = 10
    answer_rate_limit: int = 60
    rate_limit_window_seconds: int = 60

    # ---------- Logging ------------------------------------------------ #
    log_level: str = "INFO"
    log_format: str = "console"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("require_ai", mode="before")
    @classmethod
    def _parse_require_ai(cls, value):
        return _truthy(value)

    @field_validator("ai_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value):
        return str(value or "openai").strip().lower()

    def cors_origins(self) -> List[str]:
        origins = [self.frontend_origin, *self.allowed_origins.split(",")]
        return list(dict.fromkeys(o.strip() for o in origins if o.strip()))

    def ai_config(self) -> AIConfig:
        return AIConfig(
            provider=self.ai_provider,
            require_ai=self.require_ai,
            openai_api_key=self.openai_api_key,
            openai_model=self.openai_model,
            openai_base_url=self.openai_base_url,
            # Gemini reuses the OpenAI key when no dedicated key is configured
            gemini_api_key=self.gemini_api_key or self.openai_api_key,
            gemini_model=self.gemini_model,
            groq_api_key=self.groq_api_key,
            groq_model=self.groq_model,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
