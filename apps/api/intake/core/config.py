from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from apps/api so it works regardless of CWD
_env_file = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    database_url: str = "postgresql://localhost/story_intake"
    sql_echo: bool = False

    # Identity comes from the auth provider; we only verify its bearer token
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days

    # remote: real model calls; mock: deterministic replies for local dev
    llm_mode: str = "remote"

    # Chat (OpenAI-compatible); None => provider-specific default
    chat_api_base_url: str | None = None
    chat_api_key: str | None = None
    chat_model: str | None = None
    chat_max_tokens: int = 2048
    openai_api_key: str | None = None

    chat_rate_limit: str = "30/minute"

    # CORS (comma-separated origins; * allows all)
    cors_origins: str = "*"

    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parsed CORS origins for middleware."""
        raw = self.cors_origins.strip()
        return ["*"] if not raw else [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def is_mock_llm(self) -> bool:
        return (self.llm_mode or "").strip().lower() == "mock"


@lru_cache
def get_settings() -> Settings:
    return Settings()
