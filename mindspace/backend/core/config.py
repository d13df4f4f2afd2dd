# mindspace/backend/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "mindspace-dev-secret-change-me"


class Settings(BaseSettings):
    # 앱 기본
    env: str = Field("dev", alias="ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_allow_origins: str = Field(
        "http://localhost:3000,http://localhost:5173,http://localhost:8080",
        alias="CORS_ALLOW_ORIGINS",
    )

    # DB
    database_url: str = Field("sqlite:///./data/mindspace.db", alias="DATABASE_URL")

    # JWT / 세션
    jwt_secret_key: str = Field(DEFAULT_JWT_SECRET, alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    jwt_expire_days: int = Field(7, alias="JWT_EXPIRE_DAYS")
    session_ttl_days: int = Field(7, alias="SESSION_TTL_DAYS")

    # LLM / OpenAI
    openai_api_key: str = Field("", alias="OPENAI_API_KEY")
    ai_model: str = Field("gpt-3.5-turbo", alias="AI_MODEL")
    ai_max_tokens: int = Field(200, alias="AI_MAX_TOKENS")
    ai_temperature: float = Field(0.7, alias="AI_TEMPERATURE")
    llm_timeout_sec: float = Field(30.0, alias="LLM_TIMEOUT_SEC")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    s = Settings()
    if s.env.strip().lower() == "prod" and s.jwt_secret_key == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set in prod")
    return s


settings = get_settings()
