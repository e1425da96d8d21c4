"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]
PositiveInt = Annotated[int, Field(gt=0)]
TemperatureFloat = Annotated[float, Field(ge=0.0, le=2.0)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    openai_base_url: HttpUrl | None = Field(default=None, validation_alias="OPENAI_BASE_URL")
    openai_completion_model: NonEmptyStr = Field(
        default="gpt-3.5-turbo-instruct",
        validation_alias="OPENAI_COMPLETION_MODEL",
    )
    openai_chat_model: NonEmptyStr = Field(
        default="gpt-4o-mini",
        validation_alias="OPENAI_CHAT_MODEL",
    )
    openai_max_tokens: PositiveInt = Field(default=256, validation_alias="OPENAI_MAX_TOKENS")
    openai_temperature: TemperatureFloat | None = Field(
        default=None,
        validation_alias="OPENAI_TEMPERATURE",
    )
    openai_timeout_seconds: NonNegativeFloat = Field(
        default=60.0,
        validation_alias="OPENAI_TIMEOUT_SECONDS",
    )
    recommendation_trim_chars: str = Field(
        default="\n?",
        validation_alias="RECOMMENDATION_TRIM_CHARS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("openai_base_url", mode="before")
    @classmethod
    def _blank_base_url_means_default_host(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
