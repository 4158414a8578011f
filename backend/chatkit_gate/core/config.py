from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore", frozen=True)

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # OpenAI / ChatKit
    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    chatkit_workflow_id: str | None = Field(default=None, validation_alias="OPENAI_ROUTER_AGENT_ID")
    openai_base_url: str = Field(default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL")
    chatkit_request_timeout_seconds: float = Field(
        default=30.0,
        validation_alias="CHATKIT_REQUEST_TIMEOUT_SECONDS",
    )

    # Ключ домена: подпись cookie ecotrips.chatkit.auth
    chatkit_domain_key: str | None = Field(default=None, validation_alias="CHATKIT_DOMAIN_KEY")

    @field_validator("openai_api_key", "chatkit_workflow_id", "chatkit_domain_key", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def missing_for_session(self) -> str | None:
        """Env name of the first required value that is not configured, or None."""
        if not self.openai_api_key:
            return "OPENAI_API_KEY"
        if not self.chatkit_workflow_id:
            return "OPENAI_ROUTER_AGENT_ID"
        if not self.chatkit_domain_key:
            return "CHATKIT_DOMAIN_KEY"
        return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
