from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="Agency Hub")
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )
    convex_url: AnyHttpUrl | None = Field(
        default=None
    )
    convex_deploy_key: str | None = Field(
        default=None
    )
    convex_timeout: float = Field(
        default=10.0
    )
    convex_documents_module: str = Field(
        default="documents"
    )
    use_mock_data: bool = Field(
        default=True
    )

    model_config = SettingsConfigDict(env_prefix="AGENCY_HUB_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
