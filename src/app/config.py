from __future__ import annotations

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
    )
    RECIPES_TABLE: str = "recipes"
    HTTP_TIMEOUT_SECONDS: float = 10.0
    HTTP_USER_AGENT: str = (
        "Mozilla/5.0 (compatible; RecipeClipper/0.1; +https://github.com/recipe-clipper)"
    )


settings = Settings()
