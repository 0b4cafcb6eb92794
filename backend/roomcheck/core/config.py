"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "RoomCheck"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    allowed_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    # Firebase (Auth + Firestore)
    firebase_project_id: Optional[str] = None
    google_application_credentials: Optional[str] = None
    firebase_web_api_key: Optional[str] = None
    firebase_auth_url: str = "https://identitytoolkit.googleapis.com/v1"

    # Cloudinary image hosting
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_upload_preset: Optional[str] = None
    cloudinary_api_url: str = "https://api.cloudinary.com/v1_1"

    # OpenAI vision comparison
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o"
    openai_max_tokens: int = 1500
    openai_image_detail: str = "high"

    # Operator backend (report generation + invite email)
    report_service_url: str = "http://localhost:3000"

    # Tenant-facing frontend, used to build inspection deep links
    public_app_url: str = "http://localhost:5173"

    # None means no timeout on outbound calls
    http_timeout_seconds: Optional[float] = None
    max_upload_size_mb: int = 20

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def inspection_link(self, inspection_id: str) -> str:
        """Deep link a tenant opens to start the walkthrough."""
        return f"{self.public_app_url.rstrip('/')}/inspect/{inspection_id}"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
