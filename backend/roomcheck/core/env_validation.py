"""
Runtime Environment Validation Module

Validates the environment at application startup. Missing core configuration
is a hard fail (exit 1). Missing provider credentials only produce warnings:
the upload and vision clients raise ConfigError when they are actually used.
"""

import os
import sys
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class StartupSettings(BaseSettings):
    """
    Strict validation schema for the variables the API cannot start without.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # CRITICAL: Firebase (Auth + Firestore)
    # ========================================================================
    firebase_project_id: str  # REQUIRED: Firebase project ID
    google_application_credentials: Optional[str] = None  # Path to service account JSON

    # ========================================================================
    # CRITICAL: CORS Configuration
    # ========================================================================
    allowed_origins: str  # REQUIRED: Comma-separated list of allowed origins
    debug: bool = False

    # ========================================================================
    # Providers: checked lazily, warned about here
    # ========================================================================
    firebase_web_api_key: Optional[str] = None
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_upload_preset: Optional[str] = None
    openai_api_key: Optional[str] = None


def validate_environment() -> StartupSettings:
    """
    Validate required environment variables at startup.

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = StartupSettings()
    except ValidationError as e:
        print("❌ FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"   • {field}: {error['msg']}", file=sys.stderr)
        print("\nPlease check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    # 1. CORS: wildcard only allowed in debug
    if not settings.debug:
        origins = [o.strip() for o in settings.allowed_origins.split(",")]
        if "*" in origins:
            print(
                "❌ FATAL: Wildcard CORS origin (*) detected in production mode.",
                file=sys.stderr,
            )
            sys.exit(1)

    # 2. Firebase: credentials path must exist if provided
    if settings.google_application_credentials:
        if not os.path.exists(settings.google_application_credentials):
            print(
                f"❌ FATAL: Firebase credentials file not found: {settings.google_application_credentials}",
                file=sys.stderr,
            )
            sys.exit(1)

    # 3. Providers
    if not settings.cloudinary_cloud_name or not settings.cloudinary_upload_preset:
        print("⚠️  CLOUDINARY_CLOUD_NAME / CLOUDINARY_UPLOAD_PRESET not set: uploads will fail")
    if not settings.openai_api_key:
        print("⚠️  OPENAI_API_KEY not set: AI comparison will fail")
    if not settings.firebase_web_api_key:
        print("⚠️  FIREBASE_WEB_API_KEY not set: /auth/sign-in and /auth/sign-up will fail")

    print("✅ Environment validation passed")
    print(f"   Firebase project: {settings.firebase_project_id}")
    print(f"   Debug: {settings.debug}")
    print(f"   CORS Origins: {settings.allowed_origins}")

    return settings


if __name__ == "__main__":
    validate_environment()
    print("\n✅ All environment variables are valid!")
