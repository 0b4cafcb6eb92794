"""Firebase Admin SDK bootstrap."""

import firebase_admin
from firebase_admin import credentials

from roomcheck.core.config import get_settings


def get_firebase_app() -> firebase_admin.App:
    """Initialize the default Firebase app once and return it."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    settings = get_settings()
    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None

    if settings.google_application_credentials:
        cred = credentials.Certificate(settings.google_application_credentials)
        return firebase_admin.initialize_app(cred, options)
    return firebase_admin.initialize_app(options=options)
