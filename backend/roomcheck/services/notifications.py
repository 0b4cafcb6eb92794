"""
Operator backend integration.

Two endpoints live outside this service:
- GET  /api/start-report/{inspectionId}   kicks off report generation
- POST /api/send-email                    delivers the tenant invite
"""

import logging
from typing import Optional

import httpx

from roomcheck.core.config import get_settings
from roomcheck.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


class ReportServiceClient:
    """Bridge to the operator's report and email backend."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def start_report(self, inspection_id: str) -> None:
        """Fire-and-forget report trigger. Failures are logged, never retried."""
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/api/start-report/{inspection_id}")
            logger.info(f"[REPORT] Report requested for {inspection_id}: {response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"[REPORT] Report trigger for {inspection_id} failed: {e}")

    async def send_email(self, email: str, subject: str, email_content: str) -> None:
        """Send an email through the operator backend."""
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.base_url}/api/send-email",
                    json={"email": email, "subject": subject, "emailContent": email_content},
                )
        except httpx.HTTPError as e:
            logger.error(f"[EMAIL] Send to {email} failed: {e}")
            raise ProviderError(f"Email could not be sent: {e}") from e

        if not response.is_success:
            logger.warning(f"[EMAIL] Send to {email} rejected: {response.status_code}")
            raise ProviderError(f"Email could not be sent ({response.status_code})")

        logger.info(f"[EMAIL] Sent '{subject}' to {email}")


def get_report_service() -> ReportServiceClient:
    settings = get_settings()
    return ReportServiceClient(
        base_url=settings.report_service_url,
        timeout=settings.http_timeout_seconds,
    )
