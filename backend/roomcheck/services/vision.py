"""Vision comparison client (OpenAI chat completions with image inputs).

The model's answer is treated as an opaque text blob: it is returned verbatim
and never parsed.
"""

import logging
from typing import Any, Optional, Sequence

import httpx

from roomcheck.core.config import get_settings
from roomcheck.core.exceptions import ConfigError, EmptyResult, ProviderError

logger = logging.getLogger(__name__)

COMPARISON_PROMPT = """You are an AI assistant specialized in property inspection, comparing "Before" and "After" images of a rental room to identify significant changes.

You are an expert at analyzing images and finding differences between them.
You will be given two sets of images: reference images and comparison images.
Your task is to identify all the differences between these images and provide a detailed description of each difference.
Focus on just Missing or added objects

Format your response as a list of differences, with each difference clearly described.
Be specific and detailed in your descriptions, mentioning the exact location and nature of each difference.

**Instructions for your response:**
- Be objective, factual, and concise. Do not speculate or invent details.
- List minor changes as well, provided it is a real identifiable change.
- Do not end in conversation-like manner with "Would you like..." etc.
---
BEFORE IMAGES:"""

AFTER_MARKER = "\nAFTER IMAGES:"

INVENTORY_PROMPT = """You are an AI assistant specialized in property inspection. The following images show one room of a rental property before a tenancy starts.

List every distinct item visible in the room as an itemized inventory, one item per line, grouped by category (Furniture, Appliances, Fixtures, Decor, Other). For each item give its approximate location and visible condition.

**Instructions for your response:**
- Be objective, factual, and concise. Do not speculate or invent details.
- If a category has no items, write "None" for that category.
- Do not end in conversation-like manner with "Would you like..." etc.
---
ROOM IMAGES:"""


class VisionComparisonClient:
    """Client for the hosted multimodal chat-completion endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o",
        max_tokens: int = 1500,
        image_detail: str = "high",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.image_detail = image_detail
        self.timeout = timeout
        self.transport = transport

    def _image_parts(self, urls: Sequence[str]) -> list[dict[str, Any]]:
        return [
            {"type": "image_url", "image_url": {"url": url, "detail": self.image_detail}}
            for url in urls
        ]

    def build_comparison_content(
        self,
        reference_urls: Sequence[str],
        comparison_urls: Sequence[str],
    ) -> list[dict[str, Any]]:
        """Prompt, then every "before" image, then every "after" image."""
        return [
            {"type": "text", "text": COMPARISON_PROMPT},
            *self._image_parts(reference_urls),
            {"type": "text", "text": AFTER_MARKER},
            *self._image_parts(comparison_urls),
        ]

    def build_inventory_content(self, image_urls: Sequence[str]) -> list[dict[str, Any]]:
        return [
            {"type": "text", "text": INVENTORY_PROMPT},
            *self._image_parts(image_urls),
        ]

    async def compare(self, reference_urls: Sequence[str], comparison_urls: Sequence[str]) -> str:
        """Describe differences between the "before" and "after" image sets."""
        content = self.build_comparison_content(reference_urls, comparison_urls)
        logger.info(
            f"[VISION] Comparing {len(reference_urls)} reference vs {len(comparison_urls)} new image(s)"
        )
        return await self._complete(content)

    async def describe_inventory(self, image_urls: Sequence[str]) -> str:
        """Itemized inventory of a room from its reference images."""
        logger.info(f"[VISION] Inventory analysis of {len(image_urls)} image(s)")
        return await self._complete(self.build_inventory_content(image_urls))

    async def _complete(self, content: list[dict[str, Any]]) -> str:
        if not self.api_key:
            raise ConfigError("OpenAI API key is missing.")

        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": content}],
            "max_tokens": self.max_tokens,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=body,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"[VISION] Request error: {e}")
            raise ProviderError(f"Vision request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        error = data.get("error")
        if not response.is_success or error:
            message = error.get("message") if isinstance(error, dict) else error
            logger.warning(f"[VISION] Provider error {response.status_code}: {message}")
            raise ProviderError(message or "OpenAI API request failed")

        choices = data.get("choices") or []
        if not choices:
            logger.warning("[VISION] Response had no choices")
            raise EmptyResult("No comparison result returned by the AI model.")

        return (choices[0].get("message") or {}).get("content") or ""


def get_vision_client() -> VisionComparisonClient:
    """Factory function to get the vision client from config."""
    settings = get_settings()
    return VisionComparisonClient(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=settings.openai_model,
        max_tokens=settings.openai_max_tokens,
        image_detail=settings.openai_image_detail,
        timeout=settings.http_timeout_seconds,
    )
