import json

import httpx
import pytest

from roomcheck.core.exceptions import ConfigError, EmptyResult, ProviderError
from roomcheck.services.vision import AFTER_MARKER, COMPARISON_PROMPT, VisionComparisonClient


def client_with(handler, api_key="sk-test") -> VisionComparisonClient:
    return VisionComparisonClient(api_key, transport=httpx.MockTransport(handler))


def completion(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def test_reference_images_come_before_uploads():
    content = VisionComparisonClient("sk-test").build_comparison_content(
        ["r1", "r2", "r3"], ["u1", "u2"]
    )

    assert content[0] == {"type": "text", "text": COMPARISON_PROMPT}
    assert content[4] == {"type": "text", "text": AFTER_MARKER}
    urls = [part["image_url"]["url"] for part in content if part["type"] == "image_url"]
    assert urls == ["r1", "r2", "r3", "u1", "u2"]
    assert all(part["image_url"]["detail"] == "high" for part in content if part["type"] == "image_url")


@pytest.mark.asyncio
async def test_compare_returns_text_verbatim():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=completion("  Missing: kettle on counter.\n"))

    result = await client_with(handler).compare(["a.jpg", "b.jpg"], ["https://cdn/c.jpg"])

    assert result == "  Missing: kettle on counter.\n"
    [request] = requests
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.read())
    assert body["model"] == "gpt-4o"
    assert body["max_tokens"] == 1500
    assert body["messages"][0]["role"] == "user"


@pytest.mark.asyncio
async def test_missing_key_fails_before_any_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ConfigError):
        await client_with(handler, api_key=None).compare(["a.jpg"], ["b.jpg"])


@pytest.mark.asyncio
async def test_provider_error_message_passed_through():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

    with pytest.raises(ProviderError, match="Rate limit reached"):
        await client_with(handler).compare(["a.jpg"], ["b.jpg"])


@pytest.mark.asyncio
async def test_error_field_on_success_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": {"message": "Invalid image URL"}})

    with pytest.raises(ProviderError, match="Invalid image URL"):
        await client_with(handler).compare(["a.jpg"], ["b.jpg"])


@pytest.mark.asyncio
async def test_missing_choices_is_empty_result():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "cmpl-1", "choices": []})

    with pytest.raises(EmptyResult):
        await client_with(handler).compare(["a.jpg"], ["b.jpg"])


@pytest.mark.asyncio
async def test_inventory_uses_room_images_only():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(json.loads(request.read()))
        return httpx.Response(200, json=completion("Furniture: sofa"))

    assert await client_with(handler).describe_inventory(["l1.jpg"]) == "Furniture: sofa"
    content = requests[0]["messages"][0]["content"]
    assert [p["image_url"]["url"] for p in content if p["type"] == "image_url"] == ["l1.jpg"]
