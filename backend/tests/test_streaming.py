import json

import pytest

from roomcheck.routers.streaming import format_event, snapshot_events


class FakeRequest:
    """Reports a disconnect after ``polls`` checks."""

    def __init__(self, polls: int):
        self.polls = polls

    async def is_disconnected(self) -> bool:
        self.polls -= 1
        return self.polls < 0


def test_format_event():
    assert format_event("snapshot", [1]) == "event: snapshot\ndata: [1]\n\n"


@pytest.mark.asyncio
async def test_stream_yields_snapshots_and_unsubscribes():
    unsubscribed = []

    def subscribe(on_change, on_error):
        on_change(["Flat 2B"])
        on_change(["Flat 2B", "Cottage"])
        return lambda: unsubscribed.append(True)

    events = [
        e async for e in snapshot_events(FakeRequest(polls=2), subscribe, lambda docs: docs, keepalive=0.01)
    ]

    assert [json.loads(e.split("data: ")[1]) for e in events] == [["Flat 2B"], ["Flat 2B", "Cottage"]]
    assert unsubscribed == [True]


@pytest.mark.asyncio
async def test_stream_ends_on_subscription_error():
    unsubscribed = []

    def subscribe(on_change, on_error):
        on_error(RuntimeError("permission denied"))
        return lambda: unsubscribed.append(True)

    events = [e async for e in snapshot_events(FakeRequest(polls=5), subscribe, lambda docs: docs)]

    assert events == [format_event("error", {"detail": "permission denied"})]
    assert unsubscribed == [True]


@pytest.mark.asyncio
async def test_stream_sends_keepalive_when_idle():
    def subscribe(on_change, on_error):
        return lambda: None

    events = [
        e async for e in snapshot_events(FakeRequest(polls=1), subscribe, lambda docs: docs, keepalive=0.01)
    ]

    assert events == [": keepalive\n\n"]
