from datetime import timedelta

import pytest

from roomcheck.core.exceptions import InvalidInput, NotFound
from roomcheck.models.collections import COLLECTION_HOMES
from roomcheck.services.homes import HomeService, resolve_selected_home
from tests.conftest import OWNER, T0


@pytest.mark.asyncio
async def test_create_home_trims_and_stores(store):
    homes = HomeService(store)

    home = await homes.create_home(OWNER, "  Flat 2B ", " 2 High Street ")

    saved = store.raw(COLLECTION_HOMES, home.id)
    assert saved["name"] == "Flat 2B"
    assert saved["address"] == "2 High Street"
    assert saved["userId"] == OWNER


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   ", None])
async def test_create_home_requires_name(store, name):
    with pytest.raises(InvalidInput):
        await HomeService(store).create_home(OWNER, name)
    assert store.writes == []


@pytest.mark.asyncio
async def test_context_falls_back_to_first_home(store, flat_2b):
    store.put(COLLECTION_HOMES, "home-2", {
        "name": "Cottage", "userId": OWNER, "createdAt": T0 + timedelta(days=1),
    })
    store.put(COLLECTION_HOMES, "home-other", {
        "name": "Not mine", "userId": "someone-else", "createdAt": T0,
    })
    homes = HomeService(store)

    context = await homes.load_context(OWNER, "home-2")
    assert [h.id for h in context.homes] == ["home-1", "home-2"]
    assert context.selected_home.name == "Cottage"

    context = await homes.load_context(OWNER, "home-other")
    assert context.selected_home_id == "home-1"


def test_resolve_selected_home_without_homes():
    assert resolve_selected_home([], "home-1") is None


@pytest.mark.asyncio
async def test_get_home_hides_other_owners(store, flat_2b):
    with pytest.raises(NotFound):
        await HomeService(store).get_home("someone-else", "home-1")


@pytest.mark.asyncio
async def test_subscribe_pushes_changes_until_unsubscribed(store, flat_2b):
    homes = HomeService(store)
    seen = []

    unsubscribe = homes.subscribe_homes(OWNER, lambda docs: seen.append([h.name for h in docs]))
    await homes.create_home(OWNER, "Cottage")
    unsubscribe()
    await homes.create_home(OWNER, "Barn")

    assert seen == [["Flat 2B"], ["Flat 2B", "Cottage"]]
