"""Client state store driven against the real app over ASGI."""

import asyncio
import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from vuestagram.client import FALLBACK_ERROR_CODE, BoardStore, LocalStorage
from vuestagram.client.store import error_code
from vuestagram.core.feed import FEED_PAGE_SIZE
from vuestagram.main import app

from conftest import PASSWORD, seed_boards

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
async def requests_seen(client):
    """Paths requested by the store, in order."""
    return []


@pytest.fixture
async def http(client, requests_seen):
    async def record(request):
        requests_seen.append(request.url.path)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        event_hooks={"request": [record]},
    ) as c:
        yield c


@pytest.fixture
def alerts():
    return []


@pytest.fixture
def store(http, alerts):
    return BoardStore(http, LocalStorage(), alert=alerts.append)


async def test_login_persists_tokens_and_profile(store, user):
    assert await store.login("alice", PASSWORD)

    assert store.storage.get_item("accessToken")
    assert store.storage.get_item("refreshToken")
    assert json.loads(store.storage.get_item("userInfo"))["name"] == "Alice"
    assert store.auth_flg is True
    assert store.user_info["account"] == "alice"
    assert store.route == "/board"


async def test_failed_login_alerts_server_code(store, user, alerts):
    assert not await store.login("alice", "wrong")

    assert alerts == ["Login failed: E20"]
    assert store.storage.get_item("accessToken") is None
    assert store.auth_flg is False


async def test_logout_clears_storage_and_state(store, user):
    await store.login("alice", PASSWORD)
    await store.get_board_list()

    await store.logout()

    assert store.storage.get_item("accessToken") is None
    assert store.storage.get_item("refreshToken") is None
    assert store.storage.keys() == []
    assert store.auth_flg is False
    assert store.user_info == {}
    assert store.route == "/login"


async def test_logout_clears_storage_even_when_server_rejects(store, alerts):
    store.storage.set_item("accessToken", "stale")
    store.storage.set_item("refreshToken", "stale")

    await store.logout()

    assert store.storage.keys() == []
    assert store.route == "/login"
    assert len(alerts) == 1


async def test_state_is_restored_from_storage(http, user):
    storage = LocalStorage()
    first = BoardStore(http, storage)
    await first.login("alice", PASSWORD)
    storage.set_item("lastID", 12)

    second = BoardStore(http, storage)

    assert second.auth_flg is True
    assert second.user_info["name"] == "Alice"
    assert second.last_id == 12


async def test_load_more_until_exhausted_then_stops(store, test_db, user, requests_seen):
    ids = await seed_boards(test_db, user, 45)
    await store.login("alice", PASSWORD)

    await store.get_board_list()
    assert len(store.board_list) == FEED_PAGE_SIZE
    assert store.last_id == store.board_list[-1]["id"]

    await store.get_add_board_list()
    await store.get_add_board_list()
    assert [b["id"] for b in store.board_list] == sorted(ids, reverse=True)
    assert store.no_more_board_list_flg is False

    # this page comes back empty
    await store.get_add_board_list()
    assert store.no_more_board_list_flg is True
    assert store.last_id == 0
    assert store.storage.get_item("lastID") is None

    feed_requests = len([p for p in requests_seen if p.startswith("/api/board")])
    assert not await store.get_add_board_list()
    assert not await store.get_add_board_list()
    assert len([p for p in requests_seen if p.startswith("/api/board")]) == feed_requests
    assert len(store.board_list) == 45


async def test_empty_first_page_marks_feed_exhausted(store, user):
    await store.login("alice", PASSWORD)

    assert await store.get_board_list()

    assert store.board_list == []
    assert store.no_more_board_list_flg is True


async def test_feed_without_login_alerts_server_code(store, alerts):
    assert not await store.get_board_list()

    assert alerts == ["Could not load boards (E10)"]


async def test_store_board_prepends_when_feed_has_more_than_one(store, test_db, user):
    await seed_boards(test_db, user, 3)
    await store.login("alice", PASSWORD)
    await store.get_board_list()

    assert await store.store_board("new post", PNG, "new.png")

    assert store.board_list[0]["content"] == "new post"
    assert len(store.board_list) == 4
    assert store.user_info["boards_count"] == 4
    assert json.loads(store.storage.get_item("userInfo"))["boards_count"] == 4
    assert store.route == "/board"


async def test_store_board_does_not_prepend_to_single_entry_feed(store, test_db, user):
    await seed_boards(test_db, user, 1)
    await store.login("alice", PASSWORD)
    await store.get_board_list()

    assert await store.store_board("second", PNG, "second.png")

    assert len(store.board_list) == 1
    assert store.user_info["boards_count"] == 2


async def test_store_board_validation_failure_alerts_code(store, user, alerts):
    await store.login("alice", PASSWORD)

    assert not await store.store_board("x" * 201, PNG, "big.png")

    assert alerts == ["Could not create board (E01)"]
    assert store.user_info["boards_count"] == 0


def test_error_code_falls_back_without_server_code():
    request = httpx.Request("GET", "http://test/api/board/0")
    no_body = httpx.Response(500, text="oops", request=request)
    coded = httpx.Response(400, json={"code": "E01"}, request=request)

    assert error_code(httpx.HTTPStatusError("x", request=request, response=no_body)) == FALLBACK_ERROR_CODE
    assert error_code(httpx.HTTPStatusError("x", request=request, response=coded)) == "E01"
    assert error_code(httpx.ConnectError("down", request=request)) == FALLBACK_ERROR_CODE


async def test_concurrent_load_more_sends_one_request(store, test_db, user, requests_seen):
    ids = await seed_boards(test_db, user, 45)
    await store.login("alice", PASSWORD)
    await store.get_board_list()
    cursor = store.last_id
    requests_seen.clear()

    results = await asyncio.gather(store.get_add_board_list(), store.get_add_board_list())

    assert sorted(results) == [False, True]
    assert requests_seen == [f"/api/board/{cursor}"]
    board_ids = [b["id"] for b in store.board_list]
    assert len(board_ids) == len(set(board_ids)) == 40
    assert board_ids == sorted(ids, reverse=True)[:40]


async def test_unreadable_stored_cursor_falls_back_to_zero(http):
    storage = LocalStorage()
    storage.set_item("lastID", "undefined")

    store = BoardStore(http, storage)

    assert store.last_id == 0
