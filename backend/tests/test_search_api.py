"""Tests for Search API endpoints and the search service."""

from __future__ import annotations

from datetime import datetime, timezone

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.db.models import LogEntry, LogType
from lifelog.services.search import SearchService, escape_like
from lifelog.utils.clock import now_ms, to_ms
from lifelog.utils.ids import new_id

DAY_MS = 86_400_000


def utc_ms(*args: int) -> int:
    return to_ms(datetime(*args, tzinfo=timezone.utc))


async def create_log(
    client: AsyncClient, content: str, timestamp: int | None = None, type: str = "thought"
) -> dict:
    """Helper to create a log through the API."""
    body = {"type": type, "content": content}
    if timestamp is not None:
        body["timestamp"] = timestamp
    response = await client.post("/api/logs", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_escape_like():
    assert escape_like("100%") == "100\\%"
    assert escape_like("a_b") == "a\\_b"
    assert escape_like("c:\\dir") == "c:\\\\dir"


class TestSearchApi:
    """Tests for GET /api/search."""

    async def test_finds_substring(self, client: AsyncClient):
        await create_log(client, "Walked to the river")
        await create_log(client, "Cooked dinner")
        data = (await client.get("/api/search", params={"q": "river", "tz": "UTC"})).json()
        assert [item["content"] for item in data["items"]] == ["Walked to the river"]

    async def test_percent_is_literal(self, client: AsyncClient):
        await create_log(client, "100% complete")
        await create_log(client, "1000 complete")
        data = (await client.get("/api/search", params={"q": "100%", "tz": "UTC"})).json()
        assert [item["content"] for item in data["items"]] == ["100% complete"]

    async def test_underscore_is_literal(self, client: AsyncClient):
        await create_log(client, "snake_case")
        await create_log(client, "snakeXcase")
        data = (await client.get("/api/search", params={"q": "e_c", "tz": "UTC"})).json()
        assert [item["content"] for item in data["items"]] == ["snake_case"]

    async def test_default_window_excludes_old_entries(self, client: AsyncClient):
        await create_log(client, "old note", timestamp=now_ms() - 200 * DAY_MS)
        recent = await create_log(client, "new note", timestamp=now_ms() - 1000)
        data = (await client.get("/api/search", params={"q": "note", "tz": "UTC"})).json()
        assert [item["id"] for item in data["items"]] == [recent["id"]]

    async def test_date_restricts_to_local_day(self, client: AsyncClient):
        # 2025-01-15 in Tokyo is [14th 15:00Z, 15th 15:00Z)
        inside = await create_log(client, "tea time", timestamp=utc_ms(2025, 1, 14, 16))
        await create_log(client, "tea time", timestamp=utc_ms(2025, 1, 14, 14))
        data = (
            await client.get(
                "/api/search", params={"q": "tea", "tz": "Asia/Tokyo", "date": "2025-01-15"}
            )
        ).json()
        assert [item["id"] for item in data["items"]] == [inside["id"]]

    async def test_type_filter(self, client: AsyncClient):
        await create_log(client, "sushi place", type="meal")
        location = await create_log(client, "sushi place", type="location")
        data = (
            await client.get(
                "/api/search", params={"q": "sushi", "tz": "UTC", "type": "location"}
            )
        ).json()
        assert [item["id"] for item in data["items"]] == [location["id"]]

    async def test_newest_first(self, client: AsyncClient):
        now = now_ms()
        older = await create_log(client, "coffee", timestamp=now - 5000)
        newer = await create_log(client, "coffee", timestamp=now - 1000)
        data = (await client.get("/api/search", params={"q": "coffee", "tz": "UTC"})).json()
        assert [item["id"] for item in data["items"]] == [newer["id"], older["id"]]

    async def test_query_too_short(self, client: AsyncClient):
        response = await client.get("/api/search", params={"q": " a ", "tz": "UTC"})
        assert response.status_code == 400
        assert response.json()["field"] == "q"

    async def test_missing_query(self, client: AsyncClient):
        response = await client.get("/api/search", params={"tz": "UTC"})
        assert response.status_code == 400
        assert response.json()["field"] == "q"

    async def test_missing_tz(self, client: AsyncClient):
        response = await client.get("/api/search", params={"q": "coffee"})
        assert response.status_code == 400
        assert response.json()["field"] == "tz"

    async def test_invalid_tz(self, client: AsyncClient):
        response = await client.get("/api/search", params={"q": "coffee", "tz": "Nowhere/City"})
        assert response.status_code == 400
        assert "timezone" in response.json()["detail"].lower()

    async def test_invalid_type(self, client: AsyncClient):
        response = await client.get(
            "/api/search", params={"q": "coffee", "tz": "UTC", "type": "snack"}
        )
        assert response.status_code == 400
        assert response.json()["field"] == "type"

    async def test_invalid_date(self, client: AsyncClient):
        response = await client.get(
            "/api/search", params={"q": "coffee", "tz": "UTC", "date": "2025-02-31"}
        )
        assert response.status_code == 400
        assert response.json()["field"] == "date"


async def test_results_are_capped(db_session: AsyncSession):
    now = now_ms()
    for i in range(55):
        ts = now - (i + 1) * 1000
        db_session.add(
            LogEntry(
                id=new_id(),
                type=LogType.THOUGHT.value,
                content=f"needle {i}",
                timestamp=ts,
                created_at=ts,
                updated_at=ts,
            )
        )
    await db_session.commit()

    items = await SearchService(db_session).search(q="needle", tz="UTC", now=now)
    assert len(items) == 50
    assert items[0].content == "needle 0"
    assert items[-1].content == "needle 49"
