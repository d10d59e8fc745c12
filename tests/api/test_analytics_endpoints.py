"""Admin analytics endpoints."""

from fastapi import FastAPI
from httpx import AsyncClient

BASE = "/api/v1/search/analytics"


async def test_non_admin_forbidden(client: AsyncClient, auth_headers) -> None:
    """Analytics reports are admin only."""
    for user in ("viewer-user", "brand-user", "creator-user"):
        response = await client.get(BASE, headers=auth_headers(user))
        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"


async def test_report_after_searches(client: AsyncClient, app: FastAPI, auth_headers) -> None:
    headers = auth_headers("admin-user")
    await client.post("/api/v1/search", headers=headers, json={"query": "logo"})
    await client.post("/api/v1/search", headers=headers, json={"query": "zzzz"})
    await app.state.container.tracker.drain()

    response = await client.get(BASE, headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["totalSearches"] == 2
    assert data["zeroResultsRate"] == 0.5
    assert {q["query"] for q in data["topQueries"]} == {"logo", "zzzz"}

    zero = await client.get(f"{BASE}/zero-results", headers=headers)
    assert zero.json()["queries"] == [{"query": "zzzz", "count": 1, "averageResultsCount": None}]


async def test_performance_and_trending(client: AsyncClient, auth_headers) -> None:
    headers = auth_headers("admin-user")
    perf = await client.get(f"{BASE}/performance", headers=headers)
    assert perf.status_code == 200
    assert perf.json()["p95ExecutionTimeMs"] == 0
    trending = await client.get(f"{BASE}/trending", headers=headers, params={"hours": 6})
    assert trending.status_code == 200
    assert trending.json()["trending"] == []


async def test_inverted_date_range_400(client: AsyncClient, auth_headers) -> None:
    response = await client.get(
        BASE,
        headers=auth_headers("admin-user"),
        params={"startDate": "2025-02-01T00:00:00Z", "endDate": "2025-01-01T00:00:00Z"},
    )
    assert response.status_code == 400


async def test_cleanup_events(client: AsyncClient, auth_headers) -> None:
    headers = auth_headers("admin-user")
    response = await client.delete(f"{BASE}/events", headers=headers, params={"daysToKeep": 30})
    assert response.status_code == 200
    assert response.json() == {"deleted": 0}
    invalid = await client.delete(f"{BASE}/events", headers=headers, params={"daysToKeep": 0})
    assert invalid.status_code == 400
