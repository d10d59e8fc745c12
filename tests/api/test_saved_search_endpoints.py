"""Saved search endpoints: CRUD, execute and owner cascade."""

from httpx import AsyncClient

BASE = "/api/v1/saved-searches"


async def _create(client: AsyncClient, headers: dict[str, str], **overrides) -> dict:
    payload = {"name": "Logos", "query": "brand logo", "entityTypes": ["asset"]}
    payload.update(overrides)
    response = await client.post(BASE, headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_get_list(client: AsyncClient, auth_headers) -> None:
    """Created saved searches are returned to their owner in camelCase."""
    headers = auth_headers("brand-user")
    created = await _create(client, headers, filters={"assetType": ["IMAGE"]})
    assert created["ownerId"] == "brand-user"
    assert created["entityTypes"] == ["asset"]
    assert created["filters"] == {"assetType": ["IMAGE"]}

    fetched = await client.get(f"{BASE}/{created['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Logos"

    listed = await client.get(BASE, headers=headers)
    assert [s["id"] for s in listed.json()["savedSearches"]] == [created["id"]]


async def test_create_validation(client: AsyncClient, auth_headers) -> None:
    headers = auth_headers("brand-user")
    empty_name = await client.post(BASE, headers=headers, json={"name": "", "query": "logo"})
    assert empty_name.status_code == 422
    bad_type = await client.post(
        BASE, headers=headers, json={"name": "x", "query": "logo", "entityTypes": ["invoice"]}
    )
    assert bad_type.status_code == 400
    too_short = await client.post(BASE, headers=headers, json={"name": "x", "query": "a"})
    assert too_short.status_code == 400
    assert too_short.json()["error"] == "VALIDATION_ERROR"


async def test_other_owner_sees_404(client: AsyncClient, auth_headers) -> None:
    """A saved search owned by someone else is reported as not found."""
    created = await _create(client, auth_headers("brand-user"))
    response = await client.get(f"{BASE}/{created['id']}", headers=auth_headers("brand2-user"))
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_patch_partial(client: AsyncClient, auth_headers) -> None:
    headers = auth_headers("brand-user")
    created = await _create(client, headers)
    response = await client.patch(
        f"{BASE}/{created['id']}", headers=headers, json={"name": "Renamed"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["query"] == "brand logo"


async def test_save_delete_execute_404(client: AsyncClient, auth_headers) -> None:
    """Saving, deleting, then executing the same id returns 404."""
    headers = auth_headers("creator-user")
    created = await _create(client, headers)
    deleted = await client.delete(f"{BASE}/{created['id']}", headers=headers)
    assert deleted.status_code == 204
    response = await client.post(f"{BASE}/{created['id']}/execute", headers=headers)
    assert response.status_code == 404


async def test_execute_matches_search(client: AsyncClient, auth_headers) -> None:
    """Executing a saved search returns the same results as the equivalent search."""
    headers = auth_headers("creator-user")
    created = await _create(client, headers)
    executed = await client.post(
        f"{BASE}/{created['id']}/execute", headers=headers, json={"page": 1, "limit": 10}
    )
    direct = await client.post(
        "/api/v1/search",
        headers=headers,
        json={"query": "brand logo", "entityTypes": ["asset"], "limit": 10},
    )
    assert executed.status_code == 200
    assert [r["id"] for r in executed.json()["results"]] == [
        r["id"] for r in direct.json()["results"]
    ]
    assert executed.json()["pagination"] == direct.json()["pagination"]


async def test_owner_cascade_admin_only(client: AsyncClient, auth_headers) -> None:
    headers = auth_headers("brand-user")
    await _create(client, headers, name="One")
    await _create(client, headers, name="Two")
    forbidden = await client.delete(f"{BASE}/owners/brand-user", headers=headers)
    assert forbidden.status_code == 403
    response = await client.delete(
        f"{BASE}/owners/brand-user", headers=auth_headers("admin-user")
    )
    assert response.status_code == 200
    assert response.json() == {"deleted": 2}
    assert (await client.get(BASE, headers=headers)).json()["savedSearches"] == []
