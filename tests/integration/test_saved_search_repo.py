"""Saved search repository integration tests. Require Postgres; session is rolled back after each test."""

from datetime import timedelta

import pytest

from catalog_search.domain.entities.saved_search import SavedSearchEntity
from catalog_search.domain.exceptions import ResourceNotFoundException
from catalog_search.infrastructure.persistence.repositories import SavedSearchRepository
from catalog_search.shared.utils.generators import generate_cuid


def _saved(owner_id: str, name: str, created_at) -> SavedSearchEntity:
    return SavedSearchEntity(
        id=generate_cuid(),
        owner_id=owner_id,
        name=name,
        query="brand logo",
        entity_types=["asset"],
        created_at=created_at,
        updated_at=created_at,
        filters={"assetType": ["IMAGE"]},
    )


@pytest.mark.requires_db
async def test_create_and_get_by_id(db_session, now) -> None:
    """Create a saved search then read it back with JSONB fields intact."""
    repo = SavedSearchRepository(db_session)
    created = await repo.create(_saved("repo-owner-1", "Logos", now))
    found = await repo.get_by_id(created.id)
    assert found is not None
    assert found.owner_id == "repo-owner-1"
    assert found.entity_types == ["asset"]
    assert found.filters == {"assetType": ["IMAGE"]}


@pytest.mark.requires_db
async def test_get_by_id_not_found_returns_none(db_session) -> None:
    repo = SavedSearchRepository(db_session)
    assert await repo.get_by_id("nonexistent-saved-search") is None


@pytest.mark.requires_db
async def test_list_by_owner_newest_first(db_session, now) -> None:
    repo = SavedSearchRepository(db_session)
    older = await repo.create(_saved("repo-owner-2", "Older", now - timedelta(days=1)))
    newer = await repo.create(_saved("repo-owner-2", "Newer", now))
    await repo.create(_saved("repo-owner-3", "Other", now))
    listed = await repo.list_by_owner("repo-owner-2")
    assert [s.id for s in listed] == [newer.id, older.id]


@pytest.mark.requires_db
async def test_update_and_delete(db_session, now) -> None:
    repo = SavedSearchRepository(db_session)
    created = await repo.create(_saved("repo-owner-4", "Logos", now))
    created.name = "Renamed"
    updated = await repo.update(created)
    assert updated.name == "Renamed"
    assert await repo.delete(created.id) is True
    assert await repo.delete(created.id) is False
    with pytest.raises(ResourceNotFoundException):
        await repo.update(created)


@pytest.mark.requires_db
async def test_delete_by_owner(db_session, now) -> None:
    repo = SavedSearchRepository(db_session)
    await repo.create(_saved("repo-owner-5", "One", now))
    await repo.create(_saved("repo-owner-5", "Two", now))
    assert await repo.delete_by_owner("repo-owner-5") == 2
    assert await repo.list_by_owner("repo-owner-5") == []
