"""Pytest configuration and fixtures for catalog search.

Environment is set before any catalog_search import so Settings validation
passes with the in-process backend. HTTP tests build a fresh app per test
(its own stores and rate-limit windows) and talk to it over ASGITransport.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-catalog-search")
os.environ.setdefault("DATABASE_BACKEND", "memory")
os.environ["REDIS_ENABLED"] = "false"
os.environ["TELEMETRY_ENABLED"] = "false"

from collections.abc import AsyncIterator, Callable, Iterator  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402

from catalog_search.core.config import get_settings  # noqa: E402
from catalog_search.domain.entities.principal import Principal  # noqa: E402
from catalog_search.domain.entities.searchable import (  # noqa: E402
    LicenseGrant,
    Participation,
    SearchableEntity,
)
from catalog_search.domain.enums import EntityType, Role  # noqa: E402
from catalog_search.shared.utils.datetime import utc_now  # noqa: E402

get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    return utc_now()


@pytest.fixture
def make_entity(now: datetime) -> Callable[..., SearchableEntity]:
    """Factory for projections; ages are in days relative to now."""

    def _make(
        id: str,
        entity_type: EntityType = EntityType.ASSET,
        title: str = "Untitled",
        status: str = "PUBLISHED",
        owner_id: str = "owner-x",
        created_days_ago: float = 1,
        updated_days_ago: float | None = None,
        **kwargs: Any,
    ) -> SearchableEntity:
        created = now - timedelta(days=created_days_ago)
        updated = now - timedelta(
            days=created_days_ago if updated_days_ago is None else updated_days_ago
        )
        return SearchableEntity(
            id=id,
            entity_type=entity_type,
            title=title,
            status=status,
            owner_id=owner_id,
            created_at=created,
            updated_at=updated,
            **kwargs,
        )

    return _make


@pytest.fixture
def catalog(now: datetime, make_entity) -> list[SearchableEntity]:
    """Small mixed catalog.

    creator-1 actively participates in a1, a2 and p1 (ended on a3).
    brand-1 owns p1 and is the brand of a1, a2; brand-2 holds an ACTIVE grant
    on a4 and owns l1.
    """
    c1_active = (Participation("creator-1"),)
    return [
        make_entity(
            "a1",
            title="Brand logo refresh",
            status="APPROVED",
            owner_id="creator-1",
            kind="IMAGE",
            brand_id="brand-1",
            tags=("logo", "branding"),
            description="Refreshed logo for the spring catalog",
            participants=c1_active,
            created_days_ago=2,
        ),
        make_entity(
            "a2",
            title="Brand logo animation",
            status="PUBLISHED",
            owner_id="creator-1",
            kind="VIDEO",
            brand_id="brand-1",
            tags=("logo", "motion"),
            participants=c1_active,
            created_days_ago=20,
        ),
        make_entity(
            "a3",
            title="Logo sketches",
            status="DRAFT",
            owner_id="creator-3",
            kind="IMAGE",
            tags=("logo",),
            participants=(Participation("creator-1", ended_at=now - timedelta(days=1)),),
            created_days_ago=60,
        ),
        make_entity(
            "a4",
            title="Brand logo print",
            status="PUBLISHED",
            owner_id="creator-2",
            kind="IMAGE",
            tags=("logo", "print"),
            participants=(Participation("creator-2"),),
            grants=(LicenseGrant("brand-2", "ACTIVE", now + timedelta(days=30)),),
            created_days_ago=200,
        ),
        make_entity(
            "c1",
            entity_type=EntityType.CREATOR,
            title="Jane logo designer",
            status="VERIFIED",
            owner_id="creator-1",
            tags=("illustration",),
            created_days_ago=400,
        ),
        make_entity(
            "p1",
            entity_type=EntityType.PROJECT,
            title="Summer brand logo campaign",
            status="IN_PROGRESS",
            owner_id="brand-1",
            kind="CAMPAIGN",
            brand_id="brand-1",
            participants=c1_active,
            created_days_ago=5,
        ),
        make_entity(
            "l1",
            entity_type=EntityType.LICENSE,
            title="Logo usage license",
            status="ACTIVE",
            owner_id="brand-2",
            kind="EXCLUSIVE",
            brand_id="brand-2",
            created_days_ago=10,
        ),
    ]


@pytest.fixture
def principals() -> dict[str, Principal]:
    return {
        p.user_id: p
        for p in (
            Principal("admin-user", Role.ADMIN),
            Principal("viewer-user", Role.VIEWER),
            Principal("brand-user", Role.BRAND, brand_id="brand-1"),
            Principal("brand2-user", Role.BRAND, brand_id="brand-2"),
            Principal("creator-user", Role.CREATOR, creator_id="creator-1"),
            Principal("idle-creator", Role.CREATOR, creator_id="creator-9"),
            Principal("no-profile-creator", Role.CREATOR),
        )
    }


def make_token(user_id: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    settings = get_settings()
    return jwt.encode(
        {"sub": user_id, "exp": utc_now() + expires_in},
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )


@pytest.fixture
def token_for() -> Callable[..., str]:
    """Return make_token for tests that need raw tokens."""
    return make_token


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Return a function building Authorization headers for a user id."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _headers


@pytest.fixture
def app(
    catalog: list[SearchableEntity],
    principals: dict[str, Principal],
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[FastAPI]:
    """Fresh app on the memory backend, loaded with the catalog and principals."""
    from catalog_search.main import create_app

    monkeypatch.setenv("DATABASE_BACKEND", "memory")
    monkeypatch.delenv("SEED_DATA_PATH", raising=False)
    get_settings.cache_clear()
    application = create_app()
    container = application.state.container
    for entity in catalog:
        container.index.upsert(entity)
    for principal in principals.values():
        container.directory.put(principal)
    yield application
    get_settings.cache_clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _postgres_configured() -> bool:
    get_settings.cache_clear()
    try:
        return get_settings().database_backend == "postgres"
    except ValueError:
        return False


@pytest.fixture
async def session_factory() -> AsyncIterator[Any]:
    """Session factory for a migrated Postgres database; skips when not configured.

    The engine is disposed afterwards so pooled connections never outlive the
    test's event loop.
    """
    if not _postgres_configured():
        pytest.skip("Postgres not configured (set DATABASE_BACKEND=postgres and DATABASE_URL)")
    from catalog_search.infrastructure.persistence.database import (
        dispose_engine,
        get_session_factory,
    )

    yield get_session_factory()
    await dispose_engine()


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[Any]:
    """Database session for repository tests. Rolls back after test.

    Requires DATABASE_BACKEND=postgres, DATABASE_URL and `alembic upgrade head`.
    Run without a database via: pytest -m "not requires_db".
    """
    async with session_factory() as session:
        yield session
        await session.rollback()

