"""Role-based visibility predicates."""

from datetime import timedelta

from catalog_search.application.services.permission_filter import (
    PermissionFilter,
    scope_predicate,
    visibility_predicate,
)
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.entities.searchable import LicenseGrant
from catalog_search.domain.enums import EntityType, Role
from catalog_search.domain.value_objects.predicates import MatchAll, MatchNone


def _visible(principal, catalog, now) -> set[str]:
    pf = PermissionFilter()
    return {e.id for e in catalog if pf.is_visible(principal, e, now)}


def test_admin_and_viewer_see_everything(principals, catalog, now) -> None:
    """Admin and viewer roles have unrestricted visibility."""
    all_ids = {e.id for e in catalog}
    assert _visible(principals["admin-user"], catalog, now) == all_ids
    assert _visible(principals["viewer-user"], catalog, now) == all_ids
    assert visibility_predicate(principals["admin-user"], EntityType.ASSET, now) == MatchAll()


def test_creator_sees_active_participations_and_creator_directory(
    principals, catalog, now
) -> None:
    """Creators see entities they actively participate in, plus creator profiles."""
    visible = _visible(principals["creator-user"], catalog, now)
    assert visible == {"a1", "a2", "p1", "c1"}


def test_ended_participation_hides_entity(principals, catalog, now) -> None:
    """a3 participation ended yesterday, so it is no longer visible."""
    assert "a3" not in _visible(principals["creator-user"], catalog, now)


def test_brand_sees_owned_branded_and_licensed(principals, catalog, now) -> None:
    """Brands see their own entities, branded entities and actively licensed assets."""
    assert _visible(principals["brand-user"], catalog, now) == {"a1", "a2", "p1", "c1"}
    assert _visible(principals["brand2-user"], catalog, now) == {"a4", "l1", "c1"}


def test_expired_or_inactive_grant_not_visible(principals, make_entity, now) -> None:
    expired = make_entity(
        "g1", grants=(LicenseGrant("brand-2", "ACTIVE", now - timedelta(seconds=1)),)
    )
    pending = make_entity("g2", grants=(LicenseGrant("brand-2", "PENDING", None),))
    active_open = make_entity("g3", grants=(LicenseGrant("brand-2", "active", None),))
    visible = _visible(principals["brand2-user"], [expired, pending, active_open], now)
    assert visible == {"g3"}


def test_missing_profile_matches_nothing(principals, catalog, now) -> None:
    """A creator without a creator profile sees nothing, not even creators."""
    principal = principals["no-profile-creator"]
    assert _visible(principal, catalog, now) == set()
    assert visibility_predicate(principal, EntityType.CREATOR, now) == MatchNone()
    assert visibility_predicate(Principal("b", Role.BRAND), EntityType.ASSET, now) == MatchNone()


def test_unknown_role_and_anonymous_match_nothing(catalog, now) -> None:
    rogue = Principal("rogue", "superuser")  # type: ignore[arg-type]
    assert _visible(rogue, catalog, now) == set()
    assert visibility_predicate(None, EntityType.ASSET, now) == MatchNone()


def test_scope_predicate_ors_entity_types(principals, catalog, now) -> None:
    """Scope restricts to requested types; each type keeps its own visibility rule."""
    predicate = scope_predicate(
        principals["creator-user"], (EntityType.ASSET, EntityType.CREATOR), now
    )
    matched = {e.id for e in catalog if predicate.matches(e)}
    assert matched == {"a1", "a2", "c1"}


def test_scope_predicate_all_hidden_is_match_none(principals, now) -> None:
    predicate = scope_predicate(principals["no-profile-creator"], tuple(EntityType), now)
    assert predicate == MatchNone()
