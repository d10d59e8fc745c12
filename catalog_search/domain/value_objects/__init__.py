"""Domain value objects: entity predicates and retrieval order."""

from catalog_search.domain.value_objects.predicates import (
    ActiveGrant,
    ActiveParticipant,
    AllOf,
    AnyOf,
    DateBetween,
    FieldEquals,
    FieldIn,
    MatchAll,
    MatchNone,
    Predicate,
    TagsContainAll,
    TextMatch,
    all_of,
    any_of,
)
from catalog_search.domain.value_objects.ranking import RetrievalOrder

__all__ = [
    "ActiveGrant",
    "ActiveParticipant",
    "AllOf",
    "AnyOf",
    "DateBetween",
    "FieldEquals",
    "FieldIn",
    "MatchAll",
    "MatchNone",
    "Predicate",
    "RetrievalOrder",
    "TagsContainAll",
    "TextMatch",
    "all_of",
    "any_of",
]
