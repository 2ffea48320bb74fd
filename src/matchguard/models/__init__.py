"""Value records shared by the client, the assertion engine and the executor."""

from .matching_models import (
    CatalogReport,
    Check,
    InternalProductMatch,
    MatchedItem,
    Outcome,
    RawResponse,
    Scenario,
    ScenarioReport,
    SearchIntent,
    SearchKind,
    SearchResponse,
    SearchResult,
    Suite,
)

__all__ = [
    "CatalogReport",
    "Check",
    "InternalProductMatch",
    "MatchedItem",
    "Outcome",
    "RawResponse",
    "Scenario",
    "ScenarioReport",
    "SearchIntent",
    "SearchKind",
    "SearchResponse",
    "SearchResult",
    "Suite",
]
