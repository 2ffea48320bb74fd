from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    field_validator,
    model_validator,
)


class SearchKind(str, Enum):
    TEXT = "text"
    URL = "url"


class Suite(str, Enum):
    QUALITY = "quality"
    BOUNDARY = "boundary"


class Check(str, Enum):
    MATCH_COUNT = "match_count"
    MIN_MATCH_COUNT = "min_match_count"
    INTERNAL_MATCH_COUNT = "internal_match_count"
    TERM_OVERLAP = "term_overlap"
    SCORE_BOUNDS = "score_bounds"
    SCORE_THRESHOLD = "score_threshold"


class Outcome(str, Enum):
    PASSED = "passed"
    REJECTED_AS_EXPECTED = "rejected_as_expected"
    CONTRACT_VIOLATION = "contract_violation"
    INFRASTRUCTURE_FAILURE = "infrastructure_failure"
    HARNESS_ERROR = "harness_error"


# --------------------------------- Requests ---------------------------------
class SearchIntent(BaseModel):
    """Partial, caller-supplied search request.

    Field values are never validated: wrong types and ``None`` are kept as-is so
    the service gets to enforce its own contract. Fields the caller did not set
    are tracked through ``model_fields_set`` and default-filled on the wire.
    Unknown keyword arguments are kept as extra wire fields.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    kind: SearchKind
    payload: Any = None
    status_id: Any = Field(None, alias="statusId")
    top_k: Any = Field(None, alias="topK")
    threshold: Any = None
    enable_private_label_ranking: Any = Field(None, alias="enablePrivateLabelRanking")
    enable_stock_product_ranking: Any = Field(None, alias="enableStockProductRanking")
    enable_vendor_ranking: Any = Field(None, alias="enableVendorRanking")
    enable_product_ranking: Any = Field(None, alias="enableProductRanking")
    use_old_reranking: Any = Field(None, alias="useOldReranking")


class RawResponse(NamedTuple):
    status_code: int
    body: bytes
    url: str
    attempts: int = 1


# --------------------------------- Responses --------------------------------
class InternalProductMatch(BaseModel):
    """Candidate catalog product attached to a matched item."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str | None = None
    # Strings and booleans are shape violations, not scores
    percentage: StrictFloat | StrictInt | None = None


class MatchedItem(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    matched_internal_products: list[InternalProductMatch] = Field(
        default_factory=list, alias="matchedInternalProducts"
    )

    # Services send ``null`` instead of an empty list for items without candidates
    @field_validator("matched_internal_products", mode="before")
    def none_as_empty(cls, v):  # pylint: disable=no-self-argument
        return [] if v is None else v


class SearchResult(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    matched_items: list[MatchedItem] = Field(alias="matchedItems")


class SearchResponse(BaseModel):
    """Body of a 200 response from either search endpoint."""

    model_config = ConfigDict(extra="allow", frozen=True)

    result: SearchResult


# --------------------------------- Scenarios --------------------------------
class Scenario(BaseModel):
    """Immutable (input, expected outcome) pair executed by the harness."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    suite: Suite
    intent: SearchIntent
    expected_status: int = 200
    expected_matches: int | None = None
    min_matches: int | None = None
    expected_internal_matches: int | None = None
    min_percentage: float | None = None
    product_terms: tuple[str, ...] = ()
    checks: tuple[Check, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def derive_checks(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("checks"):
            return data
        checks: list[Check] = []
        if data.get("expected_matches") is not None:
            checks.append(Check.MATCH_COUNT)
        if data.get("min_matches") is not None:
            checks.append(Check.MIN_MATCH_COUNT)
        if data.get("expected_internal_matches") is not None:
            checks.append(Check.INTERNAL_MATCH_COUNT)
        if data.get("product_terms"):
            checks.append(Check.TERM_OVERLAP)
        if 200 <= data.get("expected_status", 200) < 300:
            checks.append(Check.SCORE_BOUNDS)
        if data.get("min_percentage") is not None:
            checks.append(Check.SCORE_THRESHOLD)
        return {**data, "checks": tuple(checks)}

    @model_validator(mode="after")
    def checks_have_expectations(self) -> Scenario:
        required = {
            Check.MATCH_COUNT: self.expected_matches,
            Check.MIN_MATCH_COUNT: self.min_matches,
            Check.INTERNAL_MATCH_COUNT: self.expected_internal_matches,
            Check.TERM_OVERLAP: self.product_terms or None,
            Check.SCORE_THRESHOLD: self.min_percentage,
        }
        missing = [c.value for c in self.checks if c in required and required[c] is None]
        if missing:
            raise ValueError(
                f"scenario {self.id} selects {', '.join(missing)} without an expected value"
            )
        return self

    @property
    def expects_acceptance(self) -> bool:
        return 200 <= self.expected_status < 300


# ---------------------------------- Reports ---------------------------------
class ScenarioReport(BaseModel):
    scenario_id: str
    outcome: Outcome
    status_code: int | None = None
    message: str = ""
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.PASSED, Outcome.REJECTED_AS_EXPECTED)


class CatalogReport(BaseModel):
    reports: list[ScenarioReport] = Field(default_factory=list)

    @property
    def passed(self) -> list[ScenarioReport]:
        return [r for r in self.reports if r.ok]

    @property
    def failed(self) -> list[ScenarioReport]:
        return [r for r in self.reports if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def counts(self) -> dict[Outcome, int]:
        counts = {outcome: 0 for outcome in Outcome}
        for report in self.reports:
            counts[report.outcome] += 1
        return counts
