"""Structural and semantic checks over search responses.

Every check returns ``None`` when it holds and raises ``ContractViolation``
naming the expected and the offending value when it does not. Checks are
independent so a scenario can pick only the ones relevant to its intent.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import msgspec
from pydantic import ValidationError

from matchguard.errors.errors import ContractViolation
from matchguard.models.matching_models import (
    Check,
    InternalProductMatch,
    RawResponse,
    Scenario,
    SearchResponse,
)
from matchguard.utils.logging_utils import setup_logging

logger = setup_logging(__name__)

_BODY_PREVIEW = 200


def _preview(body: bytes) -> str:
    text = body.decode("utf-8", errors="replace")
    return text if len(text) <= _BODY_PREVIEW else text[:_BODY_PREVIEW] + "..."


def _label(product: InternalProductMatch) -> str:
    return product.name if product.name is not None else "unknown"


def decode_response(raw: RawResponse) -> SearchResponse:
    try:
        data = msgspec.json.decode(raw.body)
    except msgspec.DecodeError as e:
        raise ContractViolation(
            f"Expected a JSON body from {raw.url}, got: {_preview(raw.body)!r}",
            expected="JSON",
            actual=_preview(raw.body),
        ) from e
    try:
        return SearchResponse.model_validate(data)
    except ValidationError as e:
        raise ContractViolation(
            f"Response from {raw.url} does not match "
            f"{{result: {{matchedItems: [...]}}}}: {e.error_count()} error(s), "
            f"first: {e.errors()[0]['msg']} at {e.errors()[0]['loc']}",
            expected="SearchResponse",
            actual=data,
        ) from e


def check_status(raw: RawResponse, expected: int) -> None:
    if raw.status_code != expected:
        raise ContractViolation(
            f"Expected status {expected} from {raw.url}, but got {raw.status_code}: "
            f"{_preview(raw.body)!r}",
            expected=expected,
            actual=raw.status_code,
        )


def iter_internal_matches(response: SearchResponse) -> Iterator[InternalProductMatch]:
    for item in response.result.matched_items:
        yield from item.matched_internal_products


def check_match_count(response: SearchResponse, expected: int) -> None:
    actual = len(response.result.matched_items)
    if actual != expected:
        raise ContractViolation(
            f"Expected exactly {expected} top-level matched items, but got {actual}",
            expected=expected,
            actual=actual,
        )


def check_min_match_count(response: SearchResponse, minimum: int) -> None:
    actual = len(response.result.matched_items)
    if actual < minimum:
        raise ContractViolation(
            f"Expected at least {minimum} top-level matched items, but got {actual}",
            expected=minimum,
            actual=actual,
        )


def check_internal_match_count(response: SearchResponse, expected: int) -> None:
    actual = sum(1 for _ in iter_internal_matches(response))
    if actual != expected:
        raise ContractViolation(
            f"Expected exactly {expected} internal matched products, but got {actual}",
            expected=expected,
            actual=actual,
        )


def check_term_overlap(response: SearchResponse, terms: Iterable[str]) -> None:
    """At least one internal product name contains at least one of ``terms``.

    Existential on purpose: ranking noise in the other candidates is tolerated.
    """
    lowered = [t.lower() for t in terms]
    if not lowered:
        raise ValueError("term overlap needs at least one term")

    names = [(p.name or "").lower() for p in iter_internal_matches(response)]
    if not any(term in name for name in names for term in lowered):
        raise ContractViolation(
            "Expected at least one internal product name to contain one of these "
            f"terms: {', '.join(lowered)}, but none matched. Names: {names}",
            expected=lowered,
            actual=names,
        )


def check_score_bounds(response: SearchResponse) -> None:
    for product in iter_internal_matches(response):
        if product.percentage is None:
            continue
        if not 0 <= product.percentage <= 100:
            raise ContractViolation(
                f"Expected percentage to be within [0, 100], but got "
                f"{product.percentage} for product {_label(product)!r}",
                expected=(0, 100),
                actual=product.percentage,
            )


def check_score_threshold(response: SearchResponse, minimum: float) -> None:
    for product in iter_internal_matches(response):
        if product.percentage is None:
            continue
        if not product.percentage > minimum:
            raise ContractViolation(
                f"Expected percentage to be greater than {minimum}, but got "
                f"{product.percentage} for product {_label(product)!r}",
                expected=minimum,
                actual=product.percentage,
            )


def apply_checks(response: SearchResponse, scenario: Scenario) -> None:
    """Run the checks ``scenario`` selected, in declared order."""
    for check in scenario.checks:
        logger.debug(f"{scenario.id}: {check.value}")
        if check is Check.MATCH_COUNT:
            check_match_count(response, scenario.expected_matches)
        elif check is Check.MIN_MATCH_COUNT:
            check_min_match_count(response, scenario.min_matches)
        elif check is Check.INTERNAL_MATCH_COUNT:
            check_internal_match_count(response, scenario.expected_internal_matches)
        elif check is Check.TERM_OVERLAP:
            check_term_overlap(response, scenario.product_terms)
        elif check is Check.SCORE_BOUNDS:
            check_score_bounds(response)
        elif check is Check.SCORE_THRESHOLD:
            check_score_threshold(response, scenario.min_percentage)
