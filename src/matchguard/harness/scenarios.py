"""Scenario catalog: quality cases from JSON, boundary cases enumerated here."""

from __future__ import annotations

import json
from collections.abc import Iterable
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from matchguard.harness.normalizer import text_intent, url_intent
from matchguard.models.matching_models import Scenario, SearchIntent, SearchKind, Suite
from matchguard.utils.logging_utils import setup_logging

logger = setup_logging(__name__)

CUTTING_BOARD = "Cutting Board"


class QualityCase(BaseModel):
    """One row of a quality-scenario JSON file."""

    id: str
    description: str
    type: SearchKind
    input: str
    expected_product_matches: int | None = Field(
        None, ge=1, alias="expectedProductMatches"
    )
    min_product_matches: int | None = Field(None, ge=1, alias="minProductMatches")
    product_terms: list[str] = Field(alias="productTerms")
    min_percentage: float = Field(alias="minPercentage")

    @model_validator(mode="after")
    def expects_some_matches(self) -> QualityCase:
        if self.expected_product_matches is None and self.min_product_matches is None:
            raise ValueError(
                f"quality case {self.id} needs expectedProductMatches or minProductMatches"
            )
        return self

    def to_scenario(self) -> Scenario:
        return Scenario(
            id=self.id,
            description=f"Should successfully match {self.description}",
            suite=Suite.QUALITY,
            intent=SearchIntent(kind=self.type, payload=self.input),
            expected_status=200,
            expected_matches=self.expected_product_matches,
            min_matches=self.min_product_matches,
            product_terms=tuple(self.product_terms),
            min_percentage=self.min_percentage,
        )


def _read_quality_cases(raw: str) -> list[Scenario]:
    rows = json.loads(raw)
    return [QualityCase.model_validate(row).to_scenario() for row in rows]


def load_quality_scenarios(path: str | Path | None = None) -> list[Scenario]:
    """Load quality scenarios from ``path`` or from the packaged catalog."""
    if path is None:
        raw = (
            resources.files("matchguard")
            .joinpath("data/quality_scenarios.json")
            .read_text(encoding="utf-8")
        )
    else:
        raw = Path(path).read_text(encoding="utf-8")
        logger.info(f"Loading quality scenarios from {path}")
    return _read_quality_cases(raw)


def _boundary(
    id: str, description: str, intent: SearchIntent, status: int, **expect: Any
) -> Scenario:
    return Scenario(
        id=id,
        description=description,
        suite=Suite.BOUNDARY,
        intent=intent,
        expected_status=status,
        **expect,
    )


BOUNDARY_SCENARIOS: tuple[Scenario, ...] = (
    # ---------------------------- Text content ----------------------------
    _boundary("TC-5", "Should return status 400 for empty text", text_intent(""), 400),
    _boundary(
        "TC-6",
        "Should return 0 matches for malformed text input",
        text_intent("@@##$$%%"),
        200,
        expected_matches=0,
    ),
    _boundary("TC-7", "Should return 400 for invalid URL", url_intent("invalid-url"), 400),
    _boundary(
        "TC-8",
        "Should return 0 matches for page with no product data",
        url_intent("https://example.com/no-product"),
        200,
        expected_matches=0,
    ),
    _boundary(
        "TC-9", "Should return 400 for missing required fields", text_intent(), 400
    ),
    _boundary(
        "TC-10",
        "Should not handle text with only whitespace",
        text_intent("     "),
        400,
    ),
    _boundary(
        "TC-11",
        "Should not handle text with only newlines and tabs",
        text_intent("\n\n\t\t\r\n"),
        400,
    ),
    _boundary(
        "TC-12",
        "Should handle text with HTML tags",
        text_intent('<script>alert("XSS")</script> Cutting Board'),
        200,
        expected_matches=1,
    ),
    _boundary(
        "TC-13",
        "Should handle text with SQL injection patterns",
        text_intent("' OR '1'='1'; DROP TABLE products;--"),
        200,
        expected_matches=0,
    ),
    _boundary(
        "TC-14",
        "Should handle text with NoSQL injection patterns",
        text_intent('{"$gt": ""} OR 1=1'),
        200,
        expected_matches=0,
    ),
    _boundary(
        "TC-15",
        "Should handle text with path traversal attempts",
        text_intent("../../../etc/passwd"),
        200,
        expected_matches=0,
    ),
    _boundary(
        "TC-16", "Should handle text with null bytes", text_intent("Product\0Name"), 200
    ),
    # ------------------------------ URL policy ------------------------------
    _boundary(
        "TC-17",
        "Should reject URL without protocol",
        url_intent("www.example.com/product"),
        400,
    ),
    _boundary(
        "TC-18", "Should reject file: protocol URL", url_intent("file:///etc/passwd"), 400
    ),
    _boundary(
        "TC-19",
        "Should reject FTP protocol URL",
        url_intent("ftp://ftp.example.com/file.txt"),
        400,
    ),
    _boundary(
        "TC-20",
        "Should reject localhost URL",
        url_intent("http://localhost:8080/admin"),
        400,
    ),
    _boundary(
        "TC-21", "Should reject 127.0.0.1 URL", url_intent("http://127.0.0.1/admin"), 400
    ),
    _boundary(
        "TC-22",
        "Should reject private IP ranges",
        url_intent("http://192.168.1.1/router"),
        400,
    ),
    # ---------------------------- Numeric knobs ----------------------------
    _boundary(
        "TC-23",
        "Should reject negative topK value",
        text_intent(CUTTING_BOARD, top_k=-5),
        400,
    ),
    _boundary(
        "TC-24",
        "Should reject zero topK value",
        text_intent(CUTTING_BOARD, top_k=0),
        400,
    ),
    _boundary(
        "TC-25",
        "Should reject extremely large topK value",
        text_intent(CUTTING_BOARD, top_k=999999),
        400,
    ),
    _boundary(
        "TC-26",
        "Should reject negative threshold value",
        text_intent(CUTTING_BOARD, threshold=-0.5),
        400,
    ),
    _boundary(
        "TC-27",
        "Should reject threshold greater than 1",
        text_intent(CUTTING_BOARD, threshold=1.5),
        400,
    ),
    _boundary(
        "TC-28",
        "Should not reject threshold equal to 0",
        text_intent(CUTTING_BOARD, threshold=0),
        200,
        min_matches=1,
    ),
    _boundary(
        "TC-29",
        "Should reject non-numeric topK value",
        text_intent(CUTTING_BOARD, top_k="five"),
        400,
    ),
    _boundary(
        "TC-30",
        "Should reject non-numeric threshold value",
        text_intent(CUTTING_BOARD, threshold="high"),
        400,
    ),
    # ------------------------------ Value types ------------------------------
    _boundary(
        "TC-31", "Should reject non-string text value", text_intent(12345), 400
    ),
    _boundary(
        "TC-32",
        "Should reject non-string URL value",
        url_intent({"domain": "example.com"}),
        400,
    ),
    _boundary("TC-33", "Should reject null text value", text_intent(None), 400),
    _boundary("TC-34", "Should reject null URL value", url_intent(None), 400),
    # ------------------------------ Encodings ------------------------------
    _boundary(
        "TC-35",
        "Should handle text with mixed character encodings",
        text_intent("Cutting Board 切割板 доска"),
        200,
    ),
    _boundary(
        "TC-36",
        "Should handle text with right-to-left characters",
        text_intent("لوح تقطيع Cutting Board"),
        200,
    ),
    _boundary(
        "TC-37",
        "Should handle text with combining characters",
        text_intent("Café Naïve Résumé"),
        200,
    ),
    # ------------------------------ Field set ------------------------------
    _boundary(
        "TC-38",
        "Should ignore extra unexpected fields",
        text_intent(CUTTING_BOARD, maliciousField="blabla"),
        200,
    ),
    _boundary(
        "TC-39",
        "Should handle a custom statusId",
        text_intent(CUTTING_BOARD, status_id="test"),
        200,
    ),
    _boundary(
        "TC-40",
        "Should reject 10.0.0.0/8 private range",
        url_intent("http://10.0.0.5/internal"),
        400,
    ),
    _boundary(
        "TC-41",
        "Should reject 172.16.0.0/12 private range",
        url_intent("http://172.16.0.1/metadata"),
        400,
    ),
    _boundary(
        "TC-42",
        "Should reject IPv6 loopback URL",
        url_intent("http://[::1]/admin"),
        400,
    ),
    _boundary(
        "TC-43", "Should return 400 for missing URL field", url_intent(), 400
    ),
)

QUALITY_SCENARIOS: tuple[Scenario, ...] = tuple(load_quality_scenarios())


def all_scenarios() -> list[Scenario]:
    return [*QUALITY_SCENARIOS, *BOUNDARY_SCENARIOS]


def get_scenario(scenario_id: str) -> Scenario:
    for scenario in all_scenarios():
        if scenario.id == scenario_id:
            return scenario
    raise KeyError(f"Unknown scenario: {scenario_id}")


def select(
    scenarios: Iterable[Scenario],
    *,
    suite: Suite | str | None = None,
    ids: Iterable[str] | None = None,
) -> list[Scenario]:
    scenarios = list(scenarios)
    wanted = set(ids) if ids else None
    chosen = [
        s
        for s in scenarios
        if (suite is None or s.suite == Suite(suite))
        and (wanted is None or s.id in wanted)
    ]
    if wanted:
        unknown = wanted - {s.id for s in scenarios}
        if unknown:
            raise KeyError(f"Unknown scenario(s): {', '.join(sorted(unknown))}")
    return chosen
