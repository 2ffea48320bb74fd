"""Runs scenarios: Normalizer -> Client -> status check -> selected checks."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import httpx

from matchguard.clients.product_matching_client import ProductMatchingClient
from matchguard.errors.errors import ContractViolation, InfrastructureFailure
from matchguard.harness.assertions import apply_checks, check_status, decode_response
from matchguard.harness.normalizer import normalize
from matchguard.models.matching_models import (
    CatalogReport,
    Outcome,
    Scenario,
    ScenarioReport,
    SearchIntent,
)
from matchguard.utils.config import HarnessSettings
from matchguard.utils.logging_utils import setup_logging

logger = setup_logging(__name__)


async def _evaluate(client: ProductMatchingClient, scenario: Scenario) -> ScenarioReport:
    raw = await client.submit(scenario.intent.kind, normalize(scenario.intent))
    try:
        check_status(raw, scenario.expected_status)
        if not scenario.expects_acceptance:
            return ScenarioReport(
                scenario_id=scenario.id,
                outcome=Outcome.REJECTED_AS_EXPECTED,
                status_code=raw.status_code,
                attempts=raw.attempts,
            )
        apply_checks(decode_response(raw), scenario)
    except ContractViolation as e:
        logger.warning(f"{scenario.id} violated the contract: {e}")
        return ScenarioReport(
            scenario_id=scenario.id,
            outcome=Outcome.CONTRACT_VIOLATION,
            status_code=raw.status_code,
            message=str(e),
            attempts=raw.attempts,
        )
    return ScenarioReport(
        scenario_id=scenario.id,
        outcome=Outcome.PASSED,
        status_code=raw.status_code,
        attempts=raw.attempts,
    )


async def run_scenario(
    client: ProductMatchingClient, scenario: Scenario, *, timeout: float | None = None
) -> ScenarioReport:
    """Execute one scenario and report its outcome.

    Contract violations and infrastructure failures end up in the report;
    anything else is a harness bug and propagates.
    """
    logger.debug(f"Running {scenario.id}: {scenario.description}")
    try:
        report = await asyncio.wait_for(_evaluate(client, scenario), timeout)
    except InfrastructureFailure as e:
        logger.error(f"{scenario.id} could not be evaluated: {e}")
        return ScenarioReport(
            scenario_id=scenario.id,
            outcome=Outcome.INFRASTRUCTURE_FAILURE,
            status_code=e.status,
            message=str(e),
        )
    except asyncio.TimeoutError:
        logger.error(f"{scenario.id} exceeded its {timeout}s budget")
        return ScenarioReport(
            scenario_id=scenario.id,
            outcome=Outcome.INFRASTRUCTURE_FAILURE,
            message=f"scenario exceeded its {timeout}s budget",
        )
    logger.info(f"{scenario.id}: {report.outcome.value}")
    return report


async def execute(
    scenario: Scenario,
    settings: HarnessSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ScenarioReport:
    """Run ``scenario`` on its own short-lived client."""
    async with ProductMatchingClient(settings, transport=transport) as client:
        return await run_scenario(
            client, scenario, timeout=settings.scenario_timeout
        )


async def run_catalog(
    scenarios: Iterable[Scenario],
    settings: HarnessSettings,
    *,
    workers: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CatalogReport:
    semaphore = asyncio.Semaphore(workers or settings.workers)

    async def _bounded(scenario: Scenario) -> ScenarioReport:
        async with semaphore:
            try:
                return await execute(scenario, settings, transport=transport)
            except Exception as e:
                # A harness bug in one scenario must not abort the rest of the batch
                logger.exception(f"{scenario.id} crashed the harness: {e!r}")
                return ScenarioReport(
                    scenario_id=scenario.id,
                    outcome=Outcome.HARNESS_ERROR,
                    message=f"harness error: {e!r}",
                )

    reports = await asyncio.gather(*(_bounded(s) for s in scenarios))
    catalog = CatalogReport(reports=list(reports))
    logger.info(
        f"Catalog finished: {len(catalog.passed)} passed, {len(catalog.failed)} failed"
    )
    return catalog


async def check_status_idempotent(
    client: ProductMatchingClient, intent: SearchIntent
) -> int:
    """Submit the same normalized request twice and return the shared status.

    Only acceptance/rejection must repeat; match sets may differ between calls.
    """
    payload = normalize(intent)
    first = await client.submit(intent.kind, payload)
    second = await client.submit(intent.kind, payload)
    if first.status_code != second.status_code:
        raise ContractViolation(
            f"Expected the same status for a repeated request to {first.url}, "
            f"but got {first.status_code} then {second.status_code}",
            expected=first.status_code,
            actual=second.status_code,
        )
    return first.status_code
