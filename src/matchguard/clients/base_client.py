import abc
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from matchguard.errors.errors import InfrastructureFailure
from matchguard.models.matching_models import RawResponse
from matchguard.utils.config import HarnessSettings
from matchguard.utils.logging_utils import setup_logging

logger = setup_logging(__name__)

_AUTH_FAILURE_STATUS = {401}


class BaseAPIClient(abc.ABC):
    """Async HTTP client that hands every response back as data.

    Validation rejections (4xx) are what the harness is looking for, so status
    codes are never raised. Only failures unrelated to the input under test
    (transport errors, timeouts, rejected credentials) surface as
    ``InfrastructureFailure``.
    """

    def __init__(
        self,
        settings: HarnessSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._retries = settings.transient_retries
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.http_timeout,
            headers={"Authorization": settings.api_key.get_secret_value()},
            transport=transport,
        )

    async def _post(self, path: str, payload: Any) -> RawResponse:
        # Only connection-level failures are retried; timeouts never are.
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.NetworkError),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            stop=stop_after_attempt(1 + self._retries),
            reraise=True,
        )
        target = str(self._client.base_url).rstrip("/") + path
        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    resp = await self._client.post(path, json=payload)
        except httpx.TimeoutException as e:
            logger.error("HTTP timeout", extra={"url": target})
            raise InfrastructureFailure(
                f"request timed out after {self._settings.http_timeout}s",
                url=target,
            ) from e
        except httpx.TransportError as e:
            logger.error("HTTP transport error", extra={"url": target})
            raise InfrastructureFailure(
                f"could not reach service: {e!r}", url=target
            ) from e

        url = str(resp.request.url)
        logger.info(f"POST {path} -> {resp.status_code}")
        if resp.status_code in _AUTH_FAILURE_STATUS:
            logger.error(
                "Authentication rejected",
                extra={"status": resp.status_code, "url": url},
            )
            raise InfrastructureFailure(
                "service rejected the configured credential",
                status=resp.status_code,
                url=url,
            )
        return RawResponse(
            status_code=resp.status_code, body=resp.content, url=url, attempts=attempts
        )

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
