"""Async wrapper around the two search endpoints of the product-matching service."""

from __future__ import annotations

from typing import Any

import httpx

from matchguard.models.matching_models import RawResponse, SearchKind
from matchguard.utils.config import HarnessSettings

from .base_client import BaseAPIClient


class ProductMatchingClient(BaseAPIClient):
    """Submits normalized search payloads and returns ``(status, body)`` pairs."""

    def __init__(
        self,
        settings: HarnessSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, transport=transport)
        self._paths = {
            SearchKind.TEXT: settings.text_search_path,
            SearchKind.URL: settings.url_search_path,
        }

    async def submit(
        self, kind: SearchKind | str, payload: dict[str, Any]
    ) -> RawResponse:
        """POST ``payload`` to the endpoint selected by ``kind``. One call, no masking."""
        return await self._post(self._paths[SearchKind(kind)], payload)

    async def search_by_text(self, payload: dict[str, Any]) -> RawResponse:
        return await self.submit(SearchKind.TEXT, payload)

    async def search_by_url(self, payload: dict[str, Any]) -> RawResponse:
        return await self.submit(SearchKind.URL, payload)
