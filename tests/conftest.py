import ipaddress
import json
import re
from urllib.parse import urlsplit

import httpx
import pytest

from matchguard.utils.config import HarnessSettings

API_KEY = "test-key"
BASE_URL = "http://matching.test"

CATALOG = (
    "Choice White Polyethylene Cutting Board 18 x 12",
    "Bamboo Cutting Board 16 x 10",
    "Vollrath Stainless Steel Mixing Bowl 5 Qt",
    "Mercer Chef Knife 10 inch",
    "Nitrile Gloves Large",
)

_SCRIPT_RE = re.compile(r"<script.*?</script>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WORD_RE = re.compile(r"\w+")


def _words(text: str) -> set[str]:
    return {w for w in _WORD_RE.findall(text.lower()) if len(w) >= 3}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _bad_request(detail: str) -> httpx.Response:
    return httpx.Response(400, json={"detail": detail})


class FakeMatchingService:
    """In-process stand-in for the matching service, enforcing its contract."""

    def __init__(self):
        self.calls: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if request.headers.get("Authorization") != API_KEY:
            return httpx.Response(401, json={"detail": "unauthorized"})

        body = json.loads(request.content)
        key = {"/search/free-text": "text", "/search/from-url": "url"}.get(
            request.url.path
        )
        if key is None:
            return httpx.Response(404, json={"detail": "not found"})

        value = body.get(key)
        if not isinstance(value, str):
            return _bad_request(f"{key} must be a string")
        top_k = body.get("topK")
        if not isinstance(top_k, int) or isinstance(top_k, bool) or not 1 <= top_k <= 100:
            return _bad_request("topK must be an integer in [1, 100]")
        threshold = body.get("threshold")
        if not _is_number(threshold) or not 0 <= threshold <= 1:
            return _bad_request("threshold must be a number in [0, 1]")

        if key == "text":
            if not value.strip():
                return _bad_request("text must not be blank")
            text = _TAG_RE.sub(" ", _SCRIPT_RE.sub(" ", value))
            lines = [line for line in text.splitlines() if line.strip()]
        else:
            rejection = self._check_url(value)
            if rejection:
                return _bad_request(rejection)
            lines = [urlsplit(value).path]

        items = []
        for line in lines:
            matches = self._match(line, top_k, threshold)
            if matches:
                items.append({"input": line, "matchedInternalProducts": matches})
        return httpx.Response(200, json={"result": {"matchedItems": items}})

    @staticmethod
    def _check_url(value: str) -> str | None:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            return "url must be an absolute http(s) URL"
        if parts.hostname == "localhost":
            return "url must not target loopback"
        try:
            address = ipaddress.ip_address(parts.hostname)
        except ValueError:
            return None
        if address.is_loopback or address.is_private:
            return "url must not target private addresses"
        return None

    @staticmethod
    def _match(line: str, top_k: int, threshold: float) -> list[dict]:
        query = _words(line)
        if not query:
            return []
        scored = []
        for name in CATALOG:
            overlap = len(query & _words(name))
            percentage = round(100 * overlap / len(query), 2)
            if overlap and percentage >= threshold * 100:
                scored.append({"name": name, "percentage": percentage})
        scored.sort(key=lambda m: m["percentage"], reverse=True)
        return scored[:top_k]


@pytest.fixture
def settings():
    return HarnessSettings(
        _env_file=None,
        base_url=BASE_URL,
        api_key=API_KEY,
        scenario_timeout=5,
        workers=4,
    )


@pytest.fixture
def fake_service():
    return FakeMatchingService()


@pytest.fixture
def transport(fake_service):
    return httpx.MockTransport(fake_service)
