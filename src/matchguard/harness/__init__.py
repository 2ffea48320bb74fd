"""Validation-and-assertion engine: normalizer, checks, catalog and executor."""

from .executor import check_status_idempotent, execute, run_catalog, run_scenario
from .normalizer import build_intent, normalize, text_intent, url_intent

__all__ = [
    "build_intent",
    "check_status_idempotent",
    "execute",
    "normalize",
    "run_catalog",
    "run_scenario",
    "text_intent",
    "url_intent",
]
