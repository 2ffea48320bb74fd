from __future__ import annotations

from typing import Any, Final

from matchguard.models.matching_models import SearchIntent, SearchKind

# Wire defaults, in wire order after the payload key
DEFAULTS: Final[dict[str, Any]] = {
    "top_k": 3,
    "threshold": 0.5,
    "enable_private_label_ranking": False,
    "enable_stock_product_ranking": False,
    "enable_vendor_ranking": False,
    "enable_product_ranking": False,
    "use_old_reranking": True,
}
STATUS_ID_DEFAULT: Final[str] = "string"


def _wire_name(field: str) -> str:
    return SearchIntent.model_fields[field].alias or field


def normalize(intent: SearchIntent) -> dict[str, Any]:
    """Default-fill ``intent`` into the complete wire payload.

    Values the caller set are copied verbatim, even when they are of the wrong
    type or ``None``. The ``text``/``url`` key is left out entirely when the
    caller never supplied it.
    """
    explicit = intent.model_fields_set
    body: dict[str, Any] = {
        "statusId": intent.status_id if "status_id" in explicit else STATUS_ID_DEFAULT
    }
    if "payload" in explicit:
        body[intent.kind.value] = intent.payload
    for field, default in DEFAULTS.items():
        body[_wire_name(field)] = (
            getattr(intent, field) if field in explicit else default
        )
    body.update(intent.model_extra or {})
    return body


def build_intent(kind: SearchKind | str, **fields: Any) -> SearchIntent:
    """Create an intent from snake_case or wire-name keyword arguments.

    ``payload`` may be replaced by the kind's own key (``text=...`` or
    ``url=...``).
    """
    kind = SearchKind(kind)
    if kind.value in fields:
        fields["payload"] = fields.pop(kind.value)
    return SearchIntent(kind=kind, **fields)


def text_intent(*args: Any, **fields: Any) -> SearchIntent:
    if args:
        fields["payload"] = args[0]
    return build_intent(SearchKind.TEXT, **fields)


def url_intent(*args: Any, **fields: Any) -> SearchIntent:
    if args:
        fields["payload"] = args[0]
    return build_intent(SearchKind.URL, **fields)
