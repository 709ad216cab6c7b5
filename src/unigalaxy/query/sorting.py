"""Single-key sorting for list results.

Python's sort is stable in both directions, so ties keep input order and
no secondary key is needed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

from unigalaxy.core.models import COMPLEXITY_ORDER, ComponentRecord

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

DEFAULT_SORT_KEY = "name"


def parse_timestamp(value: str | None) -> datetime:
    """ISO-8601 → aware datetime. Missing or unparseable → epoch; naive → UTC."""
    if not value:
        return EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def complexity_rank(record: ComponentRecord) -> int:
    return COMPLEXITY_ORDER.get(record.complexity or "", 0)


_SORT_KEY_FUNCS: dict[str, Callable[[ComponentRecord], Any]] = {
    "name": lambda r: r.name or "",
    "author": lambda r: r.author or "",
    "category": lambda r: r.category or "",
    "created_at": lambda r: parse_timestamp(r.created_at),
    "complexity": complexity_rank,
}


def resolve_sort_key(sort_by: str | None) -> str:
    """Unrecognized keys fall back to name ordering."""
    return sort_by if sort_by in _SORT_KEY_FUNCS else DEFAULT_SORT_KEY


def sort_records(
    records: Iterable[ComponentRecord],
    sort_by: str | None = DEFAULT_SORT_KEY,
    sort_order: str = "asc",
) -> list[ComponentRecord]:
    key = _SORT_KEY_FUNCS[resolve_sort_key(sort_by)]
    return sorted(records, key=key, reverse=(sort_order or "").lower() == "desc")
