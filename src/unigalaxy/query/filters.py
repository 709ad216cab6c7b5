"""Filter composition for search and list.

Stages run conjunctively in a fixed order, each over the set the previous
stage left:

    text → category → author → tags → platforms → complexity

Text, category, and author only read identity fields, which index entries
and records share, so those stages can also run against the index before
hydration. Tags, platforms, and complexity need the hydrated record.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from unigalaxy.core.models import normalize_platform

T = TypeVar("T")


@dataclass
class FilterSet:
    """Requested filters. Empty/None fields are inactive."""

    query: str = ""
    category: str | None = None
    author: str | None = None
    tags: list[str] = field(default_factory=list)
    platforms: list[str] = field(default_factory=list)
    complexity: str | None = None


@dataclass(frozen=True)
class FilterStage:
    name: str
    predicate: Callable[[Any], bool]
    identity_only: bool = False

    def apply(self, items: Iterable[T]) -> list[T]:
        return [item for item in items if self.predicate(item)]


def _matches_text(query: str) -> Callable[[Any], bool]:
    needle = query.lower()

    def predicate(item: Any) -> bool:
        return (
            needle in (item.name or "").lower()
            or needle in (item.id or "").lower()
            or needle in (item.author or "").lower()
        )

    return predicate


def _has_any_tag(tags: Sequence[str]) -> Callable[[Any], bool]:
    wanted = list(tags)
    return lambda record: any(tag in record.tags for tag in wanted)


def _supports_platforms(platforms: Sequence[str]) -> Callable[[Any], bool]:
    keys = [normalize_platform(p) for p in platforms]

    def predicate(record: Any) -> bool:
        # Records without platform data are not excluded
        if not record.platforms:
            return True
        return all(record.platforms.get(key) is not False for key in keys)

    return predicate


def build_stages(filters: FilterSet) -> list[FilterStage]:
    """Active stages in evaluation order."""
    stages: list[FilterStage] = []
    if filters.query:
        stages.append(FilterStage("text", _matches_text(filters.query), identity_only=True))
    if filters.category:
        category = filters.category
        stages.append(FilterStage("category", lambda r: r.category == category, identity_only=True))
    if filters.author:
        author = filters.author
        stages.append(FilterStage("author", lambda r: r.author == author, identity_only=True))
    if filters.tags:
        stages.append(FilterStage("tags", _has_any_tag(filters.tags)))
    if filters.platforms:
        stages.append(FilterStage("platforms", _supports_platforms(filters.platforms)))
    if filters.complexity:
        complexity = filters.complexity
        stages.append(FilterStage("complexity", lambda r: r.complexity == complexity))
    return stages


def apply_stages(items: Iterable[T], stages: Iterable[FilterStage]) -> list[T]:
    survivors = list(items)
    for stage in stages:
        survivors = stage.apply(survivors)
    return survivors
