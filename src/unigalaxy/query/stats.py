"""Corpus statistics over a filtered record set (never just the page)."""

from __future__ import annotations

import math
from collections.abc import Sequence

from unigalaxy.core.models import PLATFORM_KEYS, ComponentRecord, normalize_platform
from unigalaxy.query.sorting import parse_timestamp

TOP_AUTHORS = 10
POPULAR_TAGS = 15
RECENT_COMPONENTS = 5

COMPLEXITY_BUCKETS: tuple[str, ...] = ("low", "medium", "high", "unknown")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _ranked(counts: dict[str, int], limit: int) -> list[tuple[str, int]]:
    # Stable sort: equal counts keep first-encountered order
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]


def _bump(counts: dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


def compute_statistics(records: Sequence[ComponentRecord]) -> dict:
    categories: dict[str, int] = {}
    authors: dict[str, int] = {}
    tags: dict[str, int] = {}
    complexity = {bucket: 0 for bucket in COMPLEXITY_BUCKETS}
    platform_support = {key: 0 for key in PLATFORM_KEYS}
    bundle_sizes: list[int] = []

    for record in records:
        _bump(categories, record.category)
        _bump(authors, record.author)
        for tag in record.tags:
            _bump(tags, tag)

        complexity[record.complexity or "unknown"] += 1

        for platform, supported in record.platforms.items():
            key = normalize_platform(platform)
            if supported and key in platform_support:
                platform_support[key] += 1

        # Zero-size records do not report a bundle size
        if record.performance and record.performance.bundle_size:
            bundle_sizes.append(record.performance.bundle_size)

    total_bundle = sum(bundle_sizes)
    performance_metrics = {
        "avg_bundle_size": _round_half_up(total_bundle / len(bundle_sizes)) if bundle_sizes else 0,
        "total_bundle_size": total_bundle,
        "min_bundle_size": min(bundle_sizes, default=0),
        "max_bundle_size": max(bundle_sizes, default=0),
    }

    dated = [r for r in records if r.created_at]
    recent = sorted(dated, key=lambda r: parse_timestamp(r.created_at), reverse=True)

    return {
        "total_components": len(records),
        "categories": categories,
        "authors": authors,
        "tags": tags,
        "complexity_distribution": complexity,
        "platform_support": platform_support,
        "performance_metrics": performance_metrics,
        "top_authors": [{"author": a, "count": c} for a, c in _ranked(authors, TOP_AUTHORS)],
        "popular_tags": [{"tag": t, "count": c} for t, c in _ranked(tags, POPULAR_TAGS)],
        "recent_components": [
            {"id": r.id, "name": r.name, "author": r.author, "created_at": r.created_at}
            for r in recent[:RECENT_COMPONENTS]
        ],
    }
