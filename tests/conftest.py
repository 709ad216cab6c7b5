"""Shared fixtures: record builders, in-memory corpus, snippet trees."""

from __future__ import annotations

from pathlib import Path

import pytest

from unigalaxy.core.memory import InMemoryRecordStore
from unigalaxy.core.models import (
    PLATFORM_KEYS,
    Complexity,
    ComponentRecord,
    ConvertedPayload,
    InterfaceDescriptor,
    PerformanceMetrics,
    PlatformCompatibility,
    SourcePayload,
)

# =============================================================================
# Builders
# =============================================================================


def build_record(
    id: str = "alice_glow-button",
    *,
    name: str | None = None,
    category: str = "buttons",
    author: str | None = None,
    tags: list[str] | None = None,
    complexity: str | None = "low",
    bundle_size: int = 120,
    platforms: dict[str, bool] | None = None,
    compatibility: dict[str, PlatformCompatibility] | None = None,
    created_at: str | None = "2024-01-01T00:00:00+00:00",
    style: str = ".btn { padding: 20rpx; }",
) -> ComponentRecord:
    author = author if author is not None else id.partition("_")[0]
    name = name if name is not None else id.partition("_")[2] or id
    component_name = "Galaxy" + "".join(p.capitalize() for p in name.split("-"))
    return ComponentRecord(
        id=id,
        name=name,
        category=category,
        author=author,
        description=f"{name} component",
        tags=list(tags or []),
        original=SourcePayload(html="<div class=\"btn\"></div>", css=".btn { padding: 10px; }"),
        uniapp=ConvertedPayload(
            template="<view class=\"btn\"></view>",
            script="export default {}",
            style=style,
            component_name=component_name,
        ),
        platforms=platforms if platforms is not None else {k: True for k in PLATFORM_KEYS},
        compatibility=compatibility
        if compatibility is not None
        else {k: PlatformCompatibility() for k in ("h5", "mp_weixin", "mp_alipay", "app_plus")},
        performance=PerformanceMetrics(Complexity(complexity), bundle_size) if complexity else None,
        props=[
            InterfaceDescriptor(
                name="disabled", type="Boolean", default=False, required=False, description=""
            )
        ],
        events=[InterfaceDescriptor(name="click", description="Tap handler", parameters=["event"])]
        if category == "buttons"
        else [],
        created_at=created_at,
        updated_at=created_at,
    )


def write_snippet(root: Path, category: str, stem: str, css: str, html: str) -> Path:
    path = root / category / f"{stem}.html"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"<style>\n{css}\n</style>\n{html}\n", encoding="utf-8")
    return path


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def make_record():
    return build_record


@pytest.fixture
def corpus_records() -> list[ComponentRecord]:
    """Six records across two categories, three authors, all complexities."""
    return [
        build_record("alice_glow-button", tags=["animation", "glow"], complexity="medium",
                     bundle_size=300, created_at="2024-03-01T00:00:00+00:00"),
        build_record("bob_flat-button", tags=["flat"], complexity="low",
                     bundle_size=100, created_at="2024-01-01T00:00:00+00:00"),
        build_record("carol_spinner", category="loaders", tags=["animation"], complexity="high",
                     bundle_size=2000, created_at="2024-02-01T00:00:00+00:00"),
        build_record("alice_dots", category="loaders", tags=["animation", "dots"], complexity="medium",
                     bundle_size=500, created_at="2024-05-01T00:00:00+00:00"),
        build_record(
            "bob_frost-button",
            tags=["glass"],
            complexity="low",
            bundle_size=250,
            created_at="2024-04-01T00:00:00+00:00",
            platforms={k: k not in ("mp_weixin",) for k in PLATFORM_KEYS},
            compatibility={
                "h5": PlatformCompatibility(),
                "mp_weixin": PlatformCompatibility(
                    issues=[
                        "Unsupported CSS property: backdrop-filter",
                        "Unsupported CSS property: clip-path",
                    ],
                    alternatives=["overflow: hidden;"],
                ),
                "mp_alipay": PlatformCompatibility(
                    issues=["Unsupported CSS property: backdrop-filter"]
                ),
                "app_plus": PlatformCompatibility(),
            },
        ),
        build_record("dave_pulse", category="loaders", tags=[], complexity="low",
                     bundle_size=80, created_at=None),
    ]


@pytest.fixture
def memory_store(corpus_records) -> InMemoryRecordStore:
    return InMemoryRecordStore(corpus_records)


@pytest.fixture
def snippet_tree(tmp_path) -> Path:
    """A small source tree shaped like the snippet collection."""
    root = tmp_path / "galaxy"
    write_snippet(
        root,
        "Buttons",
        "alice_glow-button",
        "/* Tags: glow, neon */\n.btn { padding: 10px 20px; box-shadow: 0 0 5px #0ff; }\n"
        ".btn:hover { transform: scale(1.1); }",
        '<div class="btn"><span>Go</span></div>',
    )
    write_snippet(
        root,
        "Buttons",
        "bob_frost",
        ".frost { backdrop-filter: blur(4px); clip-path: circle(50%); width: 100px; }",
        '<button class="frost" onclick="go()">Frost</button>',
    )
    write_snippet(
        root,
        "Loaders",
        "carol_spinner",
        ".spin { animation: spin 1s linear infinite; border: 2px solid; }",
        '<div class="spin"></div>',
    )
    return root
