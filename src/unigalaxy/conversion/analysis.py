"""Metadata derived from a raw snippet: tags, compatibility, performance, interface.

All functions here read the *raw* markup and style, never the converted
output, so metadata does not depend on rewrite order.
"""

from __future__ import annotations

import re

from unigalaxy.core.models import (
    BASELINE_PLATFORMS,
    MINI_PROGRAM_PLATFORMS,
    PLATFORM_KEYS,
    Complexity,
    InterfaceDescriptor,
    PerformanceMetrics,
    PlatformCompatibility,
)
from unigalaxy.core.rules import RuleTable

# Styles longer than this many lines are "high" complexity
HIGH_COMPLEXITY_LINES = 100

_TAG_ANNOTATION = re.compile(r"/\*.*?Tags?:\s*([^*]+)\*/", re.IGNORECASE)

# (keywords, tag): any keyword present in the style adds the tag
_TAG_HEURISTICS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("animation", "transform"), "animation"),
    (("gradient",), "gradient"),
    (("hover",), "interactive"),
)

_ANIMATED_KEYWORDS = ("animation", "transform")


def extract_tags(css: str) -> list[str]:
    """Annotation tags first (``/* Tags: a, b */``), then heuristic tags; deduplicated."""
    tags: list[str] = []
    match = _TAG_ANNOTATION.search(css)
    if match:
        tags.extend(t.strip() for t in match.group(1).split(","))
    for keywords, tag in _TAG_HEURISTICS:
        if any(k in css for k in keywords):
            tags.append(tag)
    return list(dict.fromkeys(t for t in tags if t))


def unsupported_properties_in(css: str, rules: RuleTable) -> list[str]:
    return [prop for prop in rules.unsupported_properties if prop in css]


def analyze_compatibility(css: str, rules: RuleTable) -> dict[str, PlatformCompatibility]:
    """Per-platform support for the four baseline platforms.

    Unsupported properties are flagged on the mini-program platforms only;
    web and app-shell entries stay clean. This asymmetry is the current
    contract, not a per-platform capability model.
    """
    compatibility = {key: PlatformCompatibility() for key in BASELINE_PLATFORMS}
    for prop in unsupported_properties_in(css, rules):
        alternative = rules.alternative_for(prop)
        for key in MINI_PROGRAM_PLATFORMS:
            compatibility[key].issues.append(f"Unsupported CSS property: {prop}")
            if alternative:
                compatibility[key].alternatives.append(alternative)
    return compatibility


def platform_support(compatibility: dict[str, PlatformCompatibility]) -> dict[str, bool]:
    """Support flags for every known platform; platforms without an entry are supported."""
    return {
        key: compatibility[key].supported if key in compatibility else True
        for key in PLATFORM_KEYS
    }


def classify_complexity(css: str) -> Complexity:
    """low → medium on animation/transform; the line-count check runs independently and wins."""
    complexity = Complexity.LOW
    if any(k in css for k in _ANIMATED_KEYWORDS):
        complexity = Complexity.MEDIUM
    if len(css.split("\n")) > HIGH_COMPLEXITY_LINES:
        complexity = Complexity.HIGH
    return complexity


def analyze_performance(html: str, css: str) -> PerformanceMetrics:
    return PerformanceMetrics(
        complexity=classify_complexity(css),
        bundle_size=len(html) + len(css),
    )


def generate_props(category: str) -> list[InterfaceDescriptor]:
    props = [
        InterfaceDescriptor(
            name="disabled",
            type="Boolean",
            default=False,
            required=False,
            description="Whether the component is disabled",
        )
    ]
    if category == "buttons":
        props.extend(
            [
                InterfaceDescriptor(
                    name="text",
                    type="String",
                    default="Button",
                    required=False,
                    description="Button label",
                ),
                InterfaceDescriptor(
                    name="type",
                    type="String",
                    default="primary",
                    required=False,
                    description="Button style variant",
                ),
            ]
        )
    return props


def generate_events(category: str) -> list[InterfaceDescriptor]:
    if category == "buttons":
        return [InterfaceDescriptor(name="click", description="Tap handler", parameters=["event"])]
    return []


def describe(name: str, tags: list[str]) -> str:
    suffix = f" ({', '.join(tags)})" if tags else ""
    return f"{name} component{suffix}"
