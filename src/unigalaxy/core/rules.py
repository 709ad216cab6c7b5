"""Rule table: declarative mappings that drive snippet conversion.

The table is pure data (tag names, event names, unit ratio, CSS property
compatibility). Transform code never names a specific tag or property;
it turns table entries into RewriteRules and applies them in order with
``apply_rules``. Adding a mapping means editing the table, not the code.

On-disk shape (YAML or JSON):

    html_tag_mapping: {div: view, span: text}
    event_mapping: {click: tap}
    css_unit_conversion: {px_to_rpx_ratio: 2}
    css_property_compatibility:
      unsupported: [backdrop-filter]
      alternatives: {backdrop-filter: "background-color: rgba(255,255,255,0.85);"}
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from unigalaxy.core.errors import RuleLoadError
from unigalaxy.observability.logging import get_logger

logger = get_logger(__name__)

Replacement = str | Callable[[re.Match[str]], str]


# ---------------------------------------------------------------------------
# Rewrite rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RewriteRule:
    """One regex substitution. ``replacement`` follows ``re.sub`` semantics."""

    pattern: str
    replacement: Replacement
    flags: int = re.IGNORECASE
    description: str = ""

    @property
    def regex(self) -> re.Pattern[str]:
        return re.compile(self.pattern, self.flags)

    def apply(self, text: str) -> str:
        return self.regex.sub(self.replacement, text)


def apply_rules(text: str, rules: Iterable[RewriteRule]) -> str:
    """Apply rewrite rules in sequence. Order is significant."""
    for rule in rules:
        text = rule.apply(text)
    return text


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

_DEFAULT_TAG_MAP: tuple[tuple[str, str], ...] = (
    ("div", "view"),
    ("section", "view"),
    ("article", "view"),
    ("header", "view"),
    ("footer", "view"),
    ("nav", "view"),
    ("main", "view"),
    ("aside", "view"),
    ("ul", "view"),
    ("ol", "view"),
    ("li", "view"),
    ("span", "text"),
    ("p", "text"),
    ("h1", "text"),
    ("h2", "text"),
    ("h3", "text"),
    ("h4", "text"),
    ("h5", "text"),
    ("h6", "text"),
    ("strong", "text"),
    ("em", "text"),
    ("i", "text"),
    ("img", "image"),
)

_DEFAULT_EVENT_MAP: tuple[tuple[str, str], ...] = (
    ("click", "tap"),
    ("mousedown", "touchstart"),
    ("mouseup", "touchend"),
    ("mousemove", "touchmove"),
    ("mouseleave", "touchcancel"),
)

_DEFAULT_UNSUPPORTED: tuple[str, ...] = (
    "backdrop-filter",
    "clip-path",
    "mix-blend-mode",
    "mask-image",
    "caret-color",
)

_DEFAULT_ALTERNATIVES: dict[str, str] = {
    "backdrop-filter": "background-color: rgba(255, 255, 255, 0.85);",
    "clip-path": "overflow: hidden;",
}


@dataclass(frozen=True)
class RuleTable:
    """Immutable conversion rules, loaded once per process."""

    tag_map: tuple[tuple[str, str], ...] = ()
    event_map: tuple[tuple[str, str], ...] = ()
    unit_ratio: float = 1.0
    source_unit: str = "px"
    target_unit: str = "rpx"
    unsupported_properties: tuple[str, ...] = ()
    property_alternatives: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def default(cls) -> RuleTable:
        return cls(
            tag_map=_DEFAULT_TAG_MAP,
            event_map=_DEFAULT_EVENT_MAP,
            unit_ratio=2.0,
            unsupported_properties=_DEFAULT_UNSUPPORTED,
            property_alternatives=dict(_DEFAULT_ALTERNATIVES),
        )

    @classmethod
    def empty(cls) -> RuleTable:
        return cls()

    def alternative_for(self, prop: str) -> str | None:
        return self.property_alternatives.get(prop)

    def summary(self) -> dict:
        """Rule counts for status reporting and load logging."""
        return {
            "tags": len(self.tag_map),
            "events": len(self.event_map),
            "unsupported": len(self.unsupported_properties),
            "alternatives": len(self.property_alternatives),
            "px_to_rpx_ratio": self.unit_ratio,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RuleTable:
        """Build from the on-disk shape. Missing sections stay empty."""
        if not isinstance(data, Mapping):
            raise TypeError(f"rule table must be a mapping, got {type(data).__name__}")

        units = data.get("css_unit_conversion") or {}
        compat = data.get("css_property_compatibility") or {}
        return cls(
            tag_map=_pairs(data.get("html_tag_mapping")),
            event_map=_pairs(data.get("event_mapping")),
            unit_ratio=float(units.get("px_to_rpx_ratio", 1.0)),
            unsupported_properties=tuple(str(p) for p in compat.get("unsupported") or ()),
            property_alternatives={
                str(k): str(v) for k, v in (compat.get("alternatives") or {}).items()
            },
        )

    def to_dict(self) -> dict:
        return {
            "html_tag_mapping": dict(self.tag_map),
            "event_mapping": dict(self.event_map),
            "css_unit_conversion": {"px_to_rpx_ratio": self.unit_ratio},
            "css_property_compatibility": {
                "unsupported": list(self.unsupported_properties),
                "alternatives": dict(self.property_alternatives),
            },
        }


def _pairs(mapping: Any) -> tuple[tuple[str, str], ...]:
    if not mapping:
        return ()
    if not isinstance(mapping, Mapping):
        raise TypeError(f"expected a mapping, got {type(mapping).__name__}")
    return tuple((str(k), str(v)) for k, v in mapping.items())


# ---------------------------------------------------------------------------
# Rule source
# ---------------------------------------------------------------------------


def read_rule_table(path: Path) -> RuleTable:
    """Strict loader: raise RuleLoadError on any failure.

    JSON is a subset of YAML, so both formats go through yaml.safe_load.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise RuleLoadError(str(path), str(e)) from e
    try:
        return RuleTable.from_dict(raw or {})
    except (TypeError, ValueError, AttributeError) as e:
        raise RuleLoadError(str(path), str(e)) from e


def load_rule_table(path: Path | None = None) -> RuleTable:
    """Load the rule table once at startup.

    No path → bundled defaults. A path that fails to load degrades to an
    empty table so the process stays usable.
    """
    if path is None:
        return RuleTable.default()
    try:
        table = read_rule_table(path)
    except RuleLoadError as e:
        logger.warning("rules.load.failed", path=str(path), error=e.reason, fallback="empty")
        return RuleTable.empty()
    logger.info("rules.loaded", path=str(path), **table.summary())
    return table
