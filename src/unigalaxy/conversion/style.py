"""Style transform: units, unsupported properties, platform-conditional shadows.

Pipeline order is units → property compatibility → shadow split. The
conditional blocks use uni-app's comment syntax, which the uni-app
compiler resolves per build target.
"""

from __future__ import annotations

import re

from unigalaxy.core.rules import RewriteRule, RuleTable, apply_rules

WEB_PLATFORM = "H5"
MINI_PROGRAM_PLATFORM = "MP"

SHADOW_PROPERTY = "box-shadow"
SHADOW_FALLBACK = "border: 1rpx solid rgba(0,0,0,0.1);"


def conditional_block(platform: str, body: str) -> str:
    return f"/* #ifdef {platform} */\n  {body}\n  /* #endif */"


def web_and_mini_program(web_body: str, mp_body: str) -> str:
    return f"{conditional_block(WEB_PLATFORM, web_body)}\n  {conditional_block(MINI_PROGRAM_PLATFORM, mp_body)}"


def declaration_pattern(prop: str) -> str:
    """Regex for a full ``prop: value;`` declaration, not matching longer property names."""
    return rf"(?<![\w-]){re.escape(prop)}\s*:[^;]+;"


def format_number(value: float) -> str:
    """Integral values print bare ("32"), others keep full float precision ("1.5")."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def unit_rule(rules: RuleTable) -> RewriteRule:
    ratio = rules.unit_ratio
    target = rules.target_unit

    def _scale(match: re.Match[str]) -> str:
        return f"{format_number(float(match.group(1)) * ratio)}{target}"

    return RewriteRule(
        pattern=rf"(?<![\w.])(\d+(?:\.\d+)?|\.\d+){re.escape(rules.source_unit)}\b",
        replacement=_scale,
        flags=0,
        description=f"{rules.source_unit} → {target} (×{ratio})",
    )


def property_rule(prop: str, alternative: str | None) -> RewriteRule:
    """Wrap an unsupported declaration with its alternative, or strip it."""
    if alternative is None:
        return RewriteRule(
            pattern=declaration_pattern(prop),
            replacement="",
            description=f"strip {prop}",
        )

    def _wrap(match: re.Match[str]) -> str:
        return web_and_mini_program(match.group(0), alternative)

    return RewriteRule(
        pattern=declaration_pattern(prop),
        replacement=_wrap,
        description=f"{prop} → H5 only, {alternative!r} elsewhere",
    )


def _split_shadow(match: re.Match[str]) -> str:
    return web_and_mini_program(match.group(0), SHADOW_FALLBACK)


SHADOW_RULE = RewriteRule(
    pattern=declaration_pattern(SHADOW_PROPERTY),
    replacement=_split_shadow,
    description="box-shadow → H5 verbatim, border fallback on mini-programs",
)


def style_rules(rules: RuleTable) -> list[RewriteRule]:
    out = [unit_rule(rules)]
    for prop in rules.unsupported_properties:
        out.append(property_rule(prop, rules.alternative_for(prop)))
    out.append(SHADOW_RULE)
    return out


def convert_style(css: str, rules: RuleTable) -> str:
    return apply_rules(css, style_rules(rules))


def has_shadow_fallback(style: str) -> bool:
    return SHADOW_FALLBACK in style


def split_shadows(style: str) -> str:
    """Split shadow declarations for mini-programs unless already split."""
    if has_shadow_fallback(style):
        return style
    return SHADOW_RULE.apply(style)
