"""Markup transform: HTML tags and event bindings → uni-app template syntax.

Each RuleTable entry expands into a fixed set of RewriteRules; the rules
are applied in table order so overlapping mappings resolve the same way
on every run.
"""

from __future__ import annotations

import re

from unigalaxy.core.rules import RewriteRule, RuleTable, apply_rules

# HTML elements that never have a closing tag
VOID_ELEMENTS = frozenset({"area", "br", "col", "embed", "hr", "img", "input", "source", "wbr"})

_ATTRS = r"(\s[^>]*?)?"
_BOUNDARY_BEFORE = r"(?<![\w-])"
_BOUNDARY_AFTER = r"(?![\w-])"


def tag_rules(source: str, target: str) -> list[RewriteRule]:
    """Rules rewriting one element name, attribute text kept verbatim."""
    src = re.escape(source)
    rules = [
        RewriteRule(
            pattern=rf"<{src}{_ATTRS}\s*/>",
            replacement=rf"<{target}\1></{target}>",
            description=f"self-closing <{source}/> → <{target}></{target}>",
        ),
    ]
    if source.lower() in VOID_ELEMENTS:
        rules.append(
            RewriteRule(
                pattern=rf"<{src}(\s[^>]*)?>",
                replacement=rf"<{target}\1></{target}>",
                description=f"void <{source}> → <{target}></{target}>",
            )
        )
    else:
        rules.append(
            RewriteRule(
                pattern=rf"<{src}(\s[^>]*)?>",
                replacement=rf"<{target}\1>",
                description=f"<{source}> → <{target}>",
            )
        )
    rules.append(
        RewriteRule(
            pattern=rf"</{src}\s*>",
            replacement=f"</{target}>",
            description=f"</{source}> → </{target}>",
        )
    )
    return rules


def event_rules(source: str, target: str) -> list[RewriteRule]:
    """Rules rewriting ``@source`` bindings and inline ``onsource`` handlers to ``@target``."""
    src = re.escape(source)
    return [
        RewriteRule(
            pattern=rf"@{src}{_BOUNDARY_AFTER}",
            replacement=f"@{target}",
            description=f"@{source} → @{target}",
        ),
        RewriteRule(
            pattern=rf"{_BOUNDARY_BEFORE}on{src}{_BOUNDARY_AFTER}",
            replacement=f"@{target}",
            description=f"on{source} → @{target}",
        ),
    ]


# Anchors are always navigators, whatever the tag map says
ANCHOR_RULES: tuple[RewriteRule, ...] = (
    RewriteRule(pattern=r"<a(\s[^>]*)?>", replacement=r"<navigator\1>", description="<a> → <navigator>"),
    RewriteRule(pattern=r"</a\s*>", replacement="</navigator>", description="</a> → </navigator>"),
)


def markup_rules(rules: RuleTable) -> list[RewriteRule]:
    """Full ordered rule list for a template: tags, events, then anchors."""
    out: list[RewriteRule] = []
    for source, target in rules.tag_map:
        out.extend(tag_rules(source, target))
    for source, target in rules.event_map:
        out.extend(event_rules(source, target))
    out.extend(ANCHOR_RULES)
    return out


def convert_markup(html: str, rules: RuleTable) -> str:
    return apply_rules(html, markup_rules(rules)).strip()
