"""uni-app project artifacts generated from converted records.

Vue single-file components, usage snippets, easycom configuration, and
the human-readable guides returned alongside conversion results.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from unigalaxy.conversion.naming import pascal_to_kebab
from unigalaxy.conversion.style import split_shadows
from unigalaxy.core.models import ComponentRecord, PlatformCompatibility, normalize_platform

# Bundles larger than this get split/trim suggestions
LARGE_BUNDLE_BYTES = 1000

INTEGRATION_STEPS = [
    "1. Copy the component file into the components directory",
    "2. Enable easycom auto-import in pages.json",
    "3. Use the component directly in a page",
    "4. Customize component props as needed",
]

GLOBAL_STYLES = """<style>
/* Galaxy component library global styles */
.galaxy-component {
  box-sizing: border-box;
}

/* Shared transitions */
.galaxy-transition {
  transition: all 0.3s ease;
}

/* Layout helpers */
.galaxy-flex {
  display: flex;
}

.galaxy-center {
  align-items: center;
  justify-content: center;
}
</style>"""


def _js(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _attr(value: Any) -> str:
    """Render a prop default as a template attribute value."""
    if isinstance(value, bool) or value is None:
        return _js(value)
    return str(value)


def component_compatibility(record: ComponentRecord, platform: str) -> PlatformCompatibility | None:
    return record.compatibility.get(normalize_platform(platform))


# ---------------------------------------------------------------------------
# Vue code
# ---------------------------------------------------------------------------


def enhance_vue_script(record: ComponentRecord) -> str:
    """Full Vue options object with props and event handlers from the record."""
    if record.props:
        props_code = ",\n".join(
            f"    {p.name}: {{\n"
            f"      type: {p.type},\n"
            f"      default: {_js(p.default)},\n"
            f"      required: {_js(bool(p.required))}\n"
            f"    }}"
            for p in record.props
        )
    else:
        props_code = "    // no props"

    if record.events:
        methods_code = ",\n".join(
            f"    handle{e.name[:1].upper()}{e.name[1:]}(e) {{\n"
            f"      this.$emit('{e.name}', e);\n"
            f"    }}"
            for e in record.events
        )
    else:
        methods_code = "    // no event handlers"

    return (
        "export default {\n"
        f"  name: '{record.uniapp.component_name}',\n"
        "  props: {\n"
        f"{props_code}\n"
        "  },\n"
        "  data() {\n"
        "    return {\n"
        "      isPressed: false,\n"
        "      isLoading: false\n"
        "    };\n"
        "  },\n"
        "  methods: {\n"
        f"{methods_code}\n"
        "  }\n"
        "}"
    )


def complete_vue_component(record: ComponentRecord) -> str:
    return (
        f"<template>\n{record.uniapp.template}\n</template>\n\n"
        f"<script>\n{enhance_vue_script(record)}\n</script>\n\n"
        f"<style scoped>\n{record.uniapp.style}\n</style>"
    )


def optimize_style_for_platforms(style: str, platforms: Sequence[str], enable_conditions: bool) -> str:
    """Split shadows for mini-program targets. Already-split styles are left alone."""
    if not enable_conditions:
        return style
    keys = {normalize_platform(p) for p in platforms}
    if keys & {"mp_weixin", "mp_alipay"}:
        return split_shadows(style)
    return style


def usage_example(record: ComponentRecord, custom_name: str | None = None) -> str:
    kebab = pascal_to_kebab(custom_name or record.uniapp.component_name)
    props_example = "\n".join(f'  {p.name}="{_attr(p.default)}"' for p in record.props[:3])
    return (
        "<template>\n"
        '  <view class="page">\n'
        f"    <{kebab}\n"
        f"{props_example}\n"
        '      @click="handleClick"\n'
        "    />\n"
        "  </view>\n"
        "</template>\n\n"
        "<script>\n"
        "export default {\n"
        "  methods: {\n"
        "    handleClick(e) {\n"
        "      console.log('component clicked', e);\n"
        "    }\n"
        "  }\n"
        "}\n"
        "</script>"
    )


# ---------------------------------------------------------------------------
# Guides and advice
# ---------------------------------------------------------------------------


def platform_notes(record: ComponentRecord, platform: str) -> list[str]:
    compat = component_compatibility(record, platform)
    return list(compat.issues) if compat else []


def integration_guide(record: ComponentRecord, platforms: Sequence[str]) -> dict:
    return {
        "steps": list(INTEGRATION_STEPS),
        "platforms": [{"name": p, "notes": platform_notes(record, p)} for p in platforms],
        "dependencies": list(record.dependencies),
    }


def performance_tips(record: ComponentRecord) -> list[str]:
    tips = []
    if record.complexity == "high":
        tips.append("Reduce animation complexity on mini-program targets")
        tips.append("Prefer transform over position changes for movement")
    tips.append("Use v-if rather than v-show for conditional rendering")
    tips.append("Avoid complex expressions inside templates")
    return tips


def optimization_suggestions(record: ComponentRecord) -> list[str]:
    suggestions = []
    if record.complexity == "high":
        suggestions.append("Simplify animations to improve rendering performance")
        suggestions.append("Use conditional compilation to ship per-platform implementations")
    if record.performance and record.performance.bundle_size > LARGE_BUNDLE_BYTES:
        suggestions.append("Consider splitting into smaller components")
        suggestions.append("Remove unused CSS rules")
    return suggestions


def compatibility_recommendations(record: ComponentRecord, platforms: Sequence[str]) -> list[dict]:
    recommendations = []
    for platform in platforms:
        compat = component_compatibility(record, platform)
        if compat and compat.issues:
            recommendations.append(
                {
                    "platform": platform,
                    "type": "warning",
                    "message": f"{platform} has compatibility issues",
                    "details": list(compat.issues),
                    "solutions": list(compat.alternatives),
                }
            )
    return recommendations


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


def pages_json_config(records: Sequence[ComponentRecord]) -> dict:
    custom = {}
    for record in records:
        kebab = pascal_to_kebab(record.uniapp.component_name)
        custom[f"^{kebab}$"] = f"@/components/{kebab}/{kebab}.vue"
    return {"easycom": {"autoscan": True, "custom": custom}}


def main_js_config(records: Sequence[ComponentRecord], auto_import: bool) -> str:
    if auto_import:
        return "// Components are auto-imported via easycom; no manual registration needed"
    imports = []
    registrations = []
    for record in records:
        name = record.uniapp.component_name
        kebab = pascal_to_kebab(name)
        imports.append(f"import {name} from '@/components/{kebab}/{kebab}.vue'")
        registrations.append(f"Vue.component('{kebab}', {name})")
    return "\n".join(imports) + "\n\n// Register components globally\n" + "\n".join(registrations)


def installation_guide(component_count: int) -> list[str]:
    return [
        "1. Create a components directory if it does not exist",
        "2. Copy each component file into its own subdirectory",
        "3. Configure easycom rules in pages.json",
        "4. Restart the dev server",
        "5. Use the component tags directly in pages",
        f"6. {component_count} component(s) integrated in total",
    ]
