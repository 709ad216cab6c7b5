"""Tests for the service facade and the code generators behind it."""

from __future__ import annotations

import pytest

from unigalaxy import codegen
from unigalaxy.core.memory import InMemoryRecordStore
from unigalaxy.core.models import PlatformCompatibility
from unigalaxy.core.rules import RuleTable
from unigalaxy.service import ComponentService, compatibility_confidence

SHADOW_STYLE = ".card { box-shadow: 0 0 8rpx #000; }"


@pytest.fixture
def service(memory_store) -> ComponentService:
    return ComponentService(memory_store)


# =============================================================================
# Confidence
# =============================================================================


class TestConfidence:
    def test_no_issues(self):
        assert compatibility_confidence(PlatformCompatibility()) == 100

    def test_twenty_per_issue(self):
        assert compatibility_confidence(PlatformCompatibility(issues=["a", "b"])) == 60

    def test_floor_at_zero(self):
        assert compatibility_confidence(PlatformCompatibility(issues=["x"] * 7)) == 0

    def test_unsupported_is_zero(self):
        assert compatibility_confidence(PlatformCompatibility(supported=False)) == 0


# =============================================================================
# search / list / details
# =============================================================================


class TestSearch:
    def test_items_carry_preview(self, service):
        result = service.search(query="spinner")
        assert result["total"] == 1
        item = result["components"][0]
        assert item["id"] == "carol_spinner"
        assert item["preview_url"] == "https://uiverse.io/preview/carol_spinner"
        assert item["performance"]["complexity"] == "high"

    def test_default_limit(self, memory_store):
        svc = ComponentService(memory_store, search_limit=2)
        result = svc.search()
        assert result["limit"] == 2
        assert len(result["components"]) == 2
        assert result["total"] == 6

    def test_custom_preview_base(self, memory_store):
        svc = ComponentService(memory_store, preview_base_url="https://example.test/p/")
        item = svc.search(query="dots")["components"][0]
        assert item["preview_url"] == "https://example.test/p/alice_dots"


class TestList:
    def test_statistics_attached(self, service):
        result = service.list_components()
        assert result["statistics"]["total_components"] == 6
        assert "preview_url" not in result["components"][0]

    def test_without_stats_with_preview(self, service):
        result = service.list_components(include_stats=False, include_preview=True)
        assert "statistics" not in result
        assert result["components"][0]["preview_url"].endswith(result["components"][0]["id"])

    def test_limit_zero_overview(self, service):
        result = service.list_components(limit=0)
        assert result["components"] == []
        assert result["total"] == 6
        assert result["statistics"]["complexity_distribution"]["low"] == 3


class TestDetails:
    def test_not_found(self, service):
        assert service.get_details("nobody_nothing") == {"error": "Component nobody_nothing not found"}

    def test_default_view(self, service):
        detail = service.get_details("alice_glow-button")
        assert detail["id"] == "alice_glow-button"
        assert "original_code" not in detail
        assert "<galaxy-glow-button" in detail["usage_example"]
        assert [p["name"] for p in detail["integration_guide"]["platforms"]] == [
            "H5",
            "MP-WEIXIN",
            "APP-PLUS",
        ]

    def test_with_code_without_usage(self, service):
        detail = service.get_details("alice_glow-button", include_code=True, include_usage=False)
        assert detail["original_code"]["html"] == '<div class="btn"></div>'
        assert detail["uniapp_code"]["component_name"] == "GalaxyGlowButton"
        assert "usage_example" not in detail


# =============================================================================
# convert / analyze
# =============================================================================


class TestConvert:
    def test_not_found(self, service):
        assert "error" in service.convert("nobody_nothing")

    def test_defaults(self, service):
        result = service.convert("alice_glow-button")
        assert result["original_name"] == "glow-button"
        assert result["converted_name"] == "GalaxyGlowButton"
        assert result["target_platforms"] == ["H5", "MP-WEIXIN", "MP-ALIPAY", "APP-PLUS"]
        script = result["converted_component"]["script"]
        assert "disabled: {" in script
        assert "handleClick(e)" in script
        assert result["performance_tips"]

    def test_custom_name(self, service):
        result = service.convert("alice_glow-button", component_name="MyButton")
        assert result["converted_name"] == "MyButton"
        assert result["converted_component"]["component_name"] == "MyButton"
        assert "<my-button" in result["usage_example"]

    def test_no_tips_without_optimize(self, service):
        assert service.convert("alice_glow-button", optimize_for_target=False)["performance_tips"] == []

    def test_shadow_split_for_mini_programs(self, make_record):
        svc = ComponentService(InMemoryRecordStore([make_record("a_card", style=SHADOW_STYLE)]))
        style = svc.convert("a_card", target_platforms=["MP-WEIXIN"])["converted_component"]["style"]
        assert "/* #ifdef MP */" in style
        assert codegen.split_shadows(style) == style

    def test_shadow_kept_for_web_only(self, make_record):
        svc = ComponentService(InMemoryRecordStore([make_record("a_card", style=SHADOW_STYLE)]))
        assert svc.convert("a_card", target_platforms=["H5"])["converted_component"]["style"] == SHADOW_STYLE
        no_cond = svc.convert("a_card", target_platforms=["MP-WEIXIN"], enable_conditions=False)
        assert no_cond["converted_component"]["style"] == SHADOW_STYLE


class TestAnalyze:
    def test_not_found(self, service):
        assert service.analyze_compatibility("nobody_nothing") == {
            "error": "Component nobody_nothing not found"
        }

    def test_two_issues_on_weixin(self, service):
        result = service.analyze_compatibility("bob_frost-button", target_platforms=["MP-WEIXIN", "H5"])
        weixin = result["compatibility"]["MP-WEIXIN"]
        assert weixin["confidence"] == 60
        assert len(weixin["issues"]) == 2
        assert weixin["alternatives"] == ["overflow: hidden;"]
        assert result["compatibility"]["H5"]["confidence"] == 100

    def test_recommendations_per_platform_with_issues(self, service):
        result = service.analyze_compatibility("bob_frost-button")
        assert [r["platform"] for r in result["recommendations"]] == ["MP-WEIXIN", "MP-ALIPAY"]
        assert result["recommendations"][0]["solutions"] == ["overflow: hidden;"]

    def test_platform_without_entry(self, service):
        result = service.analyze_compatibility("alice_dots", target_platforms=["MP-BAIDU"])
        assert result["compatibility"]["MP-BAIDU"]["confidence"] == 100

    def test_performance_analysis(self, service):
        perf = service.analyze_compatibility("carol_spinner")["performance_analysis"]
        assert perf["complexity"] == "high"
        assert len(perf["optimization_suggestions"]) == 4

    def test_performance_skipped(self, service):
        result = service.analyze_compatibility("carol_spinner", check_performance=False)
        assert result["performance_analysis"] is None


# =============================================================================
# Integration
# =============================================================================


class TestIntegration:
    def test_files_and_missing(self, service):
        result = service.generate_integration(["alice_glow-button", "nobody_nothing"])
        assert result["components_count"] == 2
        assert list(result["integration_files"]) == ["GalaxyGlowButton.vue"]
        assert result["missing"] == ["nobody_nothing"]
        vue = result["integration_files"]["GalaxyGlowButton.vue"]
        assert vue.startswith("<template>")
        assert "<style scoped>" in vue

    def test_easycom_config(self, service):
        config = service.generate_integration(["alice_dots"])["configuration"]
        assert config["pages.json"]["easycom"]["custom"] == {
            "^galaxy-dots$": "@/components/galaxy-dots/galaxy-dots.vue"
        }
        assert "easycom" in config["main.js"]
        assert "App.vue" not in config

    def test_manual_registration(self, service):
        config = service.generate_integration(
            ["alice_dots"], auto_import=False, global_styles=True
        )["configuration"]
        assert "pages.json" not in config
        assert "import GalaxyDots from '@/components/galaxy-dots/galaxy-dots.vue'" in config["main.js"]
        assert "Vue.component('galaxy-dots', GalaxyDots)" in config["main.js"]
        assert config["App.vue"] == codegen.GLOBAL_STYLES

    def test_usage_examples_by_id(self, service):
        result = service.generate_integration(["alice_dots", "carol_spinner"])
        assert set(result["usage_examples"]) == {"alice_dots", "carol_spinner"}
        assert result["installation_guide"][-1] == "6. 2 component(s) integrated in total"


# =============================================================================
# status
# =============================================================================


class TestStatus:
    def test_reports_corpus_and_rules(self, service):
        result = service.status()
        assert result["status"] == "ok"
        assert result["components"] == 6
        assert result["rules_source"] == "default"
        assert result["rules"]["px_to_rpx_ratio"] == 2.0

    def test_empty_rule_table_reported(self, memory_store):
        svc = ComponentService(memory_store, rules=RuleTable.empty(), rules_source="rules.yaml")
        result = svc.status()
        assert result["rules_source"] == "rules.yaml"
        assert result["rules"]["tags"] == 0
