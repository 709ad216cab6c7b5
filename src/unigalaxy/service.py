"""Service facade: the six operations exposed to MCP clients and the CLI.

Every operation returns a plain dict. A missing component id becomes
``{"error": "Component <id> not found"}``; nothing raises for bad input.
Batch operations skip unreadable records instead of failing the batch.
"""

from __future__ import annotations

from collections.abc import Sequence

from unigalaxy import codegen
from unigalaxy.core.errors import ComponentNotFoundError
from unigalaxy.core.models import DEFAULT_TARGET_PLATFORMS, ComponentRecord, PlatformCompatibility
from unigalaxy.core.rules import RuleTable
from unigalaxy.core.store import RecordStore
from unigalaxy.observability.logging import get_logger
from unigalaxy.query.engine import (
    DEFAULT_LIST_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    ListRequest,
    QueryEngine,
    SearchRequest,
)
from unigalaxy.query.projections import ComponentDetail, ComponentSummary, preview_url

logger = get_logger(__name__)

DEFAULT_PREVIEW_BASE_URL = "https://uiverse.io/preview"

# Platforms covered by the integration guide in get_details
DETAIL_GUIDE_PLATFORMS: tuple[str, ...] = ("H5", "MP-WEIXIN", "APP-PLUS")

ISSUE_PENALTY = 20


def compatibility_confidence(compat: PlatformCompatibility) -> int:
    """100 minus 20 per issue, floored at 0; unsupported platforms score 0."""
    if not compat.supported:
        return 0
    return max(0, 100 - ISSUE_PENALTY * len(compat.issues))


def _not_found(e: ComponentNotFoundError) -> dict:
    logger.info("component.not_found", component_id=e.component_id, reason=e.reason)
    return {"error": str(e)}


class ComponentService:
    """Compose the query engine and code generators into response dicts.

    Args:
        store: Corpus to read.
        rules: Rule table loaded at startup, reported by status().
        rules_source: Where the rule table came from (a path or "default").
        preview_base_url: Prefix for preview links.
        search_limit: Default page size for search.
        list_limit: Default page size for list.
    """

    def __init__(
        self,
        store: RecordStore,
        rules: RuleTable | None = None,
        rules_source: str = "default",
        preview_base_url: str = DEFAULT_PREVIEW_BASE_URL,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        list_limit: int = DEFAULT_LIST_LIMIT,
    ) -> None:
        self.store = store
        self.rules = rules or RuleTable.default()
        self.rules_source = rules_source
        self.engine = QueryEngine(store)
        self.preview_base_url = preview_base_url
        self.search_limit = search_limit
        self.list_limit = list_limit

    def _preview(self, component_id: str) -> str:
        return preview_url(self.preview_base_url, component_id)

    def status(self) -> dict:
        """Corpus size and the rule table this process loaded."""
        return {
            "status": "ok",
            "store": type(self.store).__name__,
            "components": len(self.store.index()),
            "rules_source": self.rules_source,
            "rules": self.rules.summary(),
        }

    # -------------------------------------------------------------------------
    # search / list / details
    # -------------------------------------------------------------------------

    def search(
        self,
        query: str = "",
        category: str | None = None,
        author: str | None = None,
        tags: Sequence[str] | None = None,
        platforms: Sequence[str] | None = None,
        complexity: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict:
        result = self.engine.search(
            SearchRequest(
                query=query or "",
                category=category,
                author=author,
                tags=list(tags or []),
                platforms=list(platforms or []),
                complexity=complexity,
                limit=self.search_limit if limit is None else limit,
                offset=offset,
            )
        )
        return {
            "total": result.total,
            "limit": result.limit,
            "offset": result.offset,
            "components": [
                ComponentSummary.from_record(r, self._preview(r.id)).to_dict() for r in result.records
            ],
        }

    def list_components(
        self,
        category: str | None = None,
        author: str | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
        include_stats: bool = True,
        include_preview: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict:
        result = self.engine.list_components(
            ListRequest(
                category=category,
                author=author,
                sort_by=sort_by,
                sort_order=sort_order,
                include_stats=include_stats,
                include_preview=include_preview,
                limit=self.list_limit if limit is None else limit,
                offset=offset,
            )
        )
        response: dict = {
            "total": result.total,
            "limit": result.limit,
            "offset": result.offset,
            "components": [
                ComponentSummary.from_record(
                    r, self._preview(r.id) if include_preview else None
                ).to_dict()
                for r in result.records
            ],
        }
        if result.statistics is not None:
            response["statistics"] = result.statistics
        return response

    def get_details(
        self,
        component_id: str,
        include_code: bool = False,
        include_usage: bool = True,
    ) -> dict:
        try:
            record = self.engine.get_record(component_id)
        except ComponentNotFoundError as e:
            return _not_found(e)

        detail = ComponentDetail.from_record(record, self._preview(record.id), include_code=include_code)
        if include_usage:
            detail.extras["usage_example"] = codegen.usage_example(record)
            detail.extras["integration_guide"] = codegen.integration_guide(
                record, DETAIL_GUIDE_PLATFORMS
            )
        return detail.to_dict()

    # -------------------------------------------------------------------------
    # convert / analyze
    # -------------------------------------------------------------------------

    def convert(
        self,
        component_id: str,
        target_platforms: Sequence[str] | None = None,
        enable_conditions: bool = True,
        optimize_for_target: bool = True,
        component_name: str | None = None,
    ) -> dict:
        try:
            record = self.engine.get_record(component_id)
        except ComponentNotFoundError as e:
            return _not_found(e)

        platforms = list(target_platforms or DEFAULT_TARGET_PLATFORMS)
        converted_name = component_name or record.uniapp.component_name
        return {
            "component_id": component_id,
            "original_name": record.name,
            "converted_name": converted_name,
            "target_platforms": platforms,
            "converted_component": {
                "template": record.uniapp.template,
                "script": codegen.enhance_vue_script(record),
                "style": codegen.optimize_style_for_platforms(
                    record.uniapp.style, platforms, enable_conditions
                ),
                "component_name": converted_name,
            },
            "usage_example": codegen.usage_example(record, component_name),
            "integration_guide": codegen.integration_guide(record, platforms),
            "performance_tips": codegen.performance_tips(record) if optimize_for_target else [],
        }

    def analyze_compatibility(
        self,
        component_id: str,
        target_platforms: Sequence[str] | None = None,
        check_performance: bool = True,
    ) -> dict:
        try:
            record = self.engine.get_record(component_id)
        except ComponentNotFoundError as e:
            return _not_found(e)

        platforms = list(target_platforms or DEFAULT_TARGET_PLATFORMS)
        compatibility = {}
        for platform in platforms:
            compat = codegen.component_compatibility(record, platform) or PlatformCompatibility()
            compatibility[platform] = {
                **compat.to_dict(),
                "confidence": compatibility_confidence(compat),
            }

        performance_analysis = None
        if check_performance and record.performance:
            performance_analysis = {
                **record.performance.to_dict(),
                "optimization_suggestions": codegen.optimization_suggestions(record),
            }

        return {
            "component_id": component_id,
            "component_name": record.name,
            "target_platforms": platforms,
            "compatibility": compatibility,
            "performance_analysis": performance_analysis,
            "recommendations": codegen.compatibility_recommendations(record, platforms),
        }

    # -------------------------------------------------------------------------
    # integration
    # -------------------------------------------------------------------------

    def generate_integration(
        self,
        component_ids: Sequence[str],
        auto_import: bool = True,
        global_styles: bool = False,
    ) -> dict:
        records: list[ComponentRecord] = []
        missing: list[str] = []
        for component_id in component_ids:
            try:
                records.append(self.engine.get_record(component_id))
            except ComponentNotFoundError as e:
                logger.warning("integration.component.skipped", component_id=component_id, error=str(e))
                missing.append(component_id)

        configuration: dict = {}
        if auto_import:
            configuration["pages.json"] = codegen.pages_json_config(records)
        configuration["main.js"] = codegen.main_js_config(records, auto_import)
        if global_styles:
            configuration["App.vue"] = codegen.GLOBAL_STYLES

        return {
            "components_count": len(component_ids),
            "integration_files": {
                f"{r.uniapp.component_name}.vue": codegen.complete_vue_component(r) for r in records
            },
            "configuration": configuration,
            "usage_examples": {r.id: codegen.usage_example(r) for r in records},
            "installation_guide": codegen.installation_guide(len(component_ids)),
            "missing": missing,
        }
