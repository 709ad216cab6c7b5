"""MCP server implementation for unigalaxy.

Tools exposed:
- search_uniapp_components: Filter the corpus by text, category, tags, platforms
- convert_to_uniapp_component: Platform-tuned Vue code for one component
- analyze_uniapp_compatibility: Per-platform issues, confidence, advice
- list_available_components: Sorted, paged listing with corpus statistics
- get_component_details: Full record view with usage snippet
- generate_uniapp_project_integration: .vue files and easycom config for a set of ids
- uniapp_status: Corpus size and loaded rule table

Architecture:
    Each tool has a plain `_<name>_impl()` function with the core logic,
    plus an `@mcp.tool`-decorated wrapper that delegates to it.
    Tests call the `_impl` functions directly; MCP clients hit the wrappers.

    The corpus is read from UNIGALAXY_DATA_DIR (a converted corpus written by
    `unigalaxy convert`). The server never writes to it.
"""

from __future__ import annotations

from pathlib import Path

from fastmcp import FastMCP

from unigalaxy.core.rules import RuleTable, load_rule_table
from unigalaxy.core.store import JsonRecordStore, RecordStore
from unigalaxy.observability.logging import get_logger
from unigalaxy.service import DEFAULT_PREVIEW_BASE_URL, ComponentService

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Server-level state: initialized once via create_server() or serve()
# ---------------------------------------------------------------------------

_service: ComponentService | None = None

mcp = FastMCP("unigalaxy")


def _ensure_initialized() -> None:
    """Lazy initialization: open the corpus and rule table from env config."""
    global _service

    if _service is not None:
        return

    # Initialize observability (env-var driven, zero-config by default)
    from unigalaxy.cli._config import get_config
    from unigalaxy.observability import configure

    configure()
    config = get_config()

    rules_path = Path(config.rules_path) if config.rules_path else None
    store = JsonRecordStore(Path(config.data_dir))
    _service = ComponentService(
        store,
        rules=load_rule_table(rules_path),
        rules_source=str(rules_path) if rules_path else "default",
        preview_base_url=config.preview_base_url,
        search_limit=config.search_limit,
        list_limit=config.list_limit,
    )
    logger.info("server.initialized", data_dir=str(config.data_dir), **_service.status())


def create_server(
    store: RecordStore,
    rules: RuleTable | None = None,
    preview_base_url: str = DEFAULT_PREVIEW_BASE_URL,
) -> FastMCP:
    """Create and configure the MCP server over an explicit store.

    Args:
        store: Corpus the tools read from.
        rules: Rule table. None = built-in defaults.
        preview_base_url: Prefix for preview links.

    Used by tests and advanced configurations. For normal usage, call serve().
    """
    global _service

    _service = ComponentService(
        store,
        rules=rules,
        rules_source="default" if rules is None else "custom",
        preview_base_url=preview_base_url,
    )
    return mcp


def _get_service() -> ComponentService:
    _ensure_initialized()
    if _service is None:
        raise RuntimeError("unigalaxy MCP server is not initialized")
    return _service


# ---------------------------------------------------------------------------
# Tool implementations (plain functions, testable, no decorator wrapping)
# ---------------------------------------------------------------------------


def _search_impl(
    query: str = "",
    category: str | None = None,
    author: str | None = None,
    tags: list[str] | None = None,
    platforms: list[str] | None = None,
    complexity: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> dict:
    return _get_service().search(
        query=query,
        category=category,
        author=author,
        tags=tags,
        platforms=platforms,
        complexity=complexity,
        limit=limit,
        offset=offset,
    )


def _convert_impl(
    component_id: str,
    target_platforms: list[str] | None = None,
    enable_conditions: bool = True,
    optimize_for_target: bool = True,
    component_name: str | None = None,
) -> dict:
    return _get_service().convert(
        component_id,
        target_platforms=target_platforms,
        enable_conditions=enable_conditions,
        optimize_for_target=optimize_for_target,
        component_name=component_name,
    )


def _analyze_impl(
    component_id: str,
    target_platforms: list[str] | None = None,
    check_performance: bool = True,
) -> dict:
    return _get_service().analyze_compatibility(
        component_id,
        target_platforms=target_platforms,
        check_performance=check_performance,
    )


def _list_impl(
    category: str | None = None,
    author: str | None = None,
    sort_by: str = "name",
    sort_order: str = "asc",
    include_stats: bool = True,
    include_preview: bool = False,
    limit: int | None = None,
    offset: int = 0,
) -> dict:
    return _get_service().list_components(
        category=category,
        author=author,
        sort_by=sort_by,
        sort_order=sort_order,
        include_stats=include_stats,
        include_preview=include_preview,
        limit=limit,
        offset=offset,
    )


def _details_impl(
    component_id: str,
    include_code: bool = False,
    include_usage: bool = True,
) -> dict:
    return _get_service().get_details(
        component_id, include_code=include_code, include_usage=include_usage
    )


def _integration_impl(
    component_ids: list[str],
    auto_import: bool = True,
    global_styles: bool = False,
) -> dict:
    return _get_service().generate_integration(
        component_ids, auto_import=auto_import, global_styles=global_styles
    )


def _status_impl() -> dict:
    return _get_service().status()


# ---------------------------------------------------------------------------
# MCP tool wrappers (thin delegates to _impl functions)
# ---------------------------------------------------------------------------


@mcp.tool
def search_uniapp_components(
    query: str = "",
    category: str | None = None,
    author: str | None = None,
    tags: list[str] | None = None,
    platforms: list[str] | None = None,
    complexity: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> dict:
    """Search converted uni-app components.

    Args:
        query: Case-insensitive substring matched against name, id and author.
        category: Exact category, e.g. "buttons", "loaders".
        author: Exact author handle.
        tags: Match components carrying ANY of these tags.
        platforms: Match components supported on ALL of these platforms
            ("H5", "MP-WEIXIN", "MP-ALIPAY", "APP-PLUS", ...).
        complexity: "low", "medium" or "high".
        limit: Page size (default 10).
        offset: Items to skip.
    """
    return _search_impl(query, category, author, tags, platforms, complexity, limit, offset)


@mcp.tool
def convert_to_uniapp_component(
    component_id: str,
    target_platforms: list[str] | None = None,
    enable_conditions: bool = True,
    optimize_for_target: bool = True,
    component_name: str | None = None,
) -> dict:
    """Return ready-to-use uni-app Vue code for one component.

    Args:
        component_id: Id from search or list results.
        target_platforms: Platforms to tune for. None = H5, MP-WEIXIN, MP-ALIPAY, APP-PLUS.
        enable_conditions: Split styles with conditional compilation blocks.
        optimize_for_target: Include performance tips.
        component_name: Override the generated PascalCase component name.
    """
    return _convert_impl(
        component_id, target_platforms, enable_conditions, optimize_for_target, component_name
    )


@mcp.tool
def analyze_uniapp_compatibility(
    component_id: str,
    target_platforms: list[str] | None = None,
    check_performance: bool = True,
) -> dict:
    """Report per-platform support, issues, alternatives and a 0-100 confidence.

    Args:
        component_id: Id from search or list results.
        target_platforms: Platforms to analyze. None = the four default targets.
        check_performance: Include complexity and bundle-size analysis.
    """
    return _analyze_impl(component_id, target_platforms, check_performance)


@mcp.tool
def list_available_components(
    category: str | None = None,
    author: str | None = None,
    sort_by: str = "name",
    sort_order: str = "asc",
    include_stats: bool = True,
    include_preview: bool = False,
    limit: int | None = None,
    offset: int = 0,
) -> dict:
    """List components sorted by a field, with statistics over the filtered set.

    Args:
        category: Exact category filter.
        author: Exact author filter.
        sort_by: "name", "author", "category", "created_at" or "complexity".
        sort_order: "asc" or "desc".
        include_stats: Attach corpus statistics for the filtered set.
        include_preview: Attach preview URLs.
        limit: Page size (default 50).
        offset: Items to skip.
    """
    return _list_impl(
        category, author, sort_by, sort_order, include_stats, include_preview, limit, offset
    )


@mcp.tool
def get_component_details(
    component_id: str,
    include_code: bool = False,
    include_usage: bool = True,
) -> dict:
    """Full details for one component.

    Args:
        component_id: Id from search or list results.
        include_code: Attach original HTML/CSS and converted uni-app code.
        include_usage: Attach a usage example and integration guide.
    """
    return _details_impl(component_id, include_code, include_usage)


@mcp.tool
def generate_uniapp_project_integration(
    component_ids: list[str],
    auto_import: bool = True,
    global_styles: bool = False,
) -> dict:
    """Generate .vue files and project configuration for several components.

    Unknown ids are skipped and listed under "missing".

    Args:
        component_ids: Components to integrate.
        auto_import: Emit easycom rules for pages.json instead of manual registration.
        global_styles: Emit shared App.vue styles.
    """
    return _integration_impl(component_ids, auto_import, global_styles)


@mcp.tool
def uniapp_status() -> dict:
    """Report corpus size and the conversion rule table the server loaded.

    Call this if searches come back empty or results look stale.
    """
    return _status_impl()


def serve(transport: str = "stdio") -> None:
    """Start the unigalaxy MCP server.

    Args:
        transport: "stdio" (default) or "sse".
    """
    _ensure_initialized()
    mcp.run(transport=transport)
