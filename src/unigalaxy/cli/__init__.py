"""unigalaxy CLI -- typer-based command interface.

Commands:
    unigalaxy convert <source-dir>           Convert snippets into a uni-app corpus
    unigalaxy inspect stats/list/show/rules  Inspect a converted corpus
    unigalaxy mcp-serve                      Start MCP server (stdio or sse)
"""

from __future__ import annotations

import typer

from unigalaxy.cli import convert_cmd, inspect_cmd

app = typer.Typer(
    name="unigalaxy",
    help="Convert UI snippets into uni-app components and query the result.",
    no_args_is_help=True,
)

app.command("convert")(convert_cmd.convert)
app.add_typer(inspect_cmd.app, name="inspect")


@app.callback()
def _setup() -> None:
    """Convert UI snippets into uni-app components and query the result."""
    from unigalaxy.observability import configure

    configure()


@app.command("mcp-serve")
def mcp_serve(
    transport: str = typer.Option("stdio", help="Transport: 'stdio' or 'sse'."),
) -> None:
    """Start the unigalaxy MCP server.

    Exposes the converted corpus as tools any MCP client can use:
    search_uniapp_components, convert_to_uniapp_component,
    analyze_uniapp_compatibility, list_available_components,
    get_component_details, generate_uniapp_project_integration.
    """
    from unigalaxy.mcp.server import serve

    serve(transport=transport)


def main() -> None:
    """Entry point for the unigalaxy CLI."""
    app()
