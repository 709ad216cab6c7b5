"""CLI commands for inspecting a converted corpus."""

from __future__ import annotations

import json
from pathlib import Path

import typer
import yaml

from unigalaxy.cli._errors import get_store, handle_error, require_corpus
from unigalaxy.core.errors import ComponentNotFoundError, RuleLoadError
from unigalaxy.core.rules import RuleTable, read_rule_table
from unigalaxy.query import ListRequest, QueryEngine
from unigalaxy.query.projections import ComponentDetail

app = typer.Typer(help="Inspect a converted corpus (stats, components, rules).")

DataDirOption = typer.Option(
    None, "--data-dir", "-d", help="Corpus directory (default: UNIGALAXY_DATA_DIR)"
)


@app.command()
@require_corpus
def stats(data_dir: Path = DataDirOption) -> None:
    """Show corpus statistics."""
    s = QueryEngine(get_store()).list_components(ListRequest(limit=0)).statistics

    typer.echo(f"Components: {s['total_components']}")
    typer.echo(f"Categories: {len(s['categories'])}")
    typer.echo(f"Authors:    {len(s['authors'])}")
    typer.echo(f"Tags:       {len(s['tags'])}")

    typer.echo("\nComplexity:")
    for level, count in s["complexity_distribution"].items():
        typer.echo(f"  {level:<10} {count:>6}")

    typer.echo("\nPlatform support:")
    for platform, count in s["platform_support"].items():
        typer.echo(f"  {platform:<12} {count:>6}")

    perf = s["performance_metrics"]
    typer.echo(
        f"\nBundle size: avg {perf['avg_bundle_size']}  "
        f"min {perf['min_bundle_size']}  max {perf['max_bundle_size']}"
    )


@app.command("list")
@require_corpus
def list_components(
    data_dir: Path = DataDirOption,
    category: str = typer.Option(None, "--category", "-c", help="Filter by category"),
    author: str = typer.Option(None, "--author", "-a", help="Filter by author"),
    sort_by: str = typer.Option("name", "--sort", "-s", help="Sort field"),
    desc: bool = typer.Option(False, "--desc", help="Descending order"),
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum rows"),
) -> None:
    """List components, one per line."""
    engine = QueryEngine(get_store())
    result = engine.list_components(
        ListRequest(
            category=category,
            author=author,
            sort_by=sort_by,
            sort_order="desc" if desc else "asc",
            include_stats=False,
            limit=limit,
        )
    )
    if not result.records:
        typer.echo("No components found.")
        return

    typer.echo(f"{'Id':<40} {'Category':<14} {'Complexity':<10}")
    typer.echo("-" * 66)
    for r in result.records:
        typer.echo(f"{r.id:<40} {r.category:<14} {r.complexity or '-':<10}")
    if result.total > len(result.records):
        typer.echo(f"... {result.total - len(result.records)} more")


@app.command()
@require_corpus
def show(
    component_id: str = typer.Argument(..., help="Component id"),
    data_dir: Path = DataDirOption,
    code: bool = typer.Option(False, "--code", help="Include original and converted code"),
    fmt: str = typer.Option("yaml", "--format", "-f", help="Output format: yaml or json"),
) -> None:
    """Show one component record."""
    try:
        record = QueryEngine(get_store()).get_record(component_id)
    except ComponentNotFoundError as e:
        handle_error(str(e))
        return

    data = ComponentDetail.from_record(record, preview="", include_code=code).to_dict()
    data.pop("preview_url")
    if fmt == "json":
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    elif fmt == "yaml":
        typer.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip())
    else:
        handle_error(f"Unknown format: {fmt}")


@app.command()
def rules(
    path: Path = typer.Option(None, "--rules", "-r", help="Rule table to validate (default: built-in)"),
) -> None:
    """Print the effective rule table as YAML."""
    if path is None:
        table = RuleTable.default()
    else:
        try:
            table = read_rule_table(path)
        except RuleLoadError as e:
            handle_error(str(e))
            return
    typer.echo(yaml.safe_dump(table.to_dict(), sort_keys=False, allow_unicode=True).rstrip())
