"""CLI command for converting a snippet collection into a uni-app corpus."""

from __future__ import annotations

from pathlib import Path

import typer

from unigalaxy.cli._config import get_config
from unigalaxy.cli._errors import handle_error
from unigalaxy.conversion import ConversionPass, discover_sources
from unigalaxy.core.errors import RuleLoadError
from unigalaxy.core.rules import RuleTable, read_rule_table
from unigalaxy.core.store import JsonRecordStore


def convert(
    source_dir: Path = typer.Argument(..., help="Snippet root: <Category>/<author>_<slug>.html"),
    output: Path = typer.Option(
        None, "--output", "-o", help="Corpus directory (default: UNIGALAXY_DATA_DIR)"
    ),
    rules: Path = typer.Option(None, "--rules", "-r", help="Rule table (YAML or JSON)"),
    category: list[str] = typer.Option(
        None, "--category", "-c", help="Only convert these categories (repeatable)"
    ),
) -> None:
    """Convert raw HTML/CSS snippets into uni-app component records.

    Malformed snippets are reported and skipped; the rest of the batch is
    still written. Re-converting into an existing corpus merges into its
    index: components from other categories or snippets that failed this
    run stay indexed, and each component keeps its original creation time.
    """
    if not source_dir.is_dir():
        handle_error(f"Source directory not found: {source_dir}")

    table = RuleTable.default()
    if rules is not None:
        try:
            table = read_rule_table(rules)
        except RuleLoadError as e:
            handle_error(str(e))

    store = JsonRecordStore(output or Path(get_config().data_dir))
    sources = discover_sources(source_dir, category or None)
    if not sources:
        typer.echo(f"No snippets found under {source_dir}.")
        return

    previous = store.get if store.index_path.is_file() else None
    report = ConversionPass(table, previous=previous).run(sources)
    if report.records:
        store.write_report(report)

    typer.echo(f"Converted {len(report.records)} of {len(sources)} snippets into {store.root}")
    for name, count in sorted(report.summary.category_counts().items()):
        typer.echo(f"  {name:<20} {count:>6}")
    typer.echo(f"Authors: {len(report.summary.authors)}  Tags: {len(report.summary.tags)}")
    if report.records:
        typer.echo(f"Corpus now holds {len(store.index())} components")

    if report.errors:
        typer.echo(f"\n{len(report.errors)} snippet(s) failed:", err=True)
        for err in report.errors:
            typer.echo(f"  {err.identity}: {err.reason} ({err.path})", err=True)
        if not report.records:
            raise typer.Exit(1)
