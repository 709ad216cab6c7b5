"""Conversion engine: raw snippet → ComponentRecord, and the offline conversion pass.

``convert`` is a pure function of its inputs (timestamps come from ``now``).
``ConversionPass`` walks a directory of snippets and threads an explicit
CorpusSummary accumulator through the run instead of keeping module-level
author/tag sets. A malformed snippet is reported against its identity and
the pass moves on.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from unigalaxy.conversion.analysis import (
    analyze_compatibility,
    analyze_performance,
    describe,
    extract_tags,
    generate_events,
    generate_props,
    platform_support,
)
from unigalaxy.conversion.markup import convert_markup
from unigalaxy.conversion.naming import kebab_name, pascal_name
from unigalaxy.conversion.snippet import read_snippet
from unigalaxy.conversion.style import convert_style
from unigalaxy.core.errors import MalformedSourceError
from unigalaxy.core.models import (
    ComponentRecord,
    ConvertedPayload,
    CorpusIndexEntry,
    SnippetIdentity,
    SourcePayload,
)
from unigalaxy.core.rules import RuleTable
from unigalaxy.observability.logging import get_logger

logger = get_logger(__name__)

SNIPPET_SUFFIX = ".html"


def generate_script(component_name: str) -> str:
    """Vue options-object stub for a converted component."""
    return (
        "export default {\n"
        f"  name: '{component_name}',\n"
        "  props: {\n"
        "    // generated per component category\n"
        "  },\n"
        "  data() {\n"
        "    return {};\n"
        "  },\n"
        "  methods: {}\n"
        "}"
    )


def convert(
    html: str,
    css: str,
    identity: SnippetIdentity,
    rules: RuleTable,
    *,
    file_path: str = "",
    previous: ComponentRecord | None = None,
    now: datetime | None = None,
) -> ComponentRecord:
    """Convert one snippet.

    ``previous`` is the record this conversion replaces; its ``created_at``
    is kept and ``updated_at`` is refreshed.
    """
    base_name = identity.slug or identity.author
    name = kebab_name(base_name)
    component_name = pascal_name(base_name)
    tags = extract_tags(css)
    compatibility = analyze_compatibility(css, rules)

    timestamp = (now or datetime.now(UTC)).isoformat()
    created_at = previous.created_at if previous and previous.created_at else timestamp

    return ComponentRecord(
        id=identity.id,
        name=name,
        category=identity.category,
        author=identity.author,
        description=describe(name, tags),
        tags=tags,
        original=SourcePayload(html=html.strip(), css=css.strip(), file_path=file_path),
        uniapp=ConvertedPayload(
            template=convert_markup(html, rules),
            script=generate_script(component_name),
            style=convert_style(css, rules),
            component_name=component_name,
        ),
        platforms=platform_support(compatibility),
        compatibility=compatibility,
        performance=analyze_performance(html, css),
        props=generate_props(identity.category),
        events=generate_events(identity.category),
        created_at=created_at,
        updated_at=timestamp,
    )


# ---------------------------------------------------------------------------
# Conversion pass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CorpusSummary:
    """Accumulated corpus metadata. ``add`` returns a new summary."""

    entries: tuple[CorpusIndexEntry, ...] = ()
    authors: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    def add(self, record: ComponentRecord) -> CorpusSummary:
        return dataclasses.replace(
            self,
            entries=(*self.entries, record.index_entry()),
            authors=self.authors if record.author in self.authors else (*self.authors, record.author),
            tags=(*self.tags, *(t for t in record.tags if t not in self.tags)),
        )

    @property
    def total(self) -> int:
        return len(self.entries)

    def has(self, component_id: str) -> bool:
        return any(e.id == component_id for e in self.entries)

    def category_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for entry in self.entries:
            counts[entry.category] = counts.get(entry.category, 0) + 1
        return counts


@dataclass
class ConversionError:
    identity: str
    path: str
    reason: str

    def to_dict(self) -> dict:
        return {"identity": self.identity, "path": self.path, "reason": self.reason}


@dataclass
class ConversionReport:
    records: list[ComponentRecord] = field(default_factory=list)
    summary: CorpusSummary = field(default_factory=CorpusSummary)
    errors: list[ConversionError] = field(default_factory=list)


def discover_sources(root: Path, categories: Iterable[str] | None = None) -> list[tuple[Path, str]]:
    """Find ``root/<Category>/*.html`` snippets, sorted for a stable pass order.

    ``categories`` matches directory names case-insensitively; missing
    directories are logged and skipped.
    """
    if categories is None:
        dirs = sorted(p for p in root.iterdir() if p.is_dir()) if root.is_dir() else []
    else:
        existing = {p.name.lower(): p for p in root.iterdir() if p.is_dir()} if root.is_dir() else {}
        dirs = []
        for name in categories:
            match = existing.get(name.lower())
            if match is None:
                logger.warning("category.missing", category=name, root=str(root))
                continue
            dirs.append(match)

    sources: list[tuple[Path, str]] = []
    for directory in dirs:
        for path in sorted(directory.glob(f"*{SNIPPET_SUFFIX}")):
            sources.append((path, directory.name.lower()))
    return sources


class ConversionPass:
    """Convert a batch of snippet files into records plus a corpus summary.

    Args:
        rules: Rule table applied to every snippet.
        previous: Lookup for an existing record by id, so re-conversion
            keeps ``created_at``. None = every record is new.
        now: Fixed conversion time (tests). None = current UTC per run.
    """

    def __init__(
        self,
        rules: RuleTable,
        previous: Callable[[str], ComponentRecord | None] | None = None,
        now: datetime | None = None,
    ) -> None:
        self._rules = rules
        self._previous = previous
        self._now = now

    def convert_file(self, path: Path, category: str, now: datetime | None = None) -> ComponentRecord:
        identity = SnippetIdentity.from_stem(path.stem, category)
        html, css = read_snippet(path, identity.id)
        previous = self._previous(identity.id) if self._previous else None
        return convert(
            html,
            css,
            identity,
            self._rules,
            file_path=str(path),
            previous=previous,
            now=now or self._now,
        )

    def run(self, sources: Iterable[tuple[Path, str]]) -> ConversionReport:
        # One timestamp for the whole pass
        now = self._now or datetime.now(UTC)
        records: list[ComponentRecord] = []
        summary = CorpusSummary()
        errors: list[ConversionError] = []

        for path, category in sources:
            try:
                record = self.convert_file(path, category, now=now)
            except MalformedSourceError as e:
                logger.warning("snippet.malformed", identity=e.identity, path=str(path), error=e.reason)
                errors.append(ConversionError(identity=e.identity, path=str(path), reason=e.reason))
                continue
            if summary.has(record.id):
                logger.warning("snippet.duplicate", identity=record.id, path=str(path))
                errors.append(
                    ConversionError(identity=record.id, path=str(path), reason="duplicate component id")
                )
                continue
            records.append(record)
            summary = summary.add(record)

        logger.info("conversion.completed", converted=len(records), failed=len(errors))
        return ConversionReport(records=records, summary=summary, errors=errors)
