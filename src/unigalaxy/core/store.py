"""Record stores: where converted components live between conversion and query.

RecordStore is the read contract the query engine depends on:
    index() -> list[CorpusIndexEntry]   cheap summaries, loaded once
    load(id) -> ComponentRecord         full hydration, raises ComponentNotFoundError

JsonRecordStore layout (rooted at the data directory):

    metadata/component-index.json   {total, categories, components: [entry...]}
    metadata/authors.json           {total, authors: [...]}
    metadata/tags.json              {total, tags: [...]}
    components/<category>/<id>.json one ComponentRecord each
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from unigalaxy.core.errors import ComponentNotFoundError
from unigalaxy.core.models import ComponentRecord, CorpusIndexEntry
from unigalaxy.observability.logging import get_logger

if TYPE_CHECKING:
    from unigalaxy.conversion.engine import ConversionReport

logger = get_logger(__name__)


@runtime_checkable
class RecordStore(Protocol):
    """Read-only access to a converted corpus."""

    def index(self) -> list[CorpusIndexEntry]: ...

    def load(self, component_id: str) -> ComponentRecord: ...


class JsonRecordStore:
    """RecordStore backed by the JSON file layout above.

    The index is read once and cached; records are read on every load().
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._index: list[CorpusIndexEntry] | None = None

    @property
    def index_path(self) -> Path:
        return self.root / "metadata" / "component-index.json"

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def index(self) -> list[CorpusIndexEntry]:
        if self._index is None:
            self._index = self._read_index()
        return list(self._index)

    def _read_index(self) -> list[CorpusIndexEntry]:
        try:
            raw = json.loads(self.index_path.read_text(encoding="utf-8"))
            return [CorpusIndexEntry.from_dict(c) for c in raw.get("components", [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("index.load.failed", path=str(self.index_path), error=str(e), fallback="empty")
            return []

    def _entry(self, component_id: str) -> CorpusIndexEntry | None:
        return next((e for e in self.index() if e.id == component_id), None)

    def load(self, component_id: str) -> ComponentRecord:
        entry = self._entry(component_id)
        if entry is None:
            raise ComponentNotFoundError(component_id)
        path = self.root / entry.file_path
        try:
            return ComponentRecord.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise ComponentNotFoundError(component_id, str(e)) from e

    def get(self, component_id: str) -> ComponentRecord | None:
        try:
            return self.load(component_id)
        except ComponentNotFoundError:
            return None

    # -------------------------------------------------------------------------
    # Writes (offline conversion pass only)
    # -------------------------------------------------------------------------

    def record_path(self, record: ComponentRecord) -> Path:
        return Path("components") / record.category / f"{record.id}.json"

    def write_report(self, report: ConversionReport) -> None:
        """Persist converted records and merge them into the existing index.

        Records converted in this run replace their stored entries by id and
        keep their index position; new ids are appended. Entries this run did
        not produce (other categories, snippets that failed) stay indexed.
        Categories, authors, and tags are recomputed over the merged set.
        """
        converted: dict[str, CorpusIndexEntry] = {}
        tags: dict[str, list[str]] = {}
        for record in report.records:
            rel = self.record_path(record)
            _write_json(self.root / rel, record.to_dict())
            converted[record.id] = record.index_entry(file_path=rel.as_posix())
            tags[record.id] = record.tags

        existing = self.index() if self.index_path.is_file() else []
        entries = [converted.pop(e.id, e) for e in existing]
        entries.extend(converted.values())
        kept = [e for e in entries if e.id not in tags]
        for entry in kept:
            tags[entry.id] = self._stored_tags(entry)

        categories: dict[str, int] = {}
        authors: list[str] = []
        all_tags: set[str] = set()
        for entry in entries:
            categories[entry.category] = categories.get(entry.category, 0) + 1
            if entry.author not in authors:
                authors.append(entry.author)
            all_tags.update(tags[entry.id])

        _write_json(
            self.index_path,
            {
                "total": len(entries),
                "categories": categories,
                "components": [e.to_dict() for e in entries],
            },
        )
        _write_json(
            self.root / "metadata" / "authors.json",
            {"total": len(authors), "authors": sorted(authors)},
        )
        _write_json(
            self.root / "metadata" / "tags.json",
            {"total": len(all_tags), "tags": sorted(all_tags)},
        )
        self._index = entries
        logger.info(
            "corpus.written",
            root=str(self.root),
            components=len(entries),
            converted=len(report.records),
            kept=len(kept),
        )

    def _stored_tags(self, entry: CorpusIndexEntry) -> list[str]:
        try:
            return self.load(entry.id).tags
        except ComponentNotFoundError as e:
            logger.warning("corpus.merge.unreadable", component_id=entry.id, error=str(e))
            return []


def _write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
