"""Query engine: filter, sort, paginate, and summarize the corpus.

Every call reads the store's index, optionally pre-filters it on identity
fields, hydrates the survivors, and re-runs every filter stage against
the hydrated records. The pre-pass only saves hydration work; results
are identical with it switched off.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from unigalaxy.core.errors import ComponentNotFoundError
from unigalaxy.core.models import ComponentRecord, CorpusIndexEntry
from unigalaxy.core.store import RecordStore
from unigalaxy.observability.logging import get_logger
from unigalaxy.query.filters import FilterSet, apply_stages, build_stages
from unigalaxy.query.sorting import DEFAULT_SORT_KEY, sort_records
from unigalaxy.query.stats import compute_statistics

logger = get_logger(__name__)

DEFAULT_SEARCH_LIMIT = 10
DEFAULT_LIST_LIMIT = 50


@dataclass
class SearchRequest:
    query: str = ""
    category: str | None = None
    author: str | None = None
    tags: list[str] = field(default_factory=list)
    platforms: list[str] = field(default_factory=list)
    complexity: str | None = None
    limit: int = DEFAULT_SEARCH_LIMIT
    offset: int = 0

    def filters(self) -> FilterSet:
        return FilterSet(
            query=self.query,
            category=self.category,
            author=self.author,
            tags=list(self.tags),
            platforms=list(self.platforms),
            complexity=self.complexity,
        )


@dataclass
class ListRequest:
    category: str | None = None
    author: str | None = None
    sort_by: str = DEFAULT_SORT_KEY
    sort_order: str = "asc"
    include_stats: bool = True
    include_preview: bool = False
    limit: int = DEFAULT_LIST_LIMIT
    offset: int = 0

    def filters(self) -> FilterSet:
        return FilterSet(category=self.category, author=self.author)


@dataclass
class QueryResult:
    total: int
    limit: int
    offset: int
    records: list[ComponentRecord]
    statistics: dict | None = None


def paginate(records: Sequence[ComponentRecord], offset: int, limit: int) -> list[ComponentRecord]:
    return list(records[offset : offset + limit])


def _clamp(value: int) -> int:
    return max(0, int(value))


class QueryEngine:
    """Read-only queries over a RecordStore.

    Args:
        store: Source of index entries and full records.
        prefilter_index: Run identity-only filters on index entries before
            hydrating. Off = hydrate everything, same results.
    """

    def __init__(self, store: RecordStore, prefilter_index: bool = True) -> None:
        self._store = store
        self._prefilter_index = prefilter_index

    # -------------------------------------------------------------------------
    # Hydration
    # -------------------------------------------------------------------------

    def get_record(self, component_id: str) -> ComponentRecord:
        """Raises ComponentNotFoundError for unknown or unreadable ids."""
        return self._store.load(component_id)

    def hydrate(self, entries: Sequence[CorpusIndexEntry]) -> list[ComponentRecord]:
        """Load full records. An unreadable record degrades to an identity-only stub."""
        records = []
        for entry in entries:
            try:
                records.append(self._store.load(entry.id))
            except ComponentNotFoundError as e:
                logger.warning("record.hydrate.failed", component_id=entry.id, error=str(e))
                records.append(ComponentRecord.stub(entry))
        return records

    def filtered(self, filters: FilterSet) -> list[ComponentRecord]:
        stages = build_stages(filters)
        entries = self._store.index()
        if self._prefilter_index:
            entries = apply_stages(entries, [s for s in stages if s.identity_only])
        return apply_stages(self.hydrate(entries), stages)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def search(self, request: SearchRequest) -> QueryResult:
        """Filter in index order, then page."""
        limit, offset = _clamp(request.limit), _clamp(request.offset)
        matches = self.filtered(request.filters())
        return QueryResult(
            total=len(matches),
            limit=limit,
            offset=offset,
            records=paginate(matches, offset, limit),
        )

    def list_components(self, request: ListRequest) -> QueryResult:
        """Filter, sort, page; statistics cover the whole filtered set."""
        limit, offset = _clamp(request.limit), _clamp(request.offset)
        matches = sort_records(self.filtered(request.filters()), request.sort_by, request.sort_order)
        return QueryResult(
            total=len(matches),
            limit=limit,
            offset=offset,
            records=paginate(matches, offset, limit),
            statistics=compute_statistics(matches) if request.include_stats else None,
        )
