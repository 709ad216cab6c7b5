"""In-memory record store for testing without a data directory."""

from __future__ import annotations

from unigalaxy.core.errors import ComponentNotFoundError
from unigalaxy.core.models import ComponentRecord, CorpusIndexEntry


class InMemoryRecordStore:
    """Full RecordStore implementation using Python dicts.

    ``broken`` ids stay in the index but fail to hydrate, which lets tests
    exercise the degraded-record path.
    """

    def __init__(self, records: list[ComponentRecord] | None = None) -> None:
        self._records: dict[str, ComponentRecord] = {}
        self._broken: dict[str, CorpusIndexEntry] = {}
        self._order: list[str] = []
        for record in records or []:
            self.add(record)

    def add(self, record: ComponentRecord) -> None:
        if record.id not in self._records and record.id not in self._broken:
            self._order.append(record.id)
        self._records[record.id] = record

    def add_broken(self, entry: CorpusIndexEntry) -> None:
        if entry.id not in self._records and entry.id not in self._broken:
            self._order.append(entry.id)
        self._broken[entry.id] = entry

    def index(self) -> list[CorpusIndexEntry]:
        entries = []
        for cid in self._order:
            if cid in self._records:
                entries.append(self._records[cid].index_entry(file_path=f"memory://{cid}"))
            else:
                entries.append(self._broken[cid])
        return entries

    def load(self, component_id: str) -> ComponentRecord:
        if component_id in self._broken:
            raise ComponentNotFoundError(component_id, "record unreadable")
        record = self._records.get(component_id)
        if record is None:
            raise ComponentNotFoundError(component_id)
        return record
