"""Response views derived from ComponentRecord.

Two fixed shapes instead of merging index entries into records:
    ComponentSummary - one row of a search/list page
    ComponentDetail  - the full single-component view
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from unigalaxy.core.models import ComponentRecord


def preview_url(base_url: str, component_id: str) -> str:
    return f"{base_url.rstrip('/')}/{component_id}"


@dataclass
class ComponentSummary:
    id: str
    name: str
    category: str
    author: str
    description: str
    tags: list[str]
    platforms: dict[str, bool]
    performance: dict[str, Any]
    created_at: str | None = None
    updated_at: str | None = None
    preview_url: str | None = None

    @classmethod
    def from_record(cls, record: ComponentRecord, preview: str | None = None) -> ComponentSummary:
        return cls(
            id=record.id,
            name=record.name,
            category=record.category,
            author=record.author,
            description=record.description,
            tags=list(record.tags),
            platforms=dict(record.platforms),
            performance=record.performance.to_dict() if record.performance else {},
            created_at=record.created_at,
            updated_at=record.updated_at,
            preview_url=preview,
        )

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "author": self.author,
            "description": self.description,
            "tags": self.tags,
            "platforms": self.platforms,
            "performance": self.performance,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.preview_url is not None:
            d["preview_url"] = self.preview_url
        return d


@dataclass
class ComponentDetail:
    id: str
    name: str
    category: str
    author: str
    description: str
    tags: list[str]
    platforms: dict[str, bool]
    compatibility: dict[str, dict]
    performance: dict[str, Any]
    props: list[dict]
    events: list[dict]
    slots: list[dict]
    created_at: str | None
    updated_at: str | None
    preview_url: str
    original_code: dict | None = None
    uniapp_code: dict | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(
        cls,
        record: ComponentRecord,
        preview: str,
        include_code: bool = False,
    ) -> ComponentDetail:
        detail = cls(
            id=record.id,
            name=record.name,
            category=record.category,
            author=record.author,
            description=record.description,
            tags=list(record.tags),
            platforms=dict(record.platforms),
            compatibility={k: v.to_dict() for k, v in record.compatibility.items()},
            performance=record.performance.to_dict() if record.performance else {},
            props=[p.to_dict() for p in record.props],
            events=[e.to_dict() for e in record.events],
            slots=[s.to_dict() for s in record.slots],
            created_at=record.created_at,
            updated_at=record.updated_at,
            preview_url=preview,
        )
        if include_code:
            detail.original_code = {
                "html": record.original.html,
                "css": record.original.css,
                "file_path": record.original.file_path,
            }
            detail.uniapp_code = record.uniapp.to_dict()
        return detail

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "author": self.author,
            "description": self.description,
            "tags": self.tags,
            "platforms": self.platforms,
            "compatibility": self.compatibility,
            "performance": self.performance,
            "props": self.props,
            "events": self.events,
            "slots": self.slots,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "preview_url": self.preview_url,
        }
        if self.original_code is not None:
            d["original_code"] = self.original_code
            d["uniapp_code"] = self.uniapp_code
        d.update(self.extras)
        return d
