"""Core data models for the component corpus.

These models define the contract between components:
- The conversion engine produces ComponentRecords from raw snippets
- Record stores persist records and expose CorpusIndexEntries
- The query engine reads entries, hydrates records, and derives projections

Records are never mutated after conversion. Re-conversion builds a new
record and carries ``created_at`` forward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =============================================================================
# Platforms
# =============================================================================

PLATFORM_KEYS: tuple[str, ...] = (
    "h5",
    "mp_weixin",
    "mp_alipay",
    "mp_baidu",
    "mp_toutiao",
    "app_plus",
)

# Platforms that receive a compatibility entry at conversion time
BASELINE_PLATFORMS: tuple[str, ...] = ("h5", "mp_weixin", "mp_alipay", "app_plus")

# Platforms flagged for unsupported CSS properties
MINI_PROGRAM_PLATFORMS: tuple[str, ...] = ("mp_weixin", "mp_alipay")

DEFAULT_TARGET_PLATFORMS: tuple[str, ...] = ("H5", "MP-WEIXIN", "MP-ALIPAY", "APP-PLUS")


def normalize_platform(platform: str) -> str:
    """Map a caller-facing platform name to its record key ("MP-WEIXIN" → "mp_weixin")."""
    return platform.strip().lower().replace("-", "_")


# =============================================================================
# Complexity
# =============================================================================


class Complexity(str, Enum):
    """Coarse performance classification of a component."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Any) -> Complexity | None:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# Severity order used for sorting; anything unknown/missing ranks 0
COMPLEXITY_ORDER: dict[str, int] = {"low": 1, "medium": 2, "high": 3}


# =============================================================================
# Identity
# =============================================================================


@dataclass(frozen=True)
class SnippetIdentity:
    """Who wrote a snippet and where it lives in the corpus."""

    author: str
    slug: str
    category: str

    @property
    def id(self) -> str:
        return f"{self.author}_{self.slug}" if self.slug else self.author

    @classmethod
    def from_stem(cls, stem: str, category: str) -> SnippetIdentity:
        """Parse an ``author_slug`` file stem. Everything after the first ``_`` is the slug."""
        author, _, slug = stem.partition("_")
        return cls(author=author, slug=slug, category=category.lower())


# =============================================================================
# Record parts
# =============================================================================


@dataclass
class PlatformCompatibility:
    """Support verdict for one platform."""

    supported: bool = True
    issues: list[str] = field(default_factory=list)
    alternatives: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "supported": self.supported,
            "issues": list(self.issues),
            "alternatives": list(self.alternatives),
        }

    @classmethod
    def from_dict(cls, data: dict) -> PlatformCompatibility:
        return cls(
            supported=bool(data.get("supported", True)),
            issues=list(data.get("issues") or []),
            alternatives=list(data.get("alternatives") or []),
        )


@dataclass
class PerformanceMetrics:
    """Static performance estimate. render_cost and memory_usage mirror complexity."""

    complexity: Complexity
    bundle_size: int

    @property
    def render_cost(self) -> str:
        return self.complexity.value

    @property
    def memory_usage(self) -> str:
        return self.complexity.value

    def to_dict(self) -> dict:
        return {
            "complexity": self.complexity.value,
            "bundle_size": self.bundle_size,
            "render_cost": self.render_cost,
            "memory_usage": self.memory_usage,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> PerformanceMetrics | None:
        if not data:
            return None
        complexity = Complexity.parse(data.get("complexity"))
        if complexity is None:
            return None
        return cls(complexity=complexity, bundle_size=max(0, int(data.get("bundle_size") or 0)))


@dataclass
class InterfaceDescriptor:
    """A prop, event, or slot exposed by a converted component.

    Props fill type/default/required; events fill parameters. Unset fields
    are left out of the serialized form.
    """

    name: str
    description: str = ""
    type: str | None = None
    default: Any = None
    required: bool | None = None
    parameters: list[str] | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"name": self.name}
        if self.type is not None:
            d["type"] = self.type
            d["default"] = self.default
            d["required"] = bool(self.required)
        d["description"] = self.description
        if self.parameters is not None:
            d["parameters"] = list(self.parameters)
        return d

    @classmethod
    def from_dict(cls, data: dict) -> InterfaceDescriptor:
        return cls(
            name=data.get("name", ""),
            description=data.get("description", ""),
            type=data.get("type"),
            default=data.get("default"),
            required=data.get("required"),
            parameters=data.get("parameters"),
        )


@dataclass
class SourcePayload:
    """Raw markup and style as extracted from the snippet."""

    html: str = ""
    css: str = ""
    file_path: str = ""


@dataclass
class ConvertedPayload:
    """Target-platform markup, style, and script stub."""

    template: str = ""
    script: str = ""
    style: str = ""
    component_name: str = ""

    def to_dict(self) -> dict:
        return {
            "template": self.template,
            "script": self.script,
            "style": self.style,
            "component_name": self.component_name,
        }


# =============================================================================
# Records
# =============================================================================


@dataclass
class CorpusIndexEntry:
    """Cheap summary used to filter before hydrating the full record."""

    id: str
    name: str
    category: str
    author: str
    file_path: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "author": self.author,
            "file_path": self.file_path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CorpusIndexEntry:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            category=data.get("category", ""),
            author=data.get("author", ""),
            file_path=data.get("file_path", ""),
        )


@dataclass
class ComponentRecord:
    """One converted component.

    ``performance`` is None only for stubs built from an index entry whose
    full record could not be hydrated.
    """

    id: str
    name: str
    category: str
    author: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    original: SourcePayload = field(default_factory=SourcePayload)
    uniapp: ConvertedPayload = field(default_factory=ConvertedPayload)
    platforms: dict[str, bool] = field(default_factory=dict)
    compatibility: dict[str, PlatformCompatibility] = field(default_factory=dict)
    performance: PerformanceMetrics | None = None
    props: list[InterfaceDescriptor] = field(default_factory=list)
    events: list[InterfaceDescriptor] = field(default_factory=list)
    slots: list[InterfaceDescriptor] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def complexity(self) -> str | None:
        return self.performance.complexity.value if self.performance else None

    def index_entry(self, file_path: str = "") -> CorpusIndexEntry:
        return CorpusIndexEntry(
            id=self.id,
            name=self.name,
            category=self.category,
            author=self.author,
            file_path=file_path,
        )

    @classmethod
    def stub(cls, entry: CorpusIndexEntry) -> ComponentRecord:
        """Degraded record carrying only index-level identity."""
        return cls(id=entry.id, name=entry.name, category=entry.category, author=entry.author)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "author": self.author,
            "description": self.description,
            "tags": list(self.tags),
            "original": {
                "html": self.original.html,
                "css": self.original.css,
                "file_path": self.original.file_path,
            },
            "uniapp": self.uniapp.to_dict(),
            "platforms": dict(self.platforms),
            "compatibility": {k: v.to_dict() for k, v in self.compatibility.items()},
            "performance": self.performance.to_dict() if self.performance else {},
            "props": [p.to_dict() for p in self.props],
            "events": [e.to_dict() for e in self.events],
            "slots": [s.to_dict() for s in self.slots],
            "dependencies": list(self.dependencies),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ComponentRecord:
        original = data.get("original") or {}
        uniapp = data.get("uniapp") or {}
        compatibility = {
            normalize_platform(k): PlatformCompatibility.from_dict(v)
            for k, v in (data.get("compatibility") or {}).items()
            if isinstance(v, dict)
        }
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            category=data.get("category", ""),
            author=data.get("author", ""),
            description=data.get("description", ""),
            tags=list(dict.fromkeys(data.get("tags") or [])),
            original=SourcePayload(
                html=original.get("html", ""),
                css=original.get("css", ""),
                file_path=original.get("file_path", ""),
            ),
            uniapp=ConvertedPayload(
                template=uniapp.get("template", ""),
                script=uniapp.get("script", ""),
                style=uniapp.get("style", ""),
                component_name=uniapp.get("component_name", ""),
            ),
            platforms={
                normalize_platform(k): bool(v) for k, v in (data.get("platforms") or {}).items()
            },
            compatibility=compatibility,
            performance=PerformanceMetrics.from_dict(data.get("performance")),
            props=[InterfaceDescriptor.from_dict(p) for p in data.get("props") or []],
            events=[InterfaceDescriptor.from_dict(e) for e in data.get("events") or []],
            slots=[InterfaceDescriptor.from_dict(s) for s in data.get("slots") or []],
            dependencies=list(data.get("dependencies") or []),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
