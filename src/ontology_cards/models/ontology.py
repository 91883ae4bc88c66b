"""Domain models for ontology flash cards."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

DEFAULT_CATEGORY = "default"


class Category(StrEnum):
    """Known class categories, with a fallback for anything else."""

    SYMPTOM = "symptom"
    ROLE = "role"
    EVENT = "event"
    ORGANIZATION = "organization"
    RECORD = "record"
    DEVICE = "device"
    CONCEPT = "concept"
    PROPERTY = "property"
    DEFAULT = DEFAULT_CATEGORY

    @classmethod
    def parse(cls, value: str | None) -> "Category":
        """Map a raw category string to a member, falling back to DEFAULT."""
        if not value:
            return cls.DEFAULT
        try:
            return cls(value)
        except ValueError:
            return cls.DEFAULT

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self]

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]


_CATEGORY_COLORS: dict[Category, str] = {
    Category.SYMPTOM: "#ef4444",
    Category.ROLE: "#3b82f6",
    Category.EVENT: "#8b5cf6",
    Category.ORGANIZATION: "#10b981",
    Category.RECORD: "#f59e0b",
    Category.DEVICE: "#06b6d4",
    Category.CONCEPT: "#1e293b",
    Category.PROPERTY: "#10b981",
    Category.DEFAULT: "#6b7280",
}

_CATEGORY_ICONS: dict[Category, str] = {
    Category.SYMPTOM: "🩺",
    Category.ROLE: "👤",
    Category.EVENT: "📅",
    Category.ORGANIZATION: "🏥",
    Category.RECORD: "📄",
    Category.DEVICE: "📱",
    Category.CONCEPT: "💡",
    Category.PROPERTY: "🔗",
    Category.DEFAULT: "📦",
}

_CATEGORY_NAMES: dict[Category, str] = {
    Category.SYMPTOM: "Symptoms",
    Category.ROLE: "Roles",
    Category.EVENT: "Events",
    Category.ORGANIZATION: "Organizations",
    Category.RECORD: "Records",
    Category.DEVICE: "Devices",
    Category.CONCEPT: "Concepts",
    Category.PROPERTY: "Properties",
    Category.DEFAULT: "Other",
}


class SortKey(StrEnum):
    """Orderings available for the visible list."""

    NAME = "name"
    SUBCLASSES = "subclasses"
    PROPERTIES = "properties"
    INSTANCES = "instances"
    DEPTH = "depth"


class ViewMode(StrEnum):
    SINGLE = "single"
    GRID = "grid"


class CardSection(StrEnum):
    """Expandable detail sections on the back of a card."""

    SUBCLASSES = "subclasses"
    PROPERTIES = "properties"
    INSTANCES = "instances"
    PROPERTY_RELATIONSHIPS = "property_relationships"


@dataclass(frozen=True)
class OntologyFile:
    """A source file the API can serve classes from."""

    filename: str
    has_cache: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OntologyFile":
        return cls(filename=data["filename"], has_cache=bool(data.get("has_cache", False)))


@dataclass(frozen=True)
class ClassStats:
    """Precomputed counts for a class."""

    subclasses_count: int = 0
    properties_count: int = 0
    instances_count: int = 0
    hierarchy_depth: int = 0
    superclasses_count: int = 0
    total_descendants: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ClassStats":
        data = data or {}
        total = data.get("total_descendants")
        return cls(
            subclasses_count=int(data.get("subclasses_count", 0)),
            properties_count=int(data.get("properties_count", 0)),
            instances_count=int(data.get("instances_count", 0)),
            hierarchy_depth=int(data.get("hierarchy_depth", 0)),
            superclasses_count=int(data.get("superclasses_count", 0)),
            total_descendants=int(total) if total is not None else None,
        )


@dataclass(frozen=True)
class OntologyClass:
    """A node in the ontology hierarchy, as served for one file."""

    id: str
    label: str
    local_name: str = ""
    root_class: str | None = None
    category: str | None = None
    description: str | None = None
    superclasses_list: tuple[str, ...] = ()
    subclasses_list: tuple[str, ...] = ()
    properties_list: tuple[str, ...] = ()
    instances_list: tuple[str, ...] = ()
    stats: ClassStats = field(default_factory=ClassStats)

    @property
    def category_name(self) -> str:
        """Category used for filtering; "default" when the class has none."""
        return self.category or DEFAULT_CATEGORY

    @property
    def category_kind(self) -> Category:
        return Category.parse(self.category)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OntologyClass":
        """Build a class from the API's JSON shape."""
        return cls(
            id=str(data["id"]),
            label=data.get("label") or data.get("local_name") or str(data["id"]),
            local_name=data.get("local_name") or "",
            root_class=data.get("root_class") or None,
            category=data.get("category") or None,
            description=data.get("description") or None,
            superclasses_list=tuple(data.get("superclasses_list") or ()),
            subclasses_list=tuple(data.get("subclasses_list") or ()),
            properties_list=tuple(data.get("properties_list") or ()),
            instances_list=tuple(data.get("instances_list") or ()),
            stats=ClassStats.from_dict(data.get("stats")),
        )


def integrity_problems(cls: OntologyClass) -> list[str]:
    """Return mismatches between a class's stats and its related-name lists.

    Only non-empty lists are checked; the API may omit a list while still
    reporting a count.
    """
    checks = (
        ("subclasses", cls.stats.subclasses_count, cls.subclasses_list),
        ("properties", cls.stats.properties_count, cls.properties_list),
        ("instances", cls.stats.instances_count, cls.instances_list),
        ("superclasses", cls.stats.superclasses_count, cls.superclasses_list),
    )
    problems: list[str] = []
    for name, count, items in checks:
        if items and count != len(items):
            problems.append(
                f"{cls.id}: stats.{name}_count is {count} but {name}_list has {len(items)} entries"
            )
    return problems
