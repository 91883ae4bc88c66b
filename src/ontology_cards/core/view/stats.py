"""Summary statistics over the visible list."""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from ontology_cards.models.ontology import OntologyClass


@dataclass(frozen=True)
class ViewStatistics:
    total: int
    avg_subclasses: float
    avg_properties: float
    avg_instances: float
    max_depth: int


def view_statistics(visible: Sequence[OntologyClass]) -> ViewStatistics | None:
    """Averages and maximum depth over the visible classes, None when empty."""
    if not visible:
        return None
    total = len(visible)
    return ViewStatistics(
        total=total,
        avg_subclasses=round(sum(c.stats.subclasses_count for c in visible) / total, 1),
        avg_properties=round(sum(c.stats.properties_count for c in visible) / total, 1),
        avg_instances=round(sum(c.stats.instances_count for c in visible) / total, 1),
        max_depth=max(c.stats.hierarchy_depth for c in visible),
    )


def category_counts(visible: Sequence[OntologyClass]) -> dict[str, int]:
    return dict(Counter(cls.category_name for cls in visible))


def classes_in_category(visible: Sequence[OntologyClass], category: str) -> list[OntologyClass]:
    return [cls for cls in visible if cls.category_name == category]
