"""View pipeline: filter, sort and shuffle raw classes into the visible list."""

import locale
import random
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from ontology_cards.config import ALL, SUGGESTION_LIMIT
from ontology_cards.models.ontology import OntologyClass, SortKey


@dataclass(frozen=True)
class ViewFilters:
    """Inputs of the view pipeline besides the raw classes."""

    search_term: str = ""
    category: str = ALL
    root_class: str = ALL
    sort_key: SortKey = SortKey.NAME
    shuffle: bool = False


def matches(cls: OntologyClass, filters: ViewFilters) -> bool:
    """Return True if a class passes the search, category and root filters."""
    if filters.search_term:
        term = filters.search_term.lower()
        if term not in cls.label.lower() and term not in (cls.description or "").lower():
            return False
    if filters.category != ALL and cls.category_name != filters.category:
        return False
    if filters.root_class != ALL and cls.root_class != filters.root_class:
        return False
    return True


def _name_key(cls: OntologyClass) -> tuple[str, str]:
    return (locale.strxfrm(cls.label.casefold()), cls.label)


_NUMERIC_KEYS: dict[SortKey, Callable[[OntologyClass], int]] = {
    SortKey.SUBCLASSES: lambda c: c.stats.subclasses_count,
    SortKey.PROPERTIES: lambda c: c.stats.properties_count,
    SortKey.INSTANCES: lambda c: c.stats.instances_count,
    SortKey.DEPTH: lambda c: c.stats.hierarchy_depth,
}


def sort_classes(classes: Iterable[OntologyClass], sort_key: SortKey) -> list[OntologyClass]:
    """Stable sort: names ascending, counts descending."""
    if sort_key == SortKey.NAME:
        return sorted(classes, key=_name_key)
    # reverse=True keeps equal elements in their original order
    return sorted(classes, key=_NUMERIC_KEYS[sort_key], reverse=True)


def shuffle_classes(
    classes: Sequence[OntologyClass], *, rng: random.Random | None = None
) -> list[OntologyClass]:
    """Return a uniformly random permutation (Fisher-Yates)."""
    rng = rng or random.Random()
    shuffled = list(classes)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def compute_visible_list(
    raw: Iterable[OntologyClass],
    filters: ViewFilters,
    *,
    rng: random.Random | None = None,
) -> tuple[OntologyClass, ...]:
    """Derive the visible list from the raw classes.

    Pure apart from the random source: with shuffle on, every call draws a
    fresh permutation.
    """
    filtered = [cls for cls in raw if matches(cls, filters)]
    ordered = sort_classes(filtered, filters.sort_key)
    if filters.shuffle:
        ordered = shuffle_classes(ordered, rng=rng)
    return tuple(ordered)


def available_categories(raw: Iterable[OntologyClass]) -> list[str]:
    return sorted({cls.category_name for cls in raw})


def available_root_classes(raw: Iterable[OntologyClass]) -> list[str]:
    return sorted({cls.root_class for cls in raw if cls.root_class})


def search_suggestions(
    raw: Iterable[OntologyClass], term: str, *, limit: int = SUGGESTION_LIMIT
) -> list[OntologyClass]:
    """Suggest classes while the user types.

    Searches the unfiltered classes, so a suggestion may be hidden by the
    active category or root filter.
    """
    if not term:
        return []
    needle = term.lower()
    found: list[OntologyClass] = []
    for cls in raw:
        if (
            needle in cls.label.lower()
            or needle in cls.local_name.lower()
            or needle in (cls.description or "").lower()
        ):
            found.append(cls)
            if len(found) >= limit:
                break
    return found


def highlight_match(label: str, term: str) -> tuple[str, str, str]:
    """Split a label around the first case-insensitive match of term.

    Returns (label, "", "") when the term does not occur in the label.
    """
    if not term:
        return label, "", ""
    start = label.lower().find(term.lower())
    if start == -1:
        return label, "", ""
    end = start + len(term)
    return label[:start], label[start:end], label[end:]
