"""Sibling traversal and class lookup by id or name."""

from collections.abc import Iterable, Sequence

from ontology_cards.models.ontology import OntologyClass


def parent_of(cls: OntologyClass) -> str | None:
    """The first listed superclass, else the root class, else None."""
    if cls.superclasses_list:
        return cls.superclasses_list[0]
    return cls.root_class or None


def siblings_of(
    cls: OntologyClass, visible: Sequence[OntologyClass]
) -> tuple[OntologyClass, ...]:
    """Visible classes sharing cls's parent, cls included, in visible order.

    A class without a parent grouping has no siblings.
    """
    parent = parent_of(cls)
    if parent is None:
        return ()
    return tuple(c for c in visible if parent_of(c) == parent)


def next_sibling(
    cls: OntologyClass, visible: Sequence[OntologyClass], direction: int
) -> OntologyClass | None:
    """Step through cls's siblings by direction (+1/-1), wrapping at both ends.

    Returns None when cls has no other siblings or is no longer among them.
    """
    siblings = siblings_of(cls, visible)
    if len(siblings) <= 1:
        return None
    position = next((i for i, s in enumerate(siblings) if s.id == cls.id), None)
    if position is None:
        return None
    target = position + direction
    if target < 0:
        target = len(siblings) - 1
    elif target >= len(siblings):
        target = 0
    return siblings[target]


def index_of(visible: Sequence[OntologyClass], class_id: str) -> int | None:
    for i, cls in enumerate(visible):
        if cls.id == class_id:
            return i
    return None


def find_class_index(visible: Sequence[OntologyClass], name: str) -> int | None:
    """Locate a class referenced by name in a superclass or subclass list.

    Exact label, id or local name wins; otherwise a case-insensitive match on
    label or local name.
    """
    for i, cls in enumerate(visible):
        if name in (cls.label, cls.id, cls.local_name):
            return i
    folded = name.lower()
    for i, cls in enumerate(visible):
        if cls.label.lower() == folded or (cls.local_name and cls.local_name.lower() == folded):
            return i
    return None


def resolve_related(raw: Iterable[OntologyClass], name: str) -> OntologyClass | None:
    """The class a related-name entry refers to, matched by label or local name."""
    for cls in raw:
        if cls.label == name or cls.local_name == name:
            return cls
    return None
