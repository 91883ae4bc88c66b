"""Domain models."""

from ontology_cards.models.ontology import (
    CardSection,
    Category,
    ClassStats,
    OntologyClass,
    OntologyFile,
    SortKey,
    ViewMode,
    integrity_problems,
)

__all__ = [
    "CardSection",
    "Category",
    "ClassStats",
    "OntologyClass",
    "OntologyFile",
    "SortKey",
    "ViewMode",
    "integrity_problems",
]
