"""Protocols for dependency injection in the flash-card viewer."""

from typing import Any, Protocol, runtime_checkable

from ontology_cards.models.ontology import OntologyClass, OntologyFile


@runtime_checkable
class OntologyApiProtocol(Protocol):
    """Protocol for ontology API clients.

    Every method may raise; callers convert failures to display strings.
    """

    def list_files(self) -> list[OntologyFile]:
        """List the source files classes can be loaded from."""
        ...

    def list_classes(self, file: str) -> list[OntologyClass]:
        """Fetch every class defined in a source file."""
        ...

    def create_node(self, file: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a class node."""
        ...

    def update_node(self, file: str, node_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Update a class node."""
        ...

    def delete_node(self, file: str, node_id: str) -> dict[str, Any]:
        """Delete a class node."""
        ...

    def create_relationship(self, file: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a relationship between two nodes."""
        ...
