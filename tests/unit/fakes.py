"""Fake implementations for testing the flash-card viewer."""

from dataclasses import replace
from typing import Any

from ontology_cards.api import ApiError
from ontology_cards.models.ontology import ClassStats, OntologyClass, OntologyFile


def make_class(
    id: str,
    label: str | None = None,
    *,
    superclasses: tuple[str, ...] = (),
    root_class: str | None = None,
    category: str | None = None,
    description: str | None = None,
    subclasses: tuple[str, ...] = (),
    properties: int = 0,
    instances: int = 0,
    depth: int = 0,
) -> OntologyClass:
    """Build a class with consistent stats."""
    return OntologyClass(
        id=id,
        label=label or id.title(),
        local_name=id,
        root_class=root_class,
        category=category,
        description=description,
        superclasses_list=superclasses,
        subclasses_list=subclasses,
        stats=ClassStats(
            subclasses_count=len(subclasses),
            properties_count=properties,
            instances_count=instances,
            hierarchy_depth=depth,
            superclasses_count=len(superclasses),
        ),
    )


class FakeOntologyApi:
    """In-memory fake for OntologyApi.

    Holds classes per file, applies mutations to them and records all calls
    for assertions. Register an exception in `failures` under a method name
    to make that method raise.
    """

    def __init__(self, classes: dict[str, list[OntologyClass]] | None = None) -> None:
        self.classes: dict[str, list[OntologyClass]] = {
            name: list(items) for name, items in (classes or {}).items()
        }
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._next_id = 0

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def list_files(self) -> list[OntologyFile]:
        self._record("list_files")
        return [OntologyFile(filename=name) for name in self.classes]

    def list_classes(self, file: str) -> list[OntologyClass]:
        self._record("list_classes", file)
        if file not in self.classes:
            msg = f"File {file!r} not found"
            raise ApiError(msg, status_code=404)
        return list(self.classes[file])

    def create_node(self, file: str, data: dict[str, Any]) -> dict[str, Any]:
        self._record("create_node", file, data)
        self._next_id += 1
        new_id = data.get("id") or f"new-{self._next_id}"
        self.classes[file].append(make_class(new_id, data["label"]))
        return {"id": new_id}

    def update_node(self, file: str, node_id: str, data: dict[str, Any]) -> dict[str, Any]:
        self._record("update_node", file, node_id, data)
        self.classes[file] = [
            replace(c, label=data.get("label", c.label)) if c.id == node_id else c
            for c in self.classes[file]
        ]
        return {"id": node_id}

    def delete_node(self, file: str, node_id: str) -> dict[str, Any]:
        self._record("delete_node", file, node_id)
        self.classes[file] = [c for c in self.classes[file] if c.id != node_id]
        return {}

    def create_relationship(self, file: str, data: dict[str, Any]) -> dict[str, Any]:
        self._record("create_relationship", file, data)
        return {}
