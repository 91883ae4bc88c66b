"""Write operations against the ontology API.

Each function returns a result dict and never raises: collaborator failures
become a display string under "error". Reloading the class list after a
successful write is the caller's job.
"""

from typing import Any

import requests
from loguru import logger

from ontology_cards.protocols import OntologyApiProtocol

_API_ERRORS = (RuntimeError, requests.RequestException)


def _failure(action: str, error: Exception | str) -> dict[str, Any]:
    return {"success": False, "error": f"Failed to {action}: {error}"}


def create_node(
    api: OntologyApiProtocol,
    *,
    file: str,
    data: dict[str, Any],
) -> dict[str, Any]:
    """Create a class node.

    Args:
        api: Ontology API client.
        file: Source file the node belongs to.
        data: Node fields (label, description, category, parent, ...).
    """
    if not data.get("label"):
        return {"success": False, "error": "A new node needs a label."}

    try:
        result = api.create_node(file, data)
    except _API_ERRORS as e:
        logger.error("Error creating node in {}: {}", file, e)
        return _failure("save node", e)

    output: dict[str, Any] = {"success": True}
    if result.get("id"):
        output["node_id"] = result["id"]
    return output


def update_node(
    api: OntologyApiProtocol,
    *,
    file: str,
    node_id: str,
    data: dict[str, Any],
) -> dict[str, Any]:
    """Update fields of an existing node."""
    if not data:
        return {"success": False, "error": "No fields to update."}

    try:
        api.update_node(file, node_id, data)
    except _API_ERRORS as e:
        logger.error("Error updating node {} in {}: {}", node_id, file, e)
        return _failure("save node", e)
    return {"success": True, "node_id": node_id}


def delete_node(api: OntologyApiProtocol, *, file: str, node_id: str) -> dict[str, Any]:
    try:
        api.delete_node(file, node_id)
    except _API_ERRORS as e:
        logger.error("Error deleting node {} in {}: {}", node_id, file, e)
        return _failure("delete node", e)
    return {"success": True, "node_id": node_id}


def create_relationship(
    api: OntologyApiProtocol,
    *,
    file: str,
    data: dict[str, Any],
) -> dict[str, Any]:
    """Create a relationship (subclass, property, ...) between two nodes.

    Args:
        api: Ontology API client.
        file: Source file both nodes belong to.
        data: Must carry "source" and "target"; "type" defaults to "subclass".
    """
    if not data.get("source") or not data.get("target"):
        return {"success": False, "error": "A relationship needs a source and a target."}

    payload = {"type": "subclass", **data}
    try:
        api.create_relationship(file, payload)
    except _API_ERRORS as e:
        logger.error("Error saving relationship in {}: {}", file, e)
        return _failure("save relationship", e)
    return {"success": True}
