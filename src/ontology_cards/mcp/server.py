"""MCP server exposing ontology class search and navigation tools."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import requests
from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from ontology_cards.api import OntologyApi
from ontology_cards.config import ALL, SUGGESTION_LIMIT, configure_collation
from ontology_cards.core.navigation.siblings import (
    next_sibling,
    parent_of,
    resolve_related,
    siblings_of,
)
from ontology_cards.core.view.pipeline import (
    ViewFilters,
    available_categories,
    available_root_classes,
    compute_visible_list,
    search_suggestions,
)
from ontology_cards.models.ontology import OntologyClass, SortKey
from ontology_cards.protocols import OntologyApiProtocol


def _summary(cls: OntologyClass) -> dict[str, Any]:
    return {
        "id": cls.id,
        "label": cls.label,
        "category": cls.category_name,
        "root_class": cls.root_class,
        "parent": parent_of(cls),
    }


def _load(api: OntologyApiProtocol, file: str) -> list[OntologyClass] | dict[str, Any]:
    """Fetch a file's classes, or an error dict."""
    try:
        return api.list_classes(file)
    except (RuntimeError, requests.RequestException) as e:
        logger.error("Error loading classes from {}: {}", file, e)
        return {"error": f"Failed to load ontology classes: {e}"}


# --- Core functions (testable without MCP context) ---


def ontology_list_files(api: OntologyApiProtocol) -> dict[str, Any]:
    """List ontology source files."""
    try:
        files = api.list_files()
    except (RuntimeError, requests.RequestException) as e:
        return {"error": f"Failed to load ontology files: {e}", "files": [], "count": 0}
    return {
        "files": [{"filename": f.filename, "has_cache": f.has_cache} for f in files],
        "count": len(files),
    }


def ontology_list_classes(
    api: OntologyApiProtocol,
    *,
    file: str,
    search: str = "",
    category: str = ALL,
    root_class: str = ALL,
    sort_key: str = "name",
    limit: int = 50,
    offset: int = 0,
) -> dict[str, Any]:
    """List classes of a file after filtering and sorting.

    Also returns the category and root-class values the filters accept.

    Args:
        file: Ontology source file.
        search: Case-insensitive substring of label or description.
        category: Category name, or "all".
        root_class: Root class name, or "all".
        sort_key: name, subclasses, properties, instances or depth.
        limit: Max results (1-200, default 50).
        offset: Pagination offset (negative counts as 0).
    """
    try:
        key = SortKey(sort_key)
    except ValueError:
        return {"error": f"Unknown sort key '{sort_key}'.", "classes": [], "count": 0, "total": 0}

    loaded = _load(api, file)
    if isinstance(loaded, dict):
        return {**loaded, "classes": [], "count": 0, "total": 0}

    limit = max(1, min(limit, 200))
    offset = max(0, offset)
    filters = ViewFilters(
        search_term=search, category=category, root_class=root_class, sort_key=key
    )
    visible = compute_visible_list(loaded, filters)
    page = visible[offset : offset + limit]

    output: dict[str, Any] = {
        "classes": [_summary(c) for c in page],
        "count": len(page),
        "total": len(visible),
        "has_more": offset + len(page) < len(visible),
        "categories": available_categories(loaded),
        "root_classes": available_root_classes(loaded),
    }
    if output["has_more"]:
        output["next_offset"] = offset + limit
    return output


def ontology_search_suggestions(
    api: OntologyApiProtocol,
    *,
    file: str,
    term: str,
    limit: int = SUGGESTION_LIMIT,
) -> dict[str, Any]:
    """Suggest classes whose label, local name or description contains term."""
    if not term.strip():
        return {"error": "No search term provided.", "suggestions": [], "count": 0}
    loaded = _load(api, file)
    if isinstance(loaded, dict):
        return {**loaded, "suggestions": [], "count": 0}
    found = search_suggestions(loaded, term, limit=max(1, limit))
    return {
        "suggestions": [
            {**_summary(c), "description": c.description} for c in found
        ],
        "count": len(found),
    }


def ontology_get_class_context(
    api: OntologyApiProtocol,
    *,
    file: str,
    class_id: str,
) -> dict[str, Any]:
    """A class with its parent, siblings and resolved related classes."""
    loaded = _load(api, file)
    if isinstance(loaded, dict):
        return loaded

    visible = compute_visible_list(loaded, ViewFilters())
    cls = next((c for c in visible if c.id == class_id), None)
    if cls is None:
        return {"error": f"Class '{class_id}' not found."}

    def _related(names: tuple[str, ...]) -> list[dict[str, Any]]:
        out = []
        for name in names:
            match = resolve_related(loaded, name)
            out.append({"name": name, "id": match.id if match else None})
        return out

    previous = next_sibling(cls, visible, -1)
    following = next_sibling(cls, visible, 1)
    return {
        "class": {
            **_summary(cls),
            "local_name": cls.local_name,
            "description": cls.description,
            "stats": {
                "subclasses_count": cls.stats.subclasses_count,
                "properties_count": cls.stats.properties_count,
                "instances_count": cls.stats.instances_count,
                "hierarchy_depth": cls.stats.hierarchy_depth,
            },
            "properties": list(cls.properties_list),
            "instances": list(cls.instances_list),
        },
        "parent": parent_of(cls),
        "siblings": [_summary(s) for s in siblings_of(cls, visible) if s.id != cls.id],
        "previous_sibling": previous.id if previous else None,
        "next_sibling": following.id if following else None,
        "superclasses": _related(cls.superclasses_list),
        "subclasses": _related(cls.subclasses_list),
    }


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    api: OntologyApiProtocol


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Create the API client on startup."""
    yield ServerContext(api=OntologyApi())


mcp_server = FastMCP(
    "ontology-cards",
    instructions="""\
Ontology classes form a hierarchy. Each class has a parent (its first
superclass, or its root class) and siblings sharing that parent.

1. Call ontology_list_files_tool to find a source file.
2. Use ontology_search_suggestions_tool or ontology_list_classes_tool to find
   class ids.
3. Call ontology_get_class_context_tool to see a class with its parent,
   siblings and related classes; follow previous/next sibling ids to walk
   the level.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def ontology_list_files_tool(ctx: Context) -> dict[str, Any]:
    """List ontology source files available on the API."""
    return ontology_list_files(_ctx(ctx).api)


@mcp_server.tool()
async def ontology_list_classes_tool(
    ctx: Context,
    file: str,
    search: str = "",
    category: str = ALL,
    root_class: str = ALL,
    sort_key: str = "name",
    limit: int = 50,
    offset: int = 0,
) -> dict[str, Any]:
    """List ontology classes of a file, filtered and sorted.

    Args:
        file: Ontology source file.
        search: Case-insensitive substring of label or description.
        category: Category name, or "all".
        root_class: Root class name, or "all".
        sort_key: name, subclasses, properties, instances or depth.
        limit: Max results (1-200, default 50).
        offset: Pagination offset (negative counts as 0).
    """
    return ontology_list_classes(
        _ctx(ctx).api,
        file=file,
        search=search,
        category=category,
        root_class=root_class,
        sort_key=sort_key,
        limit=limit,
        offset=offset,
    )


@mcp_server.tool()
async def ontology_search_suggestions_tool(
    ctx: Context,
    file: str,
    term: str,
    limit: int = SUGGESTION_LIMIT,
) -> dict[str, Any]:
    """Suggest classes matching a search term (label, local name or description)."""
    return ontology_search_suggestions(_ctx(ctx).api, file=file, term=term, limit=limit)


@mcp_server.tool()
async def ontology_get_class_context_tool(
    ctx: Context,
    file: str,
    class_id: str,
) -> dict[str, Any]:
    """Get a class with its parent, siblings and resolved super/subclasses."""
    return ontology_get_class_context(_ctx(ctx).api, file=file, class_id=class_id)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from ontology_cards.logging_config import configure_logging

    configure_logging(verbose=False)
    configure_collation()
    mcp_server.run(transport="stdio")
