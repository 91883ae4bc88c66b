"""CLI for browsing ontology classes as flash cards."""

import json
import sys
from typing import Annotated

import requests
import typer
from loguru import logger

from ontology_cards.api import OntologyApi
from ontology_cards.config import ALL, configure_collation
from ontology_cards.core.navigation.siblings import parent_of, siblings_of
from ontology_cards.core.session import state as st
from ontology_cards.core.session.keys import SHORTCUTS
from ontology_cards.core.session.viewer import ViewerSession
from ontology_cards.core.view.pipeline import (
    available_categories,
    available_root_classes,
    highlight_match,
    search_suggestions,
)
from ontology_cards.core.view.stats import category_counts, classes_in_category, view_statistics
from ontology_cards.logging_config import configure_logging
from ontology_cards.models.ontology import Category, OntologyClass, SortKey

app = typer.Typer(help="Ontology cards: browse ontology classes as flash cards.")

ApiUrlOption = Annotated[
    str | None,
    typer.Option("--api-url", "-u", help="Ontology API base URL"),
]
SearchOption = Annotated[
    str, typer.Option("--search", "-q", help="Substring of label or description")
]
CategoryOption = Annotated[str, typer.Option("--category", "-c", help="Category, or 'all'")]
RootOption = Annotated[str, typer.Option("--root", "-r", help="Root class, or 'all'")]
SortOption = Annotated[SortKey, typer.Option("--sort", help="Sort order")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)
    configure_collation()


def _make_api(api_url: str | None) -> OntologyApi:
    """Build the API client, exiting on bad configuration."""
    try:
        return OntologyApi(api_url)
    except ValueError as e:
        logger.error("Invalid configuration: {}", e)
        raise typer.Exit(1) from None


def _open_session(file: str, api_url: str | None) -> ViewerSession:
    """Load a file into a new session, exiting on failure."""
    session = ViewerSession(_make_api(api_url))
    session.load(file)
    if session.state.error:
        logger.error("{}", session.state.error)
        raise typer.Exit(1)
    return session


def _apply_filters(
    session: ViewerSession,
    *,
    search: str = "",
    category: str = ALL,
    root: str = ALL,
    sort: SortKey = SortKey.NAME,
    shuffle: bool = False,
) -> None:
    session.dispatch(
        st.update_filters,
        rng=session.rng,
        search_term=search,
        category=category,
        root_class=root,
        sort_key=sort,
        shuffle=shuffle,
    )


def _card_title(cls: OntologyClass) -> str:
    kind = cls.category_kind
    return f"{kind.icon} {cls.label}  [{cls.category_name}]"


def _render_card(state: st.ViewerState) -> list[str]:
    """Text rendering of the current card: front, or back when flipped."""
    cls = st.current_class(state)
    if cls is None:
        if not state.classes:
            return ["No classes loaded."]
        return ["No classes match the current filters."]

    lines = [
        f"({state.current_index + 1}/{len(state.visible)}) {_card_title(cls)}",
    ]
    parent = parent_of(cls)
    siblings = siblings_of(cls, state.visible)
    if parent:
        lines.append(f"  parent: {parent}  ({len(siblings)} siblings visible)")
    if cls.description:
        lines.append(f"  {cls.description}")

    if not st.is_flipped(state, cls.id):
        return lines

    s = cls.stats
    lines.append(
        f"  subclasses={s.subclasses_count} properties={s.properties_count} "
        f"instances={s.instances_count} depth={s.hierarchy_depth}"
    )
    for title, items in (
        ("superclasses", cls.superclasses_list),
        ("subclasses", cls.subclasses_list),
        ("properties", cls.properties_list),
        ("instances", cls.instances_list),
    ):
        if items:
            lines.append(f"  {title}: {', '.join(items)}")
    return lines


@app.command()
def files(api_url: ApiUrlOption = None) -> None:
    """List ontology source files."""
    api = _make_api(api_url)
    try:
        found = api.list_files()
    except (RuntimeError, requests.RequestException) as e:
        logger.error("Failed to load ontology files: {}", e)
        raise typer.Exit(1) from None
    typer.echo(f"{len(found)} files:\n")
    for f in found:
        typer.echo(f"  {f.filename}{'  (cached)' if f.has_cache else ''}")


@app.command()
def classes(
    file: str = typer.Argument(..., help="Ontology source file"),
    search: SearchOption = "",
    category: CategoryOption = ALL,
    root: RootOption = ALL,
    sort: SortOption = SortKey.NAME,
    shuffle: bool = typer.Option(False, "--shuffle", help="Shuffle the cards"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    api_url: ApiUrlOption = None,
) -> None:
    """List the classes of a file after filtering and sorting."""
    session = _open_session(file, api_url)
    _apply_filters(
        session, search=search, category=category, root=root, sort=sort, shuffle=shuffle
    )
    visible = session.state.visible

    if output_json:
        data = {
            "classes": [
                {
                    "id": c.id,
                    "label": c.label,
                    "category": c.category_name,
                    "root_class": c.root_class,
                    "parent": parent_of(c),
                }
                for c in visible
            ],
            "total": len(visible),
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"Showing {len(visible)} of {len(session.state.classes)} classes:\n")
    for c in visible:
        typer.echo(f"  {_card_title(c)}  id={c.id}")


@app.command()
def show(
    file: str = typer.Argument(..., help="Ontology source file"),
    name: str = typer.Argument(..., help="Class label, id or local name"),
    api_url: ApiUrlOption = None,
) -> None:
    """Show one card, flipped, with its parent and siblings."""
    session = _open_session(file, api_url)
    session.dispatch(st.jump_to_class, name)
    cls = session.current
    if not session.state.history.entries or cls is None:
        typer.echo(f"Class '{name}' not found.")
        raise typer.Exit(1)
    session.dispatch(st.toggle_flip, cls.id)
    for line in _render_card(session.state):
        typer.echo(line)
    siblings = [s.label for s in siblings_of(cls, session.state.visible) if s.id != cls.id]
    if siblings:
        typer.echo(f"  siblings: {', '.join(siblings)}")


@app.command()
def stats(
    file: str = typer.Argument(..., help="Ontology source file"),
    search: SearchOption = "",
    category: CategoryOption = ALL,
    root: RootOption = ALL,
    api_url: ApiUrlOption = None,
) -> None:
    """Summary statistics for the filtered classes."""
    session = _open_session(file, api_url)
    _apply_filters(session, search=search, category=category, root=root)
    summary = view_statistics(session.state.visible)
    if summary is None:
        typer.echo("No classes match the current filters.")
        return
    typer.echo(f"Classes: {summary.total}")
    typer.echo(f"Avg subclasses: {summary.avg_subclasses:.1f}")
    typer.echo(f"Avg properties: {summary.avg_properties:.1f}")
    typer.echo(f"Avg instances: {summary.avg_instances:.1f}")
    typer.echo(f"Max depth: {summary.max_depth}")
    typer.echo()
    for name, count in sorted(category_counts(session.state.visible).items()):
        typer.echo(f"  {Category.parse(name).display_name}: {count}")


@app.command()
def filters(
    file: str = typer.Argument(..., help="Ontology source file"),
    api_url: ApiUrlOption = None,
) -> None:
    """List the category and root-class values accepted by --category and --root."""
    session = _open_session(file, api_url)
    raw = session.state.classes
    typer.echo("Categories:")
    for name in available_categories(raw):
        kind = Category.parse(name)
        count = len(classes_in_category(raw, name))
        typer.echo(f"  {name}  {kind.icon} {kind.display_name} ({count})")
    typer.echo("Root classes:")
    for root in available_root_classes(raw):
        typer.echo(f"  {root}")


_BROWSE_HELP = """\
Commands:
  up / down       previous / next sibling (k / j)
  flip            flip the card (space)
  random          random card (r)
  shuffle         toggle shuffle (s)
  back / forward  history (b / f)
  grid            toggle grid view
  /TERM           search; lists numbered suggestions
  go N            open suggestion N
  jump NAME       open a class by name
  clear           clear the search
  quit            leave (q)"""

_KEY_ALIASES = {
    "up": "ArrowUp",
    "k": "ArrowUp",
    "down": "ArrowDown",
    "j": "ArrowDown",
    "flip": " ",
    "space": " ",
    "random": "r",
    "r": "r",
    "shuffle": "s",
    "s": "s",
}


def _browse_command(
    session: ViewerSession, line: str, suggestions: list[OntologyClass]
) -> list[OntologyClass]:
    """Apply one browse command; returns the suggestions to offer next."""
    command, _, arg = line.partition(" ")
    arg = arg.strip()

    if command in _KEY_ALIASES:
        session.key(_KEY_ALIASES[command])
    elif command in ("back", "b"):
        session.dispatch(st.go_back)
    elif command in ("forward", "f"):
        session.dispatch(st.go_forward)
    elif command == "grid":
        session.dispatch(st.toggle_view_mode)
        typer.echo(f"View: {session.state.view_mode}")
    elif command == "clear":
        session.dispatch(st.set_search_term, "", rng=session.rng)
    elif command.startswith("/"):
        term = line[1:].strip()
        session.dispatch(st.set_search_term, term, rng=session.rng)
        found = search_suggestions(session.state.classes, term)
        for i, cls in enumerate(found, start=1):
            before, match, after = highlight_match(cls.label, term)
            typer.echo(f"  {i}. {before}[{match}]{after}" if match else f"  {i}. {cls.label}")
        return found
    elif command == "go":
        if not arg.isdigit() or not 1 <= int(arg) <= len(suggestions):
            typer.echo("No such suggestion.")
            return suggestions
        session.dispatch(st.select_suggestion, suggestions[int(arg) - 1].id, rng=session.rng)
        return []
    elif command == "jump":
        session.dispatch(st.jump_to_class, arg)
    elif command in ("help", "?"):
        typer.echo(_BROWSE_HELP)
        for key_label, description in SHORTCUTS:
            typer.echo(f"  [{key_label}] {description}")
        return suggestions
    else:
        typer.echo(f"Unknown command: {command!r}. Type 'help'.")
        return suggestions
    return suggestions


@app.command()
def browse(
    file: str = typer.Argument(..., help="Ontology source file"),
    api_url: ApiUrlOption = None,
) -> None:
    """Browse cards interactively, one command per line."""
    session = _open_session(file, api_url)
    suggestions: list[OntologyClass] = []

    for line in _render_card(session.state):
        typer.echo(line)
    for raw in sys.stdin:
        line = raw.strip()
        if not line:
            continue
        if line in ("quit", "q"):
            break
        suggestions = _browse_command(session, line, suggestions)
        for out in _render_card(session.state):
            typer.echo(out)


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from ontology_cards.mcp.server import run_mcp_server

    run_mcp_server()
