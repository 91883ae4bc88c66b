"""Viewer session state and the reducers that advance it.

Every event is a pure function from one `ViewerState` to the next. The
visible list is re-derived by `recompute`, which also settles a pending
navigation against the freshly derived list, so a jump requested together
with a filter change always resolves against the list it was meant for.
"""

import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from ontology_cards.core.navigation.history import NavigationHistory, back, commit, forward
from ontology_cards.core.navigation.siblings import find_class_index, index_of, next_sibling
from ontology_cards.core.view.pipeline import ViewFilters, compute_visible_list
from ontology_cards.models.ontology import CardSection, OntologyClass, SortKey, ViewMode


@dataclass(frozen=True)
class ViewerState:
    """Everything the flash-card viewer knows about one session."""

    file: str = ""
    classes: tuple[OntologyClass, ...] = ()
    filters: ViewFilters = field(default_factory=ViewFilters)
    visible: tuple[OntologyClass, ...] = ()
    current_index: int = 0
    view_mode: ViewMode = ViewMode.SINGLE
    history: NavigationHistory = field(default_factory=NavigationHistory)
    pending_navigation: str | None = None
    flipped: frozenset[str] = frozenset()
    expanded: Mapping[str, frozenset[CardSection]] = field(default_factory=dict)
    loading: bool = False
    error: str | None = None
    load_generation: int = 0
    navigation_direction: str | None = None


def current_class(state: ViewerState) -> OntologyClass | None:
    if 0 <= state.current_index < len(state.visible):
        return state.visible[state.current_index]
    return None


def _drop_expansion(
    expanded: Mapping[str, frozenset[CardSection]], class_id: str
) -> dict[str, frozenset[CardSection]]:
    return {k: v for k, v in expanded.items() if k != class_id}


def _set_current(state: ViewerState, index: int, previous: OntologyClass | None) -> ViewerState:
    """Move the pointer; a single card forgets its expanded sections when replaced."""
    state = replace(state, current_index=index)
    if state.view_mode == ViewMode.SINGLE and previous is not None:
        now = current_class(state)
        if now is None or now.id != previous.id:
            state = replace(state, expanded=_drop_expansion(state.expanded, previous.id))
    return state


# --- Derivation ---


def recompute(state: ViewerState, *, rng: random.Random | None = None) -> ViewerState:
    """Re-derive the visible list and settle anything waiting on it.

    The index returns to 0 unless a pending navigation resolves. A pending
    navigation is attempted once the list is non-empty and cleared whether or
    not its class was found.
    """
    previous = current_class(state)
    visible = compute_visible_list(state.classes, state.filters, rng=rng)
    ids = {cls.id for cls in visible}
    state = replace(
        state,
        visible=visible,
        expanded={k: v for k, v in state.expanded.items() if k in ids},
    )
    state = _set_current(state, 0, previous)

    if state.pending_navigation is not None and visible:
        state = _resolve_pending(state)
    return state


def _resolve_pending(state: ViewerState) -> ViewerState:
    target = state.pending_navigation
    state = replace(state, pending_navigation=None)
    if target is None:
        return state
    index = index_of(state.visible, target)
    if index is None:
        logger.warning("Could not find class {!r} in the visible list", target)
        return state
    return jump_to(state, index)


def update_filters(
    state: ViewerState, *, rng: random.Random | None = None, **changes: Any
) -> ViewerState:
    """Replace some filter fields and recompute."""
    return recompute(replace(state, filters=replace(state.filters, **changes)), rng=rng)


def set_search_term(
    state: ViewerState, term: str, *, rng: random.Random | None = None
) -> ViewerState:
    return update_filters(state, rng=rng, search_term=term)


def set_category_filter(
    state: ViewerState, category: str, *, rng: random.Random | None = None
) -> ViewerState:
    return update_filters(state, rng=rng, category=category)


def set_root_filter(
    state: ViewerState, root_class: str, *, rng: random.Random | None = None
) -> ViewerState:
    return update_filters(state, rng=rng, root_class=root_class)


def set_sort_key(
    state: ViewerState, sort_key: SortKey, *, rng: random.Random | None = None
) -> ViewerState:
    return update_filters(state, rng=rng, sort_key=sort_key)


def set_shuffle(
    state: ViewerState, enabled: bool, *, rng: random.Random | None = None
) -> ViewerState:
    return update_filters(state, rng=rng, shuffle=enabled)


def toggle_shuffle(state: ViewerState, *, rng: random.Random | None = None) -> ViewerState:
    return set_shuffle(state, not state.filters.shuffle, rng=rng)


def select_suggestion(
    state: ViewerState, class_id: str, *, rng: random.Random | None = None
) -> ViewerState:
    """Jump to a search suggestion once the search term is cleared.

    The target is parked in `pending_navigation` (replacing any earlier one)
    and the recompute triggered by clearing the term picks it up.
    """
    state = replace(
        state,
        pending_navigation=class_id,
        filters=replace(state.filters, search_term=""),
    )
    return recompute(state, rng=rng)


# --- Navigation ---


def jump_to(state: ViewerState, index: int) -> ViewerState:
    """Show the card at index in single view and record the visit."""
    if not 0 <= index < len(state.visible):
        logger.debug("Ignoring jump to {} (visible list has {})", index, len(state.visible))
        return state
    previous = current_class(state)
    state = _set_current(replace(state, view_mode=ViewMode.SINGLE), index, previous)
    return replace(
        state,
        history=commit(state.history, state.visible[index].id),
        navigation_direction=None,
    )


def jump_to_class(state: ViewerState, name: str) -> ViewerState:
    """Jump to a class referenced by label, id or local name."""
    index = find_class_index(state.visible, name)
    if index is None:
        logger.debug("No visible class named {!r}", name)
        return state
    return jump_to(state, index)


def _restore(state: ViewerState, history: NavigationHistory, class_id: str | None) -> ViewerState:
    state = replace(state, history=history)
    if class_id is None:
        return state
    index = index_of(state.visible, class_id)
    if index is None:
        logger.debug("History entry {!r} is not visible, staying put", class_id)
        return state
    return _set_current(state, index, current_class(state))


def go_back(state: ViewerState) -> ViewerState:
    history, class_id = back(state.history)
    return _restore(state, history, class_id)


def go_forward(state: ViewerState) -> ViewerState:
    history, class_id = forward(state.history)
    return _restore(state, history, class_id)


def navigate_sibling(state: ViewerState, direction: int) -> ViewerState:
    """Move to the next (+1) or previous (-1) sibling of the current card."""
    cls = current_class(state)
    if cls is None:
        return state
    target = next_sibling(cls, state.visible, direction)
    if target is None:
        return state
    index = index_of(state.visible, target.id)
    if index is None:
        return state
    state = jump_to(state, index)
    return replace(state, navigation_direction="down" if direction > 0 else "up")


def random_card(state: ViewerState, *, rng: random.Random | None = None) -> ViewerState:
    """Show a random visible card. Not recorded in history."""
    if not state.visible:
        return state
    rng = rng or random.Random()
    return _set_current(state, rng.randrange(len(state.visible)), current_class(state))


def set_view_mode(state: ViewerState, mode: ViewMode) -> ViewerState:
    return replace(state, view_mode=mode)


def toggle_view_mode(state: ViewerState) -> ViewerState:
    mode = ViewMode.GRID if state.view_mode == ViewMode.SINGLE else ViewMode.SINGLE
    return set_view_mode(state, mode)


# --- Per-card UI state ---


def toggle_flip(state: ViewerState, class_id: str) -> ViewerState:
    return replace(state, flipped=state.flipped ^ {class_id})


def is_flipped(state: ViewerState, class_id: str) -> bool:
    return class_id in state.flipped


def toggle_section(state: ViewerState, class_id: str, section: CardSection) -> ViewerState:
    sections = state.expanded.get(class_id, frozenset()) ^ {section}
    expanded = _drop_expansion(state.expanded, class_id)
    if sections:
        expanded[class_id] = sections
    return replace(state, expanded=expanded)


def is_section_expanded(state: ViewerState, class_id: str, section: CardSection) -> bool:
    return section in state.expanded.get(class_id, frozenset())


# --- Repository lifecycle ---


def begin_load(state: ViewerState, file: str) -> tuple[ViewerState, int]:
    """Start loading a file; the returned generation identifies this load."""
    generation = state.load_generation + 1
    state = replace(state, file=file, loading=True, error=None, load_generation=generation)
    return state, generation


def _is_stale(state: ViewerState, generation: int) -> bool:
    if generation != state.load_generation:
        logger.warning(
            "Ignoring stale load (generation {}, latest {})", generation, state.load_generation
        )
        return True
    return False


def complete_load(
    state: ViewerState,
    generation: int,
    classes: Iterable[OntologyClass],
    *,
    rng: random.Random | None = None,
) -> ViewerState:
    """Swap in freshly loaded classes. Flip and expansion state start over."""
    if _is_stale(state, generation):
        return state
    state = replace(
        state,
        classes=tuple(classes),
        loading=False,
        error=None,
        flipped=frozenset(),
        expanded={},
        current_index=0,
    )
    return recompute(state, rng=rng)


def fail_load(state: ViewerState, generation: int, message: str) -> ViewerState:
    if _is_stale(state, generation):
        return state
    return replace(
        state, classes=(), visible=(), current_index=0, loading=False, error=message
    )


def clear_file(state: ViewerState) -> ViewerState:
    """Deselect the file. In-flight loads become stale."""
    return replace(
        state,
        file="",
        classes=(),
        visible=(),
        current_index=0,
        loading=False,
        load_generation=state.load_generation + 1,
    )


def after_delete(state: ViewerState, previous_index: int, previous_length: int) -> ViewerState:
    """Keep the pointer in range after the card at the end was deleted."""
    if previous_index < previous_length - 1:
        return state
    index = max(0, previous_length - 2)
    index = min(index, max(0, len(state.visible) - 1))
    return replace(state, current_index=index)


def set_error(state: ViewerState, message: str) -> ViewerState:
    return replace(state, error=message)


def clear_error(state: ViewerState) -> ViewerState:
    return replace(state, error=None)
