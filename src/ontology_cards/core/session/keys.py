"""Keyboard shortcuts for the flash-card viewer."""

import random
from dataclasses import dataclass

from ontology_cards.core.session.state import (
    ViewerState,
    current_class,
    is_flipped,
    navigate_sibling,
    random_card,
    toggle_flip,
    toggle_shuffle,
)

SHORTCUTS: tuple[tuple[str, str], ...] = (
    ("↑", "Previous sibling"),
    ("↓", "Next sibling"),
    ("Space", "Flip card"),
    ("R", "Random card"),
    ("S", "Toggle shuffle"),
)


@dataclass(frozen=True)
class KeyResult:
    """Outcome of a key press; `handled` means the default action is suppressed."""

    state: ViewerState
    handled: bool


def handle_key(
    state: ViewerState,
    key: str,
    *,
    in_text_input: bool = False,
    rng: random.Random | None = None,
) -> KeyResult:
    if in_text_input:
        return KeyResult(state, handled=False)

    cls = current_class(state)
    if key in ("ArrowUp", "ArrowDown"):
        # A flipped card scrolls its back instead
        if cls is not None and is_flipped(state, cls.id):
            return KeyResult(state, handled=False)
        direction = -1 if key == "ArrowUp" else 1
        return KeyResult(navigate_sibling(state, direction), handled=True)
    if key == " ":
        if cls is not None:
            state = toggle_flip(state, cls.id)
        return KeyResult(state, handled=True)
    if key in ("r", "R"):
        return KeyResult(random_card(state, rng=rng), handled=True)
    if key in ("s", "S"):
        return KeyResult(toggle_shuffle(state, rng=rng), handled=True)
    return KeyResult(state, handled=False)
