"""Back/forward history of visited classes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NavigationHistory:
    """Visited class ids and a pointer into them.

    `index` is -1 for an empty history and otherwise a valid index into
    `entries`.
    """

    entries: tuple[str, ...] = ()
    index: int = -1

    @property
    def current(self) -> str | None:
        if self.index < 0:
            return None
        return self.entries[self.index]

    @property
    def can_go_back(self) -> bool:
        return self.index > 0

    @property
    def can_go_forward(self) -> bool:
        return self.index < len(self.entries) - 1


def commit(history: NavigationHistory, class_id: str) -> NavigationHistory:
    """Record a visit, discarding the forward branch."""
    entries = (*history.entries[: history.index + 1], class_id)
    return NavigationHistory(entries=entries, index=len(entries) - 1)


def back(history: NavigationHistory) -> tuple[NavigationHistory, str | None]:
    """Step back one entry; at the start, return the history unchanged and None."""
    if not history.can_go_back:
        return history, None
    moved = NavigationHistory(entries=history.entries, index=history.index - 1)
    return moved, moved.current


def forward(history: NavigationHistory) -> tuple[NavigationHistory, str | None]:
    """Step forward one entry; at the end, return the history unchanged and None."""
    if not history.can_go_forward:
        return history, None
    moved = NavigationHistory(entries=history.entries, index=history.index + 1)
    return moved, moved.current
