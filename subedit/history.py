"""Undo/redo of Timeline states."""

from dataclasses import dataclass
from typing import List, Optional

from .timeline import Timeline

DEFAULT_MAX_STATES = 100


@dataclass(frozen=True)
class HistoryEntry:
    """A Timeline state together with the edit that produced it."""
    description: str
    timeline: Timeline


class TimelineHistory:
    """
    Linear undo/redo over immutable Timeline values.

    Because Timelines never change in place, each step stores the complete
    state rather than an inverse operation.
    """

    def __init__(self, initial: Timeline, max_states: int = DEFAULT_MAX_STATES):
        self._current = initial
        self._undo_stack: List[HistoryEntry] = []
        self._redo_stack: List[HistoryEntry] = []
        self._max_states = max_states

    @property
    def current(self) -> Timeline:
        return self._current

    @property
    def can_undo(self) -> bool:
        return len(self._undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    @property
    def undo_text(self) -> str:
        """Get description of the edit that would be undone."""
        if self._undo_stack:
            return f"Undo: {self._undo_stack[-1].description}"
        return "Undo"

    @property
    def redo_text(self) -> str:
        """Get description of the edit that would be redone."""
        if self._redo_stack:
            return f"Redo: {self._redo_stack[-1].description}"
        return "Redo"

    def push(self, description: str, timeline: Timeline) -> None:
        """
        Records a new current state.

        Clears the redo stack.
        """
        self._undo_stack.append(HistoryEntry(description, self._current))
        self._redo_stack.clear()
        self._current = timeline

        while len(self._undo_stack) > self._max_states:
            self._undo_stack.pop(0)

    def undo(self) -> Optional[Timeline]:
        """Steps back one edit. Returns the restored state, or None if there is nothing to undo."""
        if not self._undo_stack:
            return None
        entry = self._undo_stack.pop()
        self._redo_stack.append(HistoryEntry(entry.description, self._current))
        self._current = entry.timeline
        return self._current

    def redo(self) -> Optional[Timeline]:
        if not self._redo_stack:
            return None
        entry = self._redo_stack.pop()
        self._undo_stack.append(HistoryEntry(entry.description, self._current))
        self._current = entry.timeline
        return self._current

    def clear(self) -> None:
        """Forget both stacks, keeping the current state."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    def reset(self, timeline: Timeline) -> None:
        """Starts over from a new state, e.g. after captions are re-imported."""
        self.clear()
        self._current = timeline
