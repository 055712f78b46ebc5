"""
Pagesmith Editor - History

Linear undo/redo over reducer states.

    past     stack of earlier states, oldest first
    present  the current state
    future   stack of undone states, nearest on top

Structural commands push the pre-command state onto `past` and clear
`future`. View-only commands replace `present` without touching either
stack. Restoring a state from either stack keeps the present transient
view fields (selection, preview, viewport, dragging, recent kinds), so
undo/redo only ever moves the document.

Everything is synchronous: the snapshot taken after a dispatch is the
reducer's return value, never a deferred read.
"""

from __future__ import annotations

import logging
from typing import Any

from engine.editor.reducer import reduce
from engine.editor.types import (
    DEFAULT_HISTORY_LIMIT,
    DOCUMENT_FIELDS,
    STRUCTURAL_COMMANDS,
    TRANSIENT_FIELDS,
    Command,
    ReduceResult,
)

logger = logging.getLogger(__name__)


def document_of(state: dict[str, Any]) -> dict[str, Any]:
    """The persistable part of a state: everything but the transient view fields."""
    return {key: state[key] for key in DOCUMENT_FIELDS if key in state}


def restore(snapshot: dict[str, Any], current: dict[str, Any]) -> dict[str, Any]:
    """
    Document fields from `snapshot`, transient fields from `current`.

    A selection that no longer resolves in the restored document is cleared.
    """
    restored = {**snapshot, **{key: current[key] for key in TRANSIENT_FIELDS if key in current}}
    if restored.get("selected_element_id") not in restored["elements"]:
        restored["selected_element_id"] = None
    if restored.get("selected_container_id") not in restored["containers"]:
        restored["selected_container_id"] = None
    return restored


class History:
    """
    Wraps the reducer with snapshot-based undo/redo.

    `limit` caps the number of undo steps kept (oldest dropped first);
    0 or None keeps everything.
    """

    def __init__(self, initial_state: dict[str, Any], *, limit: int | None = DEFAULT_HISTORY_LIMIT) -> None:
        self.past: list[dict[str, Any]] = []
        self.present: dict[str, Any] = initial_state
        self.future: list[dict[str, Any]] = []
        self.limit = limit

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def dispatch(self, command: Command) -> ReduceResult:
        """Reduce `command` against the present state and record it if structural."""
        result = reduce(self.present, command)
        if not result.applied:
            return result

        if command.type in STRUCTURAL_COMMANDS:
            self.past.append(self.present)
            if self.limit and len(self.past) > self.limit:
                del self.past[: len(self.past) - self.limit]
            self.future.clear()

        self.present = result.state
        return result

    def undo(self) -> bool:
        """Step back one structural change. Returns False when there is nothing to undo."""
        if not self.past:
            return False
        previous = self.past.pop()
        self.future.append(self.present)
        self.present = restore(previous, self.present)
        logger.debug("History: undo (%d undo / %d redo left)", len(self.past), len(self.future))
        return True

    def redo(self) -> bool:
        """Re-apply the most recently undone change. Returns False when there is nothing to redo."""
        if not self.future:
            return False
        following = self.future.pop()
        self.past.append(self.present)
        self.present = restore(following, self.present)
        logger.debug("History: redo (%d undo / %d redo left)", len(self.past), len(self.future))
        return True

    def reset(self, state: dict[str, Any]) -> None:
        """Start a fresh history at `state` (after a bulk document load)."""
        self.past.clear()
        self.future.clear()
        self.present = state
