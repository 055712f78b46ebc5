"""
Pagesmith Editor - the document/editing core.

Components:
  formatter  - range-based rich-text formatting (pure)
  elements   - default elements, built-in templates, initial state
  reducer    - (state, command) -> state  (pure, deterministic)
  history    - linear undo/redo over reducer states
  session    - EditingSession, the facade collaborators call
"""

from engine.editor.elements import create_element, create_session_state, create_template
from engine.editor.formatter import (
    add_or_update_range,
    apply_ranges,
    infer_list_type,
    reconcile_after_edit,
    render_rich_text,
)
from engine.editor.history import History
from engine.editor.reducer import check_invariants, empty_state, reduce, replay
from engine.editor.session import EditingSession
from engine.editor.validation import validate_command

__all__ = [
    "EditingSession",
    "History",
    "reduce",
    "replay",
    "empty_state",
    "check_invariants",
    "validate_command",
    "create_element",
    "create_template",
    "create_session_state",
    "apply_ranges",
    "add_or_update_range",
    "reconcile_after_edit",
    "infer_list_type",
    "render_rich_text",
]
