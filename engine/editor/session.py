"""
Pagesmith Editor - Editing Session

The public surface collaborators (UI, HTTP layer, persistence) call.
Wires the reducer and history together, builds default elements through
the content-model factories, and runs the Range Formatter on the text
update path so callers never hand-roll markup or range bookkeeping.

Every operation is synchronous and applied to completion. Invalid
references are silent no-ops: methods return False/None and the state is
left untouched. The reason is logged at DEBUG.

The session exclusively owns the authoritative state. `state` hands out
the current snapshot for reading; callers must not mutate it.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from engine.editor import commands
from engine.editor.elements import (
    add_form_field,
    add_gallery_image,
    create_element,
    create_session_state,
    remove_form_field,
    remove_gallery_image,
    resize_table,
)
from engine.editor.formatter import (
    add_or_update_range,
    infer_list_type,
    is_valid_range,
    make_formatting,
    reconcile_after_edit,
    render_rich_text,
)
from engine.editor.history import History, document_of
from engine.editor.types import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_RECENT_KINDS_LIMIT,
    ELEMENT_KINDS,
    FORM_FIELD_TYPES,
    TEXT_KINDS,
    Command,
    IdFactory,
    ReduceResult,
    uuid_ids,
)
from engine.editor.validation import validate_command

logger = logging.getLogger(__name__)


def _text_of(element: dict[str, Any]) -> str:
    content = element.get("content", "")
    return content if isinstance(content, str) else ""


class EditingSession:
    """One user's editing session over a single document."""

    def __init__(
        self,
        state: dict[str, Any] | None = None,
        *,
        id_factory: IdFactory = uuid_ids,
        history_limit: int | None = DEFAULT_HISTORY_LIMIT,
        recent_kinds_limit: int = DEFAULT_RECENT_KINDS_LIMIT,
    ) -> None:
        if state is None:
            state = create_session_state(id_factory=id_factory)
        self._ids = id_factory
        self._history = History(state, limit=history_limit)
        self.recent_kinds_limit = recent_kinds_limit

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> dict[str, Any]:
        return self._history.present

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def recent_kinds(self) -> list[str]:
        return list(self.state["recent_kinds"])

    def get_element(self, element_id: str) -> dict[str, Any] | None:
        return self.state["elements"].get(element_id)

    def current_template(self) -> dict[str, Any] | None:
        current = self.state["current_template_id"]
        return next((t for t in self.state["templates"] if t["id"] == current), None)

    def visible_containers(self) -> list[dict[str, Any]]:
        """Containers of the current template, in layout order."""
        template = self.current_template()
        if template is None:
            return []
        containers = self.state["containers"]
        return [containers[cid] for cid in template["container_ids"] if cid in containers]

    def render_text(self, element_id: str) -> str | None:
        """Markup for a heading or paragraph; None for other kinds or unknown ids."""
        element = self.get_element(element_id)
        if element is None or element["kind"] not in TEXT_KINDS:
            return None
        return render_rich_text(
            _text_of(element),
            element.get("formatted_ranges") or [],
            element.get("list_type", "none"),
            paragraphs=element["kind"] == "paragraph",
        )

    def export_document(self) -> dict[str, Any]:
        """Persistable copy of the document (transient view fields excluded)."""
        return copy.deepcopy(document_of(self.state))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, command: Command) -> ReduceResult:
        """Validate and apply a raw command. All public operations go through here."""
        errors = validate_command(command.type, command.payload)
        if errors:
            logger.debug("EditingSession: rejected %s: %s", command.type, "; ".join(errors))
            return ReduceResult(state=self.state, applied=False, reason="INVALID_COMMAND: " + "; ".join(errors))

        result = self._history.dispatch(command)
        if not result.applied:
            logger.debug("EditingSession: %s not applied: %s", command.type, result.reason)
        return result

    # ------------------------------------------------------------------
    # Structural operations
    # ------------------------------------------------------------------

    def add_element(self, kind: str, container_id: str) -> str | None:
        """Add a default element of `kind` to a container. Returns the new id."""
        if kind not in ELEMENT_KINDS:
            logger.debug("EditingSession: unknown element kind %r", kind)
            return None

        element = create_element(kind, container_id, id_factory=self._ids)
        if not self.dispatch(commands.add_element(element, container_id)).applied:
            return None
        self.dispatch(commands.add_recent_kind(kind, self.recent_kinds_limit))
        return element["id"]

    def update_element(self, element_id: str, updates: dict[str, Any]) -> bool:
        """
        Merge `updates` into an element (style merged key by key).

        Text content edits carry their formatting along: unless the caller
        supplies them, formatted ranges are reconciled against the new text
        and a change in prefix-derived list type is applied.
        """
        element = self.get_element(element_id)
        if element is not None and isinstance(updates, dict):
            updates = self._text_updates(element, updates)
        return self.dispatch(commands.update_element(element_id, updates)).applied

    def delete_element(self, element_id: str) -> bool:
        return self.dispatch(commands.delete_element(element_id)).applied

    def duplicate_element(self, element_id: str) -> str | None:
        """Clone an element at the end of its container. Returns the clone's id."""
        new_id = self._ids()
        if not self.dispatch(commands.duplicate_element(element_id, new_id)).applied:
            return None
        return new_id

    def move_element(
        self,
        element_id: str,
        from_container_id: str,
        to_container_id: str,
        index: int | None = None,
    ) -> bool:
        command = commands.move_element(element_id, from_container_id, to_container_id, index)
        return self.dispatch(command).applied

    def set_template(self, template_id: str) -> bool:
        """
        Switch the visible template. Re-selecting the current template changes
        no document content and records no undo step; it only clears the
        selection, and returns False.
        """
        if template_id == self.state["current_template_id"]:
            self.dispatch(commands.select_element(None))
            return False
        return self.dispatch(commands.set_template(template_id)).applied

    def load_document(self, document: dict[str, Any]) -> bool:
        """Replace the document wholesale. History restarts at the loaded state."""
        result = self.dispatch(commands.load_document(document))
        if result.applied:
            self._history.reset(result.state)
        return result.applied

    # ------------------------------------------------------------------
    # Rich text
    # ------------------------------------------------------------------

    def apply_formatting(self, element_id: str, start: int, end: int, formatting: dict[str, Any]) -> bool:
        """Format content[start:end] of a text element; overlapping ranges are replaced."""
        element = self.get_element(element_id)
        if element is None or element["kind"] not in TEXT_KINDS:
            return False
        flags = {flag: bool(value) for flag, value in formatting.items() if isinstance(flag, str)}
        new_range = {"start": start, "end": end, "formatting": make_formatting(**flags)}
        if not is_valid_range(new_range, len(_text_of(element))):
            logger.debug("EditingSession: invalid range %r..%r for %s", start, end, element_id)
            return False
        ranges = add_or_update_range(element.get("formatted_ranges") or [], new_range)
        return self.update_element(element_id, {"formatted_ranges": ranges})

    def clear_formatting(self, element_id: str, start: int, end: int) -> bool:
        return self.apply_formatting(element_id, start, end, {})

    def _text_updates(self, element: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
        if element["kind"] not in TEXT_KINDS or "content" not in updates:
            return updates
        old_content = _text_of(element)
        new_content = updates["content"]
        if not isinstance(new_content, str) or new_content == old_content:
            return updates

        updates = dict(updates)
        if "formatted_ranges" not in updates:
            updates["formatted_ranges"] = reconcile_after_edit(
                old_content, new_content, element.get("formatted_ranges") or []
            )
        if element["kind"] == "paragraph" and "list_type" not in updates:
            inferred = infer_list_type(new_content)
            if inferred != infer_list_type(old_content):
                updates["list_type"] = inferred
        return updates

    # ------------------------------------------------------------------
    # Kind-specific edits
    # ------------------------------------------------------------------

    def _element_of_kind(self, element_id: str, kind: str) -> dict[str, Any] | None:
        element = self.get_element(element_id)
        if element is None or element["kind"] != kind:
            logger.debug("EditingSession: %s is not a %s element", element_id, kind)
            return None
        return element

    def resize_table(self, element_id: str, rows: int, columns: int) -> bool:
        """Resize a table; rows and columns are each clamped to 1..20."""
        element = self._element_of_kind(element_id, "table")
        if element is None:
            return False
        return self.update_element(element_id, resize_table(element, rows, columns))

    def add_gallery_image(self, element_id: str, src: str, alt: str = "") -> str | None:
        """Append an image to a gallery. Returns the new image id."""
        element = self._element_of_kind(element_id, "gallery")
        if element is None:
            return None
        update = add_gallery_image(element, src, alt, id_factory=self._ids)
        if not self.update_element(element_id, update):
            return None
        return update["images"][-1]["id"]

    def remove_gallery_image(self, element_id: str, image_id: str) -> bool:
        element = self._element_of_kind(element_id, "gallery")
        if element is None:
            return False
        return self.update_element(element_id, remove_gallery_image(element, image_id))

    def add_form_field(
        self,
        element_id: str,
        field_type: str = "text",
        label: str = "New Field",
        placeholder: str = "",
        required: bool = False,
    ) -> str | None:
        """Append a field to a form. Returns the new field id; None for an unknown field type."""
        element = self._element_of_kind(element_id, "form")
        if element is None:
            return None
        if field_type not in FORM_FIELD_TYPES:
            logger.debug("EditingSession: unknown form field type %r", field_type)
            return None
        update = add_form_field(element, field_type, label, placeholder, required, id_factory=self._ids)
        if not self.update_element(element_id, update):
            return None
        return update["fields"][-1]["id"]

    def remove_form_field(self, element_id: str, field_id: str) -> bool:
        element = self._element_of_kind(element_id, "form")
        if element is None:
            return False
        return self.update_element(element_id, remove_form_field(element, field_id))

    # ------------------------------------------------------------------
    # View-only operations
    # ------------------------------------------------------------------

    def select_element(self, element_id: str | None) -> bool:
        return self.dispatch(commands.select_element(element_id)).applied

    def select_container(self, container_id: str | None) -> bool:
        return self.dispatch(commands.select_container(container_id)).applied

    def toggle_preview_mode(self) -> bool:
        return self.dispatch(commands.toggle_preview()).applied

    def set_viewport(self, mode: str) -> bool:
        return self.dispatch(commands.set_viewport(mode)).applied

    def set_dragging(self, is_dragging: bool) -> bool:
        return self.dispatch(commands.set_dragging(is_dragging)).applied

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        return self._history.undo()

    def redo(self) -> bool:
        return self._history.redo()
