"""
Pagesmith Editor - Command Construction

Factory functions for creating well-formed commands.
Used by the session facade before feeding commands to the reducer,
and by tests to build commands concisely.
"""

from __future__ import annotations

from typing import Any

from engine.editor.types import Command


def make_command(type: str, payload: dict[str, Any] | None = None) -> Command:
    """Build a Command from a type string and an optional payload."""
    return Command(type=type, payload=dict(payload or {}))


# ---------------------------------------------------------------------------
# Structural
# ---------------------------------------------------------------------------


def add_element(element: dict[str, Any], container_id: str) -> Command:
    return make_command("element.add", {"element": element, "container_id": container_id})


def update_element(element_id: str, updates: dict[str, Any]) -> Command:
    return make_command("element.update", {"id": element_id, "updates": updates})


def delete_element(element_id: str) -> Command:
    return make_command("element.delete", {"id": element_id})


def duplicate_element(element_id: str, new_id: str | None = None) -> Command:
    """
    new_id is normally supplied by the facade's id factory so the reducer
    stays deterministic. When omitted the reducer derives "<id>-copy-N".
    """
    payload: dict[str, Any] = {"id": element_id}
    if new_id is not None:
        payload["new_id"] = new_id
    return make_command("element.duplicate", payload)


def move_element(
    element_id: str,
    from_container_id: str,
    to_container_id: str,
    index: int | None = None,
) -> Command:
    payload: dict[str, Any] = {
        "id": element_id,
        "from_container_id": from_container_id,
        "to_container_id": to_container_id,
    }
    if index is not None:
        payload["index"] = index
    return make_command("element.move", payload)


def set_template(template_id: str) -> Command:
    return make_command("template.set", {"template_id": template_id})


def load_document(document: dict[str, Any]) -> Command:
    return make_command("document.load", {"document": document})


# ---------------------------------------------------------------------------
# View-only
# ---------------------------------------------------------------------------


def select_element(element_id: str | None) -> Command:
    return make_command("select.element", {"id": element_id})


def select_container(container_id: str | None) -> Command:
    return make_command("select.container", {"id": container_id})


def toggle_preview() -> Command:
    return make_command("view.toggle_preview")


def set_viewport(mode: str) -> Command:
    return make_command("view.set_viewport", {"mode": mode})


def set_dragging(is_dragging: bool) -> Command:
    return make_command("view.set_dragging", {"is_dragging": is_dragging})


def add_recent_kind(kind: str, limit: int | None = None) -> Command:
    payload: dict[str, Any] = {"kind": kind}
    if limit is not None:
        payload["limit"] = limit
    return make_command("recent.add", payload)
