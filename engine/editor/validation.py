"""
Pagesmith Editor - Command Validation

Validates command payloads before they reach the reducer.
Validation is structural (well-formed?) not semantic (will it apply?).
The reducer handles semantic checks (does the container exist? etc.).
"""

from __future__ import annotations

from typing import Any

from engine.editor.types import COMMAND_TYPES, ELEMENT_KINDS, LIST_TYPES

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_command(type: str, payload: dict[str, Any]) -> list[str]:
    """
    Validate a command's type and payload structure.
    Returns a list of error strings. Empty list = valid.

    It does NOT check whether referenced elements/containers/templates exist.
    That's the reducer's job.
    """
    errors: list[str] = []

    if type not in COMMAND_TYPES:
        errors.append(f"Unknown command type: {type}")
        return errors

    if not isinstance(payload, dict):
        errors.append("Payload must be a non-null object")
        return errors

    validator = _VALIDATORS.get(type)
    if validator:
        errors.extend(validator(payload))

    return errors


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_str(p: dict, key: str, command: str) -> list[str]:
    if key not in p:
        return [f"{command} requires '{key}'"]
    if not isinstance(p[key], str) or not p[key]:
        return [f"'{key}' must be a non-empty string"]
    return []


def _optional_str(p: dict, key: str) -> list[str]:
    value = p.get(key)
    if value is not None and not isinstance(value, str):
        return [f"'{key}' must be a string or null"]
    return []


# ---------------------------------------------------------------------------
# Per-command validators
# ---------------------------------------------------------------------------


def _validate_element_add(p: dict) -> list[str]:
    errors = _require_str(p, "container_id", "element.add")
    element = p.get("element")
    if not isinstance(element, dict):
        errors.append("element.add requires 'element' object")
        return errors
    if not isinstance(element.get("id"), str) or not element.get("id"):
        errors.append("element requires a non-empty 'id'")
    if element.get("kind") not in ELEMENT_KINDS:
        errors.append(f"Unknown element kind: {element.get('kind')}")
    if "style" in element and not isinstance(element["style"], dict):
        errors.append("'style' must be an object")
    return errors


def _validate_element_update(p: dict) -> list[str]:
    errors = _require_str(p, "id", "element.update")
    updates = p.get("updates")
    if not isinstance(updates, dict):
        errors.append("element.update requires 'updates' object")
    else:
        if "style" in updates and not isinstance(updates["style"], dict):
            errors.append("'style' must be an object")
        if "content" in updates and not isinstance(updates["content"], str):
            errors.append("'content' must be a string")
        if "formatted_ranges" in updates and not isinstance(updates["formatted_ranges"], list):
            errors.append("'formatted_ranges' must be a list")
        list_type = updates.get("list_type", "none")
        if not isinstance(list_type, str) or list_type not in LIST_TYPES:
            errors.append(f"Unknown list type: {list_type}")
    return errors


def _validate_element_delete(p: dict) -> list[str]:
    return _require_str(p, "id", "element.delete")


def _validate_element_duplicate(p: dict) -> list[str]:
    errors = _require_str(p, "id", "element.duplicate")
    errors.extend(_optional_str(p, "new_id"))
    return errors


def _validate_element_move(p: dict) -> list[str]:
    errors = _require_str(p, "id", "element.move")
    errors.extend(_require_str(p, "from_container_id", "element.move"))
    errors.extend(_require_str(p, "to_container_id", "element.move"))
    index = p.get("index")
    if index is not None and (not isinstance(index, int) or isinstance(index, bool)):
        errors.append("'index' must be an integer")
    return errors


def _validate_template_set(p: dict) -> list[str]:
    return _require_str(p, "template_id", "template.set")


def _validate_document_load(p: dict) -> list[str]:
    document = p.get("document")
    if not isinstance(document, dict):
        return ["document.load requires 'document' object"]
    errors: list[str] = []
    for key in ("elements", "containers"):
        if not isinstance(document.get(key), dict):
            errors.append(f"document requires '{key}' object")
    if not isinstance(document.get("templates"), list):
        errors.append("document requires 'templates' list")
    return errors


def _validate_select(p: dict) -> list[str]:
    return _optional_str(p, "id")


def _validate_set_viewport(p: dict) -> list[str]:
    return _require_str(p, "mode", "view.set_viewport")


def _validate_set_dragging(p: dict) -> list[str]:
    if not isinstance(p.get("is_dragging"), bool):
        return ["view.set_dragging requires boolean 'is_dragging'"]
    return []


def _validate_recent_add(p: dict) -> list[str]:
    errors = _require_str(p, "kind", "recent.add")
    limit = p.get("limit")
    if limit is not None and (not isinstance(limit, int) or isinstance(limit, bool) or limit < 1):
        errors.append("'limit' must be a positive integer")
    return errors


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

_VALIDATORS: dict[str, Any] = {
    "element.add": _validate_element_add,
    "element.update": _validate_element_update,
    "element.delete": _validate_element_delete,
    "element.duplicate": _validate_element_duplicate,
    "element.move": _validate_element_move,
    "template.set": _validate_template_set,
    "document.load": _validate_document_load,
    "select.element": _validate_select,
    "select.container": _validate_select,
    "view.set_viewport": _validate_set_viewport,
    "view.set_dragging": _validate_set_dragging,
    "recent.add": _validate_recent_add,
}
