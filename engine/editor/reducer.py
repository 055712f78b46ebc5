"""
Pagesmith Editor - Reducer

Pure function: (state, command) -> ReduceResult
No side effects. No IO. No randomness. Deterministic.

The input state is never modified. Handlers build new dicts only for the
aggregates they change (elements map, the touched containers, the touched
element) and share everything else with the previous state, so each
transition is one atomic state construction and old states stay valid
history snapshots.

Every rejection returns the input state object unchanged.
"""

from __future__ import annotations

import copy
from collections import Counter
from typing import Any

from engine.editor.types import (
    DEFAULT_RECENT_KINDS_LIMIT,
    ELEMENT_KINDS,
    PROTECTED_ELEMENT_FIELDS,
    VIEWPORT_MODES,
    Command,
    ReduceResult,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def empty_state() -> dict[str, Any]:
    """A session with no templates, containers, or elements."""
    return {
        "elements": {},
        "containers": {},
        "templates": [],
        "current_template_id": None,
        "selected_element_id": None,
        "selected_container_id": None,
        "is_preview_mode": False,
        "is_dragging": False,
        "viewport": "desktop",
        "recent_kinds": [],
    }


def reduce(state: dict[str, Any], command: Command) -> ReduceResult:
    """
    Apply one command to the current state.
    Returns new state + applied flag + rejection reason.
    """
    handler = _HANDLERS.get(command.type)
    if handler is None:
        return _reject(state, "UNKNOWN_COMMAND", command.type)
    payload = command.payload if isinstance(command.payload, dict) else {}
    return handler(state, payload)


def replay(state: dict[str, Any], commands: list[Command]) -> dict[str, Any]:
    """Fold commands over state, skipping the ones that do not apply."""
    for command in commands:
        state = reduce(state, command).state
    return state


def check_invariants(state: dict[str, Any]) -> list[str]:
    """
    Describe every broken containment invariant. Empty list = consistent.

    - each element's parent_id names an existing container listing it once
    - each container's children are unique, exist, and point back to it
    - template ids are unique, their containers exist and belong to one
      template only, and current_template_id names one of them (or is None)
    """
    errors: list[str] = []
    elements = state.get("elements")
    containers = state.get("containers")
    templates = state.get("templates")
    if not isinstance(elements, dict) or not isinstance(containers, dict) or not isinstance(templates, list):
        return ["state requires 'elements', 'containers' objects and a 'templates' list"]

    for element_id, element in elements.items():
        if not isinstance(element, dict):
            errors.append(f"element {element_id!r} is not an object")
            continue
        if element.get("id") != element_id:
            errors.append(f"element {element_id!r} is stored under a different id")
        if element.get("kind") not in ELEMENT_KINDS:
            errors.append(f"element {element_id!r} has unknown kind {element.get('kind')!r}")
        parent_id = element.get("parent_id")
        parent = containers.get(parent_id) if isinstance(parent_id, str) else None
        if not isinstance(parent, dict):
            errors.append(f"element {element_id!r} references missing container {element.get('parent_id')!r}")
            continue
        count = list(parent.get("children") or []).count(element_id)
        if count != 1:
            errors.append(f"element {element_id!r} appears {count} times in its container {parent.get('id')!r}")

    for container_id, container in containers.items():
        if not isinstance(container, dict):
            errors.append(f"container {container_id!r} is not an object")
            continue
        if container.get("id") != container_id:
            errors.append(f"container {container_id!r} is stored under a different id")
        children = container.get("children")
        if not isinstance(children, list):
            errors.append(f"container {container_id!r} has no children list")
            continue
        if not all(isinstance(c, str) for c in children):
            errors.append(f"container {container_id!r} has a non-string child id")
            continue
        for child_id, count in Counter(children).items():
            if count > 1:
                errors.append(f"container {container_id!r} lists {child_id!r} {count} times")
            child = elements.get(child_id)
            if not isinstance(child, dict):
                errors.append(f"container {container_id!r} lists missing element {child_id!r}")
            elif child.get("parent_id") != container_id:
                errors.append(f"container {container_id!r} lists {child_id!r} whose parent is elsewhere")

    template_ids: list[Any] = []
    owners: dict[str, Any] = {}
    for template in templates:
        if not isinstance(template, dict):
            errors.append("template is not an object")
            continue
        template_id = template.get("id")
        if not isinstance(template_id, str):
            errors.append(f"template id {template_id!r} is not a string")
            continue
        template_ids.append(template_id)
        for container_id in template.get("container_ids") or []:
            if not isinstance(container_id, str) or container_id not in containers:
                errors.append(f"template {template_id!r} references missing container {container_id!r}")
                continue
            owner = owners.get(container_id)
            if owner is not None and owner != template_id:
                errors.append(f"container {container_id!r} belongs to templates {owner!r} and {template_id!r}")
            owners[container_id] = template_id

    for template_id, count in Counter(template_ids).items():
        if count > 1:
            errors.append(f"template id {template_id!r} is used {count} times")

    current = state.get("current_template_id")
    if current is not None and current not in template_ids:
        errors.append(f"current template {current!r} does not exist")

    return errors


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _reject(state: dict, code: str, msg: Any) -> ReduceResult:
    return ReduceResult(state=state, applied=False, reason=f"{code}: {msg}")


def _ok(state: dict) -> ReduceResult:
    return ReduceResult(state=state, applied=True)


def _with(state: dict, **changes: Any) -> dict:
    """Copy of state with the given top-level fields replaced."""
    return {**state, **changes}


def _get_element(state: dict, element_id: Any) -> dict | None:
    if not isinstance(element_id, str):
        return None
    return state["elements"].get(element_id)


def _get_container(state: dict, container_id: Any) -> dict | None:
    if not isinstance(container_id, str):
        return None
    return state["containers"].get(container_id)


def _template_ids(state: dict) -> list[str]:
    return [t["id"] for t in state["templates"]]


# ---------------------------------------------------------------------------
# Structural handlers
# ---------------------------------------------------------------------------


def _handle_element_add(state: dict, p: dict) -> ReduceResult:
    element = p.get("element")
    container_id = p.get("container_id")

    if not isinstance(element, dict) or not isinstance(element.get("id"), str):
        return _reject(state, "INVALID_ELEMENT", "element requires an 'id'")
    element_id = element["id"]

    container = _get_container(state, container_id)
    if container is None:
        return _reject(state, "CONTAINER_NOT_FOUND", container_id)
    if element_id in state["elements"]:
        return _reject(state, "ELEMENT_ALREADY_EXISTS", element_id)

    new_element = {**copy.deepcopy(element), "parent_id": container_id}
    return _ok(
        _with(
            state,
            elements={**state["elements"], element_id: new_element},
            containers={
                **state["containers"],
                container_id: {**container, "children": [*container["children"], element_id]},
            },
            selected_element_id=element_id,
            selected_container_id=None,
        )
    )


def _handle_element_update(state: dict, p: dict) -> ReduceResult:
    element_id = p.get("id")
    updates = p.get("updates")

    element = _get_element(state, element_id)
    if element is None:
        return _reject(state, "ELEMENT_NOT_FOUND", element_id)
    if not isinstance(updates, dict):
        return _reject(state, "INVALID_UPDATE", "'updates' must be an object")

    fields = {k: v for k, v in updates.items() if k not in PROTECTED_ELEMENT_FIELDS and k != "style"}
    style = updates.get("style")
    new_style = {**element.get("style", {}), **style} if isinstance(style, dict) else element.get("style", {})

    merged = {**element, **copy.deepcopy(fields), "style": copy.deepcopy(new_style)}
    if merged == element:
        return _reject(state, "NO_CHANGE", element_id)

    return _ok(_with(state, elements={**state["elements"], element_id: merged}))


def _handle_element_delete(state: dict, p: dict) -> ReduceResult:
    element_id = p.get("id")
    element = _get_element(state, element_id)
    if element is None:
        return _reject(state, "ELEMENT_NOT_FOUND", element_id)

    parent = _get_container(state, element.get("parent_id"))
    if parent is None:
        return _reject(state, "CONTAINER_NOT_FOUND", element.get("parent_id"))

    elements = {k: v for k, v in state["elements"].items() if k != element_id}
    changes: dict[str, Any] = {
        "elements": elements,
        "containers": {
            **state["containers"],
            parent["id"]: {**parent, "children": [c for c in parent["children"] if c != element_id]},
        },
    }
    if state["selected_element_id"] == element_id:
        changes["selected_element_id"] = None
    return _ok(_with(state, **changes))


def _copy_id(state: dict, element_id: str) -> str:
    n = 1
    while f"{element_id}-copy-{n}" in state["elements"]:
        n += 1
    return f"{element_id}-copy-{n}"


def _handle_element_duplicate(state: dict, p: dict) -> ReduceResult:
    element_id = p.get("id")
    element = _get_element(state, element_id)
    if element is None:
        return _reject(state, "ELEMENT_NOT_FOUND", element_id)

    parent = _get_container(state, element.get("parent_id"))
    if parent is None:
        return _reject(state, "CONTAINER_NOT_FOUND", element.get("parent_id"))

    new_id = p.get("new_id") or _copy_id(state, element_id)
    if not isinstance(new_id, str):
        return _reject(state, "INVALID_PAYLOAD", "'new_id' must be a string")
    if new_id in state["elements"]:
        return _reject(state, "ELEMENT_ALREADY_EXISTS", new_id)

    clone = {**copy.deepcopy(element), "id": new_id}
    return _ok(
        _with(
            state,
            elements={**state["elements"], new_id: clone},
            containers={**state["containers"], parent["id"]: {**parent, "children": [*parent["children"], new_id]}},
            selected_element_id=new_id,
            selected_container_id=None,
        )
    )


def _handle_element_move(state: dict, p: dict) -> ReduceResult:
    element_id = p.get("id")
    source_id = p.get("from_container_id")
    dest_id = p.get("to_container_id")
    index = p.get("index")

    element = _get_element(state, element_id)
    if element is None:
        return _reject(state, "ELEMENT_NOT_FOUND", element_id)
    source = _get_container(state, source_id)
    if source is None:
        return _reject(state, "CONTAINER_NOT_FOUND", source_id)
    dest = _get_container(state, dest_id)
    if dest is None:
        return _reject(state, "CONTAINER_NOT_FOUND", dest_id)
    if element.get("parent_id") != source_id or element_id not in source["children"]:
        return _reject(state, "NOT_IN_CONTAINER", f"{element_id} is not in {source_id}")

    source_children = [c for c in source["children"] if c != element_id]
    dest_children = source_children if source_id == dest_id else list(dest["children"])
    if isinstance(index, int) and not isinstance(index, bool):
        dest_children.insert(max(0, min(index, len(dest_children))), element_id)
    else:
        dest_children.append(element_id)

    if source_id == dest_id and dest_children == source["children"]:
        return _reject(state, "NO_CHANGE", element_id)

    containers = dict(state["containers"])
    containers[source_id] = {**source, "children": source_children}
    containers[dest_id] = {**dest, "children": dest_children}

    elements = state["elements"]
    if source_id != dest_id:
        elements = {**elements, element_id: {**element, "parent_id": dest_id}}

    return _ok(_with(state, elements=elements, containers=containers))


def _handle_template_set(state: dict, p: dict) -> ReduceResult:
    template_id = p.get("template_id")
    if template_id not in _template_ids(state):
        return _reject(state, "TEMPLATE_NOT_FOUND", template_id)
    # Re-selecting the current template is not a document change; the
    # session clears the selection through select.element instead.
    if template_id == state["current_template_id"]:
        return _reject(state, "NO_CHANGE", template_id)
    return _ok(
        _with(
            state,
            current_template_id=template_id,
            selected_element_id=None,
            selected_container_id=None,
        )
    )


def _handle_document_load(state: dict, p: dict) -> ReduceResult:
    document = p.get("document")
    if not isinstance(document, dict):
        return _reject(state, "INVALID_DOCUMENT", "'document' must be an object")

    candidate = _with(
        state,
        elements=copy.deepcopy(document.get("elements")),
        containers=copy.deepcopy(document.get("containers")),
        templates=copy.deepcopy(document.get("templates")),
        current_template_id=document.get("current_template_id"),
        selected_element_id=None,
        selected_container_id=None,
    )
    errors = check_invariants(candidate)
    if errors:
        return _reject(state, "INVALID_DOCUMENT", errors[0])
    return _ok(candidate)


# ---------------------------------------------------------------------------
# View-only handlers
# ---------------------------------------------------------------------------


def _handle_select_element(state: dict, p: dict) -> ReduceResult:
    element_id = p.get("id")
    if element_id is not None and _get_element(state, element_id) is None:
        return _reject(state, "ELEMENT_NOT_FOUND", element_id)
    return _ok(_with(state, selected_element_id=element_id, selected_container_id=None))


def _handle_select_container(state: dict, p: dict) -> ReduceResult:
    container_id = p.get("id")
    if container_id is not None and _get_container(state, container_id) is None:
        return _reject(state, "CONTAINER_NOT_FOUND", container_id)
    return _ok(_with(state, selected_container_id=container_id, selected_element_id=None))


def _handle_toggle_preview(state: dict, p: dict) -> ReduceResult:
    return _ok(
        _with(
            state,
            is_preview_mode=not state["is_preview_mode"],
            selected_element_id=None,
            selected_container_id=None,
        )
    )


def _handle_set_viewport(state: dict, p: dict) -> ReduceResult:
    mode = p.get("mode")
    if mode not in VIEWPORT_MODES:
        return _reject(state, "INVALID_VIEWPORT", mode)
    return _ok(_with(state, viewport=mode))


def _handle_set_dragging(state: dict, p: dict) -> ReduceResult:
    is_dragging = p.get("is_dragging")
    if not isinstance(is_dragging, bool):
        return _reject(state, "INVALID_PAYLOAD", "'is_dragging' must be a boolean")
    return _ok(_with(state, is_dragging=is_dragging))


def _handle_recent_add(state: dict, p: dict) -> ReduceResult:
    kind = p.get("kind")
    if kind not in ELEMENT_KINDS:
        return _reject(state, "UNKNOWN_KIND", kind)
    limit = p.get("limit") or DEFAULT_RECENT_KINDS_LIMIT
    recent = [kind, *(k for k in state["recent_kinds"] if k != kind)][:limit]
    return _ok(_with(state, recent_kinds=recent))


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_HANDLERS: dict[str, Any] = {
    "element.add": _handle_element_add,
    "element.update": _handle_element_update,
    "element.delete": _handle_element_delete,
    "element.duplicate": _handle_element_duplicate,
    "element.move": _handle_element_move,
    "template.set": _handle_template_set,
    "document.load": _handle_document_load,
    "select.element": _handle_select_element,
    "select.container": _handle_select_container,
    "view.toggle_preview": _handle_toggle_preview,
    "view.set_viewport": _handle_set_viewport,
    "view.set_dragging": _handle_set_dragging,
    "recent.add": _handle_recent_add,
}
