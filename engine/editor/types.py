"""
Pagesmith Editor - Shared Types

Constants and data classes used across commands, reducer, history, and the
session facade. These are the contracts that bind the editor core together.

State shape (plain JSON-compatible dicts, snake_case keys):
- elements: dict[element_id, Element]
- containers: dict[container_id, Container]  ("drop zones")
- templates: list[Template]
- current_template_id, selected_element_id, selected_container_id
- is_preview_mode, is_dragging, viewport, recent_kinds  (transient view fields)
"""

from __future__ import annotations

import itertools
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Element kinds
# ---------------------------------------------------------------------------

ELEMENT_KINDS: tuple[str, ...] = (
    "heading",
    "paragraph",
    "image",
    "button",
    "container",
    "two-column",
    "form",
    "gallery",
    "video",
    "link",
    "table",
)

TEXT_KINDS: frozenset[str] = frozenset({"heading", "paragraph"})

FONT_SIZES: set[str] = {"small", "medium", "large", "extra-large"}
FONT_WEIGHTS: set[str] = {"light", "normal", "bold"}
ALIGNMENTS: set[str] = {"left", "center", "right"}
LINK_TARGETS: set[str] = {"_self", "_blank", "_parent", "_top"}
FORM_FIELD_TYPES: set[str] = {"text", "email", "textarea"}

# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

# Application order matters: bold is wrapped first (innermost),
# superscript last (outermost).
FORMAT_FLAGS: tuple[str, ...] = (
    "bold",
    "italic",
    "underline",
    "strikethrough",
    "subscript",
    "superscript",
)

FORMAT_TAGS: dict[str, str] = {
    "bold": "strong",
    "italic": "em",
    "underline": "u",
    "strikethrough": "s",
    "subscript": "sub",
    "superscript": "sup",
}

LIST_TYPES: set[str] = {"none", "ordered", "unordered"}

# ---------------------------------------------------------------------------
# Session / view
# ---------------------------------------------------------------------------

VIEWPORT_MODES: set[str] = {"desktop", "tablet", "mobile"}

DEFAULT_RECENT_KINDS_LIMIT = 5
DEFAULT_HISTORY_LIMIT = 100

# Fields excluded from history snapshots and from persisted documents.
TRANSIENT_FIELDS: tuple[str, ...] = (
    "selected_element_id",
    "selected_container_id",
    "is_preview_mode",
    "is_dragging",
    "viewport",
    "recent_kinds",
)

DOCUMENT_FIELDS: tuple[str, ...] = (
    "elements",
    "containers",
    "templates",
    "current_template_id",
)

# ---------------------------------------------------------------------------
# Command registry
# ---------------------------------------------------------------------------

STRUCTURAL_COMMANDS: set[str] = {
    "element.add",
    "element.update",
    "element.delete",
    "element.duplicate",
    "element.move",
    "template.set",
    "document.load",
}

VIEW_COMMANDS: set[str] = {
    "select.element",
    "select.container",
    "view.toggle_preview",
    "view.set_viewport",
    "view.set_dragging",
    "recent.add",
}

COMMAND_TYPES: set[str] = STRUCTURAL_COMMANDS | VIEW_COMMANDS

# Element fields an update may never overwrite; changing them would break
# the parent/child bijection or the kind tag.
PROTECTED_ELEMENT_FIELDS: frozenset[str] = frozenset({"id", "kind", "parent_id"})


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Command:
    """
    One requested state transition.
    The reducer reads only `type` and `payload`.
    """

    type: str
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_structural(self) -> bool:
        return self.type in STRUCTURAL_COMMANDS

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Command:
        return cls(type=d["type"], payload=d.get("payload", {}))


@dataclass
class ReduceResult:
    """
    Result of applying one command to a state.
    The reducer never throws. On rejection `state` is the input object itself,
    so callers may also detect a no-op with `result.state is old_state`.
    """

    state: dict[str, Any]
    applied: bool
    reason: str | None = None


# ---------------------------------------------------------------------------
# Id generation
# ---------------------------------------------------------------------------

IdFactory = Callable[[], str]


def uuid_ids() -> str:
    """Default id factory: random UUID4 string."""
    return str(uuid.uuid4())


def sequential_ids(prefix: str = "id") -> IdFactory:
    """
    Deterministic id factory for tests and replays.

    sequential_ids("el")() -> "el-1", then "el-2", ...
    """
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"
