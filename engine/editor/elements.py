"""
Pagesmith Editor - Content Model Factories

Default elements per kind, the three built-in templates, and the initial
session state built from them. Every factory output satisfies the
containment invariants: each element's parent_id names exactly one
container, and that container lists the element exactly once.

Also holds the kind-specific edit helpers (table resize, gallery images,
form fields). They return partial updates for the session's update path
and never mutate the element they are given.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

from engine.editor.formatter import make_formatting
from engine.editor.types import (
    ELEMENT_KINDS,
    FORM_FIELD_TYPES,
    IdFactory,
    uuid_ids,
)

BASE_STYLE: dict[str, Any] = {"margin": 16, "padding": 8}

PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1498050108023-c5249f4df085"
    "?ixlib=rb-1.2.1&auto=format&fit=crop&w=600&h=400&q=60"
)
GALLERY_IMAGES = (
    "https://images.unsplash.com/photo-1501785888041-af3ef285b470?auto=format&fit=crop&w=300&h=200&q=60",
    "https://images.unsplash.com/photo-1476611317561-60117649dd94?auto=format&fit=crop&w=300&h=200&q=60",
    "https://images.unsplash.com/photo-1506744038136-46273834b3fb?auto=format&fit=crop&w=300&h=200&q=60",
)

TABLE_MIN, TABLE_MAX = 1, 20


# ---------------------------------------------------------------------------
# Per-kind defaults
# ---------------------------------------------------------------------------
# Each entry returns (kind fields, extra style keys). One entry per kind in
# ELEMENT_KINDS; the check at the bottom of this module refuses to import
# with a kind missing.


def _text_fields(content: str, bold: bool) -> dict[str, Any]:
    return {
        "content": content,
        "rich_text": False,
        "text_formatting": make_formatting(bold=bold),
        "formatted_ranges": [],
    }


def _heading(ids: IdFactory) -> tuple[dict, dict]:
    return _text_fields("New Heading", bold=True), {
        "font_size": "large",
        "font_weight": "bold",
        "color": "#000000",
        "alignment": "left",
    }


def _paragraph(ids: IdFactory) -> tuple[dict, dict]:
    fields = _text_fields("New paragraph text. Click to edit content.", bold=False)
    fields["list_type"] = "none"
    return fields, {
        "font_size": "medium",
        "font_weight": "normal",
        "color": "#4B5563",
        "alignment": "left",
    }


def _image(ids: IdFactory) -> tuple[dict, dict]:
    return {"src": PLACEHOLDER_IMAGE, "alt": "Placeholder image"}, {
        "width": "100%",
        "height": "auto",
        "border_radius": 4,
    }


def _button(ids: IdFactory) -> tuple[dict, dict]:
    return {"content": "Button", "link": "#"}, {
        "background_color": "#3B82F6",
        "color": "#FFFFFF",
        "font_size": "medium",
        "font_weight": "normal",
        "border_radius": 4,
        "alignment": "center",
    }


def _container(ids: IdFactory) -> tuple[dict, dict]:
    return {"children": []}, {
        "background_color": "#FFFFFF",
        "border_radius": 4,
        "border_width": 1,
        "border_color": "#E5E7EB",
        "min_height": 100,
    }


def _two_column(ids: IdFactory) -> tuple[dict, dict]:
    return {"left_column": [], "right_column": []}, {"gap": 16, "background_color": "#FFFFFF"}


def _form(ids: IdFactory) -> tuple[dict, dict]:
    fields = [
        _form_field(ids, "text", "Name", "Enter your name", True),
        _form_field(ids, "email", "Email", "Enter your email", True),
        _form_field(ids, "textarea", "Message", "Your message", True),
    ]
    return {
        "fields": fields,
        "submit_button": {"text": "Submit", "background_color": "#3B82F6", "color": "#FFFFFF"},
    }, {"background_color": "#FFFFFF", "gap": 16}


def _gallery(ids: IdFactory) -> tuple[dict, dict]:
    images = [{"id": ids(), "src": src, "alt": f"Gallery image {i}"} for i, src in enumerate(GALLERY_IMAGES, 1)]
    return {"images": images}, {"columns": 3, "gap": 16}


def _video(ids: IdFactory) -> tuple[dict, dict]:
    return {
        "src": "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "title": "Video Title",
        "autoplay": False,
        "controls": True,
        "loop": False,
        "muted": False,
    }, {"width": "100%", "height": "auto", "border_radius": 4, "alignment": "center"}


def _link(ids: IdFactory) -> tuple[dict, dict]:
    return {"content": "Click Here", "href": "https://www.example.com", "target": "_blank"}, {
        "color": "#3B82F6",
        "font_size": "medium",
        "font_weight": "normal",
        "text_decoration": "underline",
        "alignment": "left",
    }


def _table(ids: IdFactory) -> tuple[dict, dict]:
    columns, rows = 3, 2
    return {
        "rows": rows,
        "columns": columns,
        "headers": [f"Header {c}" for c in range(1, columns + 1)],
        "data": [[f"Row {r}, Cell {c}" for c in range(1, columns + 1)] for r in range(1, rows + 1)],
    }, {
        "border_width": 1,
        "border_color": "#E5E7EB",
        "header_background_color": "#F3F4F6",
        "header_text_color": "#111827",
        "row_background_color": "#FFFFFF",
        "row_text_color": "#4B5563",
        "font_size": "small",
        "width": "100%",
    }


_KIND_DEFAULTS: dict[str, Callable[[IdFactory], tuple[dict, dict]]] = {
    "heading": _heading,
    "paragraph": _paragraph,
    "image": _image,
    "button": _button,
    "container": _container,
    "two-column": _two_column,
    "form": _form,
    "gallery": _gallery,
    "video": _video,
    "link": _link,
    "table": _table,
}


# ---------------------------------------------------------------------------
# Public factories
# ---------------------------------------------------------------------------


def create_element(
    kind: str,
    parent_id: str | None = None,
    *,
    id_factory: IdFactory = uuid_ids,
) -> dict[str, Any]:
    """
    Build a fully populated default element of `kind`.

    Raises ValueError for an unknown kind; callers that take kinds from
    untrusted input check `kind in ELEMENT_KINDS` first.
    """
    defaults = _KIND_DEFAULTS.get(kind)
    if defaults is None:
        raise ValueError(f"Unknown element kind: {kind}")

    element_id = id_factory()
    fields, style = defaults(id_factory)
    return {
        "id": element_id,
        "kind": kind,
        "parent_id": parent_id,
        "style": {**BASE_STYLE, **style},
        **fields,
    }


def create_container(container_id: str, label: str, children: list[str] | None = None) -> dict[str, Any]:
    # Containers are flat: parent_id is always None.
    return {"id": container_id, "parent_id": None, "label": label, "children": list(children or [])}


# ---------------------------------------------------------------------------
# Built-in templates
# ---------------------------------------------------------------------------

TEMPLATE_NAMES: dict[str, str] = {
    "basic": "Basic Template",
    "portfolio": "Portfolio Template",
    "business": "Business Template",
}

BUILTIN_TEMPLATE_IDS: tuple[str, ...] = tuple(TEMPLATE_NAMES)
DEFAULT_TEMPLATE_ID = "basic"

_TEMPLATE_ZONES: dict[str, tuple[str, ...]] = {
    "basic": ("header", "content_left", "content_right", "button_row", "third_row", "footer"),
    "portfolio": ("hero", "about", "gallery", "contact", "footer"),
    "business": ("navigation", "hero", "features", "pricing", "call_to_action", "footer"),
}


def _seed(
    kind: str,
    zone_id: str,
    ids: IdFactory,
    style: dict[str, Any] | None = None,
    **fields: Any,
) -> dict[str, Any]:
    element = create_element(kind, zone_id, id_factory=ids)
    element.update(fields)
    if style:
        element["style"] = {**element["style"], **style}
    return element


def _seed_basic(zones: dict[str, str], ids: IdFactory) -> list[dict[str, Any]]:
    return [
        _seed("heading", zones["content_left"], ids, content="Welcome to Your Website"),
        _seed(
            "paragraph",
            zones["content_left"],
            ids,
            content=(
                "Easily build your website using our drag-and-drop interface. "
                "Add text, images, buttons, and more to create a stunning website."
            ),
        ),
        _seed("image", zones["content_right"], ids, style={"margin": 0, "padding": 0}, alt="Laptop with code"),
        _seed("button", zones["button_row"], ids, content="Learn More"),
    ]


def _seed_portfolio(zones: dict[str, str], ids: IdFactory) -> list[dict[str, Any]]:
    return [
        _seed(
            "heading",
            zones["hero"],
            ids,
            style={"font_size": "extra-large", "color": "#FFFFFF", "alignment": "center"},
            content="Jane Doe, Designer",
        ),
        _seed("paragraph", zones["about"], ids, content="I design calm, useful interfaces."),
        _seed("gallery", zones["gallery"], ids),
        _seed("form", zones["contact"], ids),
    ]


def _seed_business(zones: dict[str, str], ids: IdFactory) -> list[dict[str, Any]]:
    return [
        _seed("heading", zones["hero"], ids, style={"alignment": "center"}, content="Grow Your Business"),
        _seed("button", zones["hero"], ids, content="Get Started"),
        _seed(
            "paragraph",
            zones["features"],
            ids,
            content="• Fast setup\n• Friendly support\n• Fair pricing",
            list_type="unordered",
        ),
        _seed("table", zones["pricing"], ids),
    ]


_TEMPLATE_SEEDS: dict[str, Callable[[dict[str, str], IdFactory], list[dict[str, Any]]]] = {
    "basic": _seed_basic,
    "portfolio": _seed_portfolio,
    "business": _seed_business,
}


def create_template(
    template_id: str,
    *,
    id_factory: IdFactory = uuid_ids,
) -> tuple[dict[str, Any], dict[str, dict[str, Any]], dict[str, dict[str, Any]]]:
    """
    Build one built-in template.

    Returns (template, containers, elements): a self-consistent triple where
    each container's children are exactly the elements seeded into it.
    Raises ValueError for an unknown template id.
    """
    if template_id not in TEMPLATE_NAMES:
        raise ValueError(f"Unknown template: {template_id}")

    zones = {label: id_factory() for label in _TEMPLATE_ZONES[template_id]}
    elements = _TEMPLATE_SEEDS[template_id](zones, id_factory)

    containers: dict[str, dict[str, Any]] = {}
    for label, zone_id in zones.items():
        children = [e["id"] for e in elements if e["parent_id"] == zone_id]
        containers[zone_id] = create_container(zone_id, label, children)

    template = {
        "id": template_id,
        "name": TEMPLATE_NAMES[template_id],
        "container_ids": list(zones.values()),
    }
    return template, containers, {e["id"]: e for e in elements}


def create_session_state(
    *,
    id_factory: IdFactory = uuid_ids,
    template_ids: tuple[str, ...] = BUILTIN_TEMPLATE_IDS,
    current_template_id: str = DEFAULT_TEMPLATE_ID,
) -> dict[str, Any]:
    """
    Initial session state: every requested template with its containers and
    seed elements, the first view on `current_template_id`.
    """
    templates: list[dict[str, Any]] = []
    containers: dict[str, dict[str, Any]] = {}
    elements: dict[str, dict[str, Any]] = {}

    for template_id in template_ids:
        template, t_containers, t_elements = create_template(template_id, id_factory=id_factory)
        templates.append(template)
        containers.update(t_containers)
        elements.update(t_elements)

    if current_template_id not in template_ids:
        current_template_id = template_ids[0] if template_ids else None

    return {
        "elements": elements,
        "containers": containers,
        "templates": templates,
        "current_template_id": current_template_id,
        "selected_element_id": None,
        "selected_container_id": None,
        "is_preview_mode": False,
        "is_dragging": False,
        "viewport": "desktop",
        "recent_kinds": [],
    }


# ---------------------------------------------------------------------------
# Kind-specific edit helpers
# ---------------------------------------------------------------------------


def _clamp(value: int) -> int:
    return max(TABLE_MIN, min(TABLE_MAX, value))


def resize_table(element: dict[str, Any], rows: int, columns: int) -> dict[str, Any]:
    """
    Partial update resizing a table to rows x columns (each clamped to 1..20).

    Extra rows/columns are dropped; new ones get placeholder labels.
    """
    rows, columns = _clamp(rows), _clamp(columns)

    headers = list(element.get("headers", []))[:columns]
    headers += [f"Header {c}" for c in range(len(headers) + 1, columns + 1)]

    data: list[list[str]] = []
    for row in list(element.get("data", []))[:rows]:
        cells = list(row)[:columns]
        cells += [f"Cell {c}" for c in range(len(cells) + 1, columns + 1)]
        data.append(cells)
    for r in range(len(data) + 1, rows + 1):
        data.append([f"Row {r}, Cell {c}" for c in range(1, columns + 1)])

    return {"rows": rows, "columns": columns, "headers": headers, "data": data}


def add_gallery_image(
    element: dict[str, Any],
    src: str,
    alt: str = "",
    *,
    id_factory: IdFactory = uuid_ids,
) -> dict[str, Any]:
    images = copy.deepcopy(element.get("images", []))
    images.append({"id": id_factory(), "src": src, "alt": alt})
    return {"images": images}


def remove_gallery_image(element: dict[str, Any], image_id: str) -> dict[str, Any]:
    return {"images": [dict(img) for img in element.get("images", []) if img.get("id") != image_id]}


def _form_field(ids: IdFactory, field_type: str, label: str, placeholder: str, required: bool) -> dict[str, Any]:
    return {"id": ids(), "type": field_type, "label": label, "placeholder": placeholder, "required": required}


def add_form_field(
    element: dict[str, Any],
    field_type: str = "text",
    label: str = "New Field",
    placeholder: str = "",
    required: bool = False,
    *,
    id_factory: IdFactory = uuid_ids,
) -> dict[str, Any]:
    if field_type not in FORM_FIELD_TYPES:
        raise ValueError(f"Unknown form field type: {field_type}")
    fields = copy.deepcopy(element.get("fields", []))
    fields.append(_form_field(id_factory, field_type, label, placeholder, required))
    return {"fields": fields}


def remove_form_field(element: dict[str, Any], field_id: str) -> dict[str, Any]:
    return {"fields": [dict(f) for f in element.get("fields", []) if f.get("id") != field_id]}


_missing_kinds = set(ELEMENT_KINDS) - set(_KIND_DEFAULTS)
if _missing_kinds:  # pragma: no cover
    raise RuntimeError(f"No element defaults for kinds: {sorted(_missing_kinds)}")
