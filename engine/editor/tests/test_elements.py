"""
Pagesmith Content Model -- Factory Tests

Covers:
  - every kind has a default element with base style
  - kind-specific defaults (heading bold, table 3x2, form fields, gallery)
  - built-in templates are self-consistent and seeded
  - initial session state
  - table/gallery/form edit helpers
"""

import pytest

from engine.editor.elements import (
    BUILTIN_TEMPLATE_IDS,
    add_form_field,
    add_gallery_image,
    create_element,
    create_session_state,
    create_template,
    remove_form_field,
    remove_gallery_image,
    resize_table,
)
from engine.editor.reducer import check_invariants
from engine.editor.types import ELEMENT_KINDS, TRANSIENT_FIELDS, sequential_ids

# ============================================================================
# 1. Default elements
# ============================================================================


class TestCreateElement:
    @pytest.mark.parametrize("kind", ELEMENT_KINDS)
    def test_every_kind_has_defaults(self, kind, ids):
        element = create_element(kind, "zone", id_factory=ids)
        assert element["kind"] == kind
        assert element["parent_id"] == "zone"
        assert element["style"]["margin"] == 16
        assert element["style"]["padding"] == 8

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError, match="Unknown element kind"):
            create_element("carousel")

    def test_ids_are_unique(self):
        first, second = create_element("heading"), create_element("heading")
        assert first["id"] != second["id"]

    def test_heading_defaults_bold(self, ids):
        heading = create_element("heading", id_factory=ids)
        assert heading["text_formatting"]["bold"] is True
        assert heading["style"]["font_weight"] == "bold"
        assert heading["formatted_ranges"] == []

    def test_paragraph_has_list_type(self, ids):
        assert create_element("paragraph", id_factory=ids)["list_type"] == "none"

    def test_table_is_three_by_two(self, ids):
        table = create_element("table", id_factory=ids)
        assert table["headers"] == ["Header 1", "Header 2", "Header 3"]
        assert table["data"] == [
            ["Row 1, Cell 1", "Row 1, Cell 2", "Row 1, Cell 3"],
            ["Row 2, Cell 1", "Row 2, Cell 2", "Row 2, Cell 3"],
        ]

    def test_form_fields_have_ids(self, ids):
        form = create_element("form", id_factory=ids)
        assert [f["type"] for f in form["fields"]] == ["text", "email", "textarea"]
        assert len({f["id"] for f in form["fields"]}) == 3

    def test_gallery_images_have_ids(self, ids):
        gallery = create_element("gallery", id_factory=ids)
        assert len(gallery["images"]) == 3
        assert gallery["id"] not in {img["id"] for img in gallery["images"]}

    def test_defaults_not_shared_between_elements(self, ids):
        first = create_element("form", id_factory=ids)
        second = create_element("form", id_factory=ids)
        assert first["fields"] is not second["fields"]
        assert first["style"] is not second["style"]


# ============================================================================
# 2. Templates and initial state
# ============================================================================


class TestTemplates:
    @pytest.mark.parametrize("template_id", BUILTIN_TEMPLATE_IDS)
    def test_template_is_self_consistent(self, template_id, ids):
        template, containers, elements = create_template(template_id, id_factory=ids)
        state = {
            "elements": elements,
            "containers": containers,
            "templates": [template],
            "current_template_id": template_id,
        }
        assert check_invariants(state) == []
        assert template["container_ids"] == list(containers)
        assert elements

    def test_basic_template_seed(self, ids):
        template, containers, elements = create_template("basic", id_factory=ids)
        labels = {c["label"]: c for c in containers.values()}
        assert template["name"] == "Basic Template"
        left = [elements[i] for i in labels["content_left"]["children"]]
        assert [e["kind"] for e in left] == ["heading", "paragraph"]
        assert left[0]["content"] == "Welcome to Your Website"
        assert labels["footer"]["children"] == []

    def test_business_features_are_a_list(self, ids):
        _, containers, elements = create_template("business", id_factory=ids)
        features = next(c for c in containers.values() if c["label"] == "features")
        paragraph = elements[features["children"][0]]
        assert paragraph["list_type"] == "unordered"

    def test_unknown_template_raises(self):
        with pytest.raises(ValueError, match="Unknown template"):
            create_template("blog")


class TestSessionState:
    def test_all_templates_loaded(self, ids):
        state = create_session_state(id_factory=ids)
        assert [t["id"] for t in state["templates"]] == ["basic", "portfolio", "business"]
        assert state["current_template_id"] == "basic"
        assert check_invariants(state) == []

    def test_transient_defaults(self, ids):
        state = create_session_state(id_factory=ids)
        assert {k: state[k] for k in TRANSIENT_FIELDS} == {
            "selected_element_id": None,
            "selected_container_id": None,
            "is_preview_mode": False,
            "is_dragging": False,
            "viewport": "desktop",
            "recent_kinds": [],
        }

    def test_current_template_choice(self, ids):
        assert create_session_state(id_factory=ids, current_template_id="business")["current_template_id"] == "business"

    def test_same_factory_same_state(self):
        first = create_session_state(id_factory=sequential_ids("id"))
        second = create_session_state(id_factory=sequential_ids("id"))
        assert first == second


# ============================================================================
# 3. Edit helpers
# ============================================================================


class TestEditHelpers:
    def test_resize_table_grows(self, ids):
        table = create_element("table", id_factory=ids)
        update = resize_table(table, rows=3, columns=4)
        assert update["rows"] == 3
        assert update["headers"][-1] == "Header 4"
        assert update["data"][0] == ["Row 1, Cell 1", "Row 1, Cell 2", "Row 1, Cell 3", "Cell 4"]
        assert update["data"][2] == ["Row 3, Cell 1", "Row 3, Cell 2", "Row 3, Cell 3", "Row 3, Cell 4"]

    def test_resize_table_shrinks_and_clamps(self, ids):
        table = create_element("table", id_factory=ids)
        update = resize_table(table, rows=0, columns=99)
        assert update["rows"] == 1
        assert update["columns"] == 20
        assert len(update["data"]) == 1
        assert len(update["headers"]) == 20

    def test_resize_does_not_mutate(self, ids):
        table = create_element("table", id_factory=ids)
        resize_table(table, rows=1, columns=1)
        assert len(table["headers"]) == 3

    def test_gallery_add_and_remove(self, ids):
        gallery = create_element("gallery", id_factory=ids)
        added = add_gallery_image(gallery, "https://example.com/a.png", "A", id_factory=ids)
        assert len(added["images"]) == 4
        assert len(gallery["images"]) == 3
        removed = remove_gallery_image({**gallery, **added}, added["images"][-1]["id"])
        assert len(removed["images"]) == 3

    def test_form_add_and_remove(self, ids):
        form = create_element("form", id_factory=ids)
        added = add_form_field(form, "email", "Work email", id_factory=ids)
        assert added["fields"][-1]["label"] == "Work email"
        removed = remove_form_field(form, form["fields"][0]["id"])
        assert [f["label"] for f in removed["fields"]] == ["Email", "Message"]

    def test_form_rejects_unknown_field_type(self, ids):
        with pytest.raises(ValueError, match="Unknown form field type"):
            add_form_field(create_element("form", id_factory=ids), "checkbox")
