"""
Pagesmith Reducer -- Happy Path Tests

One test group per structural and view-only command, each checking the
resulting state and that containment invariants still hold.
"""

from engine.editor import commands
from engine.editor.elements import create_element
from engine.editor.reducer import check_invariants, reduce, replay


def _new_heading(element_id="h2"):
    return create_element("heading", id_factory=lambda: element_id)


# ============================================================================
# 1. element.add
# ============================================================================


class TestElementAdd:
    def test_add_appends_to_container(self, small_state):
        result = reduce(small_state, commands.add_element(_new_heading(), "zone_b"))
        assert result.applied
        assert result.state["containers"]["zone_b"]["children"] == ["h2"]
        assert result.state["elements"]["h2"]["parent_id"] == "zone_b"
        assert check_invariants(result.state) == []

    def test_add_selects_new_element(self, small_state):
        small_state["selected_container_id"] = "zone_b"
        result = reduce(small_state, commands.add_element(_new_heading(), "zone_b"))
        assert result.state["selected_element_id"] == "h2"
        assert result.state["selected_container_id"] is None

    def test_add_copies_element(self, small_state):
        element = _new_heading()
        result = reduce(small_state, commands.add_element(element, "zone_b"))
        element["style"]["color"] = "#FF0000"
        assert result.state["elements"]["h2"]["style"]["color"] == "#000000"


# ============================================================================
# 2. element.update
# ============================================================================


class TestElementUpdate:
    def test_update_field(self, small_state):
        result = reduce(small_state, commands.update_element("h1", {"content": "Hi"}))
        assert result.applied
        assert result.state["elements"]["h1"]["content"] == "Hi"

    def test_style_merged_key_by_key(self, small_state):
        result = reduce(small_state, commands.update_element("h1", {"style": {"color": "#FF0000"}}))
        style = result.state["elements"]["h1"]["style"]
        assert style["color"] == "#FF0000"
        assert style["font_size"] == "large"
        assert style["margin"] == 16

    def test_protected_fields_ignored(self, small_state):
        result = reduce(small_state, commands.update_element("h1", {"parent_id": "zone_b", "content": "x"}))
        element = result.state["elements"]["h1"]
        assert element["parent_id"] == "zone_a"
        assert element["content"] == "x"
        assert check_invariants(result.state) == []

    def test_other_elements_shared(self, small_state):
        result = reduce(small_state, commands.update_element("h1", {"content": "Hi"}))
        assert result.state["elements"]["p1"] is small_state["elements"]["p1"]
        assert result.state["containers"] is small_state["containers"]


# ============================================================================
# 3. element.delete
# ============================================================================


class TestElementDelete:
    def test_delete_removes_from_container(self, small_state):
        result = reduce(small_state, commands.delete_element("h1"))
        assert result.applied
        assert "h1" not in result.state["elements"]
        assert result.state["containers"]["zone_a"]["children"] == ["p1"]
        assert check_invariants(result.state) == []

    def test_delete_clears_matching_selection(self, small_state):
        small_state["selected_element_id"] = "h1"
        result = reduce(small_state, commands.delete_element("h1"))
        assert result.state["selected_element_id"] is None

    def test_delete_keeps_other_selection(self, small_state):
        small_state["selected_element_id"] = "p1"
        result = reduce(small_state, commands.delete_element("h1"))
        assert result.state["selected_element_id"] == "p1"


# ============================================================================
# 4. element.duplicate
# ============================================================================


class TestElementDuplicate:
    def test_duplicate_with_new_id(self, small_state):
        result = reduce(small_state, commands.duplicate_element("h1", "h1b"))
        assert result.applied
        clone = result.state["elements"]["h1b"]
        assert clone["id"] == "h1b"
        assert clone["parent_id"] == "zone_a"
        assert clone["content"] == small_state["elements"]["h1"]["content"]
        assert result.state["containers"]["zone_a"]["children"] == ["h1", "p1", "h1b"]
        assert result.state["selected_element_id"] == "h1b"
        assert check_invariants(result.state) == []

    def test_duplicate_derives_id(self, small_state):
        state = replay(small_state, [commands.duplicate_element("h1"), commands.duplicate_element("h1")])
        assert "h1-copy-1" in state["elements"]
        assert "h1-copy-2" in state["elements"]

    def test_duplicate_is_deep_copy(self, small_state):
        result = reduce(small_state, commands.duplicate_element("h1", "h1b"))
        assert result.state["elements"]["h1b"]["style"] is not result.state["elements"]["h1"]["style"]


# ============================================================================
# 5. element.move
# ============================================================================


class TestElementMove:
    def test_move_between_containers(self, small_state):
        result = reduce(small_state, commands.move_element("h1", "zone_a", "zone_b"))
        assert result.applied
        assert result.state["containers"]["zone_a"]["children"] == ["p1"]
        assert result.state["containers"]["zone_b"]["children"] == ["h1"]
        assert result.state["elements"]["h1"]["parent_id"] == "zone_b"
        assert check_invariants(result.state) == []

    def test_move_at_index(self, small_state):
        state = replay(
            small_state,
            [
                commands.move_element("p1", "zone_a", "zone_b"),
                commands.move_element("h1", "zone_a", "zone_b", index=0),
            ],
        )
        assert state["containers"]["zone_b"]["children"] == ["h1", "p1"]

    def test_index_is_clamped(self, small_state):
        result = reduce(small_state, commands.move_element("h1", "zone_a", "zone_b", index=99))
        assert result.state["containers"]["zone_b"]["children"] == ["h1"]

    def test_reorder_within_container(self, small_state):
        result = reduce(small_state, commands.move_element("p1", "zone_a", "zone_a", index=0))
        assert result.applied
        assert result.state["containers"]["zone_a"]["children"] == ["p1", "h1"]
        assert result.state["elements"]["p1"]["parent_id"] == "zone_a"


# ============================================================================
# 6. template.set and document.load
# ============================================================================


class TestTemplateAndDocument:
    def test_set_template(self, small_state):
        small_state["templates"].append({"id": "t2", "name": "Other", "container_ids": []})
        small_state["selected_element_id"] = "h1"
        result = reduce(small_state, commands.set_template("t2"))
        assert result.applied
        assert result.state["current_template_id"] == "t2"
        assert result.state["selected_element_id"] is None
        assert result.state["elements"] is small_state["elements"]

    def test_load_document_replaces_content(self, small_state):
        document = {
            "elements": {},
            "containers": {"z": {"id": "z", "parent_id": None, "children": []}},
            "templates": [{"id": "solo", "name": "Solo", "container_ids": ["z"]}],
            "current_template_id": "solo",
        }
        small_state["viewport"] = "mobile"
        result = reduce(small_state, commands.load_document(document))
        assert result.applied
        assert result.state["elements"] == {}
        assert result.state["current_template_id"] == "solo"
        assert result.state["viewport"] == "mobile"
        assert result.state["containers"]["z"] is not document["containers"]["z"]


# ============================================================================
# 7. View-only commands
# ============================================================================


class TestViewCommands:
    def test_select_element_clears_container(self, small_state):
        small_state["selected_container_id"] = "zone_a"
        result = reduce(small_state, commands.select_element("h1"))
        assert result.state["selected_element_id"] == "h1"
        assert result.state["selected_container_id"] is None

    def test_select_container_clears_element(self, small_state):
        small_state["selected_element_id"] = "h1"
        result = reduce(small_state, commands.select_container("zone_b"))
        assert result.state["selected_container_id"] == "zone_b"
        assert result.state["selected_element_id"] is None

    def test_select_none_clears(self, small_state):
        small_state["selected_element_id"] = "h1"
        result = reduce(small_state, commands.select_element(None))
        assert result.applied
        assert result.state["selected_element_id"] is None

    def test_toggle_preview_clears_selection(self, small_state):
        small_state["selected_element_id"] = "h1"
        result = reduce(small_state, commands.toggle_preview())
        assert result.state["is_preview_mode"] is True
        assert result.state["selected_element_id"] is None
        assert reduce(result.state, commands.toggle_preview()).state["is_preview_mode"] is False

    def test_set_viewport(self, small_state):
        assert reduce(small_state, commands.set_viewport("tablet")).state["viewport"] == "tablet"

    def test_set_dragging(self, small_state):
        assert reduce(small_state, commands.set_dragging(True)).state["is_dragging"] is True

    def test_recent_kinds_most_recent_first(self, small_state):
        state = replay(
            small_state,
            [
                commands.add_recent_kind("heading"),
                commands.add_recent_kind("image"),
                commands.add_recent_kind("heading"),
            ],
        )
        assert state["recent_kinds"] == ["heading", "image"]

    def test_recent_kinds_capped(self, small_state):
        kinds = ["heading", "paragraph", "image", "button"]
        state = replay(small_state, [commands.add_recent_kind(k, limit=3) for k in kinds])
        assert state["recent_kinds"] == ["button", "image", "paragraph"]
