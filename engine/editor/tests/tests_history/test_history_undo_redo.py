"""
Pagesmith History -- Undo/Redo Tests

Covers:
  - structural commands are recorded, view-only commands are not
  - undo/redo round-trip over a command sequence
  - a new structural command clears the redo stack
  - transient view fields survive undo/redo
  - dangling selections are cleared on restore
  - the undo depth limit
"""

from engine.editor import commands
from engine.editor.elements import create_element
from engine.editor.history import History, document_of


def _heading(element_id):
    return create_element("heading", id_factory=lambda: element_id)


def _structural_sequence():
    return [
        commands.add_element(_heading("h2"), "zone_b"),
        commands.update_element("h2", {"content": "Second"}),
        commands.move_element("h1", "zone_a", "zone_b"),
        commands.duplicate_element("p1", "p2"),
        commands.delete_element("p1"),
    ]


# ============================================================================
# 1. Recording
# ============================================================================


class TestRecording:
    def test_fresh_history_has_nothing_to_undo(self, small_state):
        history = History(small_state)
        assert not history.can_undo
        assert not history.can_redo
        assert history.undo() is False
        assert history.redo() is False

    def test_structural_command_is_recorded(self, small_state):
        history = History(small_state)
        history.dispatch(commands.delete_element("h1"))
        assert history.can_undo
        assert history.past == [small_state]

    def test_view_command_is_not_recorded(self, small_state):
        history = History(small_state)
        history.dispatch(commands.set_viewport("mobile"))
        history.dispatch(commands.select_element("h1"))
        assert not history.can_undo
        assert history.present["viewport"] == "mobile"

    def test_rejected_command_is_not_recorded(self, small_state):
        history = History(small_state)
        result = history.dispatch(commands.delete_element("ghost"))
        assert not result.applied
        assert not history.can_undo
        assert history.present is small_state


# ============================================================================
# 2. Round trip
# ============================================================================


class TestRoundTrip:
    def test_undo_all_then_redo_all(self, small_state):
        history = History(small_state)
        sequence = _structural_sequence()
        for command in sequence:
            assert history.dispatch(command).applied
        edited = document_of(history.present)

        for _ in sequence:
            assert history.undo()
        assert document_of(history.present) == document_of(small_state)
        assert not history.can_undo

        for _ in sequence:
            assert history.redo()
        assert document_of(history.present) == edited
        assert not history.can_redo

    def test_new_command_clears_redo(self, small_state):
        history = History(small_state)
        history.dispatch(commands.delete_element("h1"))
        history.undo()
        assert history.can_redo
        history.dispatch(commands.delete_element("p1"))
        assert not history.can_redo

    def test_view_command_keeps_redo(self, small_state):
        history = History(small_state)
        history.dispatch(commands.delete_element("h1"))
        history.undo()
        history.dispatch(commands.toggle_preview())
        assert history.can_redo


# ============================================================================
# 3. Transient fields
# ============================================================================


class TestTransientFields:
    def test_undo_keeps_view_fields(self, small_state):
        history = History(small_state)
        history.dispatch(commands.delete_element("h1"))
        history.dispatch(commands.set_viewport("tablet"))
        history.dispatch(commands.toggle_preview())
        history.dispatch(commands.add_recent_kind("image"))

        history.undo()
        assert "h1" in history.present["elements"]
        assert history.present["viewport"] == "tablet"
        assert history.present["is_preview_mode"] is True
        assert history.present["recent_kinds"] == ["image"]

    def test_undo_clears_selection_of_vanished_element(self, small_state):
        history = History(small_state)
        history.dispatch(commands.add_element(_heading("h2"), "zone_b"))
        assert history.present["selected_element_id"] == "h2"
        history.undo()
        assert history.present["selected_element_id"] is None

    def test_undo_keeps_selection_that_still_resolves(self, small_state):
        history = History(small_state)
        history.dispatch(commands.update_element("h1", {"content": "x"}))
        history.dispatch(commands.select_element("p1"))
        history.undo()
        assert history.present["selected_element_id"] == "p1"


# ============================================================================
# 4. Limit and reset
# ============================================================================


class TestLimit:
    def test_oldest_steps_dropped(self, small_state):
        history = History(small_state, limit=2)
        for n in range(5):
            history.dispatch(commands.update_element("h1", {"content": f"v{n}"}))
        assert len(history.past) == 2
        history.undo()
        history.undo()
        assert not history.undo()
        assert history.present["elements"]["h1"]["content"] == "v2"

    def test_zero_limit_is_unbounded(self, small_state):
        history = History(small_state, limit=0)
        for n in range(150):
            history.dispatch(commands.update_element("h1", {"content": f"v{n}"}))
        assert len(history.past) == 150

    def test_reset(self, small_state):
        history = History(small_state)
        history.dispatch(commands.delete_element("h1"))
        history.undo()
        history.reset(small_state)
        assert not history.can_undo
        assert not history.can_redo
        assert history.present is small_state
