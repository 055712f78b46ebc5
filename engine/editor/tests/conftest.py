"""
Editor test configuration.

Shared fixtures for the editor core. Ids come from a deterministic factory
so every run builds the same states.
"""

import pytest

from engine.editor.elements import create_container, create_element
from engine.editor.reducer import empty_state
from engine.editor.session import EditingSession
from engine.editor.types import sequential_ids


def _fixed(element_id):
    return lambda: element_id


@pytest.fixture
def ids():
    return sequential_ids("id")


@pytest.fixture
def small_state():
    """
    One template "t1" with two drop zones:
      zone_a: heading h1, paragraph p1
      zone_b: (empty)
    """
    heading = create_element("heading", "zone_a", id_factory=_fixed("h1"))
    paragraph = create_element("paragraph", "zone_a", id_factory=_fixed("p1"))
    state = empty_state()
    state["elements"] = {"h1": heading, "p1": paragraph}
    state["containers"] = {
        "zone_a": create_container("zone_a", "zone_a", ["h1", "p1"]),
        "zone_b": create_container("zone_b", "zone_b"),
    }
    state["templates"] = [{"id": "t1", "name": "Test", "container_ids": ["zone_a", "zone_b"]}]
    state["current_template_id"] = "t1"
    return state


@pytest.fixture
def session():
    """A fresh session on the built-in templates with sequential ids."""
    return EditingSession(id_factory=sequential_ids("id"))
