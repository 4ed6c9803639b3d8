"""Tests for tutor/annotations/selection.py"""

from tutor.annotations import COLLAPSED, Collapsed, Expanded, expanded_identity, toggle


def test_initial_state_is_collapsed():
    assert isinstance(COLLAPSED, Collapsed)
    assert expanded_identity(COLLAPSED) is None


def test_click_expands():
    assert toggle(COLLAPSED, 3) == Expanded(3)


def test_click_on_expanded_collapses():
    assert toggle(Expanded(3), 3) == COLLAPSED


def test_click_on_other_switches_directly():
    state = toggle(Expanded(3), 1)
    assert state == Expanded(1)
    assert expanded_identity(state) == 1
