from __future__ import annotations

"""
Unit tests for the Selection State Service.

Verifies:
1. Rebuild semantics (generation counter, default selection, failed rebuilds).
2. Toggle propagation to descendants and isolation of ancestors.
3. Bulk select-all / select-none.
4. Selected-file collection order and robustness.
5. Change notifications.
"""

from typing import List

import pytest

from project2text.core.services.selection import SelectionEngine
from project2text.domain.errors import MalformedPatternError
from project2text.domain.tree_models import NodeKind, TreeChange

PATHS = ["src/a.ts", "src/b/b1.js", "src/b/b2.ts", "README.md"]


@pytest.fixture
def engine() -> SelectionEngine:
    """Engine built over a small tree with '.ts' files selected by default."""
    eng = SelectionEngine(include=["src/**/*.ts"], exclude=[])
    eng.build(PATHS)
    return eng

# -----------------------------------------------------------------------------
# Build / Rebuild
# -----------------------------------------------------------------------------

def test_build_applies_default_selection(engine):
    assert engine.get_selected_files() == ["src/b/b2.ts", "src/a.ts"]
    assert engine.get_node("src").selected is False


def test_build_increments_generation(engine):
    first = engine.generation
    engine.build(PATHS)
    assert engine.generation == first + 1


def test_rebuild_with_new_patterns_discards_toggles(engine):
    engine.toggle("README.md")
    engine.rebuild(PATHS, include=["**/*.js"], exclude=[])

    assert engine.get_selected_files() == ["src/b/b1.js"]


def test_malformed_pattern_keeps_previous_tree(engine):
    """A failed rebuild does not replace the current state."""
    before = engine.state

    with pytest.raises(MalformedPatternError):
        engine.rebuild(PATHS, include=["src/{a,b"])

    assert engine.state is before
    assert engine.get_selected_files() == ["src/b/b2.ts", "src/a.ts"]


def test_failed_rebuild_keeps_previous_patterns(engine):
    """Later builds keep working with the configuration that was in effect."""
    with pytest.raises(MalformedPatternError):
        engine.rebuild(PATHS, include=["{a"], exclude=["dist/**"])

    engine.build(PATHS + ["src/c.ts"])
    assert engine.get_selected_files() == ["src/b/b2.ts", "src/a.ts", "src/c.ts"]

    engine.toggle("src/a.ts")
    engine.apply_default_selection()
    assert engine.get_node("src/a.ts").selected is True


def test_empty_include_selects_everything_not_excluded():
    eng = SelectionEngine(include=[], exclude=["**/node_modules/**"])
    eng.build(["a.txt", "node_modules/x/index.js"])

    assert eng.get_selected_files() == ["a.txt"]


def test_children_of_and_roots(engine):
    assert [n.name for n in engine.roots] == ["src", "README.md"]
    assert [n.name for n in engine.children_of("src")] == ["b", "a.ts"]
    assert [n.name for n in engine.children_of()] == ["src", "README.md"]


def test_get_node_normalizes_separators(engine):
    assert engine.get_node("src\\b\\b1.js").rel_path == "src/b/b1.js"


def test_get_node_unknown_path_raises(engine):
    with pytest.raises(KeyError):
        engine.get_node("does/not/exist")

# -----------------------------------------------------------------------------
# Toggle
# -----------------------------------------------------------------------------

def test_toggle_directory_propagates_to_descendants(engine):
    """Scenario: toggling 'src/b' from unselected selects b1.js and b2.ts."""
    new_value = engine.toggle("src/b")

    assert new_value is True
    assert engine.get_node("src/b").selected is True
    assert engine.get_node("src/b/b1.js").selected is True
    assert engine.get_node("src/b/b2.ts").selected is True


def test_toggle_never_modifies_ancestors_or_siblings(engine):
    engine.toggle("src/b")

    assert engine.get_node("src").selected is False
    assert engine.get_node("src/a.ts").selected is True
    assert engine.get_node("README.md").selected is False


def test_toggle_file_only_changes_that_file(engine):
    assert engine.toggle("src/a.ts") is False

    assert engine.get_selected_files() == ["src/b/b2.ts"]


def test_toggle_twice_restores_uniform_subtree():
    eng = SelectionEngine(include=["**/*.md"])
    eng.build(["docs/a.md", "docs/b.md", "x.ts"])
    eng.toggle("docs")
    eng.toggle("docs")
    eng.toggle("docs")
    snapshot = {k: n.selected for k, n in eng.state.nodes.items()}

    eng.toggle("docs")
    eng.toggle("docs")

    assert {k: n.selected for k, n in eng.state.nodes.items()} == snapshot


def test_toggle_twice_restores_leaf(engine):
    before = engine.get_selected_files()
    engine.toggle("src/b/b1.js")
    engine.toggle("src/b/b1.js")
    assert engine.get_selected_files() == before


def test_toggle_unknown_path_raises(engine):
    with pytest.raises(KeyError):
        engine.toggle("ghost.txt")


def test_toggle_tolerates_corrupted_children_list(engine):
    """A directory whose children list was lost only flips itself."""
    engine.state.nodes["src/b"].children = None

    engine.toggle("src/b")

    assert engine.get_node("src/b").selected is True
    assert engine.get_node("src/b/b1.js").selected is False

# -----------------------------------------------------------------------------
# Bulk Operations
# -----------------------------------------------------------------------------

def test_select_all_and_none(engine):
    engine.select_all()
    assert all(n.selected for n in engine.state.nodes.values())
    assert engine.get_selected_files() == ["src/b/b1.js", "src/b/b2.ts", "src/a.ts", "README.md"]

    engine.select_none()
    assert not any(n.selected for n in engine.state.nodes.values())
    assert engine.get_selected_files() == []


def test_bulk_operations_on_empty_tree_are_noops():
    eng = SelectionEngine()
    eng.select_all()
    eng.select_none()
    assert eng.get_selected_files() == []
    assert len(eng.state) == 0

# -----------------------------------------------------------------------------
# Selected Files
# -----------------------------------------------------------------------------

def test_selected_files_ignore_directory_flags(engine):
    """A selected directory contributes nothing by itself."""
    engine.select_none()
    engine.state.nodes["src"].selected = True

    assert engine.get_selected_files() == []


def test_selected_files_are_stable_between_calls(engine):
    assert engine.get_selected_files() == engine.get_selected_files()


def test_selected_files_skip_dangling_keys(engine):
    engine.state.nodes["src"].children.append("src/ghost.ts")
    engine.state.roots.append("phantom")

    assert engine.get_selected_files() == ["src/b/b2.ts", "src/a.ts"]


def test_duplicate_names_in_different_directories_toggle_independently():
    eng = SelectionEngine()
    eng.build(["a/index.ts", "b/index.ts"])
    eng.select_none()

    eng.toggle("a/index.ts")

    assert eng.get_selected_files() == ["a/index.ts"]
    assert eng.get_node("b/index.ts").kind is NodeKind.FILE

# -----------------------------------------------------------------------------
# Notifications
# -----------------------------------------------------------------------------

def test_notifications_carry_granularity_and_generation():
    changes: List[TreeChange] = []
    eng = SelectionEngine()
    eng.subscribe(changes.append)

    eng.build(PATHS)
    eng.toggle("src/b")
    eng.select_all()

    assert [c.rel_path for c in changes] == [None, "src/b", None]
    assert changes[0].whole_tree is True
    assert changes[1].whole_tree is False
    assert all(c.generation == 1 for c in changes)


def test_unsubscribe_stops_notifications():
    changes: List[TreeChange] = []
    eng = SelectionEngine()
    eng.subscribe(changes.append)
    eng.unsubscribe(changes.append)

    eng.build(PATHS)

    assert changes == []


def test_failing_listener_does_not_break_mutation(caplog):
    def boom(change: TreeChange) -> None:
        raise RuntimeError("listener exploded")

    eng = SelectionEngine(include=["**/*.ts"])
    eng.subscribe(boom)
    eng.build(PATHS)

    assert eng.toggle("README.md") is True
    assert "listener exploded" in caplog.text


def test_empty_workspace_builds_no_roots():
    eng = SelectionEngine()
    eng.build([])

    assert eng.roots == []
    assert eng.get_selected_files() == []
