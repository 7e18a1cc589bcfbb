from __future__ import annotations

"""
Unit tests for Session State synchronization.

Verifies:
1. Tab handling (open uniqueness, close fallback, activate).
2. Create/undo round-trip and undo side effects on tabs.
3. Rename and content edits mirrored into tabs and the active file.
4. Delete closing tabs inside removed subtrees.
5. Selection-driven create targets.
6. Snapshot restore reconciliation.
7. Atomicity: failing calls leave the session untouched.
"""

import pytest

from vexplorer.core.session.state import SessionState
from vexplorer.core.tree import ops
from vexplorer.domain.errors import InvalidNameError, NotAFileError, NotFoundError
from vexplorer.domain.session_models import SessionSnapshot
from vexplorer.domain.tree_models import FileNode, FolderNode


def named(state: SessionState, name: str):
    """Return the first node called name."""
    for node in ops.iter_nodes(state.tree):
        if node.name == name:
            return node
    raise AssertionError(f"no node named {name}")


def shape(tree):
    """Ids and nesting, ignoring is_open flags and contents."""
    return [
        (n.id, shape(n.children)) if isinstance(n, FolderNode) else n.id
        for n in tree
    ]


def assert_views_consistent(state: SessionState) -> None:
    ids = [f.id for f in state.open_files]
    assert len(ids) == len(set(ids))
    for tab in state.open_files:
        assert ops.find(state.tree, tab.id) == tab
    if state.active_file is not None:
        assert state.active_file.id in ids
        assert ops.find(state.tree, state.active_file.id) == state.active_file

# -----------------------------------------------------------------------------
# TABS
# -----------------------------------------------------------------------------

def test_open_file_is_unique_and_active(session):
    a = named(session, "a.txt")

    for _ in range(3):
        session.open_file(a.id)

    assert [f.id for f in session.open_files] == [a.id]
    assert session.active_file.id == a.id


def test_open_second_file_appends_and_activates(session):
    a, b = named(session, "a.txt"), named(session, "b.txt")
    session.open_file(a.id)
    session.open_file(b.id)
    session.open_file(a.id)

    assert [f.name for f in session.open_files] == ["a.txt", "b.txt"]
    assert session.active_file.id == a.id


def test_open_folder_or_missing_raises(session):
    with pytest.raises(NotAFileError):
        session.open_file(named(session, "src").id)
    with pytest.raises(NotFoundError):
        session.open_file("ghost")


def test_close_active_with_two_tabs_activates_remaining(session):
    a, b = named(session, "a.txt"), named(session, "b.txt")
    session.open_file(a.id)
    session.open_file(b.id)

    session.close_file(b.id)

    assert session.active_file.id == a.id
    assert [f.id for f in session.open_files] == [a.id]


def test_close_last_tab_clears_active(session):
    a = named(session, "a.txt")
    session.open_file(a.id)

    session.close_file(a.id)

    assert session.open_files == ()
    assert session.active_file is None


def test_close_inactive_tab_keeps_active(session):
    a, b = named(session, "a.txt"), named(session, "b.txt")
    session.open_file(a.id)
    session.open_file(b.id)

    session.close_file(a.id)

    assert session.active_file.id == b.id


def test_close_unknown_tab_is_noop(session):
    revision = session.revision
    session.close_file("ghost")
    assert session.revision == revision


def test_activate_requires_open_tab(session):
    a, b = named(session, "a.txt"), named(session, "b.txt")
    session.open_file(a.id)
    session.open_file(b.id)

    session.activate(a.id)
    assert session.active_file.id == a.id

    with pytest.raises(NotFoundError):
        session.activate(named(session, "readme.md").id)

# -----------------------------------------------------------------------------
# CREATE / UNDO
# -----------------------------------------------------------------------------

def test_create_under_closed_folder_then_undo(session):
    src = named(session, "src")
    before = session.tree
    assert src.is_open is False

    new = session.create_file("c.txt", parent_id=src.id)

    folder = session.find(src.id)
    assert folder.is_open is True
    assert folder.children[-1].id == new.id
    assert new.path == "src/c.txt"
    assert len(session.history) == 1

    action = session.undo()

    assert action.node.id == new.id
    assert session.find(new.id) is None
    assert shape(session.tree) == shape(before)
    assert session.history == ()


def test_create_folder_defaults(session):
    folder = session.create_folder(parent_id=None)

    assert folder.name == "new-folder"
    assert folder.is_open is True
    assert folder.children == ()
    assert session.tree[-1].id == folder.id


def test_create_file_default_name_and_empty_content(session):
    new = session.create_file(parent_id=None)
    assert new.name == "new-file.txt"
    assert new.content == ""


def test_create_rejects_blank_name_without_changes(session):
    before = (session.tree, session.history, session.revision)

    with pytest.raises(InvalidNameError):
        session.create_file("   ", parent_id=None)

    assert (session.tree, session.history, session.revision) == before


def test_create_under_file_raises_without_changes(session):
    readme = named(session, "readme.md")
    tree = session.tree

    with pytest.raises(NotFoundError):
        session.create_file("x.txt", parent_id=readme.id)

    assert session.tree is tree
    assert session.history == ()


def test_undo_on_empty_history_is_noop(session):
    tree = session.tree
    assert session.undo() is None
    assert session.tree is tree


def test_undo_closes_tab_and_promotes_next(session):
    a = named(session, "a.txt")
    session.open_file(a.id)
    new = session.create_file("c.txt", parent_id=None)
    session.open_file(new.id)
    assert session.active_file.id == new.id

    session.undo()

    assert [f.id for f in session.open_files] == [a.id]
    assert session.active_file.id == a.id
    assert_views_consistent(session)


def test_undo_of_only_open_file_clears_active(session):
    new = session.create_file("c.txt", parent_id=None)
    session.open_file(new.id)

    session.undo()

    assert session.open_files == ()
    assert session.active_file is None


def test_undo_pops_in_stack_order(session):
    first = session.create_folder("one", parent_id=None)
    second = session.create_file("two.txt", parent_id=first.id)

    assert session.undo().node.id == second.id
    assert session.find(first.id) is not None
    assert session.undo().node.id == first.id
    assert session.find(first.id) is None

# -----------------------------------------------------------------------------
# SELECTION
# -----------------------------------------------------------------------------

def test_create_targets_selected_folder(session):
    src = named(session, "src")
    session.select(src.id)

    new = session.create_file("c.txt")

    assert session.find(src.id).children[-1].id == new.id
    assert session.history[-1].parent_id == src.id


def test_create_targets_parent_of_selected_file(session):
    a = named(session, "a.txt")
    session.select(a.id)

    new = session.create_file("sibling.txt")

    src = named(session, "src")
    assert session.find(src.id).children[-1].id == new.id
    # Selecting a file also opens it
    assert session.active_file.id == a.id


def test_create_without_selection_targets_root(session):
    new = session.create_folder("top")
    assert session.tree[-1].id == new.id
    assert session.history[-1].parent_id is None


def test_select_missing_raises(session):
    with pytest.raises(NotFoundError):
        session.select("ghost")


def test_undo_clears_selection_of_removed_node(session):
    new = session.create_folder("tmp", parent_id=None)
    session.select(new.id)

    session.undo()

    assert session.selected_id is None

# -----------------------------------------------------------------------------
# RENAME / EDIT / TOGGLE
# -----------------------------------------------------------------------------

def test_rename_propagates_to_tab_and_active(session):
    a, b = named(session, "a.txt"), named(session, "b.txt")
    session.open_file(b.id)
    session.open_file(a.id)

    session.rename(a.id, "alpha.txt")

    assert session.find(a.id).name == "alpha.txt"
    assert session.active_file.name == "alpha.txt"
    assert [f.name for f in session.open_files] == ["b.txt", "alpha.txt"]
    assert_views_consistent(session)


def test_rename_blank_fails_atomically(session):
    a = named(session, "a.txt")
    session.open_file(a.id)
    snapshot = (session.tree, session.open_files, session.active_file)

    with pytest.raises(InvalidNameError):
        session.rename(a.id, "  ")

    assert (session.tree, session.open_files, session.active_file) == snapshot


def test_rename_folder_leaves_tabs_alone(session):
    a = named(session, "a.txt")
    session.open_file(a.id)
    tabs = session.open_files

    session.rename(named(session, "src").id, "lib")

    assert session.open_files == tabs


def test_edit_content_syncs_three_views(session):
    a, b = named(session, "a.txt"), named(session, "b.txt")
    session.open_file(b.id)
    session.open_file(a.id)

    session.edit_content("S")

    assert session.active_file.content == "S"
    assert [f.content for f in session.open_files if f.id == a.id] == ["S"]
    assert session.find(a.id).content == "S"
    # Other tab untouched
    assert [f.content for f in session.open_files if f.id == b.id] == ["bye"]


def test_edit_without_active_file_raises(session):
    with pytest.raises(NotFoundError):
        session.edit_content("S")


def test_toggle_folder_does_not_touch_tabs(session):
    a, src = named(session, "a.txt"), named(session, "src")
    session.open_file(a.id)
    tabs, active = session.open_files, session.active_file

    session.toggle_folder(src.id)

    assert session.find(src.id).is_open is True
    assert session.open_files is tabs
    assert session.active_file is active


def test_toggle_file_is_noop(session):
    revision = session.revision
    session.toggle_folder(named(session, "readme.md").id)
    assert session.revision == revision

# -----------------------------------------------------------------------------
# DELETE
# -----------------------------------------------------------------------------

def test_delete_active_falls_back_to_first_tab(session):
    a, b = named(session, "a.txt"), named(session, "b.txt")
    session.open_file(a.id)
    session.open_file(b.id)

    assert session.delete(b.id) is True

    assert session.active_file.id == a.id
    assert [f.id for f in session.open_files] == [a.id]


def test_delete_folder_closes_tabs_inside(session):
    a, readme = named(session, "a.txt"), named(session, "readme.md")
    session.open_file(readme.id)
    session.open_file(a.id)

    session.delete(named(session, "src").id)

    assert [f.id for f in session.open_files] == [readme.id]
    assert session.active_file.id == readme.id
    assert_views_consistent(session)


def test_delete_missing_is_noop(session):
    tree = session.tree
    assert session.delete("ghost") is False
    assert session.tree is tree

# -----------------------------------------------------------------------------
# SNAPSHOT BRIDGE
# -----------------------------------------------------------------------------

def test_snapshot_round_trip_drops_history(session):
    a = named(session, "a.txt")
    session.open_file(a.id)
    session.create_file("new.txt", parent_id=None)

    restored = SessionState.from_snapshot(session.to_snapshot())

    assert restored.tree == session.tree
    assert restored.open_files == session.open_files
    assert restored.active_file == session.active_file
    assert restored.history == ()


def test_from_snapshot_repairs_inconsistent_views():
    tree = (FileNode(id="a", name="a.txt", content="fresh"),)
    stale_tab = FileNode(id="a", name="old.txt", content="stale")
    missing_tab = FileNode(id="gone", name="gone.txt")
    snapshot = SessionSnapshot(tree=tree, open_files=(missing_tab, stale_tab, stale_tab), active_file=missing_tab)

    restored = SessionState.from_snapshot(snapshot)

    assert restored.open_files == (tree[0],)
    assert restored.active_file == tree[0]


def test_restored_ids_are_not_reissued():
    tree = (FileNode(id="a", name="a.txt"),)
    restored = SessionState.from_snapshot(SessionSnapshot(tree=tree))

    new = restored.create_file("b.txt", parent_id=None)

    assert new.id != "a"


def test_load_upload_resets_everything(session, sample_entries):
    session.open_file(named(session, "a.txt").id)
    session.create_file("x.txt", parent_id=None)

    session.load_upload([("other/z.txt", "z")])

    assert [n.name for n in session.tree] == ["other"]
    assert session.open_files == ()
    assert session.active_file is None
    assert session.history == ()


def test_invariants_hold_through_mixed_sequence(session):
    a, b = named(session, "a.txt"), named(session, "b.txt")
    session.open_file(a.id)
    session.open_file(b.id)
    session.edit_content("edited")
    session.rename(b.id, "beta.txt")
    created = session.create_file("c.txt", parent_id=named(session, "src").id)
    session.open_file(created.id)
    session.edit_content("c body")
    session.undo()
    session.close_file(a.id)

    assert_views_consistent(session)
    assert session.active_file.name == "beta.txt"
    assert session.active_file.content == "edited"
