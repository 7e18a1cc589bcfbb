from __future__ import annotations

"""
Unit tests for Domain Models.

Verifies:
1. Node serialization keys ('type' discriminator, 'isOpen').
2. Snapshot serialization shape ({tree, openFiles, activeFile}).
3. Rejection of malformed payloads.
"""

import pytest

from vexplorer.domain.errors import ExplorerError, NotAFileError, NotFoundError
from vexplorer.domain.session_models import CreateAction, SessionSnapshot
from vexplorer.domain.tree_models import (
    FileNode,
    FolderNode,
    node_from_dict,
    node_to_dict,
    tree_from_list,
)


def test_folder_serialization_keys():
    folder = FolderNode(id="d", name="src", path="src", is_open=True, children=(
        FileNode(id="f", name="a.txt", path="src/a.txt", content="hi"),
    ))

    data = node_to_dict(folder)

    assert data["type"] == "folder"
    assert data["isOpen"] is True
    assert data["children"][0] == {
        "id": "f", "name": "a.txt", "type": "file", "path": "src/a.txt", "content": "hi",
    }
    assert node_from_dict(data) == folder


def test_is_folder_flag():
    assert FolderNode(id="d", name="d").is_folder is True
    assert FileNode(id="f", name="f").is_folder is False


def test_node_from_dict_fills_optional_fields():
    node = node_from_dict({"id": "f", "name": "a.txt", "type": "file"})
    assert node == FileNode(id="f", name="a.txt", path="", content="")


@pytest.mark.parametrize("payload", [
    "not a dict",
    {"id": "x", "name": "x", "type": "symlink"},
    {"name": "no id", "type": "file"},
])
def test_node_from_dict_rejects_malformed(payload):
    with pytest.raises(ExplorerError):
        node_from_dict(payload)


def test_tree_from_list_requires_list():
    with pytest.raises(ExplorerError):
        tree_from_list({"id": "x"})


def test_snapshot_dict_shape():
    a = FileNode(id="a", name="a.txt", content="x")
    snap = SessionSnapshot(tree=(a,), open_files=(a,), active_file=a)

    data = snap.to_dict()

    assert set(data) == {"tree", "openFiles", "activeFile"}
    assert data["activeFile"]["id"] == "a"
    assert SessionSnapshot.from_dict(data) == snap


def test_empty_snapshot_round_trip():
    data = SessionSnapshot().to_dict()
    assert data == {"tree": [], "openFiles": [], "activeFile": None}
    assert SessionSnapshot.from_dict(data) == SessionSnapshot()


def test_snapshot_rejects_folder_tab():
    data = {"tree": [], "openFiles": [{"id": "d", "name": "d", "type": "folder"}], "activeFile": None}
    with pytest.raises(ExplorerError):
        SessionSnapshot.from_dict(data)


def test_create_action_defaults():
    action = CreateAction(node=FileNode(id="f", name="f"))
    assert action.type == "create"
    assert action.parent_id is None


def test_error_hierarchy():
    assert issubclass(NotAFileError, NotFoundError)
    assert issubclass(NotFoundError, ExplorerError)


def test_snapshot_rejects_non_list_tabs():
    with pytest.raises(ExplorerError):
        SessionSnapshot.from_dict({"tree": [], "openFiles": 5})


def test_folder_rejects_non_list_children():
    with pytest.raises(ExplorerError):
        node_from_dict({"id": "d", "name": "d", "type": "folder", "children": 7})
