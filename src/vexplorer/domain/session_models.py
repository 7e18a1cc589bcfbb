from __future__ import annotations

"""
Session Domain Data Models.

Defines the undo history entries and the persisted snapshot triple
exchanged between the session layer and the snapshot store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from vexplorer.domain.errors import ExplorerError
from vexplorer.domain.tree_models import (
    FileNode,
    Node,
    Tree,
    node_from_dict,
    node_to_dict,
    tree_from_list,
    tree_to_list,
)

# -----------------------------------------------------------------------------
# HISTORY
# -----------------------------------------------------------------------------

ACTION_CREATE = "create"


@dataclass(frozen=True)
class CreateAction:
    """
    Undoable record of a file/folder creation.

    Attributes:
        node: The node as it was inserted.
        parent_id: Target folder id, or None for the root sequence.
    """
    node: Node
    parent_id: Optional[str] = None
    type: str = ACTION_CREATE

# -----------------------------------------------------------------------------
# PERSISTED SNAPSHOT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SessionSnapshot:
    """
    The persisted {tree, openFiles, activeFile} triple.

    History and selection are deliberately absent: a restored session
    starts with an empty undo stack and nothing selected.
    """
    tree: Tree = field(default_factory=tuple)
    open_files: Tuple[FileNode, ...] = field(default_factory=tuple)
    active_file: Optional[FileNode] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-compatible form of the snapshot."""
        return {
            "tree": tree_to_list(self.tree),
            "openFiles": [node_to_dict(f) for f in self.open_files],
            "activeFile": node_to_dict(self.active_file) if self.active_file else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionSnapshot":
        """
        Rebuild a snapshot from its JSON form.

        Args:
            data: Mapping produced by to_dict.

        Returns:
            SessionSnapshot: The reconstructed snapshot.

        Raises:
            ExplorerError: If the payload shape is invalid.
        """
        if not isinstance(data, dict):
            raise ExplorerError("Snapshot payload must be an object.")

        tree = tree_from_list(data.get("tree") or [])
        raw_tabs = data.get("openFiles") or []
        if not isinstance(raw_tabs, list):
            raise ExplorerError("openFiles must be a list of files.")
        open_files = tuple(_file_from_dict(item) for item in raw_tabs)
        raw_active = data.get("activeFile")
        active = _file_from_dict(raw_active) if raw_active else None
        return cls(tree=tree, open_files=open_files, active_file=active)


def _file_from_dict(data: Any) -> FileNode:
    node = node_from_dict(data)
    if not isinstance(node, FileNode):
        raise ExplorerError("Open tabs may only reference files.")
    return node
