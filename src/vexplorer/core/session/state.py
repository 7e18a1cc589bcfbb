from __future__ import annotations

"""
Session State Synchronization.

Holds the aggregate {tree, open tabs, active file, undo history, selection}
and enforces the rules that keep the views consistent after every edit:

- the active file is always one of the open tabs;
- every open tab names a file that exists in the tree;
- the tree, the tab list and the active file agree on every file's
  current name and content.

Tabs and the active file are value snapshots, not references into the tree,
so each transition propagates its change to them explicitly. Every public
mutator validates first and assigns all fields in one step, so a failing
call leaves the session exactly as it was.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from vexplorer.core.tree import ops
from vexplorer.core.tree.ids import IdGenerator
from vexplorer.core.tree.ingest import UploadEntry, build_tree
from vexplorer.domain.constants import DEFAULT_FILE_NAME, DEFAULT_FOLDER_NAME, PATH_SEPARATOR
from vexplorer.domain.errors import NotAFileError, NotFoundError
from vexplorer.domain.session_models import CreateAction, SessionSnapshot
from vexplorer.domain.tree_models import FileNode, FolderNode, Node, Tree

logger = logging.getLogger(__name__)

# Sentinel: derive the parent of a new node from the current selection.
FROM_SELECTION = object()


class SessionState:
    """
    The single-session explorer model.

    Args:
        tree: Initial root sequence.
        open_files: Initial tabs (already consistent with tree).
        active_file: Initial active file (must be among open_files).
        id_factory: Generator of unique node ids.
    """

    def __init__(
            self,
            tree: Tree = (),
            open_files: Tuple[FileNode, ...] = (),
            active_file: Optional[FileNode] = None,
            id_factory: Optional[IdGenerator] = None,
    ) -> None:
        self._ids = id_factory or IdGenerator()
        self._tree: Tree = tuple(tree)
        self._open_files: Tuple[FileNode, ...] = tuple(open_files)
        self._active_file: Optional[FileNode] = active_file
        self._history: Tuple[CreateAction, ...] = ()
        self._selected_id: Optional[str] = None
        self._revision = 0
        self._ids.reserve(ops.collect_ids(self._tree))

    # -------------------------------------------------------------------------
    # VIEWS
    # -------------------------------------------------------------------------

    @property
    def tree(self) -> Tree:
        return self._tree

    @property
    def open_files(self) -> Tuple[FileNode, ...]:
        return self._open_files

    @property
    def active_file(self) -> Optional[FileNode]:
        return self._active_file

    @property
    def history(self) -> Tuple[CreateAction, ...]:
        return self._history

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def revision(self) -> int:
        """Counter bumped on every state transition."""
        return self._revision

    def find(self, node_id: str) -> Optional[Node]:
        return ops.find(self._tree, node_id)

    # -------------------------------------------------------------------------
    # SNAPSHOT BRIDGE
    # -------------------------------------------------------------------------

    @classmethod
    def from_snapshot(
            cls,
            snapshot: SessionSnapshot,
            id_factory: Optional[IdGenerator] = None,
    ) -> "SessionState":
        """
        Restore a session, repairing any disagreement between the views.

        Tabs whose ids are no longer in the tree are dropped, surviving tabs
        are refreshed from the tree, and an active file that is not among
        the tabs falls back to the first tab.
        """
        tree = snapshot.tree
        tabs = _dedupe(_current_files(tree, snapshot.open_files))
        active = None
        if snapshot.active_file is not None:
            active = _by_id(tabs, snapshot.active_file.id) or (tabs[0] if tabs else None)
        return cls(tree=tree, open_files=tabs, active_file=active, id_factory=id_factory)

    def to_snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            tree=self._tree,
            open_files=self._open_files,
            active_file=self._active_file,
        )

    # -------------------------------------------------------------------------
    # SESSION LIFECYCLE
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Discard every view and the undo history."""
        self._commit(tree=(), open_files=(), active_file=None, history=(), selected_id=None)

    def load_upload(self, entries: Iterable[UploadEntry]) -> None:
        """
        Replace the whole session with a freshly ingested upload.

        Raises:
            NameCollisionError: See build_tree.
            InvalidNameError: See build_tree.
        """
        tree = build_tree(entries, self._ids)
        self._commit(tree=tree, open_files=(), active_file=None, history=(), selected_id=None)
        logger.info(f"Session loaded with {sum(1 for _ in ops.iter_files(tree))} file(s)")

    # -------------------------------------------------------------------------
    # SELECTION AND TABS
    # -------------------------------------------------------------------------

    def select(self, node_id: Optional[str]) -> None:
        """
        Select a node (None clears the selection). Selecting a file also
        opens it in a tab.

        Raises:
            NotFoundError: If node_id is absent.
        """
        if node_id is None:
            self._commit(selected_id=None)
            return

        node = self._require(node_id)
        if isinstance(node, FileNode):
            open_files, active = self._opened(node)
            self._commit(selected_id=node_id, open_files=open_files, active_file=active)
        else:
            self._commit(selected_id=node_id)

    def open_file(self, file_id: str) -> FileNode:
        """
        Open a file in a tab (appending only if not open yet) and make it active.

        Raises:
            NotFoundError: If the id is absent.
            NotAFileError: If the id names a folder.
        """
        node = self._require_file(file_id)
        open_files, active = self._opened(node)
        self._commit(open_files=open_files, active_file=active)
        return node

    def close_file(self, file_id: str) -> None:
        """
        Close a tab. Closing the active tab activates the first remaining
        tab, or nothing. Closing a tab that is not open is a no-op.
        """
        if _by_id(self._open_files, file_id) is None:
            return
        remaining = tuple(f for f in self._open_files if f.id != file_id)
        active = self._active_file
        if active is not None and active.id == file_id:
            active = remaining[0] if remaining else None
        self._commit(open_files=remaining, active_file=active)

    def activate(self, file_id: str) -> FileNode:
        """
        Make an already-open tab the active file.

        Raises:
            NotFoundError: If no open tab has that id.
        """
        tab = _by_id(self._open_files, file_id)
        if tab is None:
            raise NotFoundError(f"File '{file_id}' is not open")
        self._commit(active_file=tab)
        return tab

    # -------------------------------------------------------------------------
    # STRUCTURAL EDITS
    # -------------------------------------------------------------------------

    def create_file(self, name: Optional[str] = None, parent_id=FROM_SELECTION) -> FileNode:
        """
        Create an empty file and record it on the undo stack.

        Args:
            name: File name (defaults to 'new-file.txt').
            parent_id: Target folder id, None for the root, or FROM_SELECTION.

        Raises:
            InvalidNameError: If the name is blank.
            NotFoundError: If the parent is not a folder in the tree.
        """
        clean = ops.validate_name(DEFAULT_FILE_NAME if name is None else name)
        parent = self._resolve_parent(parent_id)
        node = FileNode(id=self._ids.new_id(), name=clean, path=self._child_path(parent, clean))
        self._insert(node, parent)
        return node

    def create_folder(self, name: Optional[str] = None, parent_id=FROM_SELECTION) -> FolderNode:
        """
        Create an empty, open folder and record it on the undo stack.

        Raises:
            InvalidNameError: If the name is blank.
            NotFoundError: If the parent is not a folder in the tree.
        """
        clean = ops.validate_name(DEFAULT_FOLDER_NAME if name is None else name)
        parent = self._resolve_parent(parent_id)
        node = FolderNode(
            id=self._ids.new_id(),
            name=clean,
            path=self._child_path(parent, clean),
            is_open=True,
        )
        self._insert(node, parent)
        return node

    def undo(self) -> Optional[CreateAction]:
        """
        Revert the most recent creation.

        Returns:
            Optional[CreateAction]: The undone action, or None when the
            history is empty.
        """
        if not self._history:
            return None

        action = self._history[-1]
        tree, open_files, active, selected = self._without(action.node.id)
        self._commit(
            tree=tree,
            open_files=open_files,
            active_file=active,
            selected_id=selected,
            history=self._history[:-1],
        )
        logger.info(f"Undo: removed created node '{action.node.name}'")
        return action

    def delete(self, node_id: str) -> bool:
        """
        Delete a node and its subtree, closing any tabs inside it.
        Absent ids are a no-op.

        Returns:
            bool: True if something was removed.
        """
        if ops.find(self._tree, node_id) is None:
            logger.debug(f"Delete ignored for absent id '{node_id}'")
            return False

        tree, open_files, active, selected = self._without(node_id)
        self._commit(tree=tree, open_files=open_files, active_file=active, selected_id=selected)
        logger.info(f"Deleted node '{node_id}'")
        return True

    def rename(self, node_id: str, new_name: str) -> Node:
        """
        Rename a node and mirror the new name into its tab and the active file.

        Raises:
            InvalidNameError: If the name is blank.
            NotFoundError: If the id is absent.
        """
        tree = ops.rename(self._tree, node_id, new_name)
        renamed = ops.find(tree, node_id)
        open_files, active = self._mirrored(renamed)
        self._commit(tree=tree, open_files=open_files, active_file=active)
        return renamed

    def toggle_folder(self, node_id: str) -> None:
        """Flip a folder open/closed. Tabs are untouched."""
        tree = ops.toggle_open(self._tree, node_id)
        if tree is not self._tree:
            self._commit(tree=tree)

    def edit_content(self, text: str) -> FileNode:
        """
        Replace the active file's content in the tree, its tab and the
        active file itself.

        Raises:
            NotFoundError: If no file is active.
        """
        if self._active_file is None:
            raise NotFoundError("No active file to edit")

        tree = ops.set_content(self._tree, self._active_file.id, text)
        updated = ops.find(tree, self._active_file.id)
        open_files, active = self._mirrored(updated)
        self._commit(tree=tree, open_files=open_files, active_file=active)
        return updated

    # -------------------------------------------------------------------------
    # INTERNAL HELPERS
    # -------------------------------------------------------------------------

    def _commit(self, **changes) -> None:
        """Apply a complete transition in one step."""
        for key, value in changes.items():
            setattr(self, f"_{key}", value)
        self._revision += 1

    def _require(self, node_id: str) -> Node:
        node = ops.find(self._tree, node_id)
        if node is None:
            raise NotFoundError(f"No node with id '{node_id}'")
        return node

    def _require_file(self, node_id: str) -> FileNode:
        node = self._require(node_id)
        if not isinstance(node, FileNode):
            raise NotAFileError(f"Node '{node_id}' is a folder, not a file")
        return node

    def _opened(self, node: FileNode) -> Tuple[Tuple[FileNode, ...], FileNode]:
        if _by_id(self._open_files, node.id) is None:
            return self._open_files + (node,), node
        return self._open_files, _by_id(self._open_files, node.id)

    def _mirrored(self, node: Node) -> Tuple[Tuple[FileNode, ...], Optional[FileNode]]:
        """Copy a file's current tree version into its tab and the active file."""
        if not isinstance(node, FileNode):
            return self._open_files, self._active_file
        open_files = tuple(node if f.id == node.id else f for f in self._open_files)
        active = self._active_file
        if active is not None and active.id == node.id:
            active = node
        return open_files, active

    def _resolve_parent(self, parent_id) -> Optional[str]:
        if parent_id is not FROM_SELECTION:
            return parent_id
        if self._selected_id is None:
            return None

        located = ops.locate(self._tree, self._selected_id)
        if located is None:
            return None
        owner_id, node = located
        return node.id if isinstance(node, FolderNode) else owner_id

    def _child_path(self, parent_id: Optional[str], name: str) -> str:
        if parent_id is None:
            return name
        parent_path = ops.path_of(self._tree, parent_id)
        return f"{parent_path}{PATH_SEPARATOR}{name}" if parent_path else name

    def _insert(self, node: Node, parent_id: Optional[str]) -> None:
        tree = ops.insert_under(self._tree, parent_id, node)
        action = CreateAction(node=node, parent_id=parent_id)
        self._commit(tree=tree, history=self._history + (action,))
        logger.debug(f"Created {'folder' if node.is_folder else 'file'} '{node.name}' under {parent_id}")

    def _without(self, node_id: str):
        """
        Compute the views after removing node_id and its subtree.

        Returns:
            (tree, open_files, active_file, selected_id)
        """
        node = ops.find(self._tree, node_id)
        removed_ids = ops.collect_ids((node,)) if node is not None else {node_id}

        tree = ops.remove(self._tree, node_id)
        open_files = tuple(f for f in self._open_files if f.id not in removed_ids)
        active = self._active_file
        if active is not None and active.id in removed_ids:
            active = open_files[0] if open_files else None
        selected = None if self._selected_id in removed_ids else self._selected_id
        return tree, open_files, active, selected

# -----------------------------------------------------------------------------
# MODULE HELPERS
# -----------------------------------------------------------------------------

def _by_id(files: Iterable[FileNode], file_id: str) -> Optional[FileNode]:
    for f in files:
        if f.id == file_id:
            return f
    return None


def _current_files(tree: Tree, files: Iterable[FileNode]) -> List[FileNode]:
    """Replace each file by its current tree version, dropping missing ids."""
    current = []
    for f in files:
        node = ops.find(tree, f.id)
        if isinstance(node, FileNode):
            current.append(node)
    return current


def _dedupe(files: List[FileNode]) -> Tuple[FileNode, ...]:
    seen = set()
    out = []
    for f in files:
        if f.id not in seen:
            seen.add(f.id)
            out.append(f)
    return tuple(out)
