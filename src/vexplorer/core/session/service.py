from __future__ import annotations

"""
Explorer Session Service.

Couples the in-memory SessionState with the snapshot store and the
upload/export gateways. Every user action goes through this facade so
the snapshot follows each state transition: a non-empty session is
saved, an empty one clears the stored snapshot.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from vexplorer.core.services import exporter
from vexplorer.core.services.exporter import ExportArtifact
from vexplorer.core.services.persistence import SnapshotStore
from vexplorer.core.services.uploader import collect_upload_entries
from vexplorer.core.session.state import FROM_SELECTION, SessionState
from vexplorer.core.tree.ids import IdGenerator
from vexplorer.core.tree.ingest import UploadEntry
from vexplorer.domain.constants import DEFAULT_ARCHIVE_NAME
from vexplorer.domain.errors import NotAFileError, NotFoundError
from vexplorer.domain.tree_models import FileNode, FolderNode, Node

logger = logging.getLogger(__name__)


class ExplorerService:
    """
    Application facade over one explorer session.

    Args:
        store: Snapshot store the session is mirrored to.
        state: Session to drive (a fresh empty one by default).
        archive_name: Download name used by export_tree().
    """

    def __init__(
            self,
            store: SnapshotStore,
            state: Optional[SessionState] = None,
            archive_name: str = DEFAULT_ARCHIVE_NAME,
    ) -> None:
        self._store = store
        self._state = state or SessionState()
        self._archive_name = archive_name

    @classmethod
    def restore(
            cls,
            store: SnapshotStore,
            archive_name: str = DEFAULT_ARCHIVE_NAME,
    ) -> "ExplorerService":
        """
        Start a session from the stored snapshot, or empty if there is none.
        """
        ids = IdGenerator()
        snapshot = store.load()
        if snapshot is None:
            logger.debug("No stored session; starting empty.")
            state = SessionState(id_factory=ids)
        else:
            state = SessionState.from_snapshot(snapshot, id_factory=ids)
            logger.info(f"Restored session with {len(state.tree)} root node(s)")
        return cls(store, state=state, archive_name=archive_name)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def store(self) -> SnapshotStore:
        return self._store

    # -------------------------------------------------------------------------
    # PERSISTENCE
    # -------------------------------------------------------------------------

    def persist(self) -> None:
        """Mirror the current session into the snapshot store."""
        if self._state.tree:
            self._store.save(self._state.to_snapshot())
        else:
            self._store.clear()

    def clear(self) -> None:
        """Drop the stored snapshot and reset every view."""
        self._store.clear()
        self._state.reset()
        logger.info("Session storage cleared.")

    def _apply(self, action: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        before = self._state.revision
        result = action(*args, **kwargs)
        if self._state.revision != before:
            self.persist()
        return result

    # -------------------------------------------------------------------------
    # UPLOAD
    # -------------------------------------------------------------------------

    def upload_entries(self, entries: Iterable[UploadEntry]) -> None:
        """
        Replace the session with a new upload.

        The batch is ingested before anything is discarded: a rejected
        upload leaves the current session and its snapshot as they were.

        Raises:
            NameCollisionError: See build_tree.
            InvalidNameError: See build_tree.
        """
        self._state.load_upload(list(entries))
        self._store.clear()
        self.persist()

    def upload_directory(self, directory: str, skip_hidden: bool = False) -> None:
        """Read a local folder and upload its files."""
        self.upload_entries(collect_upload_entries(directory, skip_hidden=skip_hidden))

    # -------------------------------------------------------------------------
    # USER ACTIONS
    # -------------------------------------------------------------------------

    def select(self, node_id: Optional[str]) -> None:
        self._apply(self._state.select, node_id)

    def open_file(self, file_id: str) -> FileNode:
        return self._apply(self._state.open_file, file_id)

    def close_file(self, file_id: str) -> None:
        self._apply(self._state.close_file, file_id)

    def activate(self, file_id: str) -> FileNode:
        return self._apply(self._state.activate, file_id)

    def create_file(self, name: Optional[str] = None, parent_id=FROM_SELECTION) -> FileNode:
        return self._apply(self._state.create_file, name, parent_id)

    def create_folder(self, name: Optional[str] = None, parent_id=FROM_SELECTION) -> FolderNode:
        return self._apply(self._state.create_folder, name, parent_id)

    def undo(self):
        return self._apply(self._state.undo)

    def delete(self, node_id: str) -> bool:
        return self._apply(self._state.delete, node_id)

    def rename(self, node_id: str, new_name: str) -> Node:
        return self._apply(self._state.rename, node_id, new_name)

    def toggle_folder(self, node_id: str) -> None:
        self._apply(self._state.toggle_folder, node_id)

    def edit_content(self, text: str) -> FileNode:
        return self._apply(self._state.edit_content, text)

    # -------------------------------------------------------------------------
    # EXPORT
    # -------------------------------------------------------------------------

    def export_file(self, file_id: Optional[str] = None) -> ExportArtifact:
        """
        Export one file; the active file when no id is given.

        Raises:
            NotFoundError: If there is no such file (or no active file).
            NotAFileError: If the id names a folder.
        """
        if file_id is None:
            if self._state.active_file is None:
                raise NotFoundError("No active file to export")
            return exporter.export_file(self._state.active_file)

        node = self._state.find(file_id)
        if node is None:
            raise NotFoundError(f"No file with id '{file_id}'")
        if not isinstance(node, FileNode):
            raise NotAFileError(f"Node '{file_id}' is a folder, not a file")
        return exporter.export_file(node)

    def export_tree(self, archive_name: Optional[str] = None) -> ExportArtifact:
        """Pack the whole tree; the session is never modified."""
        return exporter.export_tree(self._state.tree, archive_name or self._archive_name)

    def save_artifact(self, artifact: ExportArtifact, output_dir: str) -> str:
        return exporter.write_artifact(artifact, output_dir)
