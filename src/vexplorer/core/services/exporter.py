from __future__ import annotations

"""
Export Gateway.

Produces download artifacts from the virtual tree: a single file as raw
bytes, or the whole tree packed into a zip archive whose member paths are
derived from the current folder names. Archives are assembled fully in
memory and handed out only once complete, so a failure never yields a
partial artifact.
"""

import io
import logging
import os
import zipfile
from dataclasses import dataclass
from typing import Set

from vexplorer.core.tree import ops
from vexplorer.domain.constants import DEFAULT_ARCHIVE_NAME
from vexplorer.domain.errors import ExportFailureError
from vexplorer.domain.tree_models import FileNode, Tree
from vexplorer.infra.fs import safe_mkdir, unique_destination

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ExportArtifact:
    """
    A named byte payload ready to be offered for download.

    Attributes:
        file_name: Suggested name for the saved file.
        payload: Complete artifact bytes.
        media_type: MIME type of the payload.
    """
    file_name: str
    payload: bytes
    media_type: str = "text/plain"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def export_file(file: FileNode) -> ExportArtifact:
    """
    Encode a single file for download under its own name.

    Args:
        file: The file to export.

    Returns:
        ExportArtifact: UTF-8 bytes of the content.
    """
    return ExportArtifact(file_name=file.name, payload=file.content.encode("utf-8"))


def export_tree(tree: Tree, archive_name: str = DEFAULT_ARCHIVE_NAME) -> ExportArtifact:
    """
    Pack every file of the tree into a zip archive.

    Member paths follow a pre-order walk, each file nested under the
    current names of its ancestor folders.

    Args:
        tree: Root sequence to pack.
        archive_name: Download name of the archive.

    Returns:
        ExportArtifact: The finished archive.

    Raises:
        ExportFailureError: If the tree is empty, two files map to the same
            archive path, or packing fails.
    """
    if not tree:
        raise ExportFailureError("Nothing to export: the tree is empty.")

    buffer = io.BytesIO()
    written: Set[str] = set()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path, node in ops.derive_paths(tree):
                if not isinstance(node, FileNode):
                    continue
                if path in written:
                    raise ExportFailureError(f"Duplicate archive path: '{path}'")
                written.add(path)
                zf.writestr(path, node.content)
    except ExportFailureError:
        logger.error(f"Export aborted for '{archive_name}'")
        raise
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        logger.error(f"Failed to pack archive '{archive_name}': {e}")
        raise ExportFailureError(f"Failed to pack archive: {e}") from e

    logger.info(f"Packed {len(written)} file(s) into '{archive_name}'")
    return ExportArtifact(
        file_name=archive_name,
        payload=buffer.getvalue(),
        media_type="application/zip",
    )


def write_artifact(artifact: ExportArtifact, output_dir: str) -> str:
    """
    Save an artifact into a directory without overwriting existing files.

    Args:
        artifact: The artifact to write.
        output_dir: Destination directory (created when missing).

    Returns:
        str: Absolute path of the written file.

    Raises:
        ExportFailureError: If the directory or file cannot be written.
    """
    ok, err = safe_mkdir(output_dir)
    if not ok:
        raise ExportFailureError(f"Cannot create output directory '{output_dir}': {err}")

    dest = unique_destination(output_dir, os.path.basename(artifact.file_name))
    try:
        with open(dest, "wb") as f:
            f.write(artifact.payload)
    except OSError as e:
        logger.error(f"Failed to write '{dest}': {e}")
        raise ExportFailureError(f"Failed to write '{dest}': {e}") from e

    logger.info(f"Artifact saved to: {dest}")
    return dest
