from __future__ import annotations

"""
Path Ingestion.

Turns a flat list of (relative path, content) pairs into the nested
virtual tree, merging shared folder prefixes. Input order is preserved:
children appear in the order their first path was seen.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from vexplorer.domain.constants import PATH_SEPARATOR
from vexplorer.domain.errors import InvalidNameError, NameCollisionError
from vexplorer.domain.tree_models import FileNode, FolderNode, Tree

logger = logging.getLogger(__name__)

UploadEntry = Tuple[str, str]


@dataclass
class _FolderDraft:
    """Mutable folder used only while a batch is being assembled."""
    id: str
    name: str
    path: str
    children: List[Union["_FolderDraft", FileNode]] = field(default_factory=list)
    index: Dict[str, Union["_FolderDraft", FileNode]] = field(default_factory=dict)

    def freeze(self) -> FolderNode:
        return FolderNode(
            id=self.id,
            name=self.name,
            path=self.path,
            is_open=False,
            children=tuple(_freeze(child) for child in self.children),
        )


def _freeze(item: Union[_FolderDraft, FileNode]):
    return item.freeze() if isinstance(item, _FolderDraft) else item

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def split_path(relative_path: str) -> List[str]:
    """
    Split a '/'-joined relative path into its non-empty segments.

    Args:
        relative_path: Upload path such as 'project/src/main.py'.

    Returns:
        List[str]: Path segments; empty segments are dropped.
    """
    return [part for part in relative_path.split(PATH_SEPARATOR) if part]


def build_tree(
        entries: Iterable[UploadEntry],
        id_factory: Callable[[], str],
) -> Tree:
    """
    Build the root-level node sequence from uploaded entries.

    Every segment except the last becomes a Folder (reusing an existing
    sibling folder of the same name); the last segment becomes a File
    holding the already-read content. Folders start closed.

    Args:
        entries: Ordered (relative path, content) pairs.
        id_factory: Callable returning a fresh unique id per node.

    Returns:
        Tree: The new root sequence (empty for an empty upload).

    Raises:
        InvalidNameError: If a path has no usable segment.
        NameCollisionError: If a file and a folder compete for one name,
            or the same file path appears twice.
    """
    root = _FolderDraft(id="", name="", path="")
    count = 0

    for relative_path, content in entries:
        parts = split_path(relative_path)
        if not parts:
            raise InvalidNameError(f"Upload path has no name: {relative_path!r}")

        level = root
        for depth, part in enumerate(parts[:-1]):
            level = _descend(level, part, PATH_SEPARATOR.join(parts[:depth + 1]), id_factory)

        file_name = parts[-1]
        file_path = PATH_SEPARATOR.join(parts)
        existing = level.index.get(file_name)
        if existing is not None:
            kind = "folder" if isinstance(existing, _FolderDraft) else "file"
            raise NameCollisionError(
                f"Name collision between file and {kind} at '{file_path}'"
            )

        node = FileNode(id=id_factory(), name=file_name, path=file_path, content=content)
        level.children.append(node)
        level.index[file_name] = node
        count += 1

    logger.debug(f"Ingested {count} file(s) into {len(root.children)} root node(s)")
    return tuple(_freeze(child) for child in root.children)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _descend(
        level: _FolderDraft,
        name: str,
        path: str,
        id_factory: Callable[[], str],
) -> _FolderDraft:
    """Return the child folder called name, creating it when absent."""
    existing: Optional[Union[_FolderDraft, FileNode]] = level.index.get(name)
    if isinstance(existing, FileNode):
        raise NameCollisionError(f"Name collision between file and folder at '{path}'")
    if existing is not None:
        return existing

    folder = _FolderDraft(id=id_factory(), name=name, path=path)
    level.children.append(folder)
    level.index[name] = folder
    return folder
