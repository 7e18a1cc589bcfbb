from __future__ import annotations

"""
Pure Tree Operations.

Every operation addresses nodes by id, never by reference, and returns a
new root sequence. The input tree is never mutated; unchanged branches are
shared with the result, and an operation that changes nothing returns the
very same tuple it was given.
"""

import logging
from dataclasses import replace
from typing import Callable, Iterator, Optional, Set, Tuple

from vexplorer.domain.constants import PATH_SEPARATOR
from vexplorer.domain.errors import InvalidNameError, NotAFileError, NotFoundError
from vexplorer.domain.tree_models import FileNode, FolderNode, Node, Tree

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# LOOKUP
# -----------------------------------------------------------------------------

def find(tree: Tree, node_id: str) -> Optional[Node]:
    """
    Depth-first search for a node by id.

    Args:
        tree: Root sequence to search.
        node_id: Target id.

    Returns:
        Optional[Node]: The node, or None if absent.
    """
    for node in tree:
        if node.id == node_id:
            return node
        if isinstance(node, FolderNode):
            found = find(node.children, node_id)
            if found is not None:
                return found
    return None


def locate(tree: Tree, node_id: str, parent_id: Optional[str] = None) -> Optional[Tuple[Optional[str], Node]]:
    """
    Find a node together with the id of the folder that owns it.

    Returns:
        Optional[Tuple[Optional[str], Node]]: (parent id or None for roots, node),
        or None if the id is absent.
    """
    for node in tree:
        if node.id == node_id:
            return parent_id, node
        if isinstance(node, FolderNode):
            found = locate(node.children, node_id, node.id)
            if found is not None:
                return found
    return None


def iter_nodes(tree: Tree) -> Iterator[Node]:
    """Yield every node in pre-order."""
    for node in tree:
        yield node
        if isinstance(node, FolderNode):
            yield from iter_nodes(node.children)


def iter_files(tree: Tree) -> Iterator[FileNode]:
    """Yield every file in pre-order."""
    for node in iter_nodes(tree):
        if isinstance(node, FileNode):
            yield node


def collect_ids(tree: Tree) -> Set[str]:
    """Return the ids of every node in the tree."""
    return {node.id for node in iter_nodes(tree)}


def derive_paths(tree: Tree, prefix: str = "") -> Iterator[Tuple[str, Node]]:
    """
    Yield (path, node) pairs in pre-order, computing each path from the
    current names of its ancestors rather than the stored path field.
    """
    for node in tree:
        path = f"{prefix}{PATH_SEPARATOR}{node.name}" if prefix else node.name
        yield path, node
        if isinstance(node, FolderNode):
            yield from derive_paths(node.children, path)


def path_of(tree: Tree, node_id: str) -> Optional[str]:
    """Current '/'-joined path of a node, or None if absent."""
    for path, node in derive_paths(tree):
        if node.id == node_id:
            return path
    return None

# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

def validate_name(name: Optional[str]) -> str:
    """
    Normalize a user-supplied node name.

    Args:
        name: Raw name.

    Returns:
        str: The name stripped of surrounding whitespace.

    Raises:
        InvalidNameError: If the name is blank or contains a path separator.
    """
    clean = (name or "").strip()
    if not clean:
        raise InvalidNameError("Name must not be empty.")
    if PATH_SEPARATOR in clean:
        raise InvalidNameError(f"Name must not contain '{PATH_SEPARATOR}': {clean!r}")
    return clean

# -----------------------------------------------------------------------------
# STRUCTURAL EDITS
# -----------------------------------------------------------------------------

def insert_under(tree: Tree, parent_id: Optional[str], new_node: Node) -> Tree:
    """
    Append a node to the root sequence or to a folder's children.

    The target folder is forced open so the fresh child is visible.

    Raises:
        NotFoundError: If parent_id is given but does not name a Folder.
    """
    if parent_id is None:
        return tree + (new_node,)

    target = find(tree, parent_id)
    if target is None:
        raise NotFoundError(f"No folder with id '{parent_id}'")
    if not isinstance(target, FolderNode):
        raise NotFoundError(f"Node '{parent_id}' is a file and cannot hold children")

    new_tree, _ = _map_node(
        tree,
        parent_id,
        lambda folder: replace(folder, is_open=True, children=folder.children + (new_node,)),
    )
    return new_tree


def remove(tree: Tree, node_id: str) -> Tree:
    """
    Delete a node and its whole subtree; absent ids are a no-op.
    """
    changed = False
    kept = []
    for node in tree:
        if node.id == node_id:
            changed = True
            continue
        if isinstance(node, FolderNode):
            new_children = remove(node.children, node_id)
            if new_children is not node.children:
                node = replace(node, children=new_children)
                changed = True
        kept.append(node)
    return tuple(kept) if changed else tree


def rename(tree: Tree, node_id: str, new_name: str) -> Tree:
    """
    Replace a node's name in place. The stored path is left untouched.

    Raises:
        InvalidNameError: If the new name is blank.
        NotFoundError: If the id is absent.
    """
    clean = validate_name(new_name)
    new_tree, matched = _map_node(tree, node_id, lambda node: replace(node, name=clean))
    if not matched:
        raise NotFoundError(f"No node with id '{node_id}'")
    return new_tree


def toggle_open(tree: Tree, node_id: str) -> Tree:
    """
    Flip is_open on a folder. Files and absent ids leave the tree unchanged.
    """
    target = find(tree, node_id)
    if not isinstance(target, FolderNode):
        logger.debug(f"toggle_open ignored for id '{node_id}'")
        return tree

    new_tree, _ = _map_node(tree, node_id, lambda folder: replace(folder, is_open=not folder.is_open))
    return new_tree


def set_content(tree: Tree, node_id: str, text: str) -> Tree:
    """
    Replace a file's content.

    Raises:
        NotFoundError: If the id is absent.
        NotAFileError: If the id names a folder.
    """
    target = find(tree, node_id)
    if target is None:
        raise NotFoundError(f"No file with id '{node_id}'")
    if not isinstance(target, FileNode):
        raise NotAFileError(f"Node '{node_id}' is a folder, not a file")

    new_tree, _ = _map_node(tree, node_id, lambda node: replace(node, content=text))
    return new_tree

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _map_node(tree: Tree, node_id: str, fn: Callable[[Node], Node]) -> Tuple[Tree, bool]:
    """
    Rebuild the path from the root to node_id, replacing that node with fn(node).

    Returns:
        Tuple[Tree, bool]: (new tree, whether the id was found).
    """
    for index, node in enumerate(tree):
        if node.id == node_id:
            return tree[:index] + (fn(node),) + tree[index + 1:], True
        if isinstance(node, FolderNode):
            new_children, matched = _map_node(node.children, node_id, fn)
            if matched:
                return tree[:index] + (replace(node, children=new_children),) + tree[index + 1:], True
    return tree, False
