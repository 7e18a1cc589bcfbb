from __future__ import annotations

"""
Virtual Tree Data Models.

Provides the immutable node types used to represent an uploaded folder
hierarchy in memory. Nodes never hold a reference to their parent; a
parent owns its children and every edit produces new node instances.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

from vexplorer.domain.errors import ExplorerError

NODE_TYPE_FILE = "file"
NODE_TYPE_FOLDER = "folder"

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileNode:
    """
    Represents a leaf entry (file) in the virtual tree.

    Attributes:
        id: Session-unique identifier, never reassigned.
        name: Display name (last path segment).
        path: '/'-joined ancestor chain captured when the node was created.
        content: Text content of the file.
    """
    id: str
    name: str
    path: str = ""
    content: str = ""

    @property
    def is_folder(self) -> bool:
        return False


@dataclass(frozen=True)
class FolderNode:
    """
    Represents a directory entry in the virtual tree.

    Attributes:
        id: Session-unique identifier, never reassigned.
        name: Display name (last path segment).
        path: '/'-joined ancestor chain captured when the node was created.
        is_open: Whether the explorer shows the folder expanded.
        children: Ordered children, in insertion order.
    """
    id: str
    name: str
    path: str = ""
    is_open: bool = False
    children: Tuple["Node", ...] = field(default_factory=tuple)

    @property
    def is_folder(self) -> bool:
        return True


Node = Union[FileNode, FolderNode]
Tree = Tuple[Node, ...]

# -----------------------------------------------------------------------------
# SERIALIZATION
# -----------------------------------------------------------------------------

def node_to_dict(node: Node) -> Dict[str, Any]:
    """
    Convert a node (and its subtree) into a JSON-compatible dictionary.

    Args:
        node: Node to serialize.

    Returns:
        Dict[str, Any]: Plain mapping with a 'type' discriminator.
    """
    if isinstance(node, FolderNode):
        return {
            "id": node.id,
            "name": node.name,
            "type": NODE_TYPE_FOLDER,
            "path": node.path,
            "isOpen": node.is_open,
            "children": [node_to_dict(child) for child in node.children],
        }
    return {
        "id": node.id,
        "name": node.name,
        "type": NODE_TYPE_FILE,
        "path": node.path,
        "content": node.content,
    }


def node_from_dict(data: Dict[str, Any]) -> Node:
    """
    Rebuild a node (and its subtree) from its dictionary form.

    Args:
        data: Mapping produced by node_to_dict.

    Returns:
        Node: The reconstructed immutable node.

    Raises:
        ExplorerError: If the mapping is not a recognizable node.
    """
    if not isinstance(data, dict):
        raise ExplorerError(f"Malformed node entry: {data!r}")

    node_type = data.get("type")
    try:
        if node_type == NODE_TYPE_FOLDER:
            children = data.get("children") or []
            if not isinstance(children, list):
                raise ExplorerError(f"Folder '{data.get('id')}' children must be a list.")
            return FolderNode(
                id=str(data["id"]),
                name=str(data["name"]),
                path=str(data.get("path") or ""),
                is_open=bool(data.get("isOpen", False)),
                children=tuple(node_from_dict(c) for c in children),
            )
        if node_type == NODE_TYPE_FILE:
            return FileNode(
                id=str(data["id"]),
                name=str(data["name"]),
                path=str(data.get("path") or ""),
                content=str(data.get("content") or ""),
            )
    except KeyError as e:
        raise ExplorerError(f"Node entry is missing field {e}") from e

    raise ExplorerError(f"Unknown node type: {node_type!r}")


def tree_to_list(tree: Tree) -> list:
    """Serialize a root sequence."""
    return [node_to_dict(n) for n in tree]


def tree_from_list(items: Any) -> Tree:
    """Deserialize a root sequence; anything but a list is rejected."""
    if not isinstance(items, list):
        raise ExplorerError("Tree payload must be a list of nodes.")
    return tuple(node_from_dict(item) for item in items)
