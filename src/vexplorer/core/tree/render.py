from __future__ import annotations

"""
Tree Renderer.

Converts the virtual tree into visual ASCII lines for terminal output.
Collapsed folders hide their children unless everything is expanded.
"""

from typing import List, Optional

from vexplorer.domain.tree_models import FolderNode, Tree

FOLDER_OPEN_MARK = "▾ "
FOLDER_CLOSED_MARK = "▸ "

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree_lines(
        tree: Tree,
        show_ids: bool = True,
        expand_all: bool = False,
        active_id: Optional[str] = None,
) -> List[str]:
    """
    Render the tree with standard connectors (├──, └──).

    Args:
        tree: Root sequence to draw.
        show_ids: Append '[id]' to every entry.
        expand_all: Ignore is_open and draw every folder's children.
        active_id: Id of the active file, marked with '*'.

    Returns:
        List[str]: Visual lines, in tree order.
    """
    lines: List[str] = []
    _render(tree, lines, "", show_ids, expand_all, active_id)
    return lines


def _render(
        tree: Tree,
        lines: List[str],
        prefix: str,
        show_ids: bool,
        expand_all: bool,
        active_id: Optional[str],
) -> None:
    total = len(tree)
    for i, node in enumerate(tree):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        suffix = f" [{node.id}]" if show_ids else ""

        if isinstance(node, FolderNode):
            expanded = expand_all or node.is_open
            mark = FOLDER_OPEN_MARK if expanded else FOLDER_CLOSED_MARK
            lines.append(f"{prefix}{connector}{mark}{node.name}/{suffix}")
            if expanded:
                new_prefix = prefix + ("    " if is_last else "│   ")
                _render(node.children, lines, new_prefix, show_ids, expand_all, active_id)
            continue

        active = " *" if node.id == active_id else ""
        lines.append(f"{prefix}{connector}{node.name}{suffix}{active}")
