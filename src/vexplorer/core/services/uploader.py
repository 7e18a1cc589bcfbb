from __future__ import annotations

"""
Local Folder Upload Service.

Reads a directory from disk into ordered (relative path, content) pairs,
the same shape a browser folder picker hands over: every path starts with
the picked folder's own name and uses '/' separators. Binary files are
skipped; text is decoded leniently.
"""

import logging
import os
from typing import List, Optional, Tuple

from vexplorer.domain.constants import PATH_SEPARATOR

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 8192

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def collect_upload_entries(directory: str, skip_hidden: bool = False) -> List[Tuple[str, str]]:
    """
    Walk a directory and read every text file it contains.

    Args:
        directory: Folder picked by the user.
        skip_hidden: Ignore entries whose name starts with '.'.

    Returns:
        List[Tuple[str, str]]: (relative path, content) pairs in walk order
        (directories first visited top-down, names sorted per level).

    Raises:
        NotADirectoryError: If directory is not an existing folder.
    """
    base = os.path.abspath(directory)
    if not os.path.isdir(base):
        raise NotADirectoryError(f"Not a directory: {directory}")

    root_name = os.path.basename(base.rstrip(os.sep)) or base
    entries: List[Tuple[str, str]] = []
    skipped = 0

    for root, dirs, files in os.walk(base):
        if skip_hidden:
            dirs[:] = [d for d in dirs if not d.startswith(".")]
        dirs.sort()
        files.sort()

        rel_root = os.path.relpath(root, base)
        prefix_parts = [root_name] + ([] if rel_root == "." else rel_root.split(os.sep))

        for file_name in files:
            if skip_hidden and file_name.startswith("."):
                continue

            full_path = os.path.join(root, file_name)
            content = read_text_file(full_path)
            if content is None:
                skipped += 1
                continue
            entries.append((PATH_SEPARATOR.join(prefix_parts + [file_name]), content))

    logger.info(f"Collected {len(entries)} file(s) from {base} ({skipped} skipped)")
    return entries


def read_text_file(file_path: str) -> Optional[str]:
    """
    Read a file as text, or return None if it looks binary or is unreadable.

    Undecodable UTF-8 sequences are replaced rather than raising.
    """
    try:
        with open(file_path, "rb") as f:
            raw = f.read()
    except OSError as e:
        logger.warning(f"Skipping unreadable file {file_path}: {e}")
        return None

    if b"\x00" in raw[:BINARY_SNIFF_BYTES]:
        logger.debug(f"Skipping binary file {file_path}")
        return None
    return raw.decode("utf-8", errors="replace")
