from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform resolution of the per-user data directory and
small helpers used when export artifacts are written to disk.
"""

import os
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "VirtualExplorer"
UNIX_APP_DIR_NAME = ".vexplorer"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/VirtualExplorer
    - Linux/Mac: ~/.vexplorer

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion and user home shortcuts (~/).
    Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip() or fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def unique_destination(directory: str, file_name: str) -> str:
    """
    Return a path inside directory that does not overwrite an existing file.

    'notes.txt' becomes 'notes (1).txt', 'notes (2).txt', ... the way a
    browser names repeated downloads.

    Args:
        directory: Destination directory.
        file_name: Desired file name.

    Returns:
        str: Absolute path that does not exist yet.
    """
    candidate = os.path.join(directory, file_name)
    if not os.path.exists(candidate):
        return os.path.abspath(candidate)

    stem, ext = os.path.splitext(file_name)
    counter = 1
    while True:
        candidate = os.path.join(directory, f"{stem} ({counter}){ext}")
        if not os.path.exists(candidate):
            return os.path.abspath(candidate)
        counter += 1


def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)
