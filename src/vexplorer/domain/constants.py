from __future__ import annotations

"""
Domain Constants.

Centralized defaults shared by the session model, the snapshot store,
the export gateway and the configuration layer.
"""

CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# PERSISTENCE
# -----------------------------------------------------------------------------
STORAGE_KEY = "vexplorer_session"
SNAPSHOT_DB_FILENAME = "session.db"
DEFAULT_TTL_HOURS = 24
DEFAULT_TTL_SECONDS = DEFAULT_TTL_HOURS * 60 * 60

# -----------------------------------------------------------------------------
# CREATION AND EXPORT DEFAULTS
# -----------------------------------------------------------------------------
DEFAULT_FILE_NAME = "new-file.txt"
DEFAULT_FOLDER_NAME = "new-folder"
DEFAULT_ARCHIVE_NAME = "project.zip"

PATH_SEPARATOR = "/"
