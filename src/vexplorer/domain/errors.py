from __future__ import annotations

"""
Domain Error Hierarchy.

Typed failures raised by the tree model, the session synchronization layer
and the export gateway. Lookup failures on delete/toggle are not errors and
never reach this module.
"""


class ExplorerError(Exception):
    """Base class for every failure surfaced by the explorer core."""


class NotFoundError(ExplorerError):
    """An operation id does not resolve to the expected node type."""


class NotAFileError(NotFoundError):
    """The id resolved, but to a Folder where a File was required."""


class InvalidNameError(ExplorerError):
    """A create/rename name is blank or cannot be used as a path segment."""


class NameCollisionError(ExplorerError):
    """An uploaded path needs a folder where a file already sits (or vice versa)."""


class ExportFailureError(ExplorerError):
    """Packing or writing an export artifact failed; nothing was produced."""
