from __future__ import annotations

"""
CLI Argument Definition.

Defines the command-line schema: global options selecting the snapshot
store, and one subcommand per explorer action.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

# Selection lives only inside one process; each CLI call starts without one.
SELECT_HELP = (
    "Open a file, or check that a folder exists. The selection is not kept "
    "between runs, so new-file/new-folder take their parent from --parent."
)
PARENT_HELP = "Parent folder id (top level when omitted; never taken from a selection)."


def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the vexplorer CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="vexplorer",
        description="Browse and edit an imported folder as a virtual tree.",
    )

    # --- Storage and Diagnostics ---
    p.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Snapshot database file (default: <user data dir>/session.db).",
    )
    p.add_argument(
        "--ttl-hours",
        dest="ttl_hours",
        type=float,
        default=None,
        help="Hours after which a stored session expires.",
    )
    p.add_argument("--debug", action="store_true", help="Enable verbose logging.")
    p.add_argument("--log-file", dest="log_file", default=None, help="Also write logs to this file (rotated).")

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- Session Lifecycle ---
    imp = sub.add_parser("import", help="Import a local folder, replacing the session.")
    imp.add_argument("directory", help="Folder to import.")
    imp.add_argument("--skip-hidden", action="store_true", help="Ignore dot-files and dot-folders.")

    sub.add_parser("clear", help="Forget the stored session.")

    show = sub.add_parser("tree", help="Print the tree.")
    show.add_argument("--all", dest="expand_all", action="store_true", help="Expand every folder.")
    show.add_argument("--json", dest="json_output", action="store_true", help="Print the snapshot as JSON.")

    sub.add_parser("tabs", help="List open tabs.")

    cfg = sub.add_parser("config", help="Show or change persistent settings.")
    cfg.add_argument("key", nargs="?", default=None, help="Setting name (all settings when omitted).")
    cfg.add_argument("value", nargs="?", default=None, help="New value to store.")

    # --- Tabs and Selection ---
    for name, help_text in (
        ("select", SELECT_HELP),
        ("open", "Open a file in a tab and make it active."),
        ("close", "Close a tab."),
        ("activate", "Switch to an open tab."),
        ("toggle", "Expand or collapse a folder."),
        ("delete", "Delete a node and everything below it."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("node_id", help="Node id.")

    # --- Editing ---
    edit = sub.add_parser("edit", help="Replace the active file's content.")
    source = edit.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", default=None, help="New content.")
    source.add_argument("--from-file", dest="from_file", default=None, help="Read new content from a file.")

    ren = sub.add_parser("rename", help="Rename a node.")
    ren.add_argument("node_id", help="Node id.")
    ren.add_argument("name", help="New name.")

    for name, help_text in (
        ("new-file", "Create an empty file."),
        ("new-folder", "Create an empty folder."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("name", nargs="?", default=None, help="Name of the new entry.")
        cmd.add_argument("--parent", dest="parent_id", default=None, help=PARENT_HELP)

    # --- Export ---
    exf = sub.add_parser("export-file", help="Save one file (the active one by default).")
    exf.add_argument("node_id", nargs="?", default=None, help="File id.")
    exf.add_argument("--out", dest="output_dir", default=".", help="Destination directory.")

    ext = sub.add_parser("export-tree", help="Save the whole tree as a zip archive.")
    ext.add_argument("--out", dest="output_dir", default=".", help="Destination directory.")
    ext.add_argument("--name", dest="archive_name", default=None, help="Archive file name.")

    return p

# -----------------------------------------------------------------------------
# SETTINGS MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate global CLI options into settings overrides.

    Args:
        args: Parsed namespace.

    Returns:
        Dict[str, Any]: Only the settings explicitly given on the command line.
    """
    overrides: Dict[str, Any] = {}
    if args.ttl_hours is not None:
        overrides["snapshot_ttl_hours"] = args.ttl_hours
    if args.debug:
        overrides["log_level"] = "DEBUG"
    if getattr(args, "skip_hidden", False):
        overrides["skip_hidden"] = True
    if getattr(args, "archive_name", None):
        overrides["archive_name"] = args.archive_name
    return overrides
