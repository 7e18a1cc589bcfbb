from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates one CLI invocation: logging bootstrap, settings resolution
(persistent config plus command-line overrides), session restore from the
snapshot store, execution of a single explorer action, and rendering of
the result. The snapshot is rewritten after every successful action.
"""

import argparse
import json
import os
import sys
from typing import Any, Callable, Dict, List, Optional

from vexplorer.core.services.persistence import SnapshotStore
from vexplorer.core.session.service import ExplorerService
from vexplorer.core.tree.render import render_tree_lines
from vexplorer.domain.config import (
    coerce_setting,
    get_snapshot_db_path,
    load_settings,
    save_settings,
)
from vexplorer.domain.errors import ExplorerError
from vexplorer.infra.fs import normalize_path
from vexplorer.infra.logging import LoggingConfig, configure_logging, get_logger
from vexplorer.interface.cli import args as cli_args

logger = get_logger(__name__)

Handler = Callable[[ExplorerService, argparse.Namespace, Dict[str, Any]], int]

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 action failure, 2 bad input path).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Settings resolution (persistent config + overrides)
    settings = dict(load_settings())
    settings.update(cli_args.args_to_overrides(args))

    # 3. Logging bootstrap (console stderr, optional rotating file)
    log_file = normalize_path(args.log_file, os.getcwd()) if args.log_file else None
    configure_logging(LoggingConfig.from_settings(settings, log_file=log_file))
    logger.debug(f"CLI command '{args.command}' with settings: {settings}")

    # 4. Session restore
    db_path = normalize_path(args.db_path, get_snapshot_db_path())
    ttl_seconds = float(settings["snapshot_ttl_hours"]) * 60 * 60
    store = SnapshotStore(db_path, ttl_seconds=ttl_seconds)
    service = ExplorerService.restore(store, archive_name=settings["archive_name"])

    # 5. Action dispatch
    handler = _COMMANDS[args.command]
    try:
        return handler(service, args, settings)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except ExplorerError as e:
        logger.debug(f"Command '{args.command}' failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

# -----------------------------------------------------------------------------
# COMMAND HANDLERS
# -----------------------------------------------------------------------------

def _cmd_import(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    directory = normalize_path(args.directory, os.getcwd())
    if not os.path.isdir(directory):
        print(f"ERROR: Folder does not exist: {directory}", file=sys.stderr)
        return 2

    service.upload_directory(directory, skip_hidden=bool(settings.get("skip_hidden")))
    _print_tree(service, expand_all=False)
    return 0


def _cmd_clear(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    service.clear()
    print("Session cleared.")
    return 0


def _cmd_tree(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    if args.json_output:
        print(json.dumps(service.state.to_snapshot().to_dict(), ensure_ascii=False, indent=2))
        return 0
    _print_tree(service, expand_all=args.expand_all)
    return 0


def _cmd_tabs(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    _print_tabs(service)
    return 0


def _cmd_config(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    stored = load_settings()
    if args.key is None:
        print(json.dumps(stored, ensure_ascii=False, indent=2))
        return 0

    if args.value is None:
        if args.key not in stored:
            print(f"ERROR: Unknown setting '{args.key}'", file=sys.stderr)
            return 2
        print(json.dumps(stored[args.key], ensure_ascii=False))
        return 0

    try:
        value = coerce_setting(args.key, args.value)
    except KeyError:
        print(f"ERROR: Unknown setting '{args.key}'", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    save_settings({args.key: value})
    logger.info(f"Setting '{args.key}' saved")
    print(f"{args.key} = {json.dumps(value, ensure_ascii=False)}")
    return 0


def _cmd_select(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    service.select(args.node_id)
    _print_tabs(service)
    return 0


def _cmd_open(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    node = service.open_file(args.node_id)
    print(node.content)
    return 0


def _cmd_close(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    service.close_file(args.node_id)
    _print_tabs(service)
    return 0


def _cmd_activate(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    node = service.activate(args.node_id)
    print(node.content)
    return 0


def _cmd_toggle(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    service.toggle_folder(args.node_id)
    _print_tree(service, expand_all=False)
    return 0


def _cmd_delete(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    removed = service.delete(args.node_id)
    if not removed:
        print(f"Nothing to delete for id '{args.node_id}'.")
    _print_tree(service, expand_all=False)
    return 0


def _cmd_edit(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    if args.from_file is not None:
        try:
            with open(args.from_file, "r", encoding="utf-8", errors="replace") as f:
                text = f.read()
        except OSError as e:
            print(f"ERROR: Cannot read '{args.from_file}': {e}", file=sys.stderr)
            return 2
    else:
        text = args.text

    node = service.edit_content(text)
    print(f"Updated {node.name} ({len(node.content)} chars).")
    return 0


def _cmd_rename(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    node = service.rename(args.node_id, args.name)
    print(f"Renamed to {node.name} [{node.id}].")
    return 0


def _cmd_new_file(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    node = service.create_file(args.name or settings["default_file_name"], args.parent_id)
    print(f"Created file {node.name} [{node.id}].")
    return 0


def _cmd_new_folder(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    node = service.create_folder(args.name or settings["default_folder_name"], args.parent_id)
    print(f"Created folder {node.name} [{node.id}].")
    return 0


def _cmd_export_file(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    artifact = service.export_file(args.node_id)
    print(service.save_artifact(artifact, normalize_path(args.output_dir, os.getcwd())))
    return 0


def _cmd_export_tree(service: ExplorerService, args: argparse.Namespace, settings: Dict[str, Any]) -> int:
    artifact = service.export_tree(settings["archive_name"])
    print(service.save_artifact(artifact, normalize_path(args.output_dir, os.getcwd())))
    return 0


_COMMANDS: Dict[str, Handler] = {
    "import": _cmd_import,
    "clear": _cmd_clear,
    "tree": _cmd_tree,
    "tabs": _cmd_tabs,
    "config": _cmd_config,
    "select": _cmd_select,
    "open": _cmd_open,
    "close": _cmd_close,
    "activate": _cmd_activate,
    "toggle": _cmd_toggle,
    "delete": _cmd_delete,
    "edit": _cmd_edit,
    "rename": _cmd_rename,
    "new-file": _cmd_new_file,
    "new-folder": _cmd_new_folder,
    "export-file": _cmd_export_file,
    "export-tree": _cmd_export_tree,
}

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_tree(service: ExplorerService, expand_all: bool) -> None:
    state = service.state
    if not state.tree:
        print("(empty session)")
        return
    active_id = state.active_file.id if state.active_file else None
    for line in render_tree_lines(state.tree, show_ids=True, expand_all=expand_all, active_id=active_id):
        print(line)


def _print_tabs(service: ExplorerService) -> None:
    state = service.state
    if not state.open_files:
        print("(no open tabs)")
        return
    active_id = state.active_file.id if state.active_file else None
    for f in state.open_files:
        marker = "*" if f.id == active_id else " "
        print(f"{marker} {f.name} [{f.id}]")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
