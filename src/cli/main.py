"""Packconv CLI entry points.
This module exposes extract, compile, dump, restore, and inspection commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Any, Callable, Sequence

from core.config import PackConfig
from core.constants import DEFAULT_CHECKPACK_PACK, DEFAULT_SAMPLE_KEY_LIMIT
from core.errors import PackError
from core.pack_paths import pack_name_from_file
from store.pack_sdk import PackClient

PackAction = Callable[[str], Sequence[str]]


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="packconv",
        description="Convert compendium packs between stores and editable file trees",
    )
    parser.add_argument(
        "--project-root", help="Override PACKCONV_PROJECT_ROOT for this command"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_extract_command(subparsers)
    _add_compile_command(subparsers)
    _add_dump_command(subparsers)
    _add_restore_command(subparsers)
    _add_checkpack_command(subparsers)
    subparsers.add_parser("list", help="List registered packs and what exists on disk")
    return parser


def main(argv: Sequence[str] | None = None, client: PackClient | None = None) -> int:
    """Run the packconv CLI.

    Args:
        argv: Optional argument vector.
        client: Optional preconfigured SDK client.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.project_root, client)
        if args.command == "extract":
            return _run_extract_command(client, args)
        if args.command == "compile":
            return _run_pack_command(client, args.pack, lambda pack: _compile(client, pack))
        if args.command == "dump":
            return _run_pack_command(client, args.pack, lambda pack: _dump(client, pack))
        if args.command == "restore":
            return _run_pack_command(
                client, args.pack, lambda pack: _restore(client, pack, args.backup)
            )
        if args.command == "checkpack":
            return _run_checkpack_command(client, args)
        if args.command == "list":
            return _run_list_command(client)
    except PackError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(project_root: str | None, client: PackClient | None) -> PackClient:
    """Build SDK client with optional project-root override.

    Args:
        project_root: Optional override path.
        client: Optional existing client to reuse.

    Returns:
        Configured SDK client.
    """
    if client is None:
        client = PackClient(PackConfig.from_env())
    if project_root:
        client = client.with_project_root(project_root)
    return client


def _run_extract_command(client: PackClient, args: argparse.Namespace) -> int:
    """Handle extract command.

    A ``--file`` without ``--pack`` extracts into the pack named after the file.
    """
    if args.file:
        db_file = Path(args.file).expanduser().resolve()
        pack_name = args.pack or pack_name_from_file(db_file)
        _print_lines(_extract(client, pack_name, db_file, args.backup))
        return 0
    return _run_pack_command(
        client, args.pack, lambda pack: _extract(client, pack, None, args.backup)
    )


def _run_pack_command(client: PackClient, pack_name: str | None, action: PackAction) -> int:
    """Run an action for one pack, or for every registered pack.

    A single pack propagates its failure. Across all packs each failure
    is reported and the remaining packs still run.

    Returns:
        Exit code.
    """
    if pack_name:
        _print_lines(action(pack_name))
        return 0
    failed_packs: list[str] = []
    for registered_pack in client.config.available_packs:
        try:
            _print_lines(action(registered_pack))
        except PackError as error:
            print(f"pack={registered_pack} error={error}", file=sys.stderr)
            failed_packs.append(registered_pack)
    succeeded = len(client.config.available_packs) - len(failed_packs)
    print(f"succeeded={succeeded} failed={len(failed_packs)}")
    return 1 if failed_packs else 0


def _run_checkpack_command(client: PackClient, args: argparse.Namespace) -> int:
    """Handle checkpack command."""
    keys = client.checkpack(args.pack, args.limit)
    for key in keys:
        print(key)
    print(f"sampled_keys={len(keys)}")
    return 0


def _run_list_command(client: PackClient) -> int:
    """Handle list command."""
    for status in client.list_packs():
        print(
            f"{status.pack_name}\t"
            f"level={'yes' if status.level_exists else 'no'}\t"
            f"db={'yes' if status.db_exists else 'no'}\t"
            f"source={'yes' if status.source_exists else 'no'}"
        )
    return 0


def _extract(
    client: PackClient,
    pack_name: str,
    db_file: Path | None,
    backup: bool,
) -> list[str]:
    result = client.extract(pack_name, db_file=db_file, backup=backup)
    lines = [
        f"pack={result.pack_name}",
        f"output_dir={result.output_dir}",
        f"folders={result.folder_count}",
        f"documents={result.document_count}",
        f"embedded={result.embedded_count}",
        f"failed={result.failed_count}",
    ]
    if result.backup_dir:
        lines.append(f"backup_dir={result.backup_dir}")
    return lines


def _compile(client: PackClient, pack_name: str) -> list[str]:
    result = client.compile(pack_name)
    return [
        f"pack={result.pack_name}",
        f"output_path={result.output_path}",
        f"folders={result.folder_count}",
        f"documents={result.document_count}",
        f"failed={len(result.failed_files)}",
    ]


def _dump(client: PackClient, pack_name: str) -> list[str]:
    result = client.dump(pack_name)
    return [
        f"pack={result.pack_name}",
        f"output_path={result.output_path}",
        f"entries={result.entry_count}",
    ]


def _restore(client: PackClient, pack_name: str, backup: bool) -> list[str]:
    result = client.restore(pack_name, backup=backup)
    lines = [
        f"pack={result.pack_name}",
        f"level_dir={result.level_dir}",
        f"entries={result.entry_count}",
    ]
    if result.backup_dir:
        lines.append(f"backup_dir={result.backup_dir}")
    return lines


def _print_lines(lines: Sequence[str]) -> None:
    for line in lines:
        print(line)


def _add_extract_command(subparsers: Any) -> None:
    """Register extract subcommand."""
    parser = subparsers.add_parser(
        "extract", help="Extract flat store files into editable JSON file trees"
    )
    parser.add_argument("--pack", help="Pack name; omit to extract every registered pack")
    parser.add_argument("--file", help="Custom .db file to extract")
    parser.add_argument(
        "--backup",
        action="store_true",
        help="Rename the existing source tree aside instead of deleting it",
    )


def _add_compile_command(subparsers: Any) -> None:
    """Register compile subcommand."""
    parser = subparsers.add_parser("compile", help="Compile JSON file trees into flat store files")
    parser.add_argument("--pack", help="Pack name; omit to compile every registered pack")


def _add_dump_command(subparsers: Any) -> None:
    """Register dump subcommand."""
    parser = subparsers.add_parser("dump", help="Dump LevelDB packs into flat store files")
    parser.add_argument("--pack", help="Pack name; omit to dump every registered pack")


def _add_restore_command(subparsers: Any) -> None:
    """Register restore subcommand."""
    parser = subparsers.add_parser("restore", help="Rebuild LevelDB packs from flat store files")
    parser.add_argument("--pack", help="Pack name; omit to restore every registered pack")
    parser.add_argument(
        "--backup",
        action="store_true",
        help="Rename the existing LevelDB directory aside before restoring",
    )


def _add_checkpack_command(subparsers: Any) -> None:
    """Register checkpack subcommand."""
    parser = subparsers.add_parser("checkpack", help="Show sample keys from a LevelDB pack")
    parser.add_argument("--pack", default=DEFAULT_CHECKPACK_PACK, help="Pack name")
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_SAMPLE_KEY_LIMIT,
        help="Maximum number of keys to print",
    )
