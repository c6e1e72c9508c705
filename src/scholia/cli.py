"""CLI for scholia - a terminal front end over the notes store."""

import argparse
import asyncio
import json
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.errors import ScholiaError
from .core.model import Note
from .logging_config import configure_logging
from .runtime import Runtime, build_runtime


def _note_json(note: Note) -> str:
    return json.dumps(note.to_dict(), ensure_ascii=False)


def _fail(rt: Runtime) -> int:
    print(f"Error: {rt.store.get_state().error}", file=sys.stderr)
    return 1


async def cmd_ls(args: argparse.Namespace, rt: Runtime) -> int:
    """List notes, newest first. The selected note is marked with '*'."""
    notes = rt.store.sorted_notes()
    if args.json:
        print(json.dumps([n.to_dict() for n in notes], ensure_ascii=False))
        return 0
    selected = rt.store.get_state().selected_note_id
    for note in notes:
        marker = "*" if note.id == selected else " "
        title = note.title or "(untitled)"
        print(f"{marker} {note.id}\t{title}")
    if not notes and not args.quiet:
        print("No notes yet")
    return 0


async def cmd_show(args: argparse.Namespace, rt: Runtime) -> int:
    """Print one note."""
    rt.store.select_note(args.id)
    note = rt.store.selected_note()
    if note is None:
        return _fail(rt)
    if args.json:
        print(_note_json(note))
    else:
        print(f"# {note.title}\n")
        print(note.content)
    return 0


async def cmd_add(args: argparse.Namespace, rt: Runtime) -> int:
    """Create a note."""
    note = await rt.store.add_note(title=args.title, content=args.content)
    if note is None:
        return _fail(rt)
    if args.json:
        print(_note_json(note))
    elif not args.quiet:
        print(note.id)
    return 0


async def cmd_edit(args: argparse.Namespace, rt: Runtime) -> int:
    """Change a note's title and/or content."""
    if args.title is None and args.content is None:
        print("Error: nothing to change (use --title and/or --content)", file=sys.stderr)
        return 1
    note = await rt.store.update_note(args.id, title=args.title, content=args.content)
    if note is None:
        return _fail(rt)
    if args.json:
        print(_note_json(note))
    elif not args.quiet:
        print(f"Updated {note.id}")
    return 0


async def cmd_rm(args: argparse.Namespace, rt: Runtime) -> int:
    """Delete a note."""
    if not await rt.store.delete_note(args.id):
        return _fail(rt)
    if not args.quiet:
        print(f"Deleted {args.id}")
    return 0


HANDLERS = {
    "ls": cmd_ls,
    "show": cmd_show,
    "add": cmd_add,
    "edit": cmd_edit,
    "rm": cmd_rm,
}


async def _run(args: argparse.Namespace, rt: Runtime) -> int:
    try:
        await rt.store.load_notes()
        if rt.store.get_error():
            return _fail(rt)
        return await HANDLERS[args.cmd](args, rt)
    finally:
        await rt.aclose()


def _version_string() -> str:
    return (
        f"scholia {__version__} "
        f"(python {platform.python_version()}, platform {platform.platform()})"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scholia", description="Scholia notes CLI")
    parser.add_argument("--version", action="version", version=_version_string())
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: cwd/scholia.toml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    subparsers.add_parser("ls", help="List notes, newest first")

    parser_show = subparsers.add_parser("show", help="Print a note")
    parser_show.add_argument("id", help="Note ID")

    parser_add = subparsers.add_parser("add", help="Create a note")
    parser_add.add_argument("--title", default="", help="Note title")
    parser_add.add_argument("--content", default="", help="Note body")

    parser_edit = subparsers.add_parser("edit", help="Update a note")
    parser_edit.add_argument("id", help="Note ID")
    parser_edit.add_argument("--title", default=None, help="New title")
    parser_edit.add_argument("--content", default=None, help="New body")

    parser_rm = subparsers.add_parser("rm", help="Delete a note")
    parser_rm.add_argument("id", help="Note ID")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        rt = build_runtime(config_path=args.config)
        configure_logging(rt.config.logging)
        return asyncio.run(_run(args, rt))
    except ScholiaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def entrypoint() -> Any:
    sys.exit(main())


if __name__ == "__main__":
    entrypoint()
