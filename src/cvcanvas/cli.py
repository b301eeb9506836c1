"""Command-line interface for editing CVs in the configured store."""

from __future__ import annotations

import argparse
import base64
import mimetypes
import sys
from pathlib import Path
from typing import Sequence

from cvcanvas.backends import KeyValueBackend, create_backend
from cvcanvas.document_store import DocumentStore
from cvcanvas.editor import CvEditor
from cvcanvas.exceptions import CvCanvasError
from cvcanvas.html_export import render_html
from cvcanvas.output_formatter import format_outline
from cvcanvas.registry import CvRegistry
from cvcanvas.schemas import Document, SplitDirection
from cvcanvas.section_tree import iter_sections
from cvcanvas.utils.logging_config import configure_logging

_STYLE_OPTIONS = {
    "background": "background_color",
    "padding": "padding",
    "margin": "margin",
    "border_style": "border_style",
    "border_width": "border_width",
    "border_color": "border_color",
}


class CommandError(CvCanvasError):
    """A command could not be carried out."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cvcanvas", description="Compose CVs out of nested, stylable sections.")
    parser.add_argument("--log-level", help="Log level (default from CVCANVAS_LOG_LEVEL)")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List CVs")

    new = commands.add_parser("new", help="Create a CV")
    new.add_argument("--name", help="Display name (default: 'CV <n>')")

    show = commands.add_parser("show", help="Print the section outline of a CV")
    show.add_argument("cv_id")
    show.add_argument("--full-ids", action="store_true", help="Print full section ids")

    add = commands.add_parser("add", help="Split a section by adding a child")
    add.add_argument("cv_id")
    add.add_argument("parent", help="Parent section id or unique prefix")
    add.add_argument(
        "--direction",
        choices=[direction.value for direction in SplitDirection],
        default=SplitDirection.VERTICAL.value,
    )

    text = commands.add_parser("text", help="Set the text of a section")
    text.add_argument("cv_id")
    text.add_argument("section", help="Section id or unique prefix")
    text.add_argument("text")

    image = commands.add_parser("image", help="Embed an image file in a section")
    image.add_argument("cv_id")
    image.add_argument("section", help="Section id or unique prefix")
    image.add_argument("path", type=Path)

    style = commands.add_parser("style", help="Change the style of a section")
    style.add_argument("cv_id")
    style.add_argument("section", help="Section id or unique prefix")
    for option in _STYLE_OPTIONS:
        style.add_argument(f"--{option.replace('_', '-')}", dest=option)

    remove = commands.add_parser("remove", help="Remove a nested section")
    remove.add_argument("cv_id")
    remove.add_argument("section", help="Section id or unique prefix")

    export = commands.add_parser("export", help="Write a print-ready HTML page")
    export.add_argument("cv_id")
    export.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")

    delete = commands.add_parser("delete", help="Delete a CV")
    delete.add_argument("cv_id")
    return parser


def main(argv: Sequence[str] | None = None, *, backend: KeyValueBackend | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        kv = backend if backend is not None else create_backend()
    except ValueError as exc:
        parser.error(str(exc))
    store = DocumentStore(kv)
    registry = CvRegistry(kv, store)

    try:
        return _run(args, store, registry)
    except CvCanvasError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _run(args: argparse.Namespace, store: DocumentStore, registry: CvRegistry) -> int:
    if args.command == "list":
        for entry in registry.list():
            print(f"{entry.id}  {entry.last_modified:%Y-%m-%d %H:%M}  {entry.name}")
        return 0

    if args.command == "new":
        entry = registry.create(args.name)
        print(entry.id)
        return 0

    if args.command == "delete":
        if not registry.remove(args.cv_id):
            raise CommandError(f"Unknown CV: {args.cv_id}")
        return 0

    editor = CvEditor(store, args.cv_id, registry=registry)
    document = editor.load()
    if document is None:
        raise CommandError(f"No document stored for CV: {args.cv_id}")

    if args.command == "show":
        print(format_outline(document, full_ids=args.full_ids))
    elif args.command == "export":
        entry = registry.get(args.cv_id)
        html = render_html(document, title=entry.name if entry else "CV")
        if args.output:
            args.output.write_text(html, encoding="utf-8")
        else:
            print(html)
    elif args.command == "add":
        child = editor.add_section(resolve_section_id(document, args.parent), SplitDirection(args.direction))
        if child is None:
            raise CommandError(f"No section matches {args.parent!r}")
        print(child.id)
    elif args.command == "text":
        editor.set_text(resolve_section_id(document, args.section), args.text)
    elif args.command == "image":
        editor.set_image(resolve_section_id(document, args.section), encode_image(args.path))
    elif args.command == "style":
        section = editor.find(resolve_section_id(document, args.section))
        if section is None:
            raise CommandError(f"No section matches {args.section!r}")
        changes = {
            field: getattr(args, option)
            for option, field in _STYLE_OPTIONS.items()
            if getattr(args, option) is not None
        }
        if not changes:
            raise CommandError("No style options given")
        editor.set_style(section.id, section.style.model_copy(update=changes))
    elif args.command == "remove":
        section_id = resolve_section_id(document, args.section)
        if any(root.id == section_id for root in document):
            raise CommandError("Top-level sections cannot be removed")
        editor.remove_section(section_id)
    return 0


def resolve_section_id(document: Document, token: str) -> str:
    """Resolve a full section id or a unique prefix of one."""
    ids = [section.id for section in iter_sections(document)]
    if token in ids:
        return token
    matches = [section_id for section_id in ids if section_id.startswith(token)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise CommandError(f"No section matches {token!r}")
    raise CommandError(f"Section prefix {token!r} is ambiguous ({len(matches)} matches)")


def encode_image(path: Path) -> str:
    """Encode an image file as a ``data:`` URL."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise CommandError(f"Cannot read image {path}: {exc}") from exc
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    if not media_type.startswith("image/"):
        raise CommandError(f"Not an image file: {path}")
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"
