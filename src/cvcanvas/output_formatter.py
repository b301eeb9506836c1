"""Format a CV document as a plain-text outline."""

from __future__ import annotations

from typing import Sequence

from cvcanvas.schemas import Section, SectionKind
from cvcanvas.section_tree import count_sections

_PREVIEW_CHARS = 40
_SHORT_ID_CHARS = 8


def format_outline(document: Sequence[Section], *, full_ids: bool = False) -> str:
    """Create a summary line followed by the indented section tree."""
    tree = _create_sections_tree(document, full_ids=full_ids)
    summary = f"Sections: {count_sections(document)}"
    return f"{summary}\n{tree}" if tree else summary


def _create_sections_tree(sections: Sequence[Section], indent: int = 0, *, full_ids: bool) -> str:
    lines: list[str] = []
    for section in sections:
        lines.append(" " * (indent * 4) + _describe(section, full_ids=full_ids))
        if section.children:
            lines.append(_create_sections_tree(section.children, indent + 1, full_ids=full_ids))
    return "\n".join(lines)


def _describe(section: Section, *, full_ids: bool) -> str:
    section_id = section.id if full_ids else section.id[:_SHORT_ID_CHARS]
    label = f"[{section.kind.value}] {section_id}"
    preview = _preview(section)
    return f"{label} {preview}" if preview else label


def _preview(section: Section) -> str:
    if not section.content:
        return ""
    if section.kind is SectionKind.IMAGE:
        # data: URLs are long and unreadable; show only the media type.
        head = section.content.split(",", 1)[0]
        return f"<{head}>" if head.startswith("data:") else f"<{section.content[:_PREVIEW_CHARS]}>"
    text = " ".join(section.content.split())
    if len(text) > _PREVIEW_CHARS:
        text = text[: _PREVIEW_CHARS - 3] + "..."
    return f'"{text}"'
