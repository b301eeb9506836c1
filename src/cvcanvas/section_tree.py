"""Section tree operations.

Every operation is a pure transform over a forest of frozen ``Section``
values: the input is never modified, ancestors of a changed node are
rebuilt, and subtrees that were not touched are returned as the very same
objects. When nothing matches, the input forest itself is returned.
"""

from __future__ import annotations

from typing import Callable, Iterator, Mapping, Sequence
from uuid import uuid4

from cvcanvas.config import DEFAULT_ROOT_PADDING, DEFAULT_SECTION_PADDING
from cvcanvas.exceptions import DuplicateSectionIdError
from cvcanvas.schemas import (
    Document,
    Section,
    SectionKind,
    SectionStyle,
    SectionUpdate,
    SplitDirection,
)
from cvcanvas.utils.logging_config import get_logger

logger = get_logger(__name__)

IdFactory = Callable[[], str]


def new_section_id() -> str:
    """Return a random 128-bit identifier."""
    return str(uuid4())


def default_style(padding: str = DEFAULT_SECTION_PADDING) -> SectionStyle:
    """Style of a freshly created section: transparent, padded, no border."""
    return SectionStyle(
        background_color="transparent",
        padding=padding,
        margin="0px",
        border_style="none",
        border_width="1px",
        border_color="#000000",
    )


def create_section(
    *,
    id_factory: IdFactory | None = None,
    padding: str = DEFAULT_SECTION_PADDING,
) -> Section:
    """Mint an empty container section with a fresh identifier.

    Args:
        id_factory: Identifier generator. Defaults to random UUIDs.
        padding: Padding of the default style.

    Returns:
        A new section with no content and no children.
    """
    make_id = id_factory or new_section_id
    return Section(
        id=make_id(),
        kind=SectionKind.CONTAINER,
        content="",
        style=default_style(padding),
        children=(),
    )


def new_document(*, id_factory: IdFactory | None = None) -> Document:
    """Return the document of a newly registered CV: a single root container."""
    return (create_section(id_factory=id_factory, padding=DEFAULT_ROOT_PADDING),)


def iter_sections(tree: Sequence[Section]) -> Iterator[Section]:
    """Yield every section depth-first, parents before children."""
    for section in tree:
        yield section
        yield from iter_sections(section.children)


def collect_ids(tree: Sequence[Section]) -> set[str]:
    """Return the identifiers of all sections in the tree."""
    return {section.id for section in iter_sections(tree)}


def count_sections(tree: Sequence[Section]) -> int:
    """Count total sections in the tree."""
    total = 0
    for section in tree:
        total += 1
        total += count_sections(section.children)
    return total


def find_duplicate_ids(tree: Sequence[Section]) -> list[str]:
    """Return identifiers that occur more than once, in walk order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for section in iter_sections(tree):
        if section.id in seen and section.id not in duplicates:
            duplicates.append(section.id)
        seen.add(section.id)
    return duplicates


def find_section(tree: Sequence[Section], section_id: str) -> Section | None:
    """Locate a section anywhere in the forest."""
    for section in iter_sections(tree):
        if section.id == section_id:
            return section
    return None


def update_section(
    tree: Sequence[Section],
    section_id: str,
    fields: SectionUpdate | Mapping[str, object],
) -> Document:
    """Merge ``fields`` into the section with ``section_id``.

    Each supplied field replaces the corresponding field of the section;
    a supplied ``style`` replaces the whole style record.

    Args:
        tree: The current forest.
        section_id: Identifier of the section to change.
        fields: A ``SectionUpdate`` or a mapping validated into one.

    Returns:
        The rewritten forest, or ``tree`` unchanged when no section matches.

    Raises:
        pydantic.ValidationError: If ``fields`` has unknown keys or wrong types.
    """
    patch = fields if isinstance(fields, SectionUpdate) else SectionUpdate.model_validate(fields)
    changes = patch.changes()

    def apply(section: Section) -> Section:
        if not changes:
            return section
        return section.model_copy(update=changes)

    result = _rewrite(tree, section_id, apply)
    _log_outcome("update", section_id, result is not None, fields=sorted(changes))
    return tuple(tree) if result is None else result


def insert_child(
    tree: Sequence[Section],
    parent_id: str,
    new_section: Section,
    *,
    direction: SplitDirection = SplitDirection.VERTICAL,
) -> Document:
    """Append ``new_section`` to the children of the section with ``parent_id``.

    ``direction`` is layout intent for the renderer and does not change
    where the child is placed.

    Returns:
        The rewritten forest, or ``tree`` unchanged when no section matches.

    Raises:
        DuplicateSectionIdError: If any identifier of ``new_section`` is
            already used in ``tree``.
    """
    if find_section(tree, parent_id) is None:
        _log_outcome("insert_child", parent_id, False, child_id=new_section.id)
        return tuple(tree)
    clashes = collect_ids((new_section,)) & collect_ids(tree)
    if clashes:
        raise DuplicateSectionIdError(f"Section ids already in use: {', '.join(sorted(clashes))}")

    def apply(section: Section) -> Section:
        return section.model_copy(update={"children": (*section.children, new_section)})

    result = _rewrite(tree, parent_id, apply)
    _log_outcome(
        "insert_child",
        parent_id,
        result is not None,
        child_id=new_section.id,
        direction=SplitDirection(direction).value,
    )
    return tuple(tree) if result is None else result


def remove_child(tree: Sequence[Section], section_id: str) -> Document:
    """Remove a nested section together with its subtree.

    Top-level sections are left in place, so a document always keeps its
    roots.

    Returns:
        The rewritten forest, or ``tree`` unchanged when no nested section matches.
    """

    def prune(children: tuple[Section, ...]) -> tuple[Section, ...] | None:
        kept: list[Section] = []
        changed = False
        for child in children:
            if child.id == section_id:
                changed = True
                continue
            rewritten = prune(child.children)
            if rewritten is None:
                kept.append(child)
            else:
                kept.append(child.model_copy(update={"children": rewritten}))
                changed = True
        return tuple(kept) if changed else None

    roots: list[Section] = []
    removed = False
    for root in tree:
        rewritten = prune(root.children)
        if rewritten is None:
            roots.append(root)
        else:
            roots.append(root.model_copy(update={"children": rewritten}))
            removed = True

    _log_outcome("remove_child", section_id, removed)
    return tuple(roots) if removed else tuple(tree)


def _rewrite(
    nodes: Sequence[Section],
    target_id: str,
    apply: Callable[[Section], Section],
) -> tuple[Section, ...] | None:
    """Rewrite the node matching ``target_id`` depth-first.

    Returns None when no node in ``nodes`` matched or ``apply`` returned the
    node itself, so callers can keep the original objects. Sibling subtrees
    are always visited.
    """
    rewritten: list[Section] = []
    changed = False
    for node in nodes:
        if node.id == target_id:
            updated = apply(node)
            rewritten.append(updated)
            changed = changed or updated is not node
            continue
        children = _rewrite(node.children, target_id, apply) if node.children else None
        if children is None:
            rewritten.append(node)
        else:
            rewritten.append(node.model_copy(update={"children": children}))
            changed = True
    return tuple(rewritten) if changed else None


def _log_outcome(operation: str, section_id: str, matched: bool, **context: object) -> None:
    if matched:
        logger.debug("Section tree %s applied", operation, extra={"section_id": section_id, **context})
    else:
        logger.debug("Section tree %s found no match", operation, extra={"section_id": section_id, **context})
