"""Editing session over one CV: tree mutations followed by an immediate save."""

from __future__ import annotations

from typing import Mapping

from cvcanvas.document_store import DocumentStore
from cvcanvas.exceptions import CvCanvasError
from cvcanvas.registry import CvRegistry
from cvcanvas.schemas import (
    Document,
    Section,
    SectionKind,
    SectionStyle,
    SectionUpdate,
    SplitDirection,
)
from cvcanvas.section_tree import (
    IdFactory,
    create_section,
    find_section,
    insert_child,
    remove_child,
    update_section,
)
from cvcanvas.utils.logging_config import get_logger

logger = get_logger(__name__)


class CvEditor:
    """One open editing session of a CV.

    Every mutation that changes the tree is saved before it returns.
    Mutations whose target is gone are no-ops and are not saved, and so is
    every mutation while no document is loaded.

    Args:
        store: Where the document is loaded from and saved to.
        cv_id: Identifier of the CV being edited.
        registry: Optional registry whose entry is touched on each save.
        id_factory: Identifier generator for new sections.
    """

    def __init__(
        self,
        store: DocumentStore,
        cv_id: str,
        *,
        registry: CvRegistry | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self.store = store
        self.cv_id = cv_id
        self.registry = registry
        self.id_factory = id_factory
        self._document: Document | None = None

    @property
    def document(self) -> Document | None:
        return self._document

    def load(self) -> Document | None:
        """(Re)load the document from the store."""
        self._document = self.store.load(self.cv_id)
        return self._document

    def find(self, section_id: str) -> Section | None:
        if self._document is None:
            return None
        return find_section(self._document, section_id)

    def update_section(self, section_id: str, fields: SectionUpdate | Mapping[str, object]) -> Document | None:
        if self._document is None:
            return None
        return self._commit(update_section(self._document, section_id, fields))

    def set_text(self, section_id: str, text: str) -> Document | None:
        return self.update_section(section_id, SectionUpdate(kind=SectionKind.TEXT, content=text))

    def set_image(self, section_id: str, image_ref: str) -> Document | None:
        """Store an embeddable image reference, e.g. a ``data:`` URL."""
        return self.update_section(section_id, SectionUpdate(kind=SectionKind.IMAGE, content=image_ref))

    def set_style(self, section_id: str, style: SectionStyle) -> Document | None:
        return self.update_section(section_id, SectionUpdate(style=style))

    def add_section(
        self,
        parent_id: str,
        direction: SplitDirection = SplitDirection.VERTICAL,
    ) -> Section | None:
        """Split a section by appending a new empty child.

        Returns:
            The new section, or None if the parent does not exist.
        """
        if self._document is None:
            return None
        child = create_section(id_factory=self.id_factory)
        updated = insert_child(self._document, parent_id, child, direction=direction)
        if updated is self._document:
            return None
        self._commit(updated)
        return child

    def remove_section(self, section_id: str) -> Document | None:
        if self._document is None:
            return None
        return self._commit(remove_child(self._document, section_id))

    def _commit(self, updated: Document) -> Document:
        if updated is self._document:
            return updated
        self.store.save(self.cv_id, updated)
        self._document = updated
        if self.registry is not None:
            try:
                self.registry.touch(self.cv_id)
            except CvCanvasError:
                logger.warning("Saved CV edit but could not update its registry entry", extra={"cv_id": self.cv_id})
        logger.debug("Committed CV edit", extra={"cv_id": self.cv_id})
        return updated
