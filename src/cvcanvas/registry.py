"""Registry of CVs: names and timestamps, stored beside the documents."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from cvcanvas.backends import KeyValueBackend
from cvcanvas.config import REGISTRY_KEY
from cvcanvas.document_store import DocumentStore
from cvcanvas.exceptions import MalformedRecordError
from cvcanvas.schemas import CvEntry
from cvcanvas.section_tree import IdFactory, new_document, new_section_id
from cvcanvas.utils.logging_config import get_logger

logger = get_logger(__name__)

_ENTRIES_ADAPTER: TypeAdapter[list[CvEntry]] = TypeAdapter(list[CvEntry])


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CvRegistry:
    """Lists CVs and creates new ones with their default document.

    Args:
        backend: Backend holding the registry record.
        store: Document store receiving the initial tree of new CVs.
        id_factory: Generator for CV and section identifiers.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        store: DocumentStore,
        *,
        id_factory: IdFactory | None = None,
    ) -> None:
        self.backend = backend
        self.store = store
        self._new_id = id_factory or new_section_id

    def list(self) -> list[CvEntry]:
        """Return all entries in creation order.

        Raises:
            MalformedRecordError: If the registry record cannot be parsed.
        """
        raw = self.backend.get(REGISTRY_KEY)
        if raw is None:
            return []
        try:
            payload: Any = json.loads(raw)
            return _ENTRIES_ADAPTER.validate_python(payload)
        except (json.JSONDecodeError, ValidationError, RecursionError) as exc:
            raise MalformedRecordError(f"Registry record is malformed: {exc}") from exc

    def get(self, cv_id: str) -> CvEntry | None:
        return next((entry for entry in self.list() if entry.id == cv_id), None)

    def create(self, name: str | None = None) -> CvEntry:
        """Register a new CV and store its default document."""
        entries = self.list()
        entry = CvEntry(
            id=self._new_id(),
            name=(name or "").strip() or f"CV {len(entries) + 1}",
            last_modified=_now(),
        )
        self.store.save(entry.id, new_document(id_factory=self._new_id))
        self._write([*entries, entry])
        logger.info("Created CV", extra={"cv_id": entry.id, "cv_name": entry.name})
        return entry

    def rename(self, cv_id: str, name: str) -> CvEntry | None:
        name = name.strip()
        if not name:
            raise ValueError("name cannot be empty")
        return self._replace(cv_id, name=name, last_modified=_now())

    def touch(self, cv_id: str) -> CvEntry | None:
        """Bump the modification time of an entry."""
        return self._replace(cv_id, last_modified=_now())

    def remove(self, cv_id: str) -> bool:
        """Drop an entry and its stored document.

        Returns:
            True if the entry existed.
        """
        entries = self.list()
        kept = [entry for entry in entries if entry.id != cv_id]
        if len(kept) == len(entries):
            return False
        self._write(kept)
        self.store.delete(cv_id)
        logger.info("Removed CV", extra={"cv_id": cv_id})
        return True

    def _replace(self, cv_id: str, **changes: Any) -> CvEntry | None:
        entries = self.list()
        for index, entry in enumerate(entries):
            if entry.id == cv_id:
                updated = entry.model_copy(update=changes)
                entries[index] = updated
                self._write(entries)
                return updated
        return None

    def _write(self, entries: list[CvEntry]) -> None:
        self.backend.set(REGISTRY_KEY, _ENTRIES_ADAPTER.dump_json(entries, by_alias=True).decode("utf-8"))
