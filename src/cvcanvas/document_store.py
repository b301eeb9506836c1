"""Durable per-CV persistence of section trees."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Sequence

from pydantic import TypeAdapter, ValidationError

from cvcanvas.backends import KeyValueBackend
from cvcanvas.config import DOCUMENT_KEY_PREFIX
from cvcanvas.exceptions import MalformedRecordError
from cvcanvas.schemas import Document, Section
from cvcanvas.section_tree import find_duplicate_ids
from cvcanvas.utils.logging_config import get_logger

logger = get_logger(__name__)

_DOCUMENT_ADAPTER: TypeAdapter[tuple[Section, ...]] = TypeAdapter(tuple[Section, ...])


def document_key(document_id: str) -> str:
    """Storage key of a document; never collides with the registry key."""
    if not document_id:
        raise ValueError("document_id cannot be empty")
    return f"{DOCUMENT_KEY_PREFIX}{document_id}"


def dump_document(document: Sequence[Section]) -> str:
    """Serialize a document as a JSON array of section records."""
    return _DOCUMENT_ADAPTER.dump_json(tuple(document), by_alias=True).decode("utf-8")


def parse_document(raw: str) -> Document:
    """Parse a stored document.

    Accepts the current array form and the older ``{"sections": [...]}``
    wrapper.

    Raises:
        MalformedRecordError: If the value is not a well-formed document.
    """
    try:
        payload: Any = json.loads(raw)
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        raise MalformedRecordError(f"Stored document is not valid JSON: {exc}") from exc

    if isinstance(payload, dict) and set(payload) == {"sections"}:
        payload = payload["sections"]
    if not isinstance(payload, list):
        raise MalformedRecordError(f"Stored document must be a list of sections, got {type(payload).__name__}")

    try:
        document = _DOCUMENT_ADAPTER.validate_python(payload)
        duplicates = find_duplicate_ids(document)
    except (ValidationError, RecursionError) as exc:
        raise MalformedRecordError(f"Stored document has an invalid shape: {exc}") from exc

    if duplicates:
        raise MalformedRecordError(f"Stored document repeats section ids: {', '.join(duplicates)}")
    return document


class DocumentStore:
    """Loads and saves documents through a key-value backend.

    One open session owns a document at a time; concurrent writers are
    not coordinated and the last save wins.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self.backend = backend

    def load(self, document_id: str) -> Document | None:
        """Return the stored document, or None when nothing was saved yet.

        Raises:
            MalformedRecordError: If the stored value cannot be parsed.
            StorageUnavailableError: If the backend cannot be read.
        """
        key = document_key(document_id)
        raw = self.backend.get(key)
        if raw is None:
            logger.debug("No stored document", extra={"document_id": document_id})
            return None
        try:
            return parse_document(raw)
        except MalformedRecordError:
            logger.warning("Stored document is malformed", extra={"document_id": document_id, "key": key})
            raise

    def save(self, document_id: str, document: Sequence[Section]) -> None:
        """Overwrite the stored document.

        Raises:
            StorageUnavailableError: If the backend cannot be written.
        """
        payload = dump_document(document)
        self.backend.set(document_key(document_id), payload)
        logger.debug("Saved document", extra={"document_id": document_id, "size": len(payload)})

    def delete(self, document_id: str) -> None:
        """Remove the stored document if present."""
        self.backend.delete(document_key(document_id))
        logger.debug("Deleted document", extra={"document_id": document_id})

    async def load_async(self, document_id: str) -> Document | None:
        """Load a document in a worker thread."""
        return await asyncio.to_thread(self.load, document_id)

    async def save_async(self, document_id: str, document: Sequence[Section]) -> None:
        """Save a document in a worker thread."""
        await asyncio.to_thread(self.save, document_id, document)
