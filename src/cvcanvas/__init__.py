"""cvcanvas: compose CVs out of nested, stylable sections."""

from cvcanvas.backends import FileBackend, HttpBackend, KeyValueBackend, MemoryBackend, create_backend
from cvcanvas.document_store import DocumentStore
from cvcanvas.editor import CvEditor
from cvcanvas.exceptions import (
    CvCanvasError,
    DuplicateSectionIdError,
    MalformedRecordError,
    StorageUnavailableError,
    StoreError,
)
from cvcanvas.registry import CvRegistry
from cvcanvas.schemas import (
    CvEntry,
    Document,
    Section,
    SectionKind,
    SectionStyle,
    SectionUpdate,
    SplitDirection,
)
from cvcanvas.section_tree import (
    create_section,
    find_section,
    insert_child,
    new_document,
    remove_child,
    update_section,
)

__all__ = [
    "CvCanvasError",
    "CvEditor",
    "CvEntry",
    "CvRegistry",
    "Document",
    "DocumentStore",
    "DuplicateSectionIdError",
    "FileBackend",
    "HttpBackend",
    "KeyValueBackend",
    "MalformedRecordError",
    "MemoryBackend",
    "Section",
    "SectionKind",
    "SectionStyle",
    "SectionUpdate",
    "SplitDirection",
    "StorageUnavailableError",
    "StoreError",
    "create_backend",
    "create_section",
    "find_section",
    "insert_child",
    "new_document",
    "remove_child",
    "update_section",
]
