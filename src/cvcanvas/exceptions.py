"""Custom exceptions for cvcanvas."""


class CvCanvasError(Exception):
    """Base exception for cvcanvas operations."""


class StoreError(CvCanvasError):
    """Error raised by the persistence layer."""


class MalformedRecordError(StoreError):
    """Stored value does not parse into a well-formed record."""


class StorageUnavailableError(StoreError):
    """The storage medium cannot be read or written."""


class DuplicateSectionIdError(CvCanvasError, ValueError):
    """Inserted section reuses an identifier already present in the tree."""
