"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from cvcanvas.backends import KeyValueBackend, create_backend
from cvcanvas.document_store import DocumentStore
from cvcanvas.registry import CvRegistry


@lru_cache(maxsize=1)
def get_backend() -> KeyValueBackend:
    """Backend built once from configuration."""
    return create_backend()


def get_store(backend: Annotated[KeyValueBackend, Depends(get_backend)]) -> DocumentStore:
    return DocumentStore(backend)


def get_registry(
    backend: Annotated[KeyValueBackend, Depends(get_backend)],
    store: Annotated[DocumentStore, Depends(get_store)],
) -> CvRegistry:
    return CvRegistry(backend, store)


StoreDep = Annotated[DocumentStore, Depends(get_store)]
RegistryDep = Annotated[CvRegistry, Depends(get_registry)]
