"""Section tree endpoints.

Mutations aimed at a section that no longer exists succeed without
changing anything; the current document is returned either way.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response, status

from cvcanvas.editor import CvEditor
from cvcanvas.schemas import Document, Section, SectionUpdate
from cvcanvas.section_tree import find_section
from server.dependencies import RegistryDep, StoreDep
from server.models import AddSectionRequest, AddSectionResponse, DocumentResponse, ErrorResponse

router = APIRouter(prefix="/api/cvs/{cv_id}/sections", tags=["sections"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


def _open_editor(cv_id: str, store: StoreDep, registry: RegistryDep) -> tuple[CvEditor, Document]:
    editor = CvEditor(store, cv_id, registry=registry)
    document = editor.load()
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No document for CV {cv_id!r}")
    return editor, document


@router.get("", response_model=DocumentResponse, responses=_NOT_FOUND)
async def get_document(cv_id: str, store: StoreDep) -> DocumentResponse:
    """Return the whole section forest of a CV."""
    document = await store.load_async(cv_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No document for CV {cv_id!r}")
    return DocumentResponse(cv_id=cv_id, sections=list(document))


@router.get("/{section_id}", response_model=Section, responses=_NOT_FOUND)
async def get_section(cv_id: str, section_id: str, store: StoreDep) -> Section:
    document = await store.load_async(cv_id)
    section = find_section(document, section_id) if document is not None else None
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Section {section_id!r} not found")
    return section


@router.patch("/{section_id}", response_model=DocumentResponse, responses=_NOT_FOUND)
def update_section(
    cv_id: str,
    section_id: str,
    payload: SectionUpdate,
    store: StoreDep,
    registry: RegistryDep,
) -> DocumentResponse:
    """Merge the given fields into a section; ``style`` is replaced as a whole."""
    editor, document = _open_editor(cv_id, store, registry)
    document = editor.update_section(section_id, payload) or document
    return DocumentResponse(cv_id=cv_id, sections=list(document))


@router.post(
    "/{parent_id}/children",
    response_model=AddSectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_NOT_FOUND,
)
def add_section(
    cv_id: str,
    parent_id: str,
    response: Response,
    store: StoreDep,
    registry: RegistryDep,
    payload: AddSectionRequest | None = None,
) -> AddSectionResponse:
    """Split a section by appending a new empty child to it.

    Answers 200 with the unchanged document when the parent does not exist.
    """
    editor, _ = _open_editor(cv_id, store, registry)
    request = payload or AddSectionRequest()
    child = editor.add_section(parent_id, request.direction)
    if child is None:
        response.status_code = status.HTTP_200_OK
    return AddSectionResponse(cv_id=cv_id, sections=list(editor.document or ()), section=child)


@router.delete("/{section_id}", response_model=DocumentResponse, responses=_NOT_FOUND)
def remove_section(cv_id: str, section_id: str, store: StoreDep, registry: RegistryDep) -> DocumentResponse:
    """Remove a nested section and everything below it."""
    editor, document = _open_editor(cv_id, store, registry)
    document = editor.remove_section(section_id) or document
    return DocumentResponse(cv_id=cv_id, sections=list(document))
