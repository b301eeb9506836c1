"""CV registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import HTMLResponse

from cvcanvas.html_export import render_html
from cvcanvas.schemas import CvEntry
from server.dependencies import RegistryDep, StoreDep
from server.models import CreateCvRequest, ErrorResponse, RenameCvRequest

router = APIRouter(prefix="/api/cvs", tags=["cvs"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


@router.get("", response_model=list[CvEntry])
def list_cvs(registry: RegistryDep) -> list[CvEntry]:
    """List all CVs in creation order."""
    return registry.list()


@router.post("", response_model=CvEntry, status_code=status.HTTP_201_CREATED)
def create_cv(registry: RegistryDep, payload: CreateCvRequest | None = None) -> CvEntry:
    """Register a new CV with a single empty root section."""
    return registry.create(payload.name if payload else None)


@router.get("/{cv_id}", response_model=CvEntry, responses=_NOT_FOUND)
def get_cv(cv_id: str, registry: RegistryDep) -> CvEntry:
    entry = registry.get(cv_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"CV {cv_id!r} not found")
    return entry


@router.patch("/{cv_id}", response_model=CvEntry, responses=_NOT_FOUND)
def rename_cv(cv_id: str, payload: RenameCvRequest, registry: RegistryDep) -> CvEntry:
    entry = registry.rename(cv_id, payload.name)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"CV {cv_id!r} not found")
    return entry


@router.delete("/{cv_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
def delete_cv(cv_id: str, registry: RegistryDep) -> None:
    """Remove a CV and its stored document."""
    if not registry.remove(cv_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"CV {cv_id!r} not found")


@router.get("/{cv_id}/export", response_class=HTMLResponse, responses=_NOT_FOUND)
async def export_cv(cv_id: str, store: StoreDep, registry: RegistryDep) -> HTMLResponse:
    """Return the CV as a print-ready HTML page."""
    document = await store.load_async(cv_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No document for CV {cv_id!r}")
    entry = registry.get(cv_id)
    return HTMLResponse(render_html(document, title=entry.name if entry else "CV"))
