"""Pydantic models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from cvcanvas.schemas import Section, SplitDirection


class CreateCvRequest(BaseModel):
    """Request model for ``POST /api/cvs``.

    Attributes
    ----------
    name : str | None
        Display name; defaults to ``CV <n>``.

    """

    name: str | None = Field(default=None, description="Display name of the CV")


class RenameCvRequest(BaseModel):
    """Request model for ``PATCH /api/cvs/{cv_id}``."""

    name: str = Field(..., description="New display name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that ``name`` is not empty."""
        if not v.strip():
            err = "name cannot be empty"
            raise ValueError(err)
        return v.strip()


class AddSectionRequest(BaseModel):
    """Request model for adding a child section.

    Attributes
    ----------
    direction : SplitDirection
        Layout intent passed on to the renderer.

    """

    direction: SplitDirection = Field(default=SplitDirection.VERTICAL, description="Split direction")


class DocumentResponse(BaseModel):
    """The section forest of one CV."""

    cv_id: str = Field(..., description="CV identifier")
    sections: list[Section] = Field(..., description="Top-level sections")


class AddSectionResponse(DocumentResponse):
    """Document after a split, plus the new section."""

    section: Section | None = Field(default=None, description="New section, absent when the parent was not found")


class ErrorResponse(BaseModel):
    """Error payload returned by every failing endpoint."""

    error: str = Field(..., description="Error message")
