"""CV registry entry model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CvEntry(BaseModel):
    """Metadata of one CV; the section tree lives in the document store."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str
    last_modified: datetime = Field(..., alias="lastModified")
