"""Shared schemas for cvcanvas."""

from cvcanvas.schemas.registry import CvEntry
from cvcanvas.schemas.sections import (
    Document,
    Section,
    SectionKind,
    SectionStyle,
    SectionUpdate,
    SplitDirection,
)

__all__ = [
    "CvEntry",
    "Document",
    "Section",
    "SectionKind",
    "SectionStyle",
    "SectionUpdate",
    "SplitDirection",
]
