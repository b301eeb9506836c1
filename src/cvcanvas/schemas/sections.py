"""Section tree models."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SectionKind(str, Enum):
    """How the content of a section is interpreted."""

    CONTAINER = "container"
    TEXT = "text"
    IMAGE = "image"


class SplitDirection(str, Enum):
    """Layout intent attached to a new child section.

    Only the renderer looks at it; the tree places the child the same way
    for either value.
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class SectionStyle(BaseModel):
    """Presentation attributes of a section.

    Values are CSS-like strings and are stored as given. Border fields
    may be missing from records written before borders existed.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    background_color: str
    padding: str
    margin: str
    border_style: str = "none"
    border_width: str = "1px"
    border_color: str = "#000000"


class Section(BaseModel):
    """A node of the CV tree.

    Attributes:
        id: Opaque identifier, unique within the document.
        kind: How ``content`` is rendered.
        content: Raw text, an embeddable image reference, or empty.
        style: Presentation attributes.
        children: Ordered child sections.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    kind: SectionKind = Field(..., validation_alias=AliasChoices("kind", "type"))
    content: str
    style: SectionStyle = Field(..., validation_alias=AliasChoices("style", "styles"))
    children: tuple[Section, ...]


class SectionUpdate(BaseModel):
    """Fields merged into a section by an update.

    A field that is present replaces the whole field on the section,
    ``style`` included. Identifiers and children cannot be patched.
    """

    model_config = ConfigDict(extra="forbid")

    kind: SectionKind | None = Field(default=None, validation_alias=AliasChoices("kind", "type"))
    content: str | None = None
    style: SectionStyle | None = Field(default=None, validation_alias=AliasChoices("style", "styles"))

    def changes(self) -> dict[str, object]:
        """Return the explicitly supplied, non-null fields."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


Document = tuple[Section, ...]
