"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from modules.backend.schemas.content import BlockContent


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title",
        examples=["My First Note"],
    )
    content: BlockContent = Field(description="Note body as block content")
    tags: list[str] = Field(
        default_factory=list,
        description="Tag names, in display order",
        examples=[["work", "ideas"]],
    )


class NoteUpdate(BaseModel):
    """
    Schema for updating an existing note.

    Only fields present in the request are applied. Sending `tags` replaces
    the whole tag list; omitting it leaves the tags alone.
    """

    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Note title",
    )
    content: BlockContent | None = Field(
        default=None,
        description="Note body as block content",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Replacement tag names",
    )
    is_archived: bool | None = Field(
        default=None,
        description="Archive status",
    )


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: BlockContent = Field(description="Note body as block content")
    tags: list[str] = Field(description="Current tag names")
    is_archived: bool = Field(description="Whether the note is archived")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")
    last_edited: datetime = Field(description="Last edit timestamp, the list sort key")


class NoteSearch(BaseModel):
    """Filters and page selection for listing notes."""

    query: str | None = Field(default=None, description="Case-insensitive text to find in title or body")
    tags: list[str] | None = Field(default=None, description="Match notes carrying any of these tags")
    is_archived: bool | None = Field(default=None, description="Exact archive status; omit for both")
    page: int = Field(default=1, ge=1, description="Page number, starting at 1")
    limit: int = Field(default=20, ge=1, le=100, description="Items per page")


class NotePage(BaseModel):
    """One page of notes plus the size of the whole filtered set."""

    notes: list[NoteResponse]
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
