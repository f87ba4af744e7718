"""
Tag Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class TagResponse(BaseModel):
    id: str
    name: str
    note_count: int = Field(ge=0, description="Number of notes carrying this tag")
    created_at: datetime
    updated_at: datetime


class TagList(BaseModel):
    tags: list[TagResponse]
    total: int = Field(ge=0)
