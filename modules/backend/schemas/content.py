"""
Block Content Schemas.

A note body is an ordered list of typed blocks. Each block kind is its own
model and the `type` field picks which one validates the block, so a
header carrying paragraph data (or an unknown type) is rejected.

Scalars are strict: "1" is not accepted where an integer is expected.
Unknown keys are ignored.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

EDITOR_VERSION = "2.31.0"


class HeaderData(BaseModel):
    text: StrictStr
    level: StrictInt = Field(ge=1, le=6)


class ParagraphData(BaseModel):
    text: StrictStr


class ListData(BaseModel):
    style: Literal["ordered", "unordered"]
    items: list[StrictStr]


class QuoteData(BaseModel):
    text: StrictStr
    caption: StrictStr | None = None
    alignment: Literal["left", "center"] | None = None


class DelimiterData(BaseModel):
    pass


class HeaderBlock(BaseModel):
    id: StrictStr
    type: Literal["header"]
    data: HeaderData


class ParagraphBlock(BaseModel):
    id: StrictStr
    type: Literal["paragraph"]
    data: ParagraphData


class ListBlock(BaseModel):
    id: StrictStr
    type: Literal["list"]
    data: ListData


class QuoteBlock(BaseModel):
    id: StrictStr
    type: Literal["quote"]
    data: QuoteData


class DelimiterBlock(BaseModel):
    id: StrictStr
    type: Literal["delimiter"]
    data: DelimiterData


Block = Annotated[
    Union[HeaderBlock, ParagraphBlock, ListBlock, QuoteBlock, DelimiterBlock],
    Field(discriminator="type"),
]

BLOCK_TYPES = ("header", "paragraph", "list", "quote", "delimiter")


class BlockContent(BaseModel):
    """Editor content: timestamp (epoch ms), blocks in order, editor version."""

    time: StrictInt | StrictFloat = Field(description="Content modification time, epoch milliseconds")
    blocks: list[Block] = Field(description="Content blocks in display order")
    version: StrictStr = Field(description="Editor version that produced the content")
