"""
Block Content Operations.

Validation, storage serialization, and plain-text extraction for note
bodies. Content is stored as compact JSON text and parsed back into
BlockContent on every read.

Usage:
    from modules.backend.core.content import validate_content, serialize_content

    content = validate_content(payload)
    note.content = serialize_content(content)
"""

import json
import re
import time
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from modules.backend.core.exceptions import FormatError, ValidationError
from modules.backend.core.utils import random_alphanumeric
from modules.backend.schemas.content import (
    EDITOR_VERSION,
    BlockContent,
    DelimiterBlock,
    HeaderBlock,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
)

BLOCK_ID_LENGTH = 10

_MARKUP_TAG = re.compile(r"<[^>]*>")


def _field_errors(exc: PydanticValidationError) -> dict[str, Any]:
    return {
        "validation_errors": [
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
    }


def validate_content(raw: Any) -> BlockContent:
    """
    Validate raw input (dict or BlockContent) as block content.

    Raises:
        ValidationError: With field-level details when the shape is wrong
    """
    if isinstance(raw, BlockContent):
        return raw
    try:
        return BlockContent.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError("Invalid note content", details=_field_errors(e)) from e


def serialize_content(content: BlockContent) -> str:
    """Compact, deterministic JSON. Unset optional fields are omitted."""
    return json.dumps(
        content.model_dump(mode="json", exclude_none=True),
        separators=(",", ":"),
        ensure_ascii=False,
    )


def deserialize_content(text: str) -> BlockContent:
    """
    Parse stored content text.

    Raises:
        FormatError: If the text is not JSON or not valid block content
    """
    try:
        raw = json.loads(text)
    except (TypeError, ValueError) as e:
        raise FormatError(f"Stored content is not valid JSON: {e}") from e
    try:
        return BlockContent.model_validate(raw)
    except PydanticValidationError as e:
        raise FormatError(
            f"Stored content does not match the block schema: {e.error_count()} error(s)"
        ) from e


def extract_text(content: BlockContent) -> str:
    """
    Searchable plain text of a note body, in block order.

    Markup tags are stripped. Used for matching only, never stored.
    """
    parts: list[str] = []
    for block in content.blocks:
        if isinstance(block, (HeaderBlock, ParagraphBlock)):
            parts.append(block.data.text)
        elif isinstance(block, ListBlock):
            parts.extend(block.data.items)
        elif isinstance(block, QuoteBlock):
            parts.append(block.data.text)
            if block.data.caption:
                parts.append(block.data.caption)
        elif isinstance(block, DelimiterBlock):
            continue
    return _MARKUP_TAG.sub("", " ".join(parts)).strip()


def _now_millis() -> int:
    return int(time.time() * 1000)


def create_empty_content() -> BlockContent:
    """Content with no blocks."""
    return BlockContent(time=_now_millis(), blocks=[], version=EDITOR_VERSION)


def create_simple_content(text: str) -> BlockContent:
    """Content holding a single paragraph."""
    paragraph = ParagraphBlock(
        id=random_alphanumeric(BLOCK_ID_LENGTH),
        type="paragraph",
        data={"text": text},
    )
    return BlockContent(time=_now_millis(), blocks=[paragraph], version=EDITOR_VERSION)
