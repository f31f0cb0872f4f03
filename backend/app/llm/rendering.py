"""Render a flow input into an ordered list of model content blocks.

Text placeholders are substituted in place; media placeholders split the
prompt so each image lands as its own block at the placeholder's position.
Blocks use the Anthropic message content format that ``ChatAnthropic``
accepts directly.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel

from app.models.flows import parse_data_uri

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(media\s+)?(\w+)\s*\}\}")

ContentBlock = dict[str, Any]


def text_block(text: str) -> ContentBlock:
    return {"type": "text", "text": text}


def image_block(data_uri: str) -> ContentBlock:
    mime, payload = parse_data_uri(data_uri)
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": mime, "data": payload},
    }


def render_prompt(template: str, values: BaseModel | dict[str, Any]) -> list[ContentBlock]:
    """Substitute ``values`` into ``template``.

    Raises KeyError if the template names a field the input does not have.
    """
    data = values.model_dump() if isinstance(values, BaseModel) else dict(values)

    blocks: list[ContentBlock] = []
    pending: list[str] = []

    def _flush() -> None:
        text = "".join(pending)
        pending.clear()
        if text.strip():
            blocks.append(text_block(text))

    pos = 0
    for match in _PLACEHOLDER_RE.finditer(template):
        pending.append(template[pos:match.start()])
        pos = match.end()

        is_media, field = match.group(1), match.group(2)
        if field not in data:
            raise KeyError(f"Template placeholder '{field}' has no matching input field")
        value = data[field]

        if is_media:
            if value is None:
                continue
            uris = value if isinstance(value, list) else [value]
            for uri in uris:
                _flush()
                blocks.append(image_block(uri))
        else:
            pending.append("" if value is None else str(value))

    pending.append(template[pos:])
    _flush()
    return blocks


def append_text(blocks: list[ContentBlock], text: str) -> list[ContentBlock]:
    """Return a copy of ``blocks`` with ``text`` added to the trailing text block."""
    out = [dict(b) for b in blocks]
    if out and out[-1].get("type") == "text":
        out[-1]["text"] = out[-1]["text"] + text
    else:
        out.append(text_block(text))
    return out


def count_images(blocks: list[ContentBlock]) -> int:
    return sum(1 for b in blocks if b.get("type") == "image")
