"""Recognized shapes of the worker's JSON reply.

The worker contract is best-effort. Two shapes are recognized, tried in order:

    1. `DirectUrl`   - top-level string `url`.
    2. `ChatContent` - `choices[0].message.content` string, which may embed
                       the image as a markdown link `![alt](URL)`.

Anything else classifies as `None`; callers decide whether that is fatal.
"""

import re
from dataclasses import dataclass

from flux_mcp.core.errors import ExtractionError

MARKDOWN_IMAGE_PATTERN = re.compile(r"!\[[^\]]*\]\(\s*([^)\s]+)[^)]*\)")


@dataclass(frozen=True)
class DirectUrl:
    url: str


@dataclass(frozen=True)
class ChatContent:
    text: str


def chat_content_of(data) -> str | None:
    """Return `choices[0].message.content` when it is a string."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str):
        return content
    return None


def classify_reply(data) -> DirectUrl | ChatContent | None:
    """Map a raw reply onto the first matching recognized shape."""
    if isinstance(data, dict):
        url = data.get("url")
        if isinstance(url, str) and url.strip():
            return DirectUrl(url.strip())

    content = chat_content_of(data)
    if content is not None:
        return ChatContent(content)

    return None


def find_markdown_image(text: str) -> str | None:
    """Return the URL of the first `![...](URL)` link in `text`."""
    match = MARKDOWN_IMAGE_PATTERN.search(text or "")
    if match:
        return match.group(1)
    return None


def extract_locator(data) -> str:
    """Resolve the generated image URL from a worker reply.

    Raises:
        ExtractionError: When neither shape yields a URL.
    """
    shape = classify_reply(data)

    if isinstance(shape, DirectUrl):
        return shape.url

    if isinstance(shape, ChatContent):
        url = find_markdown_image(shape.text)
        if url:
            return url
        raise ExtractionError("Could not extract image URL from response: no markdown image link in message content")

    raise ExtractionError("Could not extract image URL from response")
