"""Text completion tool handler.

Model call flow:
    prompt -> single-turn chat payload -> `client.send_request(...)` -> text.

Degradation:
    When the reply has no `choices[0].message.content`, the raw reply is
    returned serialized as JSON instead of failing.

Failure scenarios:
    Validation and upstream errors propagate to the MCP adapter, which reports
    them as tool errors.
"""

import json
import logging

from flux_mcp.core.reply_types import chat_content_of
from flux_mcp.llm.client import send_request
from flux_mcp.llm.provider_config import FluxConfig

logger = logging.getLogger(__name__)


def build_chat_payload(prompt: str) -> dict:
    return {
        "messages": [
            {"role": "user", "content": prompt},
        ],
        "stream": False,
    }


def get_chat_completion(config: FluxConfig, prompt: str) -> dict:
    """Return `{"text": ...}` for a single-turn completion of `prompt`."""
    data = send_request(config, build_chat_payload(prompt))

    content = chat_content_of(data)
    if content is None:
        logger.warning("Completion reply had no message content, returning raw reply")
        return {"text": json.dumps(data)}

    return {"text": content}
