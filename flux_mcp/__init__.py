"""flux-cloudflare-mcp package.

Architectural role:
    Exposes a Cloudflare flux worker to MCP hosts as two tools
    (`generate_image`, `get_chat_completion`).

Package split:
    - `core`: error types, input validation, reply-shape parsing, envelopes.
    - `llm`: configuration, upstream HTTP transport, text completion.
    - `image`: asset download, on-disk persistence, image generation flow.
    - `api`: MCP tool registration and process entrypoint.
"""

SERVER_NAME = "flux-cloudflare-mcp"
SERVER_VERSION = "0.0.1"
