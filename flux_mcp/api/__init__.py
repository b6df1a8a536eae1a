"""MCP adapter package.

Architectural role:
- Declares the tool catalog (`generate_image`, `get_chat_completion`).
- Routes tool calls to the image and text handlers.
- Owns process startup: configuration, logging and the stdio loop.
"""
