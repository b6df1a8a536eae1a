"""
MCP tool adapter for the flux worker.

Architectural role:
- Register tool definitions with the low-level `mcp` server.
- Route `tools/call` requests to the image and text handlers.
- Render handler results as MCP text content.

Tool call lifecycle:
1. The SDK decodes a `tools/call` request and invokes `handle_call_tool`.
2. `dispatch_tool` selects the handler by name.
3. The blocking handler runs in a worker thread (`asyncio.to_thread`).
4. The result is serialized to JSON text content.

Input validation behavior:
- SDK-side JSON-schema validation is disabled; `flux_mcp.core.validation`
  is the single source of truth so that `generate_image` failures still come
  back as envelopes.

Error handling strategy:
- `generate_image` never raises; failures are envelopes with `success=false`.
- `get_chat_completion` failures and unknown tool names raise, and the SDK
  reports them as tool errors (`isError=true`).
"""

import asyncio
import json
import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from flux_mcp import SERVER_NAME, SERVER_VERSION
from flux_mcp.core.envelope import render_envelope
from flux_mcp.core.errors import FluxError
from flux_mcp.core.validation import (
    ASPECT_RATIOS,
    DEFAULT_INFERENCE_STEPS,
    MAX_HEIGHT,
    MAX_INFERENCE_STEPS,
    MAX_WIDTH,
    MIN_INFERENCE_STEPS,
    validate_chat_request,
)
from flux_mcp.image.service import generate_image
from flux_mcp.llm.provider_config import FluxConfig
from flux_mcp.llm.service import get_chat_completion

logger = logging.getLogger(__name__)

GENERATE_IMAGE_TOOL = "generate_image"
CHAT_COMPLETION_TOOL = "get_chat_completion"


def build_tools(config: FluxConfig) -> list[types.Tool]:
    """Return the tool catalog advertised on `tools/list`."""
    return [
        types.Tool(
            name=GENERATE_IMAGE_TOOL,
            description="Generate an image from a text prompt using Flux model",
            inputSchema={
                "type": "object",
                "properties": {
                    "prompt": {
                        "type": "string",
                        "minLength": 1,
                        "description": "Prompt for generated image",
                    },
                    "seed": {
                        "type": "integer",
                        "description": "Seed for reproducible generation",
                    },
                    "num_inference_steps": {
                        "type": "integer",
                        "minimum": MIN_INFERENCE_STEPS,
                        "maximum": MAX_INFERENCE_STEPS,
                        "default": DEFAULT_INFERENCE_STEPS,
                        "description": (
                            "Number of denoising steps. 4 is recommended, and lower number "
                            "of steps produce lower quality outputs, faster."
                        ),
                    },
                    "aspect_ratio": {
                        "type": "string",
                        "enum": list(ASPECT_RATIOS),
                        "default": "1:1",
                        "description": "Aspect ratio for the generated image",
                    },
                    "disable_safety_checker": {
                        "type": "boolean",
                        "default": False,
                        "description": "Disable the upstream safety checker",
                    },
                    "file_name": {
                        "type": "string",
                        "minLength": 1,
                        "description": "Name of the file to save the image",
                    },
                    "save_folder": {
                        "type": "string",
                        "default": config.output_dir,
                        "description": "Folder path to save the image",
                    },
                    "width": {
                        "type": "integer",
                        "exclusiveMinimum": 0,
                        "maximum": MAX_WIDTH,
                        "description": "Width of the generated image",
                    },
                    "height": {
                        "type": "integer",
                        "exclusiveMinimum": 0,
                        "maximum": MAX_HEIGHT,
                        "description": "Height of the generated image",
                    },
                },
                "required": ["prompt"],
            },
        ),
        types.Tool(
            name=CHAT_COMPLETION_TOOL,
            description="Get a text completion for a prompt from the Flux API",
            inputSchema={
                "type": "object",
                "properties": {
                    "prompt": {
                        "type": "string",
                        "minLength": 1,
                        "description": "Prompt for the text completion",
                    },
                },
                "required": ["prompt"],
            },
        ),
    ]


async def dispatch_tool(config: FluxConfig, name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
    """Run one tool call and render its result as text content.

    Raises:
        ValueError: Unknown tool name.
        FluxError: `get_chat_completion` validation or upstream failure.
    """
    if name == GENERATE_IMAGE_TOOL:
        envelope = await asyncio.to_thread(generate_image, config, arguments)
        return [types.TextContent(type="text", text=render_envelope(envelope))]

    if name == CHAT_COMPLETION_TOOL:
        request = validate_chat_request(arguments)
        result = await asyncio.to_thread(get_chat_completion, config, request.prompt)
        return [types.TextContent(type="text", text=json.dumps(result, indent=2))]

    raise ValueError(f"Unknown tool: {name}")


def create_server(config: FluxConfig) -> Server:
    """Build the MCP server with both tools registered."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)
    tools = build_tools(config)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return tools

    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        try:
            return await dispatch_tool(config, name, arguments)
        except FluxError as err:
            logger.warning("Tool call %s failed: %s", name, err)
            raise
        except Exception:
            logger.exception("Tool call %s failed", name)
            raise

    return server


async def serve(config: FluxConfig) -> None:
    """Run the server over stdio until the host closes the streams."""
    server = create_server(config)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("%s v%s running on stdio", SERVER_NAME, SERVER_VERSION)
        await server.run(read_stream, write_stream, server.create_initialization_options())
