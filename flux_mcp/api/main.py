"""
Process entrypoint for the flux MCP server.

Startup sequence:
1. Load `.env` and configure logging on stderr (stdout carries the MCP
   stream).
2. Build `FluxConfig` from the environment.
3. Serve MCP over stdio until the host disconnects.

Error handling strategy:
- `ConfigError` is logged and exits with status 1 before any I/O on stdio.
- Unexpected server errors are logged with traceback and exit with status 1.
- Keyboard interrupts exit quietly.
"""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from flux_mcp.core.errors import ConfigError
from flux_mcp.llm.provider_config import FluxConfig
from flux_mcp.api.server import serve

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main() -> int:
    load_dotenv()
    configure_logging()

    try:
        config = FluxConfig.from_env(load_env_file=False)
    except ConfigError as err:
        logger.error("Error: %s", err)
        return 1

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        return 0
    except Exception:
        logger.exception("Server initialization error")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
