"""Startup configuration for the flux worker connection.

Architectural role:
    Resolves the worker endpoint, bearer credential and forwarding options
    once at process start. The resulting `FluxConfig` is passed explicitly
    into every handler; request handling never reads the environment.

Resolution:
    1. `.env` in the working directory is loaded via python-dotenv (existing
       process variables win).
    2. Values are read from the given mapping (defaults to `os.environ`).

Failure behavior:
    Missing or malformed values raise `ConfigError`. The entrypoint turns
    that into a logged message and exit status 1.
"""

import math
import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

from flux_mcp.core.errors import ConfigError

# Route appended to the worker base URL for both tools.
CHAT_COMPLETIONS_PATH = "/v1/chat/completions"

# How optional generation parameters reach the worker.
PARAMETER_MODE_PROMPT = "prompt"
PARAMETER_MODE_FIELDS = "fields"
PARAMETER_MODES = (PARAMETER_MODE_PROMPT, PARAMETER_MODE_FIELDS)

DEFAULT_OUTPUT_DIR = "./output"
DEFAULT_REQUEST_TIMEOUT = 120.0


@dataclass(frozen=True)
class FluxConfig:
    """Immutable connection and forwarding settings.

    Attributes:
        api_token: Bearer credential sent to the worker.
        api_url: Worker base URL without trailing slash.
        parameter_mode: `prompt` prefixes the aspect ratio to the prompt text,
            `fields` sends every option as a structured body field.
        output_dir: Save folder used when the caller gives none.
        request_timeout: Seconds per HTTP call, `None` for no timeout.
    """

    api_token: str
    api_url: str
    parameter_mode: str = PARAMETER_MODE_PROMPT
    output_dir: str = DEFAULT_OUTPUT_DIR
    request_timeout: float | None = DEFAULT_REQUEST_TIMEOUT

    @property
    def completions_url(self) -> str:
        return f"{self.api_url}{CHAT_COMPLETIONS_PATH}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, load_env_file: bool = True) -> "FluxConfig":
        """Build configuration from environment variables.

        Args:
            environ: Variable mapping, `os.environ` when omitted.
            load_env_file: Whether to load `.env` before reading.

        Raises:
            ConfigError: On missing token/URL, unknown parameter mode or a
                non-numeric, non-finite or negative timeout.
        """
        if load_env_file:
            load_dotenv()
        if environ is None:
            environ = os.environ

        token = (environ.get("FLUX_API_TOKEN") or "").strip()
        if not token:
            raise ConfigError("FLUX_API_TOKEN environment variable is required")

        url = (environ.get("FLUX_API_URL") or "").strip()
        if not url:
            raise ConfigError("FLUX_API_URL environment variable is required")

        mode = (environ.get("FLUX_PARAMETER_MODE") or PARAMETER_MODE_PROMPT).strip().lower()
        if mode not in PARAMETER_MODES:
            raise ConfigError(
                f"FLUX_PARAMETER_MODE must be one of {', '.join(PARAMETER_MODES)}, got {mode!r}"
            )

        output_dir = (environ.get("FLUX_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR).strip()

        raw_timeout = (environ.get("FLUX_REQUEST_TIMEOUT") or "").strip()
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigError(f"FLUX_REQUEST_TIMEOUT must be a number, got {raw_timeout!r}") from None
            if not math.isfinite(timeout):
                raise ConfigError(f"FLUX_REQUEST_TIMEOUT must be a finite number, got {raw_timeout!r}")
            if timeout < 0:
                raise ConfigError(f"FLUX_REQUEST_TIMEOUT must not be negative, got {raw_timeout!r}")
            # Zero disables the timeout entirely.
            if timeout == 0:
                timeout = None

        return cls(
            api_token=token,
            api_url=url.rstrip("/"),
            parameter_mode=mode,
            output_dir=output_dir,
            request_timeout=timeout,
        )
