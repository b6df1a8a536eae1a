"""Single-attempt HTTP transport to the flux worker.

Processing flow:
    1. Build bearer/JSON headers from `FluxConfig`.
    2. POST the JSON payload to `{api_url}/v1/chat/completions`.
    3. Return the parsed JSON reply or raise on failure.

Retry behavior:
    No retry loop. Each call is attempted once, bounded by
    `FluxConfig.request_timeout`.

Error handling strategy:
    - Non-2xx status -> `UpstreamError(status, raw body text)`.
    - Transport failures (DNS, refused connection, timeout) ->
      `UpstreamError(None, reason)`.
    - 2xx reply that is not JSON -> `UpstreamError(status, raw body text)`.

Security considerations:
    - The bearer token is never logged.
    - Exceptions include the worker's raw response body.
"""

import logging

import requests

from flux_mcp.core.errors import UpstreamError
from flux_mcp.llm.provider_config import FluxConfig

logger = logging.getLogger(__name__)


def build_headers(config: FluxConfig) -> dict:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_token}",
    }


def send_request(config: FluxConfig, payload: dict) -> dict:
    """POST a chat-completions payload to the worker.

    Args:
        config: Connection settings.
        payload: JSON-serializable request body.

    Returns:
        Parsed JSON reply.

    Raises:
        UpstreamError: On transport failure, non-2xx status or non-JSON body.
    """
    url = config.completions_url
    logger.debug("POST %s (keys=%s)", url, sorted(payload))

    try:
        response = requests.post(
            url,
            json=payload,
            headers=build_headers(config),
            timeout=config.request_timeout,
        )
    except requests.exceptions.RequestException as err:
        logger.warning("Request to %s failed: %s", url, err)
        raise UpstreamError(None, f"{err.__class__.__name__}: {err}") from err

    if not response.ok:
        logger.warning("Worker returned status %s", response.status_code)
        raise UpstreamError(response.status_code, response.text)

    try:
        return response.json()
    except ValueError:
        raise UpstreamError(response.status_code, f"Response is not valid JSON: {response.text}") from None
