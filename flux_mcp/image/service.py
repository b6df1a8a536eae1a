"""Image generation tool handler.

Role in pipeline:
    validate -> build worker payload -> POST -> extract locator
    -> (file_name given) download -> save -> envelope.

Parameter forwarding:
    `FluxConfig.parameter_mode` decides how optional parameters travel:
    - `prompt`: content is "{aspect_ratio} {prompt}"; `num_steps`, `seed` and
      `disable_safety_checker` are body fields.
    - `fields`: content is the bare prompt; `aspect_ratio`, `width` and
      `height` join the other body fields.

Error handling strategy:
    - Validation, upstream, extraction and download failures end the call
      with a failure envelope.
    - Save failures keep `success=True` and the locator, with `images=[]` and
      a `warning`.

Determinism:
    Payload construction is deterministic for fixed inputs and configuration.
"""

import logging
from typing import Any, Mapping

from flux_mcp.core.envelope import failure_envelope, success_envelope
from flux_mcp.core.errors import FluxError
from flux_mcp.core.reply_types import extract_locator
from flux_mcp.core.validation import GenerationRequest, validate_generation_request
from flux_mcp.image.client import fetch_image
from flux_mcp.image.storage import save_image
from flux_mcp.llm.client import send_request
from flux_mcp.llm.provider_config import PARAMETER_MODE_FIELDS, FluxConfig

logger = logging.getLogger(__name__)


def build_image_payload(request: GenerationRequest, parameter_mode: str) -> dict:
    """Translate a validated request into the worker's chat-completions body."""
    if parameter_mode == PARAMETER_MODE_FIELDS:
        content = request.prompt
    else:
        # The deployed worker only reads the ratio from the prompt text.
        content = f"{request.aspect_ratio} {request.prompt}"

    payload: dict[str, Any] = {
        "messages": [
            {"role": "user", "content": content},
        ],
        "num_steps": request.num_inference_steps,
    }

    if request.seed is not None:
        payload["seed"] = request.seed
    if request.disable_safety_checker:
        payload["disable_safety_checker"] = True

    if parameter_mode == PARAMETER_MODE_FIELDS:
        payload["aspect_ratio"] = request.aspect_ratio
        if request.width is not None:
            payload["width"] = request.width
        if request.height is not None:
            payload["height"] = request.height

    payload["stream"] = False
    return payload


def run_generation(config: FluxConfig, request: GenerationRequest) -> dict:
    """Execute a validated request and return its envelope.

    Raises:
        FluxError: For every fatal failure (upstream, extraction, download).
    """
    data = send_request(config, build_image_payload(request, config.parameter_mode))
    image_url = extract_locator(data)
    logger.info("Image generated: %s", image_url)

    if not request.file_name:
        return success_envelope(image_url)

    asset = fetch_image(image_url, timeout=config.request_timeout)
    saved = save_image(asset, request.file_name, request.save_folder or config.output_dir)

    return success_envelope(image_url, images=saved.images, warning=saved.warning)


def generate_image(config: FluxConfig, arguments: Mapping[str, Any] | None) -> dict:
    """`generate_image` tool entrypoint: raw arguments in, envelope out.

    Never raises; every failure is folded into a failure envelope.
    """
    try:
        request = validate_generation_request(arguments)
        logger.info("Received generation request: %s", request.prompt)
        return run_generation(config, request)
    except FluxError as err:
        logger.error("Failed to generate image: %s", err)
        return failure_envelope(err)
    except Exception as err:
        logger.exception("Unexpected failure while generating image")
        return failure_envelope(err)
