"""Caller input contracts for the MCP tools.

Role in pipeline:
    First step of every tool call. Raw MCP arguments are checked here before
    any network call is attempted.

Input validation behavior:
    - `prompt` must be a non-empty string.
    - `num_inference_steps` must lie in [1, 4] (default 4).
    - `width` / `height` must be positive and not exceed 1024.
    - `aspect_ratio` must be one of `ASPECT_RATIOS` (default `1:1`).
    - Integer fields accept integral floats (`4.0`) but not bools or `4.5`.
    - Unknown parameters are rejected.
    - Explicit `null` values are treated as omitted.

Error handling strategy:
    pydantic failures are translated into `ValidationError`, naming the first
    offending field and the violated constraint.
"""

from typing import Any, Literal, Mapping, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from flux_mcp.core.errors import ValidationError

ASPECT_RATIOS = ("1:1", "1:2", "3:2", "3:4", "16:9", "9:16")
AspectRatio = Literal["1:1", "1:2", "3:2", "3:4", "16:9", "9:16"]

MIN_INFERENCE_STEPS = 1
MAX_INFERENCE_STEPS = 4
DEFAULT_INFERENCE_STEPS = 4

MAX_WIDTH = 1024
MAX_HEIGHT = 1024

ModelT = TypeVar("ModelT", bound=BaseModel)


class GenerationRequest(BaseModel):
    """Validated `generate_image` arguments."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    prompt: str = Field(min_length=1, description="Prompt for generated image")
    seed: int | None = Field(default=None, description="Seed for reproducible generation")
    num_inference_steps: int = Field(
        default=DEFAULT_INFERENCE_STEPS,
        ge=MIN_INFERENCE_STEPS,
        le=MAX_INFERENCE_STEPS,
        description=(
            "Number of denoising steps. 4 is recommended, and lower number of "
            "steps produce lower quality outputs, faster."
        ),
    )
    aspect_ratio: AspectRatio = Field(default="1:1", description="Aspect ratio for the generated image")
    disable_safety_checker: bool = Field(default=False, description="Disable the upstream safety checker")
    file_name: str | None = Field(default=None, min_length=1, description="Name of the file to save the image")
    save_folder: str | None = Field(default=None, description="Folder path to save the image")
    width: int | None = Field(default=None, gt=0, le=MAX_WIDTH, description="Width of the generated image")
    height: int | None = Field(default=None, gt=0, le=MAX_HEIGHT, description="Height of the generated image")

    @field_validator("seed", "num_inference_steps", "width", "height", mode="before")
    @classmethod
    def _integral_float_to_int(cls, value: Any) -> Any:
        # JSON hosts may send 4.0 for 4; bools and fractional values stay strict.
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class ChatCompletionRequest(BaseModel):
    """Validated `get_chat_completion` arguments."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    prompt: str = Field(min_length=1, description="Prompt for the text completion")


def _validate(model: Type[ModelT], raw: Mapping[str, Any] | None) -> ModelT:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValidationError("arguments", "must be an object")

    cleaned = {key: value for key, value in raw.items() if value is not None}

    try:
        return model.model_validate(cleaned)
    except pydantic.ValidationError as err:
        first = err.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "arguments"
        if first.get("type") == "extra_forbidden":
            constraint = "unexpected parameter"
        elif first.get("type") == "missing":
            constraint = "is required"
        else:
            constraint = first.get("msg", "invalid value")
        raise ValidationError(field, constraint) from None


def validate_generation_request(raw: Mapping[str, Any] | None) -> GenerationRequest:
    """Validate raw `generate_image` arguments.

    Raises:
        ValidationError: For the first violated constraint.
    """
    return _validate(GenerationRequest, raw)


def validate_chat_request(raw: Mapping[str, Any] | None) -> ChatCompletionRequest:
    """Validate raw `get_chat_completion` arguments."""
    return _validate(ChatCompletionRequest, raw)
