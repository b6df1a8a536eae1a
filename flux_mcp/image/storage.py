"""On-disk persistence of generated images.

Processing flow:
    1. Resolve the save folder to an absolute path, creating it if absent.
    2. Check write permission on it.
    3. Reduce the requested file name to a base name with an allowed
       extension.
    4. Write the bytes.

Error handling strategy:
    Persistence failures never abort a generation call. `save_image` returns a
    `SaveResult` carrying either the written path or a warning; callers do not
    need to catch anything.

Concurrency:
    Writes to the same file name are not coordinated; last write wins.
"""

import logging
import os
from dataclasses import dataclass

from flux_mcp.core.errors import PathError
from flux_mcp.image.client import ImageAsset

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg")
DEFAULT_EXTENSION = ".png"


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save attempt: a written `path` or a `warning`."""

    path: str | None = None
    warning: str | None = None

    @property
    def ok(self) -> bool:
        return self.path is not None

    @property
    def images(self) -> list[str]:
        return [self.path] if self.path else []


def resolve_save_dir(folder: str) -> str:
    """Return the absolute, existing and writable save directory.

    Raises:
        PathError: If the directory cannot be created, is not a directory or
            is not writable.
    """
    absolute = os.path.abspath(os.path.expanduser(folder))

    try:
        os.makedirs(absolute, exist_ok=True)
    except OSError as err:
        raise PathError(absolute, f"Invalid save path ({err.strerror or err})") from err

    if not os.path.isdir(absolute):
        raise PathError(absolute, "Save path is not a directory")

    if not os.access(absolute, os.W_OK):
        raise PathError(absolute, "No write permission for directory")

    return absolute


def normalize_file_name(file_name: str) -> str:
    """Strip directories and enforce an allowed image extension.

    Names already ending in an allowed extension (case-insensitive) are kept.
    Any other extension, or none, is replaced by `DEFAULT_EXTENSION`.
    """
    base = os.path.basename(file_name.replace("\\", "/"))
    stem, ext = os.path.splitext(base)

    if ext and ext.lower() in ALLOWED_EXTENSIONS:
        return base

    # Nothing left once directories are stripped, e.g. "shots/".
    return f"{stem or 'image'}{DEFAULT_EXTENSION}"


def save_image(asset: ImageAsset, file_name: str, folder: str) -> SaveResult:
    """Write `asset` under `folder` as `file_name`, reporting instead of raising."""
    try:
        save_dir = resolve_save_dir(folder)
    except PathError as err:
        logger.warning("Cannot save image: %s", err)
        return SaveResult(warning=str(err))

    file_path = os.path.join(save_dir, normalize_file_name(file_name))

    try:
        with open(file_path, "wb") as f:
            f.write(asset.content)
    except OSError as err:
        if isinstance(err, PermissionError):
            logger.warning("No permission to save image to: %s", save_dir)
        else:
            logger.exception("Failed to save image to %s", file_path)
        return SaveResult(warning=f"Failed to save image to {file_path}: {err.strerror or err}")

    logger.info("Image saved: %s (%s)", file_path, asset.content_type or "unknown type")
    return SaveResult(path=file_path)
