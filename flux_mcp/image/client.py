"""Generated-asset download.

Processing flow:
    1. GET the locator returned by the worker.
    2. Raise on transport failure or non-2xx status.
    3. Return the bytes together with the reported `Content-Type`.

Base64 and temporary files:
    - No Base64 encoding is performed.
    - Nothing is written to disk here; see `flux_mcp.image.storage`.
"""

import logging
from dataclasses import dataclass

import requests

from flux_mcp.core.errors import DownloadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageAsset:
    """Downloaded image bytes and the content type the server reported."""

    content: bytes
    content_type: str | None = None


def fetch_image(url: str, timeout: float | None = None) -> ImageAsset:
    """Download the image at `url`.

    Raises:
        DownloadError: On transport failure or non-2xx status. The error keeps
            `url` so the caller can still report the locator.
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as err:
        logger.warning("Image download from %s failed: %s", url, err)
        raise DownloadError(url, reason=f"{err.__class__.__name__}: {err}") from err

    if not response.ok:
        raise DownloadError(url, status_code=response.status_code)

    return ImageAsset(content=response.content, content_type=response.headers.get("Content-Type"))
