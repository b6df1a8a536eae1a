"""Uniform tool result shape.

Every `generate_image` call answers with the same five keys:

    success  bool
    error    str | None   (set only on failure)
    url      str | None   (image locator, when known)
    images   list[str]    (paths written to disk, zero or one entries)
    warning  str | None   (non-fatal diagnostic, e.g. a failed disk write)

The host renders the JSON text produced by `render_envelope` without
branching on the outcome type.
"""

import json


def success_envelope(url: str, images: list[str] | None = None, warning: str | None = None) -> dict:
    return {
        "success": True,
        "error": None,
        "url": url,
        "images": list(images or []),
        "warning": warning,
    }


def failure_envelope(error: BaseException | str) -> dict:
    """Build a failure envelope, keeping the locator when the error knows it."""
    message = str(error) or error.__class__.__name__
    return {
        "success": False,
        "error": message,
        "url": getattr(error, "url", None),
        "images": [],
        "warning": None,
    }


def render_envelope(envelope: dict) -> str:
    return json.dumps(envelope, indent=2)
