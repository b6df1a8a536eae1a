"""Image generation package.

Scope:
    Builds worker payloads for image prompts, downloads generated assets and
    optionally persists them to disk.

Non-goals:
    - No image decoding or re-encoding.
    - No Base64 payloads returned to the host.
    - No cleanup of previously saved files.
"""
