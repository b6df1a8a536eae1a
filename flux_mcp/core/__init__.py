"""Core translation layer.

Composition:
    - `errors`: failure kinds raised across the package.
    - `validation`: caller input contracts for both tools.
    - `reply_types`: recognized upstream reply shapes and locator extraction.
    - `envelope`: uniform tool result shape.

Determinism and side effects:
    Every module here is pure; network and filesystem access live in `llm`
    and `image`.
"""
