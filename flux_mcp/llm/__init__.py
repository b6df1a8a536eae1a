"""Upstream access package.

Module split:
    - `provider_config`: startup configuration (endpoint, credential, modes).
    - `client`: single-attempt HTTP transport to the flux worker.
    - `service`: text completion tool handler.
"""
