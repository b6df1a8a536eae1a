"""Shared fixtures: a fixed configuration and an in-memory HTTP fake.

`fake_http` replaces `requests.post` / `requests.get` so tests can script
worker replies and assert which calls were (or were not) made.
"""

import pytest
import requests

from flux_mcp.llm.provider_config import FluxConfig

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class StubResponse:
    """Just enough of `requests.Response` for the code under test."""

    def __init__(self, status_code=200, json_data=None, text=None, content=b"", headers=None):
        self.status_code = status_code
        self._json = json_data
        self.text = text if text is not None else ("" if json_data is None else str(json_data))
        self.content = content
        self.headers = headers or {}

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeHttp:
    def __init__(self):
        self.posts = []
        self.gets = []
        self.post_responses = []
        self.get_responses = []

    def reply_json(self, data, status_code=200):
        self.post_responses.append(StubResponse(status_code=status_code, json_data=data))

    def reply_status(self, status_code, text):
        self.post_responses.append(StubResponse(status_code=status_code, text=text))

    def serve_image(self, content=PNG_BYTES, content_type="image/png", status_code=200):
        headers = {"Content-Type": content_type} if content_type else {}
        self.get_responses.append(StubResponse(status_code=status_code, content=content, headers=headers))

    @staticmethod
    def _next(queue):
        assert queue, "unexpected HTTP call"
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, json=None, headers=None, timeout=None, **kwargs):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return self._next(self.post_responses)

    def get(self, url, timeout=None, **kwargs):
        self.gets.append({"url": url, "timeout": timeout})
        return self._next(self.get_responses)

    @property
    def calls(self):
        return len(self.posts) + len(self.gets)


@pytest.fixture
def config(tmp_path):
    return FluxConfig(
        api_token="test-token",
        api_url="http://worker.test",
        output_dir=str(tmp_path / "output"),
    )


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeHttp()
    monkeypatch.setattr(requests, "post", fake.post)
    monkeypatch.setattr(requests, "get", fake.get)
    return fake
