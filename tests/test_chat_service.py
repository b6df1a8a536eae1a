import json

import pytest

from flux_mcp.core.errors import UpstreamError
from flux_mcp.llm.service import build_chat_payload, get_chat_completion


def test_returns_first_choice_content(config, fake_http):
    fake_http.reply_json({"choices": [{"message": {"content": "Hello there"}}, {"message": {"content": "ignored"}}]})

    assert get_chat_completion(config, "hi") == {"text": "Hello there"}
    assert fake_http.posts[0]["json"] == build_chat_payload("hi")


def test_payload_is_a_single_user_turn():
    assert build_chat_payload("hi") == {
        "messages": [{"role": "user", "content": "hi"}],
        "stream": False,
    }


def test_falls_back_to_raw_reply(config, fake_http):
    reply = {"url": "http://x/y.png"}
    fake_http.reply_json(reply)

    result = get_chat_completion(config, "draw something")

    assert json.loads(result["text"]) == reply


def test_upstream_errors_propagate(config, fake_http):
    fake_http.reply_status(401, "unauthorized")

    with pytest.raises(UpstreamError) as exc_info:
        get_chat_completion(config, "hi")

    assert exc_info.value.status_code == 401
