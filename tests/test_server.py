import asyncio
import json
import logging

import mcp.types as types
import pytest

from flux_mcp.api.server import build_tools, create_server, dispatch_tool
from flux_mcp.core.errors import UpstreamError, ValidationError


def call(config, name, arguments):
    return asyncio.run(dispatch_tool(config, name, arguments))


def test_tool_catalog(config):
    tools = {tool.name: tool for tool in build_tools(config)}

    assert set(tools) == {"generate_image", "get_chat_completion"}
    schema = tools["generate_image"].inputSchema
    assert schema["required"] == ["prompt"]
    assert schema["properties"]["num_inference_steps"]["maximum"] == 4
    assert schema["properties"]["aspect_ratio"]["enum"] == ["1:1", "1:2", "3:2", "3:4", "16:9", "9:16"]
    assert schema["properties"]["save_folder"]["default"] == config.output_dir


def test_generate_image_returns_envelope_text(config, fake_http):
    fake_http.reply_json({"url": "http://x/y.png"})

    contents = call(config, "generate_image", {"prompt": "a red fox"})

    assert len(contents) == 1
    assert contents[0].type == "text"
    assert json.loads(contents[0].text) == {
        "success": True,
        "error": None,
        "url": "http://x/y.png",
        "images": [],
        "warning": None,
    }


def test_generate_image_failure_is_an_envelope_not_an_exception(config, fake_http):
    contents = call(config, "generate_image", {"prompt": ""})

    envelope = json.loads(contents[0].text)
    assert envelope["success"] is False
    assert fake_http.calls == 0


def test_chat_completion_returns_text(config, fake_http):
    fake_http.reply_json({"choices": [{"message": {"content": "Bonjour"}}]})

    contents = call(config, "get_chat_completion", {"prompt": "hello in french"})

    assert json.loads(contents[0].text) == {"text": "Bonjour"}


def test_chat_completion_errors_raise(config, fake_http):
    with pytest.raises(ValidationError):
        call(config, "get_chat_completion", {"prompt": ""})
    assert fake_http.calls == 0

    fake_http.reply_status(502, "bad gateway")
    with pytest.raises(UpstreamError):
        call(config, "get_chat_completion", {"prompt": "hi"})


def test_unknown_tool(config):
    with pytest.raises(ValueError, match="Unknown tool"):
        call(config, "edit_image", {})


def sdk_request(server, request):
    handler = server.request_handlers[type(request)]
    return asyncio.run(handler(request)).root


def sdk_call(server, name, arguments):
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return sdk_request(server, request)


def test_server_lists_tools_through_sdk(config):
    server = create_server(config)

    result = sdk_request(server, types.ListToolsRequest(method="tools/list"))

    assert server.name == "flux-cloudflare-mcp"
    assert [tool.name for tool in result.tools] == ["generate_image", "get_chat_completion"]


def test_server_calls_generate_image_through_sdk(config, fake_http):
    server = create_server(config)
    fake_http.reply_json({"url": "http://x/y.png"})

    result = sdk_call(server, "generate_image", {"prompt": "a red fox"})

    assert result.isError is False
    assert json.loads(result.content[0].text)["url"] == "http://x/y.png"


def test_out_of_schema_arguments_reach_the_validator(config, fake_http):
    server = create_server(config)

    result = sdk_call(server, "generate_image", {"prompt": "p", "num_inference_steps": 9})

    assert result.isError is False
    envelope = json.loads(result.content[0].text)
    assert envelope["success"] is False
    assert "num_inference_steps" in envelope["error"]
    assert fake_http.calls == 0


def test_unknown_tool_through_sdk_is_a_tool_error(config):
    server = create_server(config)

    result = sdk_call(server, "edit_image", {})

    assert result.isError is True
    assert "Unknown tool" in result.content[0].text


def test_caller_errors_are_logged_without_traceback(config, fake_http, caplog):
    server = create_server(config)

    with caplog.at_level(logging.WARNING, logger="flux_mcp.api.server"):
        result = sdk_call(server, "get_chat_completion", {"prompt": ""})

    assert result.isError is True
    records = [r for r in caplog.records if r.name == "flux_mcp.api.server"]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert records[0].exc_info is None
    assert "prompt" in records[0].getMessage()


def test_unexpected_errors_are_logged_with_traceback(config, caplog):
    server = create_server(config)

    with caplog.at_level(logging.WARNING, logger="flux_mcp.api.server"):
        sdk_call(server, "edit_image", {})

    records = [r for r in caplog.records if r.name == "flux_mcp.api.server"]
    assert records[0].levelno == logging.ERROR
    assert records[0].exc_info is not None
