"""Tests for terminal_mcp.mcp.transport (line codec and serve loop)."""

from __future__ import annotations

import asyncio
import io
import json
from typing import Any

from terminal_mcp.mcp.protocol import (
    INVALID_REQUEST,
    PARSE_ERROR,
    JsonRpcRequest,
    JsonRpcResponse,
)
from terminal_mcp.mcp.server import McpServer
from terminal_mcp.mcp.transport import decode_message, encode_message, serve
from terminal_mcp.terminal.emulator import Terminal


async def run_lines(terminal: Terminal, lines: list[str]) -> list[dict[str, Any]]:
    """Feed lines through ``serve`` and return the decoded output lines."""
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data(line.encode("utf-8") + b"\n")
    reader.feed_eof()
    writer = io.BytesIO()

    await asyncio.wait_for(serve(McpServer(terminal), reader, writer), timeout=5)

    out = writer.getvalue().decode("utf-8")
    return [json.loads(line) for line in out.splitlines()]


# ---------------------------------------------------------------------------
# decode_message / encode_message
# ---------------------------------------------------------------------------


class TestDecode:
    def test_blank(self) -> None:
        assert decode_message(b"   \n") is None

    def test_request(self) -> None:
        message = decode_message(b'{"jsonrpc":"2.0","id":1,"method":"ping"}\n')
        assert isinstance(message, JsonRpcRequest)
        assert message.method == "ping"

    def test_parse_error(self) -> None:
        message = decode_message(b"not json\n")
        assert isinstance(message, JsonRpcResponse)
        assert message.id is None
        assert message.error is not None
        assert message.error.code == PARSE_ERROR

    def test_non_object(self) -> None:
        message = decode_message(b"[1, 2]\n")
        assert isinstance(message, JsonRpcResponse)
        assert message.error is not None
        assert message.error.code == INVALID_REQUEST

    def test_invalid_request_keeps_id(self) -> None:
        message = decode_message(b'{"jsonrpc":"2.0","id":4}\n')
        assert isinstance(message, JsonRpcResponse)
        assert message.id == 4
        assert message.error is not None
        assert message.error.code == INVALID_REQUEST

    def test_wrong_version_is_invalid_request(self) -> None:
        message = decode_message(b'{"jsonrpc":"1.0","id":7,"method":"ping"}\n')
        assert isinstance(message, JsonRpcResponse)
        assert message.id == 7
        assert message.error is not None
        assert message.error.code == INVALID_REQUEST

    def test_structured_id_answered_with_null(self) -> None:
        message = decode_message(b'{"jsonrpc":"2.0","id":{"x":1},"method":"ping"}\n')
        assert isinstance(message, JsonRpcResponse)
        assert message.id is None
        assert message.error is not None
        assert message.error.code == INVALID_REQUEST

    def test_malformed_notification_dropped(self) -> None:
        assert decode_message(b'{"jsonrpc":"2.0","params":{}}\n') is None

    def test_encode_one_line(self) -> None:
        data = encode_message(JsonRpcResponse.success(1, {}))
        assert data == b'{"jsonrpc":"2.0","id":1,"result":{}}\n'


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


class TestServe:
    async def test_ping(self, terminal: Terminal) -> None:
        out = await run_lines(terminal, ['{"jsonrpc":"2.0","id":1,"method":"ping"}'])
        assert out == [{"jsonrpc": "2.0", "id": 1, "result": {}}]

    async def test_notification_produces_nothing(self, terminal: Terminal) -> None:
        out = await run_lines(
            terminal, ['{"jsonrpc":"2.0","method":"notifications/initialized"}']
        )
        assert out == []

    async def test_empty_input(self, terminal: Terminal) -> None:
        assert await run_lines(terminal, []) == []

    async def test_parse_error_then_continue(self, terminal: Terminal) -> None:
        out = await run_lines(
            terminal,
            ["{oops", '{"jsonrpc":"2.0","id":2,"method":"ping"}'],
        )
        assert out[0]["id"] is None
        assert out[0]["error"]["code"] == PARSE_ERROR
        assert out[1] == {"jsonrpc": "2.0", "id": 2, "result": {}}

    async def test_responses_in_request_order(self, terminal: Terminal) -> None:
        lines = [
            '{"jsonrpc":"2.0","id":1,"method":"tools/list"}',
            '{"jsonrpc":"2.0","method":"ping"}',
            '{"jsonrpc":"2.0","id":"b","method":"nope"}',
            "",
            '{"jsonrpc":"2.0","id":3,"method":"tools/call",'
            '"params":{"name":"clear","arguments":{}}}',
            '{"jsonrpc":"2.0","id":4,"method":"ping"}',
        ]
        out = await run_lines(terminal, lines)
        assert [msg["id"] for msg in out] == [1, "b", 3, 4]
        assert len(out[0]["result"]["tools"]) == 5
        assert out[1]["error"]["code"] == -32601
        assert out[2]["result"]["content"][0]["text"] == "Terminal cleared"

    async def test_full_session(self, terminal: Terminal) -> None:
        lines = [
            json.dumps(
                {
                    "jsonrpc": "2.0",
                    "id": 0,
                    "method": "initialize",
                    "params": {
                        "protocolVersion": "2024-11-05",
                        "capabilities": {},
                        "clientInfo": {"name": "t", "version": "0"},
                    },
                }
            ),
            '{"jsonrpc":"2.0","method":"notifications/initialized"}',
            '{"jsonrpc":"2.0","id":1,"method":"tools/call",'
            '"params":{"name":"type","arguments":{"text":"echo hi\\n"}}}',
        ]
        out = await run_lines(terminal, lines)
        assert [msg["id"] for msg in out] == [0, 1]
        assert out[0]["result"]["serverInfo"]["name"] == "terminal-mcp"
        assert out[1]["result"]["content"][0]["text"] == "Typed 8 characters"
