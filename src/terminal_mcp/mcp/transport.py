"""Stdio transport — newline-delimited JSON-RPC over a byte stream pair.

One JSON object per line in each direction. Nothing but protocol
messages is ever written to the output stream.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, BinaryIO, Protocol, Union

from pydantic import ValidationError

from terminal_mcp.mcp.protocol import JsonRpcError, JsonRpcRequest, JsonRpcResponse

if TYPE_CHECKING:
    from terminal_mcp.mcp.server import McpServer

logger = logging.getLogger(__name__)

QUEUE_SIZE = 32

# A decoded line is either a request for the server or an error reply
# that the transport produced itself.
Message = Union[JsonRpcRequest, JsonRpcResponse]


class LineReader(Protocol):
    async def readline(self) -> bytes: ...


class ExecutorLineReader:
    """Read lines from a blocking binary file in the default executor."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    async def readline(self) -> bytes:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._stream.readline)


def decode_message(line: bytes) -> Message | None:
    """Decode one input line.

    Returns None for blank lines and for malformed notifications, which
    must never be answered.
    """
    text = line.decode("utf-8", errors="replace").strip()
    if not text:
        return None

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse JSON-RPC request: %s", e)
        return JsonRpcResponse.failure(None, JsonRpcError.parse_error(str(e)))

    if not isinstance(payload, dict):
        return JsonRpcResponse.failure(
            None, JsonRpcError.invalid_request("Request must be a JSON object")
        )

    try:
        return JsonRpcRequest.model_validate(payload)
    except ValidationError as e:
        if "id" not in payload:
            logger.warning("Ignoring malformed notification: %s", e)
            return None
        logger.error("Invalid JSON-RPC request: %s", e)
        request_id = payload["id"]
        # An id of the wrong type cannot be echoed back.
        if isinstance(request_id, bool) or not isinstance(request_id, (str, int, float)):
            request_id = None
        return JsonRpcResponse.failure(
            request_id, JsonRpcError.invalid_request(str(e))
        )


def encode_message(response: JsonRpcResponse) -> bytes:
    return response.to_json().encode("utf-8") + b"\n"


async def read_messages(
    reader: LineReader, messages: asyncio.Queue[Message | None]
) -> None:
    """Reader task: decode lines onto the queue until EOF, then put None."""
    try:
        while True:
            try:
                line = await reader.readline()
            except (OSError, ValueError) as e:
                logger.error("Error reading from stdin: %s", e)
                break
            if not line:
                logger.debug("EOF on stdin, shutting down")
                break
            logger.debug("Received: %s", line.rstrip())
            message = decode_message(line)
            if message is not None:
                await messages.put(message)
    finally:
        await messages.put(None)


async def write_responses(
    writer: BinaryIO, responses: asyncio.Queue[JsonRpcResponse | None]
) -> None:
    """Writer task: serialize responses one per line until None."""
    while True:
        response = await responses.get()
        if response is None:
            return
        data = encode_message(response)
        logger.debug("Sending: %s", data.rstrip())
        try:
            writer.write(data)
            writer.flush()
        except OSError as e:
            logger.error("Error writing to stdout: %s", e)
            return


async def serve(server: McpServer, reader: LineReader, writer: BinaryIO) -> None:
    """Run the protocol loop until the input is exhausted.

    Messages are handled strictly in arrival order, so responses leave in
    the same order their requests arrived.
    """
    messages: asyncio.Queue[Message | None] = asyncio.Queue(maxsize=QUEUE_SIZE)
    responses: asyncio.Queue[JsonRpcResponse | None] = asyncio.Queue()

    reader_task = asyncio.create_task(read_messages(reader, messages))
    writer_task = asyncio.create_task(write_responses(writer, responses))

    try:
        while True:
            message = await messages.get()
            if message is None:
                break
            if isinstance(message, JsonRpcResponse):
                await responses.put(message)
                continue
            response = await server.handle_request(message)
            if response is not None:
                await responses.put(response)
    finally:
        await responses.put(None)
        await writer_task
        reader_task.cancel()
        try:
            await reader_task
        except asyncio.CancelledError:
            pass
