"""MCP server — routes JSON-RPC methods to handlers and tools."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from pydantic import ValidationError

from terminal_mcp import __version__
from terminal_mcp.mcp.protocol import (
    CallToolParams,
    InitializeParams,
    InitializeResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    McpError,
    ServerInfo,
)
from terminal_mcp.tool.base import ToolArgumentsError
from terminal_mcp.tool.registry import ToolRegistry

if TYPE_CHECKING:
    from terminal_mcp.terminal.emulator import Terminal

logger = logging.getLogger(__name__)

SERVER_NAME = "terminal-mcp"

Handler = Callable[[Any], Awaitable[Any]]


class McpServer:
    """JSON-RPC method router over a single terminal.

    Requests are handled one at a time in arrival order by the caller's
    loop. Each tool call holds an ``asyncio.Lock`` over the terminal.

    ``initialized`` records that the client finished the handshake. No
    method checks it: requests arriving before the handshake are served.
    """

    def __init__(self, terminal: Terminal, registry: ToolRegistry | None = None) -> None:
        self._terminal = terminal
        self._lock = asyncio.Lock()
        self._registry = registry if registry is not None else ToolRegistry.with_defaults()
        self.initialized = False

        self._requests: dict[str, Handler] = {
            "initialize": self._handle_initialize,
            "ping": self._handle_ping,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }
        # Methods that are never answered, even when sent with an id.
        self._notifications: dict[str, Handler] = {
            "initialized": self._handle_initialized,
            "notifications/initialized": self._handle_initialized,
            "notifications/cancelled": self._handle_cancelled,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse | None:
        """Handle one message. Returns the response, or None when none is due."""
        logger.debug("Handling method: %s", request.method)

        notification_handler = self._notifications.get(request.method)
        if notification_handler is not None:
            await notification_handler(request.params)
            return None

        try:
            handler = self._requests.get(request.method)
            if handler is None:
                raise McpError(JsonRpcError.method_not_found(request.method))
            response = JsonRpcResponse.success(request.id, await handler(request.params))
        except McpError as e:
            response = JsonRpcResponse.failure(request.id, e.error)
        except Exception as e:
            logger.exception("Internal error handling %s", request.method)
            response = JsonRpcResponse.failure(
                request.id, JsonRpcError.internal_error(str(e))
            )

        # Notifications never get a reply, whatever the method.
        if request.is_notification:
            if response.error is not None:
                logger.debug(
                    "Dropping error for notification %s: %s",
                    request.method,
                    response.error.message,
                )
            return None
        return response

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _handle_initialize(self, params: Any) -> dict[str, Any]:
        if params is None:
            raise McpError(JsonRpcError.invalid_params("Missing initialize params"))
        try:
            init = InitializeParams.model_validate(params)
        except ValidationError as e:
            raise McpError(JsonRpcError.invalid_params(str(e))) from e

        logger.info(
            "Initializing MCP server for client %s %s (protocol %s)",
            init.client_info.name,
            init.client_info.version,
            init.protocol_version,
        )
        result = InitializeResult(
            server_info=ServerInfo(name=SERVER_NAME, version=__version__)
        )
        return result.to_wire()

    async def _handle_initialized(self, params: Any) -> None:
        self.initialized = True
        logger.info("MCP server initialized")

    async def _handle_cancelled(self, params: Any) -> None:
        # Tool calls run to completion; there is nothing to cancel.
        logger.debug("Received cancellation notification: %s", params)

    async def _handle_ping(self, params: Any) -> dict[str, Any]:
        return {}

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    async def _handle_tools_list(self, params: Any) -> dict[str, Any]:
        return {"tools": [d.to_wire() for d in self._registry.definitions()]}

    async def _handle_tools_call(self, params: Any) -> dict[str, Any]:
        if params is None:
            raise McpError(JsonRpcError.invalid_params("Missing call params"))
        try:
            call = CallToolParams.model_validate(params)
        except ValidationError as e:
            raise McpError(JsonRpcError.invalid_params(str(e))) from e

        logger.debug("Calling tool: %s", call.name)
        async with self._lock:
            try:
                result = await self._registry.dispatch(
                    call.name, self._terminal, call.arguments
                )
            except ToolArgumentsError as e:
                raise McpError(JsonRpcError.invalid_params(str(e))) from e

        if result.is_error:
            logger.error("Tool error: %s", result.output)
        return result.to_call_result().to_wire()
