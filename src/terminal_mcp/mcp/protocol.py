"""JSON-RPC 2.0 and MCP wire types."""

from __future__ import annotations

import json
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


# ---------------------------------------------------------------------------
# JSON-RPC envelope
# ---------------------------------------------------------------------------

RequestId = Union[StrictStr, StrictInt, StrictFloat, None]


class JsonRpcRequest(BaseModel):
    """An incoming request. No ``id`` at all marks it a notification.

    ``id: null`` is still a request (it gets a reply with ``id: null``);
    only the absence of the key makes it a notification.
    """

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    method: str
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Any = None

    @classmethod
    def parse_error(cls, message: str) -> JsonRpcError:
        return cls(code=PARSE_ERROR, message=message)

    @classmethod
    def invalid_request(cls, message: str) -> JsonRpcError:
        return cls(code=INVALID_REQUEST, message=message)

    @classmethod
    def method_not_found(cls, method: str) -> JsonRpcError:
        return cls(code=METHOD_NOT_FOUND, message=f"Method not found: {method}")

    @classmethod
    def invalid_params(cls, message: str) -> JsonRpcError:
        return cls(code=INVALID_PARAMS, message=message)

    @classmethod
    def internal_error(cls, message: str) -> JsonRpcError:
        return cls(code=INTERNAL_ERROR, message=message)


class JsonRpcResponse(BaseModel):
    """An outgoing response; exactly one of ``result`` / ``error`` is set."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    result: Any = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, id: Any, result: Any) -> JsonRpcResponse:
        return cls(id=id, result=result)

    @classmethod
    def failure(cls, id: Any, error: JsonRpcError) -> JsonRpcResponse:
        return cls(id=id, error=error)

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        else:
            data["result"] = self.result
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), ensure_ascii=False, separators=(",", ":"))


class McpError(Exception):
    """Raised by method handlers to reply with a JSON-RPC error."""

    def __init__(self, error: JsonRpcError) -> None:
        super().__init__(error.message)
        self.error = error


# ---------------------------------------------------------------------------
# MCP payloads
# ---------------------------------------------------------------------------


class ToolDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ClientInfo(BaseModel):
    name: str
    version: str


class RootsCapability(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    list_changed: bool = Field(default=False, alias="listChanged")


class ClientCapabilities(BaseModel):
    roots: RootsCapability | None = None
    sampling: Any = None


class InitializeParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: ClientCapabilities
    client_info: ClientInfo = Field(alias="clientInfo")


class ServerInfo(BaseModel):
    name: str
    version: str


class InitializeResult(BaseModel):
    protocol_version: str = MCP_PROTOCOL_VERSION
    server_info: ServerInfo

    def to_wire(self) -> dict[str, Any]:
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": self.server_info.model_dump(),
        }


class CallToolParams(BaseModel):
    name: str
    arguments: dict[str, Any] | None = None


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class CallToolResult(BaseModel):
    content: list[TextContent]
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> CallToolResult:
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, message: str) -> CallToolResult:
        return cls(content=[TextContent(text=message)], is_error=True)

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {"content": [c.model_dump() for c in self.content]}
        if self.is_error:
            data["isError"] = True
        return data
