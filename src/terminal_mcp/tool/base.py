"""Base tool classes with Pydantic parameter validation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from terminal_mcp.mcp.protocol import CallToolResult, ToolDefinition

if TYPE_CHECKING:
    from terminal_mcp.terminal.emulator import Terminal

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ToolArgumentsError(Exception):
    """Tool arguments did not match the tool's schema.

    Raised before the tool runs; reported as a protocol-level
    invalid-params error rather than a tool result.
    """


class UnknownToolError(ToolArgumentsError):
    """No tool is registered under the requested name."""


@dataclass
class ToolResult:
    """Base result from a tool execution."""

    output: str = ""
    is_error: bool = False

    def to_call_result(self) -> CallToolResult:
        if self.is_error:
            return CallToolResult.error(self.output)
        return CallToolResult.text(self.output)


@dataclass
class ToolOk(ToolResult):
    """Successful tool result."""

    is_error: bool = False


@dataclass
class ToolError(ToolResult):
    """Failed tool result: the request was valid but the terminal operation failed."""

    is_error: bool = True


class BaseTool(ABC, Generic[T]):
    """Base class for all terminal tools.

    Each tool declares its parameters as a Pydantic model (the type
    parameter T) and publishes ``input_schema``, the JSON Schema clients
    see in ``tools/list``. The published schema is part of the public
    contract and is written out by hand rather than generated.

    Usage:
        class EchoParams(BaseModel):
            text: str

        class EchoTool(BaseTool[EchoParams]):
            name = "echo"
            description = "Types text"
            param_model = EchoParams
            input_schema = {"type": "object", "properties": {...}}

            async def execute(self, terminal, params: EchoParams) -> ToolResult:
                terminal.write_str(params.text)
                return ToolOk(output="done")
    """

    name: ClassVar[str]
    description: ClassVar[str]
    param_model: ClassVar[type[BaseModel]]
    input_schema: ClassVar[dict[str, Any]]

    def parse(self, arguments: dict[str, Any] | None) -> T:
        """Validate raw arguments against ``param_model``."""
        try:
            return self.param_model.model_validate(arguments or {})  # type: ignore[return-value]
        except ValidationError as e:
            raise ToolArgumentsError(f"Invalid arguments for {self.name}: {e}") from e

    async def __call__(
        self, terminal: Terminal, arguments: dict[str, Any] | None
    ) -> ToolResult:
        """Validate arguments, then execute.

        Raises ToolArgumentsError for malformed arguments. Failures while
        executing are returned as a ToolError result.
        """
        params = self.parse(arguments)

        try:
            return await self.execute(terminal, params)
        except Exception as e:
            logger.error("Tool %s execution error: %s", self.name, e, exc_info=True)
            return ToolError(output=f"Error executing {self.name}: {e}")

    @abstractmethod
    async def execute(self, terminal: Terminal, params: T) -> ToolResult:
        """Execute the tool with validated parameters."""
        ...

    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
        )
