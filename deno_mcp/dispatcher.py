"""Tool listing and tool-call handling.

``ToolDispatcher`` owns the bodies of the two MCP operations this server
implements. It validates arguments, runs the executor and classifies the
outcome; any ``ToolError`` is converted into an error ``ToolResult``.
"""
from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from .classifier import classify_outcome, classify_setup_error
from .code_executor import DenoCodeExecutor
from .config import ServerConfig
from .errors import ExecutionSetupError, InvalidArgumentError, ToolError, UnknownToolError
from .types import ExecutionRequest, ToolDescriptor, ToolResult

EXECUTE_TYPESCRIPT = "execute_typescript"

EXECUTE_TYPESCRIPT_TOOL = ToolDescriptor(
    name=EXECUTE_TYPESCRIPT,
    description=(
        "Execute TypeScript or JavaScript code using Deno. "
        "Permissions are configured at server startup."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "code": {
                "type": "string",
                "description": "The TypeScript or JavaScript code to execute",
            },
        },
        "required": ["code"],
    },
)


def parse_execution_request(arguments: Mapping[str, Any] | None) -> ExecutionRequest:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise InvalidArgumentError("Tool arguments must be an object; 'code' argument must be a string.")
    code = arguments.get("code")
    if not isinstance(code, str):
        raise InvalidArgumentError("'code' argument must be a string.")
    return ExecutionRequest(code=code)


class ToolDispatcher:
    def __init__(self, config: ServerConfig, executor: DenoCodeExecutor | None = None):
        self.config = config
        self.executor = executor or DenoCodeExecutor.from_config(config)

    def list_tools(self) -> list[ToolDescriptor]:
        return [EXECUTE_TYPESCRIPT_TOOL]

    def tool_names(self) -> list[str]:
        return [tool.name for tool in self.list_tools()]

    def call_tool(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResult:
        try:
            if name != EXECUTE_TYPESCRIPT:
                raise UnknownToolError(name, self.tool_names())
            request = parse_execution_request(arguments)
            return self.execute(request)
        except ToolError as e:
            logger.info("Tool call '{}' rejected: {}", name, e)
            return ToolResult(text=str(e), is_error=True)

    def execute(self, request: ExecutionRequest) -> ToolResult:
        try:
            outcome = self.executor.run(request.code)
        except ExecutionSetupError as e:
            return classify_setup_error(e)
        except Exception as e:
            logger.exception("Unexpected failure while executing code")
            return classify_setup_error(ExecutionSetupError(str(e)))
        return classify_outcome(outcome)
