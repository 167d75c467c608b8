import asyncio
import json
import subprocess
import sys

from mcp.shared.memory import create_connected_server_and_client_session

from deno_mcp.config import ServerConfig
from deno_mcp.dispatcher import ToolDispatcher
from deno_mcp.server import SERVER_NAME, build_server
from deno_mcp.types import ExecutionResult


class FakeExecutor:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def run(self, code):
        self.calls.append(code)
        return self.result


def _with_client(server, fn):
    async def go():
        async with create_connected_server_and_client_session(server) as client:
            return await fn(client)

    return asyncio.run(go())


def _server(result=None):
    executor = FakeExecutor(result or ExecutionResult(stdout="Hello from Deno!\n", stderr="", exit_code=0))
    dispatcher = ToolDispatcher(ServerConfig(), executor=executor)
    return build_server(ServerConfig(), dispatcher=dispatcher), executor


def test_list_tools_over_mcp():
    server, _ = _server()
    result = _with_client(server, lambda client: client.list_tools())
    assert [tool.name for tool in result.tools] == ["execute_typescript"]
    assert result.tools[0].inputSchema["required"] == ["code"]


def test_call_tool_success_over_mcp():
    server, executor = _server()
    result = _with_client(
        server, lambda client: client.call_tool("execute_typescript", {"code": "console.log('Hello from Deno!')"})
    )
    assert not result.isError
    assert result.content[0].text == "Hello from Deno!\n"
    assert executor.calls == ["console.log('Hello from Deno!')"]


def test_call_tool_runtime_error_over_mcp():
    server, _ = _server(ExecutionResult(stdout="", stderr="error: Uncaught Error: Simulated error", exit_code=1))
    result = _with_client(
        server, lambda client: client.call_tool("execute_typescript", {"code": "throw new Error('Simulated error')"})
    )
    assert result.isError is True
    assert "Error (exit code 1):" in result.content[0].text
    assert "Simulated error" in result.content[0].text


def test_call_tool_invalid_code_over_mcp():
    server, executor = _server()
    result = _with_client(server, lambda client: client.call_tool("execute_typescript", {"code": 123}))
    assert result.isError is True
    assert "'code' argument must be a string." in result.content[0].text
    assert executor.calls == []


def test_call_unknown_tool_over_mcp():
    server, executor = _server()
    result = _with_client(server, lambda client: client.call_tool("run_shell", {"code": "ls"}))
    assert result.isError is True
    assert "Unknown tool 'run_shell'" in result.content[0].text
    assert "execute_typescript" in result.content[0].text
    assert executor.calls == []


def test_stdio_server_answers_initialize():
    init_request = {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "initialize",
        "params": {
            "protocolVersion": "2024-11-05",
            "capabilities": {},
            "clientInfo": {"name": "test-client", "version": "1.0.0"},
        },
    }
    proc = subprocess.Popen(
        [sys.executable, "-m", "deno_mcp"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    try:
        proc.stdin.write(json.dumps(init_request) + "\n")
        proc.stdin.flush()
        line = proc.stdout.readline()
    finally:
        proc.kill()
        _, stderr = proc.communicate(timeout=30)

    assert "MCP Deno server running on stdio" in stderr
    response = json.loads(line)
    assert response["id"] == 1
    assert response["result"]["serverInfo"]["name"] == SERVER_NAME
