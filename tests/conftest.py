"""Shared fixtures for toolforge tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from toolforge.agent import LLMResponse, ToolCall
from toolforge.core import Config
from toolforge.plugins import PluginRegistry, ToolInvoker, ToolSynthesizer

WEATHER_PLUGIN = '''\
async def execute(city):
    return {"temp": 72}

details = {
    "type": "function",
    "function": {
        "name": "weather",
        "description": "Current temperature for a city",
        "parameters": {
            "type": "object",
            "properties": {"city": {"type": "string"}},
            "required": ["city"],
        },
    },
}

__all__ = ["execute", "details"]
'''

SUBTRACT_PLUGIN = '''\
def execute(a, b):
    return a - b

details = {"type": "function", "function": {"name": "subtract", "parameters": {}}}
'''

FAILING_PLUGIN = '''\
async def execute():
    raise RuntimeError("disk on fire")

details = {"type": "function", "function": {"name": "explode", "parameters": {}}}
'''


def write_plugin(directory: Path, name: str, source: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.py"
    path.write_text(source)
    return path


def text_response(content: str | None) -> LLMResponse:
    message = {"role": "assistant", "content": content}
    return LLMResponse(content=content, message=message, model="gpt-4o")


def tool_call_response(name: str, args: dict[str, Any], call_id: str = "call_1") -> LLMResponse:
    arguments = json.dumps(args)
    message = {
        "role": "assistant",
        "content": None,
        "tool_calls": [{
            "id": call_id,
            "type": "function",
            "function": {"name": name, "arguments": arguments},
        }],
    }
    return LLMResponse(
        content=None,
        message=message,
        model="gpt-4o",
        tool_calls=[ToolCall(id=call_id, name=name, arguments=arguments)],
    )


class FakeCompletionClient:
    """Returns queued responses and records every request."""

    def __init__(self, *responses: LLMResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def complete(self, messages, tools=None) -> LLMResponse:
        # Copy, the orchestrator keeps appending to the same list
        self.calls.append({"messages": [dict(m) for m in messages], "tools": tools})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def plugin_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "functions"
    directory.mkdir()
    return directory


@pytest.fixture
def registry(plugin_dir: Path) -> PluginRegistry:
    return PluginRegistry(plugin_dir)


@pytest.fixture
def invoker(registry: PluginRegistry) -> ToolInvoker:
    return ToolInvoker(registry)


@pytest.fixture
def synthesizer(plugin_dir: Path) -> ToolSynthesizer:
    return ToolSynthesizer(plugin_dir)


@pytest.fixture
def config(tmp_path: Path, plugin_dir: Path) -> Config:
    config = Config()
    config.llm.api_key = "test-key"
    config.plugins.directory = str(plugin_dir)
    config.server.public_dir = str(tmp_path / "public")
    return config
