"""
Tests for the tool invoker.

Run with: pytest tests/test_invoker.py
"""

import asyncio
from pathlib import Path

import pytest

from toolforge.core.errors import ToolExecutionError, ToolNotFoundError
from toolforge.plugins import ToolInvoker

from conftest import FAILING_PLUGIN, SUBTRACT_PLUGIN, WEATHER_PLUGIN, write_plugin

SLEEPING_PLUGIN = '''\
import time


def execute(seconds):
    time.sleep(seconds)
    return "slept"

details = {"type": "function", "function": {"name": "nap", "parameters": {}}}
'''


class TestToolInvoker:
    """Tests for ToolInvoker.invoke."""

    async def test_invokes_async_entrypoint(self, plugin_dir: Path, invoker: ToolInvoker) -> None:
        """Should await coroutine entry points and return their result."""
        write_plugin(plugin_dir, "weather", WEATHER_PLUGIN)

        result = await invoker.invoke("weather", {"city": "Rome"})

        assert result == {"temp": 72}

    async def test_invokes_sync_entrypoint(self, plugin_dir: Path, invoker: ToolInvoker) -> None:
        """Should call plain functions too."""
        write_plugin(plugin_dir, "subtract", SUBTRACT_PLUGIN)

        assert await invoker.invoke("subtract", {"a": 10, "b": 3}) == 7

    async def test_arguments_are_positional_in_key_order(self, plugin_dir: Path, invoker: ToolInvoker) -> None:
        """Should pass values in the order the keys were given, not by name."""
        write_plugin(plugin_dir, "subtract", SUBTRACT_PLUGIN)

        assert await invoker.invoke("subtract", {"b": 3, "a": 10}) == -7

    async def test_unknown_tool(self, plugin_dir: Path, invoker: ToolInvoker) -> None:
        """Should raise ToolNotFoundError for a name not in the directory."""
        write_plugin(plugin_dir, "weather", WEATHER_PLUGIN)

        with pytest.raises(ToolNotFoundError) as exc_info:
            await invoker.invoke("stock_price", {"ticker": "ACME"})

        assert exc_info.value.name == "stock_price"

    async def test_unknown_tool_in_empty_directory(self, invoker: ToolInvoker) -> None:
        """Should raise ToolNotFoundError rather than crash when there are no plugins."""
        with pytest.raises(ToolNotFoundError):
            await invoker.invoke("weather", {})

    async def test_failure_is_wrapped(self, plugin_dir: Path, invoker: ToolInvoker) -> None:
        """Should wrap entry point errors and keep the original as the cause."""
        write_plugin(plugin_dir, "explode", FAILING_PLUGIN)

        with pytest.raises(ToolExecutionError) as exc_info:
            await invoker.invoke("explode", {})

        assert "disk on fire" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    async def test_wrong_arity_is_execution_error(self, plugin_dir: Path, invoker: ToolInvoker) -> None:
        """Should report a mismatched argument count as an execution failure."""
        write_plugin(plugin_dir, "subtract", SUBTRACT_PLUGIN)

        with pytest.raises(ToolExecutionError):
            await invoker.invoke("subtract", {"a": 1})

    async def test_uses_given_snapshot(self, plugin_dir: Path, invoker: ToolInvoker) -> None:
        """Should look the tool up in the snapshot passed by the caller."""
        write_plugin(plugin_dir, "weather", WEATHER_PLUGIN)
        snapshot = invoker.registry.load_tools()
        (plugin_dir / "weather.py").unlink()

        assert await invoker.invoke("weather", {"city": "Oslo"}, tools=snapshot) == {"temp": 72}

    async def test_sync_tool_does_not_block_loop(self, plugin_dir: Path, invoker: ToolInvoker) -> None:
        """Should keep the event loop running while a blocking tool works."""
        write_plugin(plugin_dir, "nap", SLEEPING_PLUGIN)
        ticks: list[float] = []

        async def ticker() -> None:
            loop = asyncio.get_running_loop()
            while True:
                ticks.append(loop.time())
                await asyncio.sleep(0.02)

        task = asyncio.create_task(ticker())
        try:
            result = await invoker.invoke("nap", {"seconds": 0.3})
        finally:
            task.cancel()

        gaps = [later - earlier for earlier, later in zip(ticks, ticks[1:])]
        assert result == "slept"
        assert len(ticks) > 5
        assert max(gaps) < 0.2
