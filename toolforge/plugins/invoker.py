"""Runs a plugin's entry point by tool name."""

import asyncio
import inspect
import json
import logging
from typing import Any

from toolforge.core.errors import ToolExecutionError, ToolNotFoundError
from toolforge.plugins.registry import PluginRegistry, ToolDescriptor

logger = logging.getLogger(__name__)


class ToolInvoker:
    """Looks tools up in the registry and calls them with positional arguments."""

    def __init__(self, registry: PluginRegistry) -> None:
        self.registry = registry

    async def invoke(
        self,
        name: str,
        args: dict[str, Any],
        tools: dict[str, ToolDescriptor] | None = None,
    ) -> Any:
        """
        Invoke a tool.

        Args:
            name: Tool name (plugin filename stem)
            args: Keyed arguments; the values are passed positionally in
                  the dict's order
            tools: Snapshot to look the tool up in. A fresh scan is taken
                   when omitted.

        Raises:
            ToolNotFoundError: name is not in the snapshot
            ToolExecutionError: the entry point raised
        """
        if tools is None:
            tools = self.registry.load_tools()

        tool = tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        positional = list(args.values())
        logger.info(f"Invoking {name} with {len(positional)} argument(s)")

        try:
            if inspect.iscoroutinefunction(tool.entrypoint):
                result = await tool.entrypoint(*positional)
            else:
                # Run in thread pool to not block event loop
                loop = asyncio.get_running_loop()
                result = await loop.run_in_executor(None, tool.entrypoint, *positional)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}")
            raise ToolExecutionError(name, e) from e

        logger.info(f"result: {json.dumps(result, default=str)}")
        return result
