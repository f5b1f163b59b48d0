"""
Completion orchestrator.

One request runs:
1. Scan the plugin directory and offer the tool schemas to the model
2. Call the completion API once
3. If the model asked for a tool, run it and make one follow-up call
4. If the model wrote a new tool module instead, save it as a plugin
5. Otherwise return the model's text
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from toolforge.core.errors import ToolNotFoundError, UpstreamAPIError
from toolforge.plugins import PluginRegistry, ToolInvoker, ToolSynthesizer, has_export_marker

from .context import RequestContext
from .llm import CompletionClient
from .prompts import (
    FUNCTION_SAVED,
    NO_CONTENT,
    NO_TOOLS_PROMPT,
    SYSTEM_PROMPT,
    function_not_found,
)

logger = logging.getLogger(__name__)


@dataclass
class OrchestratorResult:
    """User-facing answer of one orchestration call."""
    message: str
    state: dict[str, Any] | None = None
    tool_name: str | None = None
    saved_path: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.state is not None:
            body["state"] = self.state
        return body


class CompletionOrchestrator:
    """Drives the completion API, the tool invoker and the synthesizer."""

    def __init__(
        self,
        llm: CompletionClient,
        registry: PluginRegistry,
        invoker: ToolInvoker,
        synthesizer: ToolSynthesizer,
    ) -> None:
        self.llm = llm
        self.registry = registry
        self.invoker = invoker
        self.synthesizer = synthesizer

    async def answer(self, user_message: str, context: RequestContext | None = None) -> OrchestratorResult:
        """
        Answer a user message.

        At most one tool round-trip is made. A tool call requested by the
        follow-up completion is not resolved.

        Raises:
            UpstreamAPIError: a completion call failed
            ToolExecutionError: the selected tool raised
        """
        context = context or RequestContext()

        tools = self.registry.load_tools()
        schemas = [tool.schema for tool in tools.values()]
        logger.info(f"Available functions: {json.dumps([t.name for t in tools.values()])}")

        context.add("system", SYSTEM_PROMPT)
        context.add("user", user_message)
        if not schemas:
            context.add("system", NO_TOOLS_PROMPT)

        response = await self.llm.complete(context.messages, tools=schemas)

        if response.tool_calls:
            tool_call = response.tool_calls[0]
            try:
                args = tool_call.parsed_arguments()
            except ValueError as e:
                raise UpstreamAPIError(f"Invalid tool arguments for {tool_call.name}: {e}") from e

            try:
                result = await self.invoker.invoke(tool_call.name, args, tools=tools)
            except ToolNotFoundError:
                logger.warning(f"Model requested unknown function: {tool_call.name}")
                return OrchestratorResult(
                    message=function_not_found(tool_call.name),
                    state=context.state,
                    tool_name=tool_call.name,
                )

            context.messages.append(response.message)
            context.add(
                "tool",
                json.dumps({"result": result}, default=str),
                tool_call_id=tool_call.id,
            )

            final = await self.llm.complete(context.messages)
            return OrchestratorResult(
                message=final.content or NO_CONTENT,
                state=context.state,
                tool_name=tool_call.name,
            )

        text = response.content
        if text is None:
            return OrchestratorResult(message=NO_CONTENT)

        if has_export_marker(text):
            saved = self.synthesizer.persist(text)
            if saved is not None:
                return OrchestratorResult(
                    message=FUNCTION_SAVED,
                    state=context.state,
                    saved_path=saved,
                )

        return OrchestratorResult(message=text)
