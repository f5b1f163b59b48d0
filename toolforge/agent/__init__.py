"""Completion orchestration for toolforge."""

from .context import RequestContext
from .llm import CompletionClient, LLMResponse, ToolCall
from .orchestrator import CompletionOrchestrator, OrchestratorResult

__all__ = [
    "CompletionClient",
    "CompletionOrchestrator",
    "LLMResponse",
    "OrchestratorResult",
    "RequestContext",
    "ToolCall",
]
