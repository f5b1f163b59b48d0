"""Pydantic models for API request/response schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExecuteFunctionRequest(BaseModel):
    """Request body for /api/execute-function."""
    functionName: str
    parameters: dict[str, Any] = Field(default_factory=dict)


class OpenAICallRequest(BaseModel):
    """Request body for /api/openai-call."""
    user_message: str


class OpenAICallResponse(BaseModel):
    """Answer of /api/openai-call; state is omitted for plain text answers."""
    message: str
    state: dict[str, Any] | None = None


class SessionState(BaseModel):
    """
    The record posted to /api/prompt.

    Values are stored as posted, whatever their JSON type; unknown fields
    are kept so the whole body round-trips.
    """
    model_config = ConfigDict(extra="allow")

    chatgpt: Any = False
    assistant_id: Any = ""
    assistant_name: Any = ""
    dir_path: Any = ""
    news_path: Any = ""
    thread_id: Any = ""
    user_message: Any = ""
    run_id: Any = ""
    run_status: Any = ""
    vector_store_id: Any = ""
    tools: Any = Field(default_factory=list)
    parameters: Any = Field(default_factory=list)


class PromptResponse(BaseModel):
    """Acknowledgement of /api/prompt."""
    message: str
    state: dict[str, Any]


class ToolsResponse(BaseModel):
    """Schemas of the currently loadable plugins."""
    tools: list[dict[str, Any]]


class HealthResponse(BaseModel):
    """Response for health check endpoint."""
    status: str
    plugins: int
