"""
Chat-completion client.

Thin async wrapper around an OpenAI-compatible `/chat/completions` endpoint.
Calls are made once; failures surface as UpstreamAPIError.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from toolforge.core.errors import UpstreamAPIError

logger = logging.getLogger(__name__)


@dataclass
class ToolCall:
    """A tool call requested by the model."""
    id: str
    name: str
    arguments: str  # JSON text, as sent by the API

    def parsed_arguments(self) -> dict[str, Any]:
        """Decode the argument payload, keeping the model's key order."""
        if not self.arguments:
            return {}
        args = json.loads(self.arguments)
        if not isinstance(args, dict):
            raise ValueError(f"expected a JSON object, got {type(args).__name__}")
        return args


@dataclass
class LLMResponse:
    """First choice of a completion."""
    content: str | None
    message: dict[str, Any]
    model: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    tokens_used: int = 0


class CompletionClient:
    """Client for an OpenAI-compatible chat-completion API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        timeout: float | None = 600.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        # 0 means wait indefinitely
        self.timeout = timeout or None
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            transport=transport,
        )

        logger.info(f"Initialized CompletionClient: model={model}, url={self.base_url}, timeout={self.timeout}")

    async def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
    ) -> LLMResponse:
        """
        Run one chat completion.

        Args:
            messages: Conversation so far
            tools: Tool schemas; omitted from the request when empty

        Returns:
            LLMResponse for the first choice

        Raises:
            UpstreamAPIError: network failure, non-2xx status or malformed body
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if tools:
            payload["tools"] = tools

        logger.debug(f"Chat completion with {len(messages)} messages, {len(tools or [])} tools")

        try:
            response = await self._client.post(f"{self.base_url}/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamAPIError(
                f"{e.response.status_code} {_error_message(e.response)}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamAPIError(str(e) or e.__class__.__name__) from e
        except ValueError as e:
            raise UpstreamAPIError(f"Invalid JSON from completion API: {e}") from e

        logger.info(f"Model response: {json.dumps(data)}")
        return _parse_response(data, self.model)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "CompletionClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message", str(error))
    return str(error or body)


def _parse_response(data: Any, model: str) -> LLMResponse:
    try:
        message = data["choices"][0]["message"]
        tool_calls = [
            ToolCall(
                id=tc.get("id", ""),
                name=tc["function"]["name"],
                arguments=tc["function"].get("arguments") or "",
            )
            for tc in message.get("tool_calls") or []
        ]
    except (KeyError, IndexError, TypeError) as e:
        raise UpstreamAPIError(f"Malformed completion response: missing {e}") from e

    usage = data.get("usage") or {}
    return LLMResponse(
        content=message.get("content"),
        message=message,
        model=data.get("model", model),
        tool_calls=tool_calls,
        tokens_used=usage.get("total_tokens", 0),
    )
