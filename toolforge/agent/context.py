"""Per-request context passed through the orchestrator."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RequestContext:
    """
    State owned by a single orchestration call.

    `state` is a snapshot of the session record taken when the request
    started, so a concurrent /api/prompt cannot change it mid-request.
    """
    state: dict[str, Any] = field(default_factory=dict)
    messages: list[dict[str, Any]] = field(default_factory=list)

    def add(self, role: str, content: str | None, **extra: Any) -> None:
        message: dict[str, Any] = {"role": role, "content": content}
        message.update(extra)
        self.messages.append(message)
