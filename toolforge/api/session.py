"""Holder for the last prompt record posted to the API."""

import logging
from typing import Any

from .models import SessionState

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Keeps exactly one SessionState.

    replace() swaps the whole record in a single assignment; the last writer
    wins and no history is kept. Requests read it through snapshot() and
    carry the copy in their RequestContext.
    """

    def __init__(self) -> None:
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    def replace(self, state: SessionState) -> None:
        self._state = state
        logger.debug(f"Session state replaced: thread_id={state.thread_id!r}, run_id={state.run_id!r}")

    def snapshot(self) -> dict[str, Any]:
        return self._state.model_dump()
