"""HTTP API for toolforge."""

from .server import create_app
from .session import SessionStore

__all__ = ["create_app", "SessionStore"]
