"""
Core infrastructure components.

This module contains foundational infrastructure like logging, configuration
and the shared exception hierarchy.
"""

from toolforge.core.config import Config, load_config
from toolforge.core.errors import (
    ToolExecutionError,
    ToolforgeError,
    ToolNotFoundError,
    UpstreamAPIError,
)
from toolforge.core.logging import get_logger, setup_logging

__all__ = [
    "Config",
    "load_config",
    "get_logger",
    "setup_logging",
    "ToolforgeError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "UpstreamAPIError",
]
