"""Plugin loading, invocation and synthesis."""

from .invoker import ToolInvoker
from .registry import PluginRegistry, ToolDescriptor
from .synthesizer import (
    EXPORT_LINE,
    FALLBACK_NAME,
    ToolSynthesizer,
    extract_module,
    extract_name,
    has_export_marker,
)

__all__ = [
    "PluginRegistry",
    "ToolDescriptor",
    "ToolInvoker",
    "ToolSynthesizer",
    "EXPORT_LINE",
    "FALLBACK_NAME",
    "extract_module",
    "extract_name",
    "has_export_marker",
]
