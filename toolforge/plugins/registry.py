"""
Plugin registry.

A plugin is a Python module in the plugins directory that exposes:
- details: dict - the OpenAI tool schema offered to the model
- execute: callable - the entry point, sync or async

The directory is scanned on every call so that a tool written by the
synthesizer is picked up by the very next request.
"""

import importlib.util
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

logger = logging.getLogger(__name__)

PLUGIN_SUFFIX = ".py"
MODULE_PREFIX = "toolforge_plugins"


@dataclass
class ToolDescriptor:
    """A tool loaded from one plugin file."""
    name: str
    schema: dict[str, Any]
    entrypoint: Callable[..., Any]
    path: Path


class PluginRegistry:
    """Loads tool descriptors from a plugin directory."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _plugin_files(self) -> list[Path]:
        if not self.directory.is_dir():
            logger.debug(f"Plugin directory does not exist: {self.directory}")
            return []
        return sorted(
            p for p in self.directory.iterdir()
            if p.is_file() and p.suffix == PLUGIN_SUFFIX and not p.name.startswith("__")
        )

    def _import(self, path: Path) -> ModuleType:
        module_name = f"{MODULE_PREFIX}.{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load plugin from {path}")
        module = importlib.util.module_from_spec(spec)
        # Compiled from source on every scan; __pycache__ bytecode can be stale
        # when a file is overwritten within the same second
        code = compile(path.read_bytes(), str(path), "exec")
        sys.modules[module_name] = module
        exec(code, module.__dict__)
        return module

    def load_tools(self) -> dict[str, ToolDescriptor]:
        """
        Scan the plugin directory and load every plugin module.

        Import errors and modules missing `details` or `execute` are not
        caught; they propagate to the caller.

        Returns:
            Mapping of filename stem to descriptor
        """
        tools: dict[str, ToolDescriptor] = {}
        for path in self._plugin_files():
            module = self._import(path)
            tools[path.stem] = ToolDescriptor(
                name=path.stem,
                schema=module.details,
                entrypoint=module.execute,
                path=path,
            )
        logger.debug(f"Loaded {len(tools)} plugins from {self.directory}")
        return tools

    def schemas(self) -> list[dict[str, Any]]:
        """Tool schemas from a fresh scan, in the form the completion API expects."""
        return [tool.schema for tool in self.load_tools().values()]
