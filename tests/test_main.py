"""
Tests for the terminal chat, logging setup and the session store.

Run with: pytest tests/test_main.py
"""

import io
import json
import logging
from pathlib import Path

from rich.console import Console

from toolforge.agent import CompletionOrchestrator
from toolforge.api.models import SessionState
from toolforge.api.session import SessionStore
from toolforge.core.logging import JSONFormatter, setup_logging
from toolforge.main import chat_loop, print_tools
from toolforge.plugins import PluginRegistry, ToolInvoker, ToolSynthesizer

from conftest import WEATHER_PLUGIN, FakeCompletionClient, text_response, tool_call_response, write_plugin

SHIPPED_PLUGINS = Path(__file__).resolve().parent.parent / "functions"


def scripted_console(lines: list[str]) -> Console:
    console = Console(file=io.StringIO(), width=120, force_terminal=False)
    inputs = iter(lines)
    console.input = lambda prompt="": next(inputs)
    return console


class TestChatLoop:
    """Tests for the interactive loop."""

    async def test_answers_until_exit(self, plugin_dir: Path) -> None:
        """Should print tool use and answers, then stop on exit."""
        write_plugin(plugin_dir, "weather", WEATHER_PLUGIN)
        registry = PluginRegistry(plugin_dir)
        llm = FakeCompletionClient(
            tool_call_response("weather", {"city": "Rome"}),
            text_response("72 degrees in Rome"),
        )
        orchestrator = CompletionOrchestrator(llm, registry, ToolInvoker(registry), ToolSynthesizer(plugin_dir))
        console = scripted_console(["", "weather in Rome?", "exit", "never read"])

        await chat_loop(console, orchestrator)

        output = console.file.getvalue()
        assert "Used tool: weather" in output
        assert "72 degrees in Rome" in output
        assert "Goodbye" in output
        assert len(llm.calls) == 2

    async def test_errors_do_not_stop_loop(self, plugin_dir: Path) -> None:
        """Should print a failed request and keep reading."""
        from toolforge.core.errors import UpstreamAPIError

        registry = PluginRegistry(plugin_dir)
        llm = FakeCompletionClient(UpstreamAPIError("timeout"), text_response("recovered"))
        orchestrator = CompletionOrchestrator(llm, registry, ToolInvoker(registry), ToolSynthesizer(plugin_dir))
        console = scripted_console(["first", "second", "exit"])

        await chat_loop(console, orchestrator)

        output = console.file.getvalue()
        assert "Error: timeout" in output
        assert "recovered" in output

    def test_print_tools(self) -> None:
        """Should list the shipped sample plugin."""
        console = Console(file=io.StringIO(), width=200)

        print_tools(console, PluginRegistry(SHIPPED_PLUGINS))

        assert "get_current_time" in console.file.getvalue()


class TestShippedPlugins:
    """Tests for the plugins bundled in functions/."""

    async def test_get_current_time(self) -> None:
        """Should load and run the sample plugin."""
        registry = PluginRegistry(SHIPPED_PLUGINS)

        result = await ToolInvoker(registry).invoke("get_current_time", {"utc_offset_hours": 2})

        assert result["utc_offset_hours"] == 2.0
        assert len(result["time"]) == len("2026-01-01 00:00:00")


class TestSessionStore:
    """Tests for SessionStore."""

    def test_replace_is_wholesale(self) -> None:
        """Should drop every field of the previous record."""
        store = SessionStore()
        store.replace(SessionState(user_message="first", run_id="r1", note="x"))
        store.replace(SessionState(user_message="second"))

        snapshot = store.snapshot()
        assert snapshot["user_message"] == "second"
        assert snapshot["run_id"] == ""
        assert "note" not in snapshot

    def test_snapshot_is_a_copy(self) -> None:
        """Should not let callers mutate the stored record."""
        store = SessionStore()
        snapshot = store.snapshot()
        snapshot["user_message"] = "changed"

        assert store.state.user_message == ""


class TestLogging:
    """Tests for setup_logging."""

    def test_file_handler(self, tmp_path: Path) -> None:
        """Should write plain lines to the log file."""
        log_file = tmp_path / "logs" / "toolforge.log"

        setup_logging(level="DEBUG", log_file=log_file, console=False)
        logging.getLogger("toolforge.test").debug("plugin scan done")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text()
        assert "DEBUG" in text
        assert "plugin scan done" in text
        assert "\033[" not in text
        logging.getLogger().handlers.clear()

    def test_json_formatter(self) -> None:
        """Should format records as JSON objects."""
        record = logging.LogRecord("toolforge", logging.INFO, __file__, 1, 'saved "x"', None, None)

        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["message"] == 'saved "x"'
