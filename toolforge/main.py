"""
Toolforge - Terminal Chat

Run with: toolforge-chat
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from toolforge.agent import CompletionClient, CompletionOrchestrator, RequestContext
from toolforge.core import ToolforgeError, load_config, setup_logging
from toolforge.core.config import Config
from toolforge.plugins import PluginRegistry, ToolInvoker, ToolSynthesizer

logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
shutdown_requested = False


def print_banner(console: Console) -> None:
    """Print the startup banner."""
    console.print(Panel("TOOLFORGE\nChat with tools that write themselves", style="cyan"))


def signal_handler(signum: int, frame: object) -> None:
    """Handle shutdown signals gracefully."""
    global shutdown_requested
    shutdown_requested = True
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")


def setup_signal_handlers() -> None:
    """Set up signal handlers for graceful shutdown."""
    signal.signal(signal.SIGINT, signal_handler)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, signal_handler)


def print_tools(console: Console, registry: PluginRegistry) -> None:
    """Show the currently loadable plugins."""
    table = Table(title=f"Plugins in {registry.directory}")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    for tool in registry.load_tools().values():
        function = tool.schema.get("function", {})
        table.add_row(tool.name, function.get("description", ""))
    console.print(table)


def build_orchestrator(config: Config) -> CompletionOrchestrator:
    """Wire the orchestrator from configuration."""
    registry = PluginRegistry(Path(config.plugins.directory))
    llm = CompletionClient(
        api_key=config.llm.api_key,
        model=config.llm.model,
        base_url=config.llm.base_url,
        timeout=config.llm.timeout,
    )
    synthesizer = ToolSynthesizer(
        registry.directory,
        enabled=config.plugins.allow_synthesis,
        validate=config.plugins.validate_synthesis,
    )
    return CompletionOrchestrator(llm, registry, ToolInvoker(registry), synthesizer)


async def chat_loop(console: Console, orchestrator: CompletionOrchestrator) -> None:
    """Read lines from the terminal and answer them until exit."""
    while not shutdown_requested:
        try:
            user_input = console.input("[bold green]You:[/bold green] ").strip()
        except EOFError:
            logger.info("EOF received, exiting")
            break

        if shutdown_requested:
            break

        if not user_input:
            continue

        if user_input.lower() == "exit":
            console.print("[dim]Goodbye![/dim]")
            break

        if user_input.lower() == "tools":
            print_tools(console, orchestrator.registry)
            continue

        try:
            result = await orchestrator.answer(user_input, RequestContext())
        except ToolforgeError as e:
            console.print(f"[red]Error: {e}[/red]")
            continue

        if result.saved_path:
            console.print(f"[yellow]Saved new tool: {result.saved_path}[/yellow]")
        elif result.tool_name:
            console.print(f"[dim]Used tool: {result.tool_name}[/dim]")
        console.print(Panel(result.message, title="Assistant", border_style="blue"))
        console.print()


def main() -> None:
    """Main entry point."""
    config = load_config()

    log_file = Path(config.logging.log_file) if config.logging.log_file else None
    setup_logging(
        level=config.logging.level,
        log_file=log_file,
        console=config.logging.console,
        json_format=config.logging.json_format,
    )

    logger.info(f"Configuration: model={config.llm.model}, plugins={config.plugins.directory}")

    setup_signal_handlers()

    console = Console()
    print_banner(console)

    if not config.llm.api_key:
        console.print("[red]Error: no API key configured.[/red]")
        console.print("[yellow]Set OPENAI_API_KEY or TOOLFORGE_API_KEY.[/yellow]")
        sys.exit(1)

    orchestrator = build_orchestrator(config)
    console.print("[dim]Commands: 'exit' to quit, 'tools' to list plugins[/dim]")
    console.print()

    async def run() -> None:
        try:
            await chat_loop(console, orchestrator)
        finally:
            await orchestrator.llm.close()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted. Goodbye![/dim]")
    except Exception as e:
        logger.exception(f"Unexpected error in main loop: {e}")
        console.print(f"[red]Fatal error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
