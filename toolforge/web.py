"""
Toolforge - Web Server Entry Point

Run with: toolforge
         toolforge --host 0.0.0.0 --port 3000 --config config.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

from toolforge.api import create_app
from toolforge.core import load_config, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point for web server."""
    parser = argparse.ArgumentParser(description="Toolforge Web Server")
    parser.add_argument("--host", default=None, help="Host to bind to (default: from config, 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (default: from config, 3000)")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    args = parser.parse_args()

    config = load_config(args.config)

    log_file = Path(config.logging.log_file) if config.logging.log_file else None
    setup_logging(
        level=config.logging.level,
        log_file=log_file,
        console=config.logging.console,
        json_format=config.logging.json_format,
    )

    if not config.llm.api_key:
        logger.warning("No API key configured; set OPENAI_API_KEY or TOOLFORGE_API_KEY")

    app = create_app(config)

    host = args.host or config.server.host
    port = args.port or config.server.port

    logger.info(f"Server running at http://{host}:{port}")

    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level=config.logging.level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.exception(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
