"""FastAPI server for toolforge."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from toolforge.agent import CompletionClient, CompletionOrchestrator, RequestContext
from toolforge.core import Config, load_config
from toolforge.core.errors import ToolExecutionError, ToolNotFoundError, UpstreamAPIError
from toolforge.plugins import PluginRegistry, ToolInvoker, ToolSynthesizer

from .models import (
    ExecuteFunctionRequest,
    HealthResponse,
    OpenAICallRequest,
    OpenAICallResponse,
    PromptResponse,
    SessionState,
    ToolsResponse,
)
from .session import SessionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle."""
    logger.info(f"Starting toolforge API server, plugins in {app.state.registry.directory}")
    yield
    logger.info("Shutting down toolforge API server")
    await app.state.llm.close()


def register_exception_handlers(app: FastAPI) -> None:
    """Map toolforge errors to JSON error bodies."""

    @app.exception_handler(ToolNotFoundError)
    async def tool_not_found(request: Request, exc: ToolNotFoundError) -> JSONResponse:
        logger.warning(f"Function not found: {exc.name}")
        return JSONResponse(status_code=404, content={"error": "Function not found"})

    @app.exception_handler(ToolExecutionError)
    async def tool_failed(request: Request, exc: ToolExecutionError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": "Function execution failed", "details": str(exc)},
        )

    @app.exception_handler(UpstreamAPIError)
    async def upstream_failed(request: Request, exc: UpstreamAPIError) -> JSONResponse:
        logger.error(f"Completion API failed: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "OpenAI API failed", "details": str(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(exc)},
        )


def create_app(config: Config | None = None, llm: CompletionClient | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Loaded configuration; read from disk and environment when None
        llm: Completion client to use instead of one built from config
    """
    config = config or load_config()

    app = FastAPI(
        title="Toolforge API",
        description="Chat completions with self-extending plugin tools",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    registry = PluginRegistry(Path(config.plugins.directory))
    if llm is None:
        llm = CompletionClient(
            api_key=config.llm.api_key,
            model=config.llm.model,
            base_url=config.llm.base_url,
            timeout=config.llm.timeout,
        )
    invoker = ToolInvoker(registry)
    synthesizer = ToolSynthesizer(
        registry.directory,
        enabled=config.plugins.allow_synthesis,
        validate=config.plugins.validate_synthesis,
    )

    app.state.config = config
    app.state.registry = registry
    app.state.llm = llm
    app.state.invoker = invoker
    app.state.sessions = SessionStore()
    app.state.orchestrator = CompletionOrchestrator(llm, registry, invoker, synthesizer)

    register_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Report status and the number of loadable plugins."""
        return HealthResponse(status="ok", plugins=len(registry.load_tools()))

    @app.get("/api/tools", response_model=ToolsResponse)
    async def list_tools() -> ToolsResponse:
        """List the schemas of all loadable plugins."""
        return ToolsResponse(tools=registry.schemas())

    @app.post("/api/execute-function")
    async def execute_function(request: ExecuteFunctionRequest) -> JSONResponse:
        """Run a plugin directly with the given parameters."""
        result = await invoker.invoke(request.functionName, request.parameters)
        return JSONResponse(content=jsonable_encoder(result))

    @app.post("/api/openai-call", response_model=OpenAICallResponse)
    async def openai_call(request: OpenAICallRequest) -> JSONResponse:
        """Answer a user message, running or creating tools as needed."""
        context = RequestContext(state=app.state.sessions.snapshot())
        result = await app.state.orchestrator.answer(request.user_message, context)
        # state is left out entirely for plain text answers
        return JSONResponse(content=jsonable_encoder(result.to_dict()))

    @app.post("/api/prompt", response_model=PromptResponse)
    async def prompt(request: Request) -> JSONResponse:
        """Replace the session record with the posted body."""
        sessions: SessionStore = app.state.sessions
        try:
            state = SessionState.model_validate(await request.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid prompt body: {e}")
            return JSONResponse(
                status_code=500,
                content={"message": "User Message Failed", "state": sessions.snapshot()},
            )

        sessions.replace(state)
        return JSONResponse(content={
            "message": f"Got prompt: {state.user_message}",
            "state": sessions.snapshot(),
        })

    # Mounted last so it never shadows the API routes
    public_dir = Path(config.server.public_dir)
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(public_dir), html=True), name="public")

    return app
