import logging
from contextlib import asynccontextmanager

import httpx
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from ai_orch.common import logging_config, tracing
from ai_orch.config import ConfigManager
from ai_orch.engine.chat import ChatService
from ai_orch.engine.prompt_engine import PromptEngine
from ai_orch.engine.registry import ModelRegistry
from ai_orch.engine.session import SessionManager
from ai_orch.providers.factory import build_provider_pool

# Import routers
from ai_orch.api.routes import chat, models

logger = logging.getLogger("ai_orch")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Builds the shared components on startup and closes the shared HTTP
    client on shutdown.
    """
    logging_config.setup_json_logging()
    tracing.setup_tracing()
    logger.info("Initializing ai-orch...")

    app.state.config_manager = ConfigManager()
    config = app.state.config_manager.get_active_config()
    app.state.config = config

    timeout = config.get("http_client_settings", {}).get("timeout", 60.0)
    app.state.http_client = httpx.AsyncClient(timeout=timeout)

    registry = ModelRegistry.from_config(config)
    providers = build_provider_pool(
        registry.providers(),
        config.get("provider_settings", {}),
        http_client=app.state.http_client,
    )
    if not providers:
        logger.warning("No provider credentials found. Every request will exhaust the pool.")

    app.state.registry = registry
    app.state.providers = providers
    app.state.session_manager = SessionManager.from_config(config)
    app.state.chat_service = ChatService(
        registry=registry,
        providers=providers,
        session_manager=app.state.session_manager,
        prompt_engine=PromptEngine.from_config(config),
        max_active_sessions=config.get("session_settings", {}).get("max_active_sessions", 256),
    )

    logger.info(
        f"ai-orch initialized: {registry.count()} models, providers: {sorted(providers) or 'none'}."
    )
    yield
    logger.info("Shutting down...")
    logger.info("Closing the shared httpx.AsyncClient...")
    await app.state.http_client.aclose()
    logger.info("Application stopped.")


def create_app() -> FastAPI:
    app = FastAPI(title="ai-orch", version="1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat.router)
    app.include_router(models.router)

    FastAPIInstrumentor.instrument_app(app)
    return app


app = create_app()
