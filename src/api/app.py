"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, the health endpoint and the UI fallback page. The module-level
``app`` instance allows ``uvicorn src.api.app:app --reload --port 3000``.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from src.api.middleware.error_handler import register_error_handlers
from src.api.routes import chat, transcribe
from src.api.templates.index import render_index
from src.core.config import PLACEHOLDER_API_KEY, get_settings
from src.core.models import HealthResponse

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Create the upload spool dir and report the configured providers."""
    settings = get_settings()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory ready: %s", settings.upload_dir)
    logger.info("Speech-to-text provider: %s", settings.stt_provider)
    logger.info("Chat provider: %s", settings.llm_provider)
    if settings.transcription_api_key == PLACEHOLDER_API_KEY:
        logger.warning("TRANSCRIPTION_API_KEY is not set; transcription calls will fail")
    if settings.llm_provider == "azure" and settings.chat_api_key == PLACEHOLDER_API_KEY:
        logger.warning("CHAT_API_KEY is not set; chat calls will fail")
    yield


def cors_origins(settings) -> list[str]:
    """Origins allowed to call the API: the Streamlit UI and the API itself."""
    origins = [settings.ui_url.rstrip("/"), settings.api_base_url.rstrip("/")]
    return list(dict.fromkeys(origins))


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="TranscriptChat",
        description="Upload audio, get a transcript, and chat about it.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(settings),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check --
    @app.get("/api/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse()

    # -- Relays --
    app.include_router(transcribe.router, prefix="/api")
    app.include_router(chat.router, prefix="/api")

    # -- UI entry page (registered last so it never shadows /api routes) --
    @app.get("/{full_path:path}", response_class=HTMLResponse, include_in_schema=False)
    async def index(full_path: str) -> str:
        return render_index(settings.ui_url)

    return app


app = create_app()
