import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from checkers_server.config import Settings
from checkers_server.session import SessionRegistry
from checkers_server.ws_handler import router as ws_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Settings | None = None, registry: SessionRegistry | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    if registry is None:
        if settings.session_codes:
            registry = SessionRegistry(settings.session_codes)
        else:
            registry = SessionRegistry.with_generated_codes(settings.session_count)

    app = FastAPI(title="Checkers Server")
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ws_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/sessions")
    async def sessions():
        return registry.directory()

    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    logger.info("Created %d sessions", len(registry.sessions))
    return app
