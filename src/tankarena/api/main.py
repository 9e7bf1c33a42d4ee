"""Headless arena server.

Run with:  uvicorn tankarena.api.main:app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from tankarena import __version__
from tankarena.config import settings
from tankarena.host import ArenaHost

from .router import router


def create_app(host: ArenaHost | None = None, start_loop: bool = True) -> FastAPI:
    """Build the FastAPI app around *host* (a fresh one by default)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Tank Arena v{__version__} starting")
        if start_loop:
            app.state.arena_host.start()
        yield
        app.state.arena_host.stop()

    app = FastAPI(title="Tank Arena", version=__version__, lifespan=lifespan)
    app.state.arena_host = host or ArenaHost(cfg=settings)
    app.include_router(router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
