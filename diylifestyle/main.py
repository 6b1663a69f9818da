"""DIY Lifestyle, FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from diylifestyle.api.errors import register_exception_handlers
from diylifestyle.auth.middleware import MethodOverrideMiddleware, SessionMiddleware
from diylifestyle.config import settings
from diylifestyle.db.database import close_db, init_db

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events.

    uvicorn stops accepting connections and drains in-flight requests
    before the shutdown half runs, so the database closes last.
    """
    logger.info("Starting DIY Lifestyle server...")
    await init_db()
    logger.info("DIY Lifestyle server ready")
    yield
    logger.info("Process is exiting...")
    await close_db()
    logger.info("DIY Lifestyle server stopped")


def create_app() -> FastAPI:
    """Build the request pipeline.

    session decode + identity attach (SessionMiddleware) -> route dispatch
    (routers) -> error normalisation (exception handlers).
    """
    from diylifestyle.auth.google_oauth import router as auth_router
    from diylifestyle.web.homepage import router as homepage_router
    from diylifestyle.web.posts import router as posts_router
    from diylifestyle.web.seed import router as seed_router
    from diylifestyle.web.users import router as users_router

    app = FastAPI(
        title="DIY Lifestyle",
        description="A small DIY blog with Google sign-in",
        version=VERSION,
        lifespan=lifespan,
    )

    # Middleware order: Starlette LIFO: last added runs outermost (first).
    # We want: request → MethodOverride → Session → route handlers
    app.add_middleware(SessionMiddleware)
    app.add_middleware(MethodOverrideMiddleware)

    register_exception_handlers(app)

    if STATIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.include_router(auth_router)
    app.include_router(homepage_router)
    app.include_router(posts_router)
    app.include_router(seed_router)
    app.include_router(users_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "diylifestyle", "version": VERSION}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app on the configured port."""
    logger.info("Server is listening on port: %s", settings.port)
    uvicorn.run(
        "diylifestyle.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
