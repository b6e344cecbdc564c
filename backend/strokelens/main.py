# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - FastAPI Application Entry Point
Creates the app, registers lifespan events, routers,
and global error handlers. run() serves it with uvicorn on
host:port or on a Unix domain socket.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from strokelens import dependencies
from strokelens.api.middleware.error_handler import (
    CorpusNotLoadedError,
    CorpusValidationError,
    register_error_handlers,
)
from strokelens.api.routes import corpus, match
from strokelens.config import get_settings
from strokelens.utils.logger import configure_logging, get_logger

log = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Startup: configure logging, load the reference corpus.
    Shutdown: drop the matcher reference.
    """
    # ── Startup ──────────────────────────────────────────────────────────────
    configure_logging()
    settings = get_settings()

    log.info(
        "strokelens_startup",
        version=VERSION,
        corpus_path=str(settings.corpus_path) if settings.corpus_path else None,
        stroke_count_policy=settings.stroke_count_policy,
        per_stroke_weight=settings.per_stroke_weight,
    )

    try:
        dependencies.init_matcher()
    except FileNotFoundError as e:
        log.warning(
            "corpus_missing",
            error=str(e),
            advice="Point CORPUS_PATH at an existing .json or .tsv corpus.",
        )
    except CorpusValidationError as e:
        log.error("corpus_invalid", error=str(e))

    log.info("strokelens_ready")
    yield

    # ── Shutdown ─────────────────────────────────────────────────────────────
    dependencies.set_matcher(None)
    log.info("strokelens_shutdown")


def create_app() -> FastAPI:
    app = FastAPI(
        title="StrokeLens",
        summary="Handwritten character recognition from stroke drawings.",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── Error Handlers ───────────────────────────────────────────────────────
    register_error_handlers(app)

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(match.router)
    app.include_router(corpus.router)

    # ── Health Check ─────────────────────────────────────────────────────────
    @app.get("/health", tags=["health"], summary="Health check")
    async def health() -> dict:
        try:
            entries = len(dependencies.get_matcher().corpus)
            loaded = True
        except CorpusNotLoadedError:
            entries, loaded = 0, False
        return {
            "status": "ok",
            "service": "strokelens",
            "version": VERSION,
            "corpus_loaded": loaded,
            "corpus_entries": entries,
        }

    return app


# Module-level app instance for uvicorn
app = create_app()


def run() -> None:
    """Console entry point: serve on SOCKET_PATH if set, else HOST:PORT."""
    settings = get_settings()
    if settings.uses_unix_socket:
        settings.socket_path.parent.mkdir(parents=True, exist_ok=True)
        settings.socket_path.unlink(missing_ok=True)
        log.info("serving_unix_socket", path=str(settings.socket_path))
        uvicorn.run(app, uds=str(settings.socket_path), log_level=settings.log_level.lower())
    else:
        uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
