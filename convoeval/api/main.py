"""FastAPI application factory.

Assembles CORS and the API routers. ``convoeval/main.py`` re-exports the
app object for ``uvicorn convoeval.main:app``.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from convoeval.api.routes.evaluations import router as evaluations_router
from convoeval.api.routes.health import router as health_router
from convoeval.core.logging import setup_logging
from convoeval.core.settings import get_settings
from convoeval.db.session import dispose_engine


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    yield
    await dispose_engine()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS — restrict origins in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(evaluations_router)
