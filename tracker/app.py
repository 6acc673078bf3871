"""
FastAPI application entry point for the tracker backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tracker.config import get_settings
from tracker.errors import register_error_handlers
from tracker.routers import ALL_ROUTERS

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    app = FastAPI(title="STR Tax Tracker API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    for router in ALL_ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)

    logger.info("Tracker API configured (%s)", settings.environment)
    return app


app = create_app()
