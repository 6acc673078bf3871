"""
Exception handlers that render every error as ``{"error": ...}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker.db import DuplicateDepreciationError
from tracker.documents import UnknownCollectionError

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        if any(d["type"] == "missing" for d in details):
            message = "Missing required fields"
        else:
            message = "Invalid request"
        return JSONResponse(
            status_code=400, content={"error": message, "details": details}
        )

    @app.exception_handler(DuplicateDepreciationError)
    async def duplicate_depreciation(request: Request, exc: DuplicateDepreciationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(UnknownCollectionError)
    async def unknown_collection(request: Request, exc: UnknownCollectionError):
        return JSONResponse(
            status_code=404, content={"error": f"Unknown collection: {exc.args[0]}"}
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Something went wrong!"})
