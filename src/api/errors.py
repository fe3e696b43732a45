"""Translate every failure into the tagged JSON error body."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.analysis.errors import AnalysisError, InvalidInputError

logger = logging.getLogger(__name__)


async def analysis_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, AnalysisError)
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
    error = InvalidInputError("Invalid request", details=f"Missing or malformed: {fields}")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "code": "internal_error",
            "error": "Error processing the request",
            "details": str(exc) or type(exc).__name__,
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AnalysisError, analysis_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
