"""Exception handlers: render project errors as ``{"error", "code", "details"?}``."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from palmport.core.exceptions import PersistenceError, ProjectError, ValidationError

logger = logging.getLogger(__name__)


def _render(exc: ProjectError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict(include_cause=False))


async def project_error_handler(request: Request, exc: ProjectError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("API: %s %s → %r", request.method, request.url.path, exc, exc_info=exc.cause)
    else:
        logger.info("API: %s %s → %s %s", request.method, request.url.path, exc.http_status, exc.code)
    return _render(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _render(ValidationError("Invalid request", details={"errors": errors}))


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("API: database error on %s %s", request.method, request.url.path, exc_info=exc)
    return _render(PersistenceError("Database error"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("API: unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProjectError, project_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
