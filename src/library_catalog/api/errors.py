"""
HTTP error translation for the Library Catalog API.

Errors are returned as JSON bodies of the form::

    {"title": "...", "status": 400, "entityName": "book",
     "errorKey": "idexists", "detail": "..."}

with an ``X-<app>-error`` header naming the error key. Storage failures are
not translated here; they reach FastAPI's default 500 handler.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse

from ..config import get_config
from ..database.repository import (
    DuplicateError,
    InvalidPageRequestError,
    InvalidReferenceError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class BadRequestAlertError(Exception):
    """
    A request the boundary refuses before reaching the services.

    Attributes:
        title: Human readable summary
        entity_name: Entity the request was about (``book``, ``author``...)
        error_key: Short machine readable key (``idexists``, ``idnull``...)
    """

    def __init__(self, title: str, entity_name: str, error_key: str, status_code: int = 400):
        super().__init__(title)
        self.title = title
        self.entity_name = entity_name
        self.error_key = error_key
        self.status_code = status_code


def error_response(
    status_code: int,
    title: str,
    entity_name: str | None = None,
    error_key: str | None = None,
    detail=None,
) -> JSONResponse:
    app_name = get_config().app_name
    headers = {}
    if error_key:
        headers[f"X-{app_name}-error"] = f"error.{error_key}"
        if entity_name:
            headers[f"X-{app_name}-params"] = entity_name
    return JSONResponse(
        status_code=status_code,
        content={
            "title": title,
            "status": status_code,
            "entityName": entity_name,
            "errorKey": error_key,
            "detail": detail,
        },
        headers=headers,
    )


async def bad_request_alert_handler(request: Request, exc: BadRequestAlertError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.error_key)
    return error_response(exc.status_code, exc.title, exc.entity_name, exc.error_key)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return error_response(404, "Entity not found", error_key="idnotfound", detail=str(exc))


async def duplicate_handler(request: Request, exc: DuplicateError) -> JSONResponse:
    logger.info("Constraint violation on %s %s: %s", request.method, request.url.path, exc)
    return error_response(409, "Constraint violation", error_key="conflict", detail=str(exc))


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(
        400,
        "Method argument not valid",
        error_key="validation",
        detail=jsonable_encoder(exc.errors(include_url=False, include_context=False)),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {key: value for key, value in error.items() if key != "ctx"} for error in exc.errors()
    ]
    return error_response(
        400, "Method argument not valid", error_key="validation", detail=jsonable_encoder(errors)
    )


async def invalid_reference_handler(request: Request, exc: InvalidReferenceError) -> JSONResponse:
    logger.info("Unknown reference on %s %s: %s", request.method, request.url.path, exc)
    return error_response(400, "Unknown reference", error_key="badreference", detail=str(exc))


async def page_request_handler(request: Request, exc: InvalidPageRequestError) -> JSONResponse:
    return error_response(400, "Bad request", error_key="badrequest", detail=str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers above to ``app``."""
    app.add_exception_handler(BadRequestAlertError, bad_request_alert_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(DuplicateError, duplicate_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(InvalidReferenceError, invalid_reference_handler)
    app.add_exception_handler(InvalidPageRequestError, page_request_handler)
