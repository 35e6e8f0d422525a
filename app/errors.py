# FILE: app/errors.py
"""
Exception -> HTTP mapping shared by every router.

Bodies are always {"error": "<message>"}.

    InvalidPathError, PathAlreadyExistsError, BadRequestError -> 400
    SiteNotFoundError                                          -> 404
    PayloadTooLargeError                                       -> 413
    OSError                                                    -> 500

Any other exception is a server error (500) and is not rewritten here.
"""
import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse

from app.exceptions import BadRequestError
from app.sites.service import (
    InvalidPathError,
    PathAlreadyExistsError,
    PayloadTooLargeError,
    SiteNotFoundError,
    SiteStoreError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (InvalidPathError, 400),
    (PathAlreadyExistsError, 400),
    (SiteNotFoundError, 404),
    (PayloadTooLargeError, 413),
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def site_store_error_handler(_: Request, exc: SiteStoreError) -> JSONResponse:
    for exc_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, exc_type):
            return _error(status_code, str(exc))
    logger.error("[api] Site store failure: %s", exc)
    return _error(500, str(exc))


async def bad_request_handler(_: Request, exc: BadRequestError) -> JSONResponse:
    return _error(400, str(exc))


async def os_error_handler(request: Request, exc: OSError) -> JSONResponse:
    logger.exception("[api] I/O failure on %s %s", request.method, request.url.path)
    return _error(500, f"File operation failed: {exc}")


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SiteStoreError, site_store_error_handler)
    app.add_exception_handler(BadRequestError, bad_request_handler)
    app.add_exception_handler(OSError, os_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
