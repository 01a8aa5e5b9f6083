from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from src.domain.errors import (
    DecodeError,
    EmptyImageResult,
    EncodeError,
    ImageApiError,
    MissingExtension,
    NoFileProvided,
    NotAnImage,
    OversizedImage,
    ParseError,
    PayloadTooLarge,
    UnsupportedFormat,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses must come before their bases.
STATUS_BY_ERROR: tuple[tuple[type[ImageApiError], int], ...] = (
    (PayloadTooLarge, 413),
    (NotAnImage, 415),
    (NoFileProvided, 400),
    (ParseError, 400),
    (MissingExtension, 400),
    (UnsupportedFormat, 415),
    (DecodeError, 422),
    (EmptyImageResult, 422),
    (OversizedImage, 422),
    (EncodeError, 500),
)


def status_for(exc: ImageApiError) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return 400


async def image_api_error_handler(request: Request, exc: ImageApiError) -> PlainTextResponse:
    code = status_for(exc)
    level = logging.ERROR if code >= 500 else logging.WARNING
    logger.log(level, "%s %s failed with %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return PlainTextResponse(str(exc), status_code=code)


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ImageApiError, image_api_error_handler)
