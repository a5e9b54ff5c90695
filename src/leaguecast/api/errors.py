"""Exception handlers — map failures to HTTP status codes.

Learn: Three request-level failure classes:
- malformed body / bad path param  → 400 (no side effects happened)
- database failure                 → 500 (the request session rolls back)
- missing entity                   → 404, raised as HTTPException in routers

Failures while notifying clients never reach these handlers; the
broadcaster and relay swallow and log them after the write committed.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning("request.invalid", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("request.database_error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


EXCEPTION_HANDLERS = {
    RequestValidationError: validation_error_handler,
    SQLAlchemyError: database_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
