import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# First match wins.
MESSAGE_STATUS_MAP = [
    ("Authentication required", 401),
    ("Access denied", 403),
    ("does not belong to the same organization", 403),
    ("not found", 404),
    ("already exists", 409),
    ("already has an active", 409),
]


def status_for_message(message: str, default: int = 400) -> int:
    for fragment, code in MESSAGE_STATUS_MAP:
        if fragment in message:
            return code
    return default


def error_body(message: str) -> dict:
    return {"error": message}


def format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "Invalid request: " + "; ".join(parts)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(content=error_body(str(exc.detail)),
                            status_code=exc.status_code or 400,
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(content=error_body(format_validation_errors(exc)),
                            status_code=400)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        return JSONResponse(content=error_body(message),
                            status_code=status_for_message(message))

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s",
                         request.method, request.url.path)
        message = str(exc) or "Internal server error"
        return JSONResponse(content=error_body(message),
                            status_code=status_for_message(message, default=500))
