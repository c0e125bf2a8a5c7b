"""
Global exception handler middleware and JSON error renderers.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.errors import ServiceError


async def global_exception_handler(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as exc:
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal server error",
                "details": str(exc),
            },
        )


async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Message for a body that fails validation, per route
VALIDATION_MESSAGES = {
    "/api/chat": "No question text provided",
    "/api/tts": "No text provided",
}


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = errors[0].get("msg", "invalid body") if errors else "invalid body"
    message = VALIDATION_MESSAGES.get(request.url.path.rstrip("/"), "Invalid request body")
    return JSONResponse(status_code=400, content={"error": message, "details": detail})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)
