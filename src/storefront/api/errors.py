"""Translate storefront errors into ``{"message": ...}`` responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.errors import DependencyError, NotFoundError, first_message


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": first_message(exc.messages)})


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    message = exc.message if isinstance(exc, NotFoundError) else "Resource not found"
    return JSONResponse(status_code=404, content={"message": message})


async def dependency_error_handler(request: Request, exc: DependencyError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        error = errors[0]
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "header"))
        message = f"{field}: {error.get('msg')}" if field else str(error.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the storefront's error-to-status mapping on ``app``."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(DependencyError, dependency_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
