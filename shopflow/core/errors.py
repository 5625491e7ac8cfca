# shopflow/core/errors.py
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CatalogError(HTTPException):
    """
    Base class for catalog failures.

    Services raise these the same way they would raise a plain
    HTTPException; the handlers below render them into the stable
    `{"error": {"code", "message"}}` envelope.
    """

    code: str = "ERROR"
    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None):
        super().__init__(status_code=self.status_code_default, detail=message)
        self.message = message
        self.details = details

    def to_body(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}


class ProductNotFound(CatalogError):
    code = "PRODUCT_NOT_FOUND"
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class ValidationFailed(CatalogError):
    """
    One or more field constraints were violated.

    `details` holds every violation found in the pass, each as
    `{"field": "shipping.weight", "message": "..."}`.
    """

    code = "VALIDATION_FAILED"
    status_code_default = status.HTTP_400_BAD_REQUEST

    def __init__(self, details: list[dict[str, Any]], message: str = "Validation failed"):
        super().__init__(message, details=details)

    @property
    def fields(self) -> list[str]:
        return [d["field"] for d in self.details or []]


class Forbidden(CatalogError):
    code = "FORBIDDEN"
    status_code_default = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class Unauthenticated(CatalogError):
    code = "UNAUTHENTICATED"
    status_code_default = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


def _format_loc(loc: tuple[Any, ...]) -> str:
    # FastAPI prefixes locations with "query"/"body"/"path"
    parts = [str(p) for p in loc if p not in ("query", "body", "path")]
    return ".".join(parts) or "request"


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        {"field": _format_loc(tuple(err.get("loc", ()))), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationFailed(details).to_body(),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        code, message = "NOT_FOUND", "Route not found"
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        code, message = "METHOD_NOT_ALLOWED", "Method not allowed"
    else:
        code, message = "HTTP_ERROR", str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": code, "message": message}},
        headers=getattr(exc, "headers", None),
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "Internal server error",
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Attach the catalog error envelope to every failure path.

    Starlette resolves handlers along the exception MRO, so CatalogError
    subclasses never fall through to the plain HTTPException handler.
    """
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
