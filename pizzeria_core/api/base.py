"""
Pizzeria REST API base library
"""

import logging
from typing import Any, Dict, Iterable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import schemas
from ..schemas import ApiErrorCode


logger = logging.getLogger(__name__)


class APIWithoutValidationError(FastAPI):
    """
    FastAPI class that excludes 422 validation error responses in OpenAPI schema

    Invalid request parameters are answered with `400` (Bad Request) instead.
    """

    def openapi(self) -> Dict[str, Any]:
        if not self.openapi_schema:
            self.openapi_schema = get_openapi(
                title=self.title,
                version=self.version,
                openapi_version=self.openapi_version,
                description=self.description,
                license_info=self.license_info,
                routes=self.routes,
                tags=self.openapi_tags,
                servers=self.servers,
            )
            for path, operations in self.openapi_schema.get("paths", {}).items():
                for method, metadata in operations.items():
                    metadata.get("responses", {}).pop("422", None)
        return self.openapi_schema


async def handle_generic_exception(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception caught in base exception handler @ '{request.method} {request.url.path}'!",
        exc_info=exc
    )
    return JSONResponse(
        {"message": "Unexpected server error. The requested action wasn't completed successfully."},
        status_code=500
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    details = [
        schemas.APIError(
            code=ApiErrorCode.INVALID_ROUTE_VALUE,
            message=f"{'.'.join(map(str, error.get('loc', ())))}: {error.get('msg', 'invalid value')}"
        )
        for error in exc.errors()
    ]
    error = schemas.APIError(
        code=ApiErrorCode.INVALID_ROUTE_VALUE,
        message="Failed to process the request parameters.",
        details=details
    )
    return JSONResponse(error.model_dump(mode="json"), status_code=400)


class APIException(StarletteHTTPException):
    """
    Base class for any kind of expected API failure, rendered as ``APIError`` model
    """

    def __init__(
            self,
            status_code: int,
            code: ApiErrorCode,
            message: str,
            details: Optional[Iterable[schemas.APIError]] = None,
            headers: Optional[Dict[str, str]] = None
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code = code
        self.message = message
        self.details = list(details or [])

    def __str__(self) -> str:
        return f"{self.status_code} {self.code.value}: {self.message}"

    @property
    def schema(self) -> schemas.APIError:
        return schemas.APIError(code=self.code, message=self.message, details=self.details)

    @classmethod
    async def handle(cls, request: Request, exc: StarletteHTTPException) -> Response:
        """
        Handle exceptions in a generic way to produce APIError models

        Plain HTTP exceptions, e.g. raised by the router for unknown
        paths, are delegated to the default FastAPI exception handler.
        """

        if not isinstance(exc, APIException):
            return await http_exception_handler(request, exc)

        logger.debug(
            f"{type(exc).__name__}: {exc.message} @ '{request.method} "
            f"{request.url.path}' (code: {exc.code.value}, details: {len(exc.details)})"
        )
        return JSONResponse(
            exc.schema.model_dump(mode="json"),
            status_code=exc.status_code,
            headers=exc.headers
        )


class InvalidRouteValue(APIException):
    """
    Exception when a path or query parameter of the request is malformed
    """

    def __init__(self, message: str, details: Optional[Iterable[schemas.APIError]] = None):
        super().__init__(400, ApiErrorCode.INVALID_ROUTE_VALUE, message, details)


class InvalidJsonBody(APIException):
    """
    Exception when the request body is missing, no JSON object or not a valid resource
    """

    def __init__(self, message: str = "Invalid request body.", details: Optional[Iterable[schemas.APIError]] = None):
        super().__init__(400, ApiErrorCode.INVALID_JSON_BODY, message, details)


class InvalidConditionalHeader(APIException):
    """
    Exception when the conditional headers don't select exactly one write operation

    A missing conditional header uses `428` (Precondition Required),
    any other invalid combination uses `400` (Bad Request).
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(status_code, ApiErrorCode.INVALID_CONDITIONAL_HEADER, message)


class NotFound(APIException):
    """
    Exception when a requested resource was not found in the system
    """

    def __init__(self, resource: str):
        super().__init__(404, ApiErrorCode.RESOURCE_NOT_FOUND, f"{resource} was not found.")


class Conflict(APIException):
    """
    Exception when a resource should be created but its identifier is already in use
    """

    def __init__(self, resource: str):
        super().__init__(409, ApiErrorCode.RESOURCE_ALREADY_EXISTS, f"{resource} already exists.")


class PreconditionFailed(APIException):
    """
    Exception when the ETag given by the client doesn't match the current revision
    """

    def __init__(self, resource: str):
        super().__init__(
            412,
            ApiErrorCode.ETAG_MISMATCH,
            f"The ETag of {resource} does not match the current revision. "
            f"Get the resource again and retry the request with its current ETag."
        )
