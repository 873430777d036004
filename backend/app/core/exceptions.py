"""
Custom exceptions and error handlers for consistent error responses.

Every error body has the shape ``{"error", "error_code", "details"}``.
The ``error`` key carries the human readable message the web client shows.
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

# Validation error type pydantic reports for an absent key
MISSING_ERROR_TYPE = "missing"


class AppException(Exception):
    """Base application exception."""
    
    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class InsufficientPermissionsError(AppException):
    """Raised when user doesn't have permission to perform an action."""
    
    def __init__(self, message: str = "Insufficient permissions", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""
    
    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(
            message=f"{resource} not found",
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class DuplicateEmailError(AppException):
    """Raised when an e-mail address is already taken."""
    
    def __init__(self, message: str = "Email already registered", email: str = None):
        super().__init__(
            message=message,
            error_code="ERR_CONFLICT_001",
            status_code=status.HTTP_409_CONFLICT,
            details={"email": email} if email else None
        )


class InactiveAccountError(AppException):
    """Raised when an operation targets a deactivated account."""
    
    def __init__(self, message: str = "Account is inactive"):
        super().__init__(
            message=message,
            error_code="ERR_INACTIVE_001",
            status_code=status.HTTP_403_FORBIDDEN
        )


class InvalidStateError(AppException):
    """Raised when a record is not in a state that allows the operation."""
    
    def __init__(self, message: str, current_status: str = None):
        super().__init__(
            message=message,
            error_code="ERR_STATE_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"current_status": current_status} if current_status else None
        )


class AuthenticationError(AppException):
    """Raised for authentication failures."""
    
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class TokenRevokedError(AppException):
    """Raised when token has been revoked."""
    
    def __init__(self, message: str = "Token has been revoked"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_002",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class ExternalServiceError(AppException):
    """Raised when an upstream dependency (identity provider, AI endpoint) fails."""
    
    def __init__(self, service: str, message: str = None):
        super().__init__(
            message=message or f"{service} is unavailable",
            error_code="ERR_UPSTREAM_001",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"service": service}
        )


def _error_body(message: str, error_code: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    return {
        "error": message,
        "error_code": error_code,
        "details": details or {}
    }


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _missing_fields(errors: List[Dict[str, Any]]) -> List[str]:
    """
    Return the top-level body fields that were absent, null or blank.

    Errors on other fields are ignored here; they only matter when nothing
    required is missing.
    """
    missing = []
    for error in errors:
        loc = tuple(error.get("loc") or ())
        if len(loc) != 2 or loc[0] != "body":
            continue
        if error.get("type") == MISSING_ERROR_TYPE or _is_blank(error.get("input")):
            field = str(loc[1])
            if field not in missing:
                missing.append(field)
    return missing


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.error_code, exc.details)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        409: "ERR_CONFLICT",
        500: "ERR_INTERNAL_SERVER"
    }
    
    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")
    
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, error_code),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handler for Pydantic validation errors.
    
    Required fields that are absent, null or blank are reported as 400 with
    the list of missing names, even when other fields are also invalid. Any
    other validation failure is a 422.
    """
    errors = exc.errors()
    missing = _missing_fields(errors)
    if missing:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(
                "Missing required fields",
                "ERR_MISSING_FIELDS",
                {"fields": missing}
            )
        )
    
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            "Validation error",
            "ERR_VALIDATION",
            {"errors": [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
                for error in errors
            ]}
        )
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    # Runs outside the observability middleware, so take the ID from the request
    logger.exception(
        "Unhandled exception on %s %s", request.method, request.url.path,
        exc_info=exc,
        extra={"correlation_id": getattr(request.state, "correlation_id", "-")}
    )
    
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("An internal server error occurred", "ERR_INTERNAL_SERVER")
    )
