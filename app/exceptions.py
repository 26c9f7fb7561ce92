from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class ValidationError(APIException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=400, detail=detail)


class AuthError(APIException):
    """401 when credentials are missing, 403 when they are present but invalid."""

    def __init__(self, detail: str = "Invalid or expired token", status_code: int = 403):
        super().__init__(status_code=status_code, detail=detail)


class NotFoundError(APIException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class PayloadTooLargeError(APIException):
    def __init__(self, detail: str = "Request entity too large"):
        super().__init__(status_code=413, detail=detail)


class UpstreamError(APIException):
    def __init__(self, detail: str = "Processing failed"):
        super().__init__(status_code=500, detail=detail)


class StorageError(APIException):
    def __init__(self, detail: str = "Database error"):
        super().__init__(status_code=500, detail=detail)


class ConfigurationError(RuntimeError):
    pass


def create_error_response(error_message: str) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    # HTTPBearer reports a missing header as 403 "Not authenticated"
    if exc.status_code == 403 and "Not authenticated" in str(exc.detail):
        return JSONResponse(
            status_code=401,
            content=create_error_response("Access token required")
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = "Invalid request"
    if errors:
        loc = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        detail = f"Invalid request: {loc} {errors[0].get('msg', '')}".strip()
    return JSONResponse(status_code=400, content=create_error_response(detail))
