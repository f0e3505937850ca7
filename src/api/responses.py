"""JSON response bodies for the API.

Every failure body carries `success: false` and a `message`; upload
failures add `error` (file format) or `errors` (structural validation).
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse

from src.services.exceptions import (
    FileFormatError,
    ServiceError,
    StructuralValidationError,
)

FILE_FORMAT_MESSAGE = "Invalid file format or corrupted file"
STRUCTURE_MESSAGE = "Invalid data structure"
NO_FILE_MESSAGE = "No file uploaded"
BULK_UPLOAD_SERVER_ERROR = "Server error during bulk upload"
TEMPLATE_SERVER_ERROR = "Server error while generating template"


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "message": message, **extra}
    return JSONResponse(status_code=status_code, content=body)


def service_error_response(exc: ServiceError) -> JSONResponse:
    """Map a service exception to its HTTP status and body."""
    if isinstance(exc, FileFormatError):
        return error_response(exc.http_status_code, FILE_FORMAT_MESSAGE, error=exc.message)
    if isinstance(exc, StructuralValidationError):
        return error_response(exc.http_status_code, STRUCTURE_MESSAGE, errors=exc.errors)
    return error_response(exc.http_status_code, str(exc))
