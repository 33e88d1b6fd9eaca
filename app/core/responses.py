# app/core/responses.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from fastapi import HTTPException, status

# Default error code for each HTTP status when none is given explicitly
STATUS_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
    413: "FILE_TOO_LARGE",
    422: "VALIDATION_ERROR",
    status.HTTP_429_TOO_MANY_REQUESTS: "RATE_LIMIT_EXCEEDED",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "INTERNAL_SERVER_ERROR",
    status.HTTP_503_SERVICE_UNAVAILABLE: "SERVICE_UNAVAILABLE",
}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def format_response(
    success: bool,
    data: Any = None,
    message: str = "",
    error: Union[str, Dict[str, Any], None] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the uniform response envelope.

    `data` is only attached to successful responses and `error` only to
    failed ones, so clients can branch on `success` alone.
    """
    response: Dict[str, Any] = {
        "success": success,
        "message": message,
        "timestamp": utc_timestamp(),
    }
    if success and data is not None:
        response["data"] = data
    if not success and error is not None:
        response["error"] = error
    if meta:
        response["meta"] = meta
    return response


class ApiError(HTTPException):
    """HTTPException carrying a machine-readable error code for the envelope."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error = error or STATUS_ERROR_CODES.get(status_code, "ERROR")
        self.details = details

    def to_envelope(self) -> Dict[str, Any]:
        error: Union[str, Dict[str, Any]] = self.error
        if self.details:
            error = {"type": self.error, "details": self.details}
        return format_response(False, message=self.detail, error=error)
