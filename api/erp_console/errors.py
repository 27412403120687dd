# erp_console/errors.py
"""
Errors raised by the console.

Every failure coming back from the ERP backend is turned into ErpApiError with
the message the backend sent (or a Vietnamese default), so routers can render
it unchanged.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

DEFAULT_MESSAGE = "Đã xảy ra lỗi"
CONNECTION_MESSAGE = "Không thể kết nối đến máy chủ"
SESSION_EXPIRED_MESSAGE = "Phiên đăng nhập đã hết hạn, vui lòng đăng nhập lại"


class ErpApiError(Exception):
    """Non-2xx reply or transport failure talking to the ERP backend."""

    def __init__(
        self,
        status_code: int,
        message: str = DEFAULT_MESSAGE,
        code: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code or _default_code(status_code)
        self.details = details

    def to_envelope(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"success": False, "error": error}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status_code}, {self.message!r})"


class AuthenticationRequired(ErpApiError):
    def __init__(self, message: str = SESSION_EXPIRED_MESSAGE):
        super().__init__(401, message, code="UNAUTHORIZED")


class ValidationFailed(ErpApiError):
    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(422, message, code="VALIDATION_ERROR", details=details)


def _default_code(status_code: int) -> str:
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        409: "CONFLICT",
        422: "VALIDATION_ERROR",
        503: "SERVICE_UNAVAILABLE",
    }.get(status_code, "INTERNAL_ERROR" if status_code >= 500 else "ERROR")


def extract_error_message(body: Any, fallback: str = DEFAULT_MESSAGE) -> str:
    """
    Pull the human message out of an error body.

    Order: error.message, error (when a string), message, the body itself when
    it is a non-empty string, then fallback.
    """
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err.strip():
            return err
        if body.get("message"):
            return str(body["message"])
        return fallback
    if isinstance(body, str) and body.strip():
        return body.strip()
    return fallback


def error_from_response(status_code: int, body: Any) -> ErpApiError:
    code = None
    details = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        code = body["error"].get("code")
        details = body["error"].get("details")
    return ErpApiError(status_code, extract_error_message(body), code=code, details=details)
