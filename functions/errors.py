"""Callable error taxonomy."""
from __future__ import annotations

from typing import Any

# Canonical callable error codes and the HTTP status each one maps to.
HTTP_STATUS_BY_CODE: dict[str, int] = {
    "ok": 200,
    "cancelled": 499,
    "unknown": 500,
    "invalid-argument": 400,
    "deadline-exceeded": 504,
    "not-found": 404,
    "already-exists": 409,
    "permission-denied": 403,
    "resource-exhausted": 429,
    "failed-precondition": 400,
    "aborted": 409,
    "out-of-range": 400,
    "unimplemented": 501,
    "internal": 500,
    "unavailable": 503,
    "data-loss": 500,
    "unauthenticated": 401,
}


class HttpsError(Exception):
    """Error raised by a handler and rendered by the hosting layer.

    Args:
        code: One of the keys of ``HTTP_STATUS_BY_CODE``
        message: Human readable message returned to the caller
        details: Optional JSON-serializable extra information
    """

    def __init__(self, code: str, message: str, details: Any = None):
        if code not in HTTP_STATUS_BY_CODE:
            raise ValueError(f"Unknown error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    @property
    def status(self) -> str:
        return self.code.replace("-", "_").upper()

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_CODE[self.code]

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.status, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"HttpsError({self.code!r}, {self.message!r})"
