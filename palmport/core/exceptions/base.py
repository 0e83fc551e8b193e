"""
Base exception type for PalmPort.

Every domain error carries a machine-readable code and the HTTP status the
API layer renders it with. Subclasses only set ``default_code`` and
``default_http_status``.
"""
from __future__ import annotations

import traceback
from typing import Any, Optional


class ProjectError(Exception):
    """
    Root of all PalmPort errors.

    Attributes:
        message: Human-readable text, sent to clients as ``error``.
        code: Slug such as ``INVALID_STATUS``; defaults to the class default_code.
        http_status: Response status; defaults to the class default_http_status.
        details: Extra context (missing fields, upstream status, ...).
        cause: Underlying exception, kept for logs only.
    """

    default_code: str = "ERROR"
    default_http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.http_status = http_status or self.default_http_status
        self.details: dict[str, Any] = dict(details or {})
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r}, status={self.http_status})"

    def __str__(self) -> str:
        return self.message

    def to_dict(self, *, include_cause: bool = True) -> dict[str, Any]:
        """Body for API responses and structured logs.

        Responses pass ``include_cause=False``; the chained traceback stays in
        the server log.
        """
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        if include_cause and self.cause is not None:
            body["cause"] = str(self.cause)
            body["cause_traceback"] = traceback.format_exception(
                type(self.cause), self.cause, self.cause.__traceback__
            )
        return body
