# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Structured exceptions raised by the SQL Query SDK.

All SDK errors derive from :class:`SqlQueryError` and expose a stable ``code``
(the error category) and an optional ``subcode`` (see
:mod:`~IBMCloud.SqlQuery.core._error_codes`). Errors that happen after a
response was received keep it on the ``response`` attribute.
"""

from __future__ import annotations

import datetime as _dt
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .results import DetailedResponse


class SqlQueryError(Exception):
    """Base structured error for the SQL Query SDK."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
        response: Optional["DetailedResponse"] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.response = response
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(SqlQueryError):
    """Raised for invalid configuration or options, before any request is sent."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class AuthenticationError(SqlQueryError):
    """Raised when an authenticator cannot produce credentials for a request."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="authentication_error", subcode=subcode, details=details, source="client")


class TransportError(SqlQueryError):
    """Raised when the request could not be completed at the network level."""

    def __init__(
        self,
        message: str,
        *,
        subcode: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        is_transient: bool = True,
    ) -> None:
        super().__init__(
            message,
            code="transport_error",
            subcode=subcode,
            details=details,
            source="client",
            is_transient=is_transient,
        )


class DeadlineExceededError(TransportError):
    """Raised when a call's deadline expires or the call is cancelled."""

    def __init__(self, message: str = "deadline exceeded", *, subcode: Optional[str] = None) -> None:
        super().__init__(message, subcode=subcode, is_transient=False)


class DecodeError(SqlQueryError):
    """Raised when a response body is not valid JSON or violates the model schema."""

    def __init__(
        self,
        message: str,
        *,
        subcode: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        response: Optional["DetailedResponse"] = None,
    ) -> None:
        super().__init__(
            message,
            code="decode_error",
            subcode=subcode,
            status_code=response.status_code if response is not None else None,
            details=details,
            source="client",
            response=response,
        )


class HttpError(SqlQueryError):
    """Raised when the service answers with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: bool = False,
        subcode: Optional[str] = None,
        service_error_code: Optional[str] = None,
        service_request_id: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        response: Optional["DetailedResponse"] = None,
    ) -> None:
        d = details or {}
        if service_error_code is not None:
            d["service_error_code"] = service_error_code
        if service_request_id is not None:
            d["service_request_id"] = service_request_id
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        if retry_after is not None:
            d["retry_after"] = retry_after
        super().__init__(
            message,
            code="http_error",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
            is_transient=is_transient,
            response=response,
        )


__all__ = [
    "SqlQueryError",
    "ValidationError",
    "AuthenticationError",
    "TransportError",
    "DeadlineExceededError",
    "DecodeError",
    "HttpError",
]
