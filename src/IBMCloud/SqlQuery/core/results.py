# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Result types for SQL Query SDK operations.

- :class:`DetailedResponse`: the raw HTTP response metadata of one call.
- :class:`SqlQueryResponse`: decoded result plus a telemetry dictionary.
- :class:`OperationResult`: wrapper returned by every operation. It behaves
  like the decoded model (attribute access, iteration, equality) and exposes
  the raw response through ``.response`` and ``.with_detail_response()``.

Example::

    job = client.get_sql_job(GetSqlJobOptions(job_id))
    print(job.status)                    # forwarded to SqlJobInfoFull
    print(job.response.status_code)      # 200

    detail = job.with_detail_response()
    print(detail.telemetry["timing_ms"])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


@dataclass
class DetailedResponse:
    """
    HTTP response metadata for one SDK call.

    :param status_code: HTTP status code.
    :type status_code: :class:`int`
    :param headers: Response headers (case-insensitive mapping from requests).
    :type headers: :class:`dict`
    :param raw_text: Undecoded response body.
    :type raw_text: :class:`str`
    :param result: The decoded model, set once decoding succeeded.
    :param client_request_id: Request id sent in ``X-Request-ID``.
    :type client_request_id: :class:`str` | None
    :param service_request_id: Transaction id returned by the service.
    :type service_request_id: :class:`str` | None
    :param timing_ms: Duration of the call including retries.
    :type timing_ms: :class:`float` | None
    """

    status_code: int
    headers: Any = field(default_factory=dict)
    raw_text: str = ""
    result: Any = None
    client_request_id: Optional[str] = None
    service_request_id: Optional[str] = None
    timing_ms: Optional[float] = None

    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name) if self.headers is not None else None


@dataclass
class SqlQueryResponse(Generic[T]):
    """
    Decoded result plus telemetry.

    :param result: The decoded model.
    :param telemetry: ``client_request_id``, ``service_request_id``,
        ``http_status_code`` and ``timing_ms``.
    :type telemetry: :class:`dict`
    """

    result: T
    telemetry: Dict[str, Any] = field(default_factory=dict)


class OperationResult(Generic[T]):
    """
    Wrapper returned by every operation.

    Attribute access, iteration, indexing, length, truthiness and equality are
    forwarded to the decoded model so the wrapper can be used in its place.

    :param result: The decoded model.
    :param response: Raw response metadata.
    :type response: :class:`DetailedResponse`
    """

    __slots__ = ("_result", "_response")

    def __init__(self, result: T, response: DetailedResponse) -> None:
        self._result = result
        self._response = response

    @property
    def value(self) -> T:
        """The decoded model."""
        return self._result

    @property
    def response(self) -> DetailedResponse:
        """Raw response metadata."""
        return self._response

    def with_detail_response(self) -> SqlQueryResponse[T]:
        """Return the result together with its telemetry."""
        telemetry: Dict[str, Any] = {
            "client_request_id": self._response.client_request_id,
            "service_request_id": self._response.service_request_id,
            "http_status_code": self._response.status_code,
            "timing_ms": self._response.timing_ms,
        }
        return SqlQueryResponse(result=self._result, telemetry=telemetry)

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails; slots are resolved first.
        if name.startswith("__") or name in OperationResult.__slots__:
            raise AttributeError(name)
        return getattr(self._result, name)

    def __iter__(self) -> Iterator:
        return iter(self._result)  # type: ignore[call-overload]

    def __getitem__(self, key: Any) -> Any:
        return self._result[key]  # type: ignore[index]

    def __len__(self) -> int:
        return len(self._result)  # type: ignore[arg-type]

    def __bool__(self) -> bool:
        return self._result is not None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OperationResult):
            return self._result == other._result
        return self._result == other

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return str(self._result)

    def __repr__(self) -> str:
        return f"OperationResult({self._result!r})"


__all__ = ["DetailedResponse", "SqlQueryResponse", "OperationResult"]
