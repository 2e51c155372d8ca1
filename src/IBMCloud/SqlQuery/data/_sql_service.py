# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Low-level SQL Query service client.

:class:`_SqlServiceClient` owns the service URL, instance CRN, authenticator,
retry policy and default headers, and runs the common request protocol for
every operation: build the request, authenticate, send it, map failures to
structured errors and decode the JSON body.
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, TypeVar

import requests

from ..common.constants import (
    CONTENT_TYPE_JSON,
    DEFAULT_SERVICE_NAME,
    DEFAULT_SERVICE_URL,
    HEADER_ACCEPT,
    HEADER_REQUEST_ID,
    HEADER_RETRY_AFTER,
    HEADER_TRANSACTION_ID,
    SERVICE_VERSION,
)
from ..common.headers import get_sdk_headers
from ..core._error_codes import (
    DECODE_EMPTY_BODY,
    DECODE_INVALID_JSON,
    VALIDATION_INSTANCE_CRN_MISSING,
    http_subcode,
    is_transient_status,
)
from ..core._request import PreparedRequest, RequestBuilder, validate_service_url
from ..core.auth import Authenticator, validate_authenticator
from ..core.config import SqlQueryConfig
from ..core.deadline import Deadline
from ..core.errors import DecodeError, HttpError, ValidationError
from ..core.http import HttpClient
from ..core.results import DetailedResponse, OperationResult
from ..core.telemetry import create_telemetry_manager

T = TypeVar("T")

_BODY_EXCERPT_LIMIT = 200


def _service_request_id(headers: Mapping[str, str]) -> Optional[str]:
    return headers.get(HEADER_TRANSACTION_ID) or headers.get(HEADER_REQUEST_ID)


def _error_message(payload: Any, fallback: str) -> Tuple[str, Optional[str]]:
    """Pull ``(message, service_error_code)`` out of a service error body."""
    if not isinstance(payload, dict):
        return fallback, None
    errors = payload.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        first = errors[0]
        message = first.get("message")
        if isinstance(message, str) and message:
            code = first.get("code")
            return message, code if isinstance(code, str) else None
    for key in ("error", "message", "errorMessage"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            code = payload.get("code")
            return value, code if isinstance(code, str) else None
    return fallback, None


def _caller_request_id(*sources: Optional[Mapping[str, str]]) -> Optional[str]:
    """Return the first ``X-Request-ID`` given in ``sources`` (names compared case-insensitively)."""
    wanted = HEADER_REQUEST_ID.lower()
    for headers in sources:
        for name, value in (headers or {}).items():
            if name.lower() == wanted and value:
                return value
    return None


def _retry_after(headers: Mapping[str, str]) -> Optional[int]:
    value = headers.get(HEADER_RETRY_AFTER)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class _SqlServiceClient:
    """
    Shared request pipeline for the SQL Query service.

    :param instance_crn: CRN of the SQL Query instance; sent with every request.
    :type instance_crn: str
    :param authenticator: Authenticator applied to every request.
    :type authenticator: ~IBMCloud.SqlQuery.core.auth.Authenticator
    :param service_url: Base URL; defaults to :data:`~IBMCloud.SqlQuery.common.constants.DEFAULT_SERVICE_URL`.
    :type service_url: str or None
    :param config: HTTP tuning and feature toggles.
    :type config: ~IBMCloud.SqlQuery.core.config.SqlQueryConfig or None
    :param service_name: Name reported in the SDK analytics header.
    :type service_name: str
    :param session: Optional pooled session.
    :type session: requests.Session or None

    :raises ValidationError: If ``instance_crn``, ``authenticator`` or ``service_url`` is invalid.
    """

    def __init__(
        self,
        instance_crn: str,
        authenticator: Authenticator,
        service_url: Optional[str] = None,
        config: Optional[SqlQueryConfig] = None,
        *,
        service_name: str = DEFAULT_SERVICE_NAME,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not isinstance(instance_crn, str) or not instance_crn.strip():
            raise ValidationError("instance_crn is required", subcode=VALIDATION_INSTANCE_CRN_MISSING)
        self.instance_crn = instance_crn
        self.authenticator = validate_authenticator(authenticator)
        self.service_url = validate_service_url(service_url if service_url is not None else DEFAULT_SERVICE_URL)
        self.service_name = service_name or DEFAULT_SERVICE_NAME
        self.config = config or SqlQueryConfig.from_env()
        self.default_headers: Dict[str, str] = {}
        self.enable_gzip = self.config.enable_gzip
        self.http = HttpClient(
            retries=self.config.http_retries,
            backoff=self.config.http_backoff,
            timeout=self.config.http_timeout,
            max_backoff=self.config.http_max_backoff,
            jitter=self.config.http_jitter if self.config.http_jitter is not None else True,
            enable_retries=self.config.enable_retries,
            verify=not self.config.disable_ssl_verification,
            session=session,
        )
        self._telemetry = create_telemetry_manager(self.config.telemetry)

    # ------------------------------------------------------------- configuration

    def set_service_url(self, url: str) -> None:
        self.service_url = validate_service_url(url)

    def set_default_headers(self, headers: Optional[Mapping[str, str]]) -> None:
        self.default_headers = dict(headers or {})

    def clone(self) -> "_SqlServiceClient":
        """Copy with its own headers, URL and HTTP client; the authenticator is shared."""
        other = _SqlServiceClient.__new__(_SqlServiceClient)
        other.instance_crn = self.instance_crn
        other.authenticator = self.authenticator
        other.service_url = self.service_url
        other.service_name = self.service_name
        other.config = self.config
        other.default_headers = dict(self.default_headers)
        other.enable_gzip = self.enable_gzip
        other.http = self.http.clone()
        other._telemetry = self._telemetry
        return other

    def close(self) -> None:
        self.http.close()

    # ------------------------------------------------------------------ requests

    def _build(
        self,
        operation_id: str,
        method: str,
        path: str,
        path_params: Optional[Mapping[str, str]],
        query: Optional[Mapping[str, Any]],
        option_headers: Optional[Mapping[str, str]],
        body: Optional[Mapping[str, Any]],
        client_request_id: str,
    ) -> PreparedRequest:
        builder = RequestBuilder(method)
        builder.enable_gzip_compression = self.enable_gzip
        builder.resolve_request_url(self.service_url, path, path_params)

        builder.add_headers(self.default_headers)
        builder.add_headers(get_sdk_headers(self.service_name, SERVICE_VERSION, operation_id))
        builder.add_header(HEADER_ACCEPT, CONTENT_TYPE_JSON)
        builder.add_headers(option_headers)
        for name in [n for n in builder.headers if n.lower() == HEADER_REQUEST_ID.lower()]:
            del builder.headers[name]
        builder.add_header(HEADER_REQUEST_ID, client_request_id)

        builder.add_query("instance_crn", self.instance_crn)
        for name, value in (query or {}).items():
            if value is not None:
                builder.add_query(name, getattr(value, "value", value))

        if body is not None:
            builder.set_body_content_json(body)
        return builder.build()

    def _invoke(
        self,
        operation_id: str,
        method: str,
        path: str,
        decoder: Callable[[Dict[str, Any]], T],
        *,
        path_params: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None,
        option_headers: Optional[Mapping[str, str]] = None,
        body: Optional[Mapping[str, Any]] = None,
        deadline: Optional[Deadline] = None,
    ) -> OperationResult[T]:
        """
        Run one operation end to end.

        :param operation_id: Operation name, e.g. ``"GetSqlJob"``; used in the
            analytics header, telemetry and error messages.
        :param decoder: ``from_dict`` of the result model.
        :return: The decoded model wrapped with its raw response.
        :raises ValidationError: If the request cannot be built.
        :raises HttpError: If the service answers with a non-2xx status.
        :raises DecodeError: If the body is empty, not JSON, or violates the model.
        :raises TransportError: If the request fails at the network level.
        """
        client_request_id = _caller_request_id(option_headers, self.default_headers) or str(uuid.uuid4())
        request = self._build(
            operation_id, method, path, path_params, query, option_headers, body, client_request_id
        )
        self.authenticator.authenticate(request.headers)
        for name, value in self._telemetry.get_additional_headers().items():
            request.headers.setdefault(name, value)

        started = time.perf_counter()
        with self._telemetry.trace_request(
            operation_id, request.method, request.url, client_request_id, self.instance_crn
        ) as ctx:
            r = self.http.request(
                request.method,
                request.url,
                params=request.params,
                headers=request.headers,
                data=request.data,
                deadline=deadline,
            )
            service_request_id = _service_request_id(r.headers)
            self._telemetry.record_response(
                ctx, r.status_code, service_request_id=service_request_id, response_size=len(r.content or b"")
            )
            detailed = DetailedResponse(
                status_code=r.status_code,
                headers=r.headers,
                raw_text=r.text or "",
                client_request_id=client_request_id,
                service_request_id=service_request_id,
                timing_ms=(time.perf_counter() - started) * 1000,
            )
            if not 200 <= r.status_code < 300:
                raise self._http_error(operation_id, r, detailed)
            result = self._decode(operation_id, detailed, decoder)
        detailed.result = result
        return OperationResult(result, detailed)

    def _http_error(self, operation_id: str, r: requests.Response, detailed: DetailedResponse) -> HttpError:
        try:
            payload = r.json()
        except ValueError:
            payload = None
        fallback = r.reason or f"HTTP {r.status_code}"
        message, service_code = _error_message(payload, fallback)
        excerpt = (detailed.raw_text or "")[:_BODY_EXCERPT_LIMIT] or None
        return HttpError(
            f"{operation_id} failed with HTTP {r.status_code}: {message}",
            status_code=r.status_code,
            is_transient=is_transient_status(r.status_code),
            subcode=http_subcode(r.status_code),
            service_error_code=service_code,
            service_request_id=detailed.service_request_id,
            body_excerpt=excerpt,
            retry_after=_retry_after(r.headers),
            details={"operation": operation_id},
            response=detailed,
        )

    def _decode(self, operation_id: str, detailed: DetailedResponse, decoder: Callable[[Dict[str, Any]], T]) -> T:
        text = detailed.raw_text
        if not text or not text.strip():
            raise DecodeError(
                f"{operation_id}: response body is empty",
                subcode=DECODE_EMPTY_BODY,
                details={"operation": operation_id},
                response=detailed,
            )
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise DecodeError(
                f"{operation_id}: response body is not valid JSON: {exc}",
                subcode=DECODE_INVALID_JSON,
                details={"operation": operation_id},
                response=detailed,
            ) from exc
        try:
            return decoder(payload)
        except DecodeError as exc:
            exc.response = detailed
            exc.status_code = detailed.status_code
            exc.details.setdefault("operation", operation_id)
            raise


__all__ = []
