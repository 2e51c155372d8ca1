# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Request construction: URL resolution, path parameters, query, headers and body.
"""

from __future__ import annotations

import gzip
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote, urlsplit

from ..common.constants import CONTENT_TYPE_JSON, HEADER_CONTENT_ENCODING, HEADER_CONTENT_TYPE
from ._error_codes import (
    VALIDATION_REQUIRED_FIELD,
    VALIDATION_SERVICE_URL_INVALID,
    VALIDATION_SERVICE_URL_MISSING,
)
from .errors import ValidationError

ERRORMSG_SERVICE_URL_MISSING = "service URL is empty"
ERRORMSG_SERVICE_URL_INVALID = "error parsing service URL"


def validate_service_url(url: str) -> str:
    """
    Check ``url`` and return it without a trailing slash.

    :raises ValidationError: If the URL has no http(s) scheme or host, or contains
        unresolved template braces.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise ValidationError(ERRORMSG_SERVICE_URL_MISSING, subcode=VALIDATION_SERVICE_URL_MISSING)
    if "{" in candidate or "}" in candidate:
        raise ValidationError(
            f"{ERRORMSG_SERVICE_URL_INVALID}: {candidate!r}",
            subcode=VALIDATION_SERVICE_URL_INVALID,
        )
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise ValidationError(
            f"{ERRORMSG_SERVICE_URL_INVALID}: {candidate!r}",
            subcode=VALIDATION_SERVICE_URL_INVALID,
        ) from exc
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValidationError(
            f"{ERRORMSG_SERVICE_URL_INVALID}: {candidate!r}",
            subcode=VALIDATION_SERVICE_URL_INVALID,
        )
    return candidate.rstrip("/")


@dataclass
class PreparedRequest:
    """Everything needed to hand a request to :class:`~IBMCloud.SqlQuery.core.http.HttpClient`."""

    method: str
    url: str
    params: List[Tuple[str, str]] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    data: Optional[bytes] = None


class RequestBuilder:
    """
    Incrementally builds one HTTP request.

    Example::

        builder = RequestBuilder("GET")
        builder.resolve_request_url(service_url, "/tables/{table_name}", {"table_name": "t1"})
        builder.add_query("instance_crn", crn)
        request = builder.build()
    """

    def __init__(self, method: str) -> None:
        self.method = method.upper()
        self.url: Optional[str] = None
        self.headers: Dict[str, str] = {}
        self.query: List[Tuple[str, str]] = []
        self.body: Optional[bytes] = None
        self.enable_gzip_compression = False

    def resolve_request_url(
        self,
        service_url: Optional[str],
        path: str,
        path_params: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Join ``service_url`` and ``path``, substituting URL-quoted path parameters.

        :raises ValidationError: If the service URL is empty or a path parameter is empty.
        """
        if not service_url:
            raise ValidationError(ERRORMSG_SERVICE_URL_MISSING, subcode=VALIDATION_SERVICE_URL_MISSING)
        for name, value in (path_params or {}).items():
            if not value:
                raise ValidationError(
                    f"path parameter '{name}' is empty",
                    subcode=VALIDATION_REQUIRED_FIELD,
                    details={"field": name},
                )
            path = path.replace("{" + name + "}", quote(str(value), safe=""))
        self.url = service_url.rstrip("/") + path
        return self.url

    def add_header(self, name: str, value: str) -> "RequestBuilder":
        self.headers[name] = value
        return self

    def add_headers(self, headers: Optional[Mapping[str, str]]) -> "RequestBuilder":
        for name, value in (headers or {}).items():
            self.headers[name] = value
        return self

    def add_query(self, name: str, value: Any) -> "RequestBuilder":
        self.query.append((name, str(value)))
        return self

    def set_body_content_json(self, body: Mapping[str, Any]) -> "RequestBuilder":
        self.body = json.dumps(body).encode("utf-8")
        self.headers.setdefault(HEADER_CONTENT_TYPE, CONTENT_TYPE_JSON)
        return self

    def build(self) -> PreparedRequest:
        if self.url is None:
            raise ValidationError(ERRORMSG_SERVICE_URL_MISSING, subcode=VALIDATION_SERVICE_URL_MISSING)
        data = self.body
        headers = dict(self.headers)
        if data is not None and self.enable_gzip_compression:
            data = gzip.compress(data)
            headers[HEADER_CONTENT_ENCODING] = "gzip"
        return PreparedRequest(
            method=self.method,
            url=self.url,
            params=list(self.query),
            headers=headers,
            data=data,
        )


__all__ = ["RequestBuilder", "PreparedRequest", "validate_service_url"]
