# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Client configuration and external (environment) service settings.

:class:`SqlQueryConfig` carries HTTP tuning and feature toggles.
:func:`load_service_settings` reads the ``<SERVICE_NAME>_*`` variables once,
at startup, into an explicit :class:`ServiceSettings` value that is then
handed to the client. Nothing inside the client reads the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Mapping, Optional

from ..common.constants import DEFAULT_SERVICE_NAME
from ._error_codes import VALIDATION_AUTH_TYPE_UNSUPPORTED, VALIDATION_CONFIG_VALUE
from .auth import (
    AUTHTYPE_BASIC,
    AUTHTYPE_BEARERTOKEN,
    AUTHTYPE_NOAUTH,
    Authenticator,
    BasicAuthenticator,
    BearerTokenAuthenticator,
    NoAuthAuthenticator,
)
from .errors import ValidationError

if TYPE_CHECKING:
    from .telemetry import TelemetryConfig


@dataclass(frozen=True)
class SqlQueryConfig:
    """
    Configuration settings for SQL Query client operations.

    :param http_retries: Maximum number of retries once retries are enabled (default: 4).
    :type http_retries: int or None
    :param http_backoff: Base delay in seconds for exponential backoff (default: 1.0).
    :type http_backoff: float or None
    :param http_max_backoff: Maximum delay between retry attempts in seconds (default: 30.0).
    :type http_max_backoff: float or None
    :param http_timeout: Per-attempt request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param http_jitter: Whether to add jitter to retry delays (default: True).
    :type http_jitter: bool or None
    :param enable_retries: Whether automatic retries are on when the client is created.
    :type enable_retries: bool
    :param enable_gzip: Whether request bodies are gzip-compressed.
    :type enable_gzip: bool
    :param disable_ssl_verification: Skip TLS certificate verification (testing only).
    :type disable_ssl_verification: bool
    :param telemetry: Optional logging/tracing configuration.
    :type telemetry: ~IBMCloud.SqlQuery.core.telemetry.TelemetryConfig or None
    """

    # HTTP retry and resilience configuration
    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_max_backoff: Optional[float] = None
    http_timeout: Optional[float] = None
    http_jitter: Optional[bool] = None

    enable_retries: bool = False
    enable_gzip: bool = False
    disable_ssl_verification: bool = False

    telemetry: Optional["TelemetryConfig"] = field(default=None, compare=False)

    @classmethod
    def from_env(cls) -> "SqlQueryConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~IBMCloud.SqlQuery.core.config.SqlQueryConfig
        """
        return cls(
            http_retries=None,  # Will default to 4 in HttpClient
            http_backoff=None,  # Will default to 1.0 in HttpClient
            http_max_backoff=None,  # Will default to 30.0 in HttpClient
            http_timeout=None,  # Will use method-dependent defaults in HttpClient
            http_jitter=None,  # Will default to True in HttpClient
        )


@dataclass(frozen=True)
class ServiceSettings:
    """
    External settings for one service, as read by :func:`load_service_settings`.

    :param service_name: Configuration key the settings were read for.
    :param url: Service URL override, if any.
    :param authenticator: Authenticator built from the ``AUTH_TYPE`` settings, if any.
    :param config: Client configuration derived from the ``ENABLE_*`` settings.
    """

    service_name: str = DEFAULT_SERVICE_NAME
    url: Optional[str] = None
    authenticator: Optional[Authenticator] = None
    config: SqlQueryConfig = field(default_factory=SqlQueryConfig)


def _env_prefix(service_name: str) -> str:
    return service_name.upper().replace("-", "_") + "_"


def _parse_bool(name: str, value: str) -> bool:
    v = value.strip().lower()
    if v in ("true", "1", "yes", "on"):
        return True
    if v in ("false", "0", "no", "off", ""):
        return False
    raise ValidationError(f"{name} must be a boolean, got {value!r}", subcode=VALIDATION_CONFIG_VALUE)


def _parse_number(name: str, value: str, kind=int):
    try:
        parsed = kind(value.strip())
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {value!r}", subcode=VALIDATION_CONFIG_VALUE) from None
    if parsed < 0:
        raise ValidationError(f"{name} must be >= 0, got {value!r}", subcode=VALIDATION_CONFIG_VALUE)
    return parsed


def _authenticator_from_settings(prefix: str, props: Mapping[str, str]) -> Optional[Authenticator]:
    auth_type = props.get(prefix + "AUTH_TYPE")
    if auth_type is None:
        return None
    kind = auth_type.strip().lower()
    if kind == AUTHTYPE_NOAUTH:
        return NoAuthAuthenticator()
    if kind == AUTHTYPE_BASIC:
        return BasicAuthenticator(props.get(prefix + "USERNAME", ""), props.get(prefix + "PASSWORD", ""))
    if kind == AUTHTYPE_BEARERTOKEN:
        return BearerTokenAuthenticator(props.get(prefix + "BEARER_TOKEN", ""))
    raise ValidationError(
        f"Unrecognized authentication type: {auth_type}",
        subcode=VALIDATION_AUTH_TYPE_UNSUPPORTED,
        details={"supported": [AUTHTYPE_NOAUTH, AUTHTYPE_BASIC, AUTHTYPE_BEARERTOKEN]},
    )


def load_service_settings(
    service_name: str = DEFAULT_SERVICE_NAME,
    environ: Optional[Mapping[str, str]] = None,
) -> ServiceSettings:
    """
    Read ``<SERVICE_NAME>_*`` settings from ``environ`` (default: ``os.environ``).

    Recognized keys: ``URL``, ``AUTH_TYPE`` (``noauth``, ``basic``, ``bearerToken``),
    ``USERNAME``, ``PASSWORD``, ``BEARER_TOKEN``, ``ENABLE_GZIP``,
    ``ENABLE_RETRIES``, ``MAX_RETRIES``, ``RETRY_INTERVAL`` and ``DISABLE_SSL``.

    :raises ValidationError: If ``AUTH_TYPE`` is not supported or a value cannot be parsed.
    """
    props = os.environ if environ is None else environ
    prefix = _env_prefix(service_name or DEFAULT_SERVICE_NAME)

    config = SqlQueryConfig.from_env()
    if prefix + "ENABLE_GZIP" in props:
        config = replace(config, enable_gzip=_parse_bool(prefix + "ENABLE_GZIP", props[prefix + "ENABLE_GZIP"]))
    if prefix + "DISABLE_SSL" in props:
        config = replace(
            config,
            disable_ssl_verification=_parse_bool(prefix + "DISABLE_SSL", props[prefix + "DISABLE_SSL"]),
        )
    if prefix + "ENABLE_RETRIES" in props:
        config = replace(config, enable_retries=_parse_bool(prefix + "ENABLE_RETRIES", props[prefix + "ENABLE_RETRIES"]))
    if prefix + "MAX_RETRIES" in props:
        config = replace(config, http_retries=_parse_number(prefix + "MAX_RETRIES", props[prefix + "MAX_RETRIES"]) or None)
    if prefix + "RETRY_INTERVAL" in props:
        interval = _parse_number(prefix + "RETRY_INTERVAL", props[prefix + "RETRY_INTERVAL"], float)
        config = replace(config, http_max_backoff=interval or None)

    return ServiceSettings(
        service_name=service_name,
        url=props.get(prefix + "URL") or None,
        authenticator=_authenticator_from_settings(prefix, props),
        config=config,
    )


__all__ = ["SqlQueryConfig", "ServiceSettings", "load_service_settings"]
