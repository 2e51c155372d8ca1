# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Authenticators that stamp credentials onto outgoing requests.

The SDK does not implement any token-exchange protocol itself. Static
credentials are covered by :class:`BasicAuthenticator` and
:class:`BearerTokenAuthenticator`; anything that mints tokens can be plugged
in through an ``azure.core.credentials.TokenCredential`` wrapped in
:class:`TokenCredentialAuthenticator`.
"""

from __future__ import annotations

import base64
import threading
import time
from typing import MutableMapping, Optional, Sequence

from azure.core.credentials import AccessToken, TokenCredential

from ..common.constants import HEADER_AUTHORIZATION
from ._error_codes import VALIDATION_AUTHENTICATOR_INVALID
from .errors import AuthenticationError, ValidationError

AUTHTYPE_NOAUTH = "noauth"
AUTHTYPE_BASIC = "basic"
AUTHTYPE_BEARERTOKEN = "bearertoken"
AUTHTYPE_TOKEN_CREDENTIAL = "tokencredential"


def _has_bad_first_or_last_char(value: str) -> bool:
    return value.startswith(("{", '"')) or value.endswith(("}", '"'))


class Authenticator:
    """Base class for all authenticators."""

    authentication_type: str = ""

    def validate(self) -> None:
        """Raise :class:`ValidationError` if the authenticator is misconfigured."""

    def authenticate(self, headers: MutableMapping[str, str]) -> None:
        """Add credentials to ``headers`` in place."""
        raise NotImplementedError


class NoAuthAuthenticator(Authenticator):
    """Sends requests without credentials (local testing, proxies that inject auth)."""

    authentication_type = AUTHTYPE_NOAUTH

    def authenticate(self, headers: MutableMapping[str, str]) -> None:
        return None


class BasicAuthenticator(Authenticator):
    """
    HTTP basic authentication.

    :param username: User name. Must be non-empty and not wrapped in braces or quotes.
    :type username: :class:`str`
    :param password: Password. Same constraints as ``username``.
    :type password: :class:`str`
    """

    authentication_type = AUTHTYPE_BASIC

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    def validate(self) -> None:
        for name, value in (("username", self.username), ("password", self.password)):
            if not value:
                raise ValidationError(
                    f"The {name} property is required but was not specified.",
                    subcode=VALIDATION_AUTHENTICATOR_INVALID,
                )
            if _has_bad_first_or_last_char(value):
                raise ValidationError(
                    f"The {name} property is invalid. Please remove any surrounding {{, }}, or \" characters.",
                    subcode=VALIDATION_AUTHENTICATOR_INVALID,
                )

    def authenticate(self, headers: MutableMapping[str, str]) -> None:
        raw = f"{self.username}:{self.password}".encode("utf-8")
        headers[HEADER_AUTHORIZATION] = "Basic " + base64.b64encode(raw).decode("ascii")


class BearerTokenAuthenticator(Authenticator):
    """
    Sends a caller-managed bearer token.

    :param bearer_token: Access token sent as ``Authorization: Bearer <token>``.
    :type bearer_token: :class:`str`
    """

    authentication_type = AUTHTYPE_BEARERTOKEN

    def __init__(self, bearer_token: str) -> None:
        self.bearer_token = bearer_token

    def set_bearer_token(self, bearer_token: str) -> None:
        """Replace the token, e.g. after the caller refreshed it."""
        self.bearer_token = bearer_token
        self.validate()

    def validate(self) -> None:
        if not self.bearer_token:
            raise ValidationError(
                "The bearer_token property is required but was not specified.",
                subcode=VALIDATION_AUTHENTICATOR_INVALID,
            )

    def authenticate(self, headers: MutableMapping[str, str]) -> None:
        headers[HEADER_AUTHORIZATION] = f"Bearer {self.bearer_token}"


class TokenCredentialAuthenticator(Authenticator):
    """
    Bearer authentication backed by an Azure Identity style credential.

    Tokens are cached and refreshed ``refresh_margin`` seconds before they expire.
    Errors raised by the credential (for example
    ``azure.core.exceptions.ClientAuthenticationError``) propagate unchanged.

    :param credential: Any object implementing ``TokenCredential.get_token``.
    :type credential: ~azure.core.credentials.TokenCredential
    :param scopes: Scopes passed to ``get_token``.
    :type scopes: :class:`list` of :class:`str`
    :param refresh_margin: Seconds before expiry at which a new token is requested.
    :type refresh_margin: :class:`float`
    """

    authentication_type = AUTHTYPE_TOKEN_CREDENTIAL

    def __init__(
        self,
        credential: TokenCredential,
        scopes: Optional[Sequence[str]] = None,
        refresh_margin: float = 60.0,
    ) -> None:
        self.credential = credential
        self.scopes = tuple(scopes or ())
        self.refresh_margin = refresh_margin
        self._token: Optional[AccessToken] = None
        self._lock = threading.Lock()

    def validate(self) -> None:
        if not isinstance(self.credential, TokenCredential):
            raise ValidationError(
                "credential must implement azure.core.credentials.TokenCredential.",
                subcode=VALIDATION_AUTHENTICATOR_INVALID,
            )

    def _acquire_token(self) -> str:
        with self._lock:
            token = self._token
            if token is None or token.expires_on - self.refresh_margin <= time.time():
                token = self.credential.get_token(*self.scopes)
                self._token = token
        if not getattr(token, "token", None):
            raise AuthenticationError("The credential returned an empty access token.")
        return token.token

    def authenticate(self, headers: MutableMapping[str, str]) -> None:
        headers[HEADER_AUTHORIZATION] = f"Bearer {self._acquire_token()}"


def validate_authenticator(authenticator: Optional[Authenticator]) -> Authenticator:
    """Return ``authenticator`` after checking its type and configuration."""
    if authenticator is None:
        raise ValidationError("authentication information was not properly configured", subcode=VALIDATION_AUTHENTICATOR_INVALID)
    if not isinstance(authenticator, Authenticator):
        raise ValidationError(
            "authenticator must be an IBMCloud.SqlQuery.core.auth.Authenticator instance.",
            subcode=VALIDATION_AUTHENTICATOR_INVALID,
        )
    authenticator.validate()
    return authenticator


__all__ = [
    "Authenticator",
    "NoAuthAuthenticator",
    "BasicAuthenticator",
    "BearerTokenAuthenticator",
    "TokenCredentialAuthenticator",
    "validate_authenticator",
]
