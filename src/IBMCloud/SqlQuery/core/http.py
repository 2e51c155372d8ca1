# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
HTTP client with optional retry logic, deadline handling and session support.

This module provides :class:`HttpClient`, a wrapper around the requests library
that adds a toggleable retry policy for transient failures, per-method default
timeouts, caller deadlines/cancellation and optional connection pooling.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Any, Dict, Optional

import requests

from ..common.constants import HEADER_RETRY_AFTER
from ._error_codes import (
    TRANSPORT_CANCELLED,
    TRANSPORT_CONNECTION,
    TRANSPORT_DEADLINE_EXCEEDED,
    TRANSPORT_TIMEOUT,
)
from .deadline import Deadline
from .errors import DeadlineExceededError, TransportError

_logger = logging.getLogger("IBMCloud.SqlQuery.http")

DEFAULT_MAX_RETRIES = 4
DEFAULT_BACKOFF = 1.0
DEFAULT_MAX_RETRY_INTERVAL = 30.0

_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


class HttpClient:
    """
    HTTP client with a configurable retry policy and timeout handling.

    Retries are disabled until :meth:`enable_retries` is called (or the client
    is built with ``enable_retries=True``). When enabled, connection errors are
    retried for every method; read timeouts and transient statuses
    (429, 500, 502, 503, 504) are retried for idempotent methods, and 429 is
    also retried for POST.

    :param retries: Maximum number of retries once enabled. Default is 4.
    :type retries: int or None
    :param backoff: Base delay in seconds between retry attempts. Default is 1.0.
    :type backoff: float or None
    :param timeout: Default per-attempt timeout in seconds. If None, uses per-method defaults.
    :type timeout: float or None
    :param max_backoff: Upper bound for a single retry delay. Default is 30.0.
    :type max_backoff: float or None
    :param jitter: Add +/-25% random variation to retry delays.
    :type jitter: bool
    :param enable_retries: Start with retries enabled.
    :type enable_retries: bool
    :param verify: TLS certificate verification flag passed to requests.
    :type verify: bool
    :param session: Optional requests.Session for connection pooling.
    :type session: requests.Session or None
    """

    def __init__(
        self,
        *,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
        timeout: Optional[float] = None,
        max_backoff: Optional[float] = None,
        jitter: bool = True,
        enable_retries: bool = False,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.max_retries = retries if retries else DEFAULT_MAX_RETRIES
        self.base_delay = backoff if backoff is not None else DEFAULT_BACKOFF
        self.max_backoff = max_backoff if max_backoff else DEFAULT_MAX_RETRY_INTERVAL
        self.default_timeout: Optional[float] = timeout
        self.jitter = jitter
        self.retries_enabled = enable_retries
        self.verify = verify
        self._session = session

        # Transient HTTP status codes that may be retried
        self.transient_status_codes = {429, 500, 502, 503, 504}

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1 if self.retries_enabled else 1

    def enable_retries(self, max_retries: int = 0, max_retry_interval: float = 0) -> None:
        """
        Turn on automatic retries.

        A value of ``0`` for either argument selects the library default
        (4 retries, 30 second maximum interval).
        """
        self.max_retries = max_retries if max_retries > 0 else DEFAULT_MAX_RETRIES
        self.max_backoff = max_retry_interval if max_retry_interval > 0 else DEFAULT_MAX_RETRY_INTERVAL
        self.retries_enabled = True

    def disable_retries(self) -> None:
        """Turn off automatic retries."""
        self.retries_enabled = False

    def clone(self) -> "HttpClient":
        """Return a client with the same settings and no shared session."""
        other = HttpClient(
            retries=self.max_retries,
            backoff=self.base_delay,
            timeout=self.default_timeout,
            max_backoff=self.max_backoff,
            jitter=self.jitter,
            enable_retries=self.retries_enabled,
            verify=self.verify,
        )
        other.transient_status_codes = set(self.transient_status_codes)
        return other

    def _should_retry_status(self, method: str, status_code: int) -> bool:
        if status_code not in self.transient_status_codes:
            return False
        return method in _IDEMPOTENT_METHODS or status_code == 429

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if self._session is not None:
            return self._session.request(method, url, **kwargs)
        return requests.request(method, url, **kwargs)

    def _send_cancellable(self, method: str, url: str, deadline: Deadline, **kwargs: Any) -> requests.Response:
        """Send on a worker thread so that cancelling ``deadline`` abandons the attempt at once."""
        done = threading.Event()
        outcome: Dict[str, Any] = {}

        def run() -> None:
            try:
                outcome["response"] = self._send(method, url, **kwargs)
            except Exception as exc:
                outcome["error"] = exc
            finally:
                done.set()

        unregister = deadline.on_cancel(done.set)
        try:
            threading.Thread(target=run, name="sqlquery-request", daemon=True).start()
            done.wait()
        finally:
            unregister()
        if "error" in outcome:
            raise outcome["error"]
        if "response" not in outcome:
            # Cancelled in flight; the worker's late response is dropped
            deadline.check()
        return outcome["response"]

    def request(self, method: str, url: str, *, deadline: Optional[Deadline] = None, **kwargs: Any) -> requests.Response:
        """
        Execute an HTTP request applying the retry policy and deadline.

        Applies default timeouts based on HTTP method (120s for POST, 30s for others),
        caps each attempt's timeout by the deadline's remaining time, and retries
        transient failures with exponential backoff when retries are enabled.

        :param method: HTTP method (GET, POST, ...).
        :type method: str
        :param url: Target URL for the request.
        :type url: str
        :param deadline: Optional deadline bounding all attempts and backoff sleeps.
            Cancelling it fails an in-flight attempt at once.
        :type deadline: ~IBMCloud.SqlQuery.core.deadline.Deadline or None
        :param kwargs: Additional arguments passed to ``requests.request()``.
        :return: HTTP response object (any status code).
        :rtype: requests.Response
        :raises DeadlineExceededError: If the deadline expires or is cancelled.
        :raises TransportError: If the request fails at the network level.
        """
        m = (method or "").upper()
        if "timeout" not in kwargs:
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            else:
                kwargs["timeout"] = 120 if m == "POST" else 30
        kwargs.setdefault("verify", self.verify)
        base_timeout = kwargs["timeout"]

        attempts = self.max_attempts
        for attempt in range(attempts):
            bound_by_deadline = False
            if deadline is not None:
                deadline.check()
                capped = deadline.cap_timeout(base_timeout)
                bound_by_deadline = capped != base_timeout
                kwargs["timeout"] = max(capped, 0.001)
            try:
                if deadline is not None:
                    response = self._send_cancellable(m, url, deadline, **kwargs)
                else:
                    response = self._send(m, url, **kwargs)
            except requests.exceptions.Timeout as exc:
                if deadline is not None and (bound_by_deadline or deadline.expired or deadline.cancelled):
                    raise DeadlineExceededError(
                        f"context deadline exceeded: {m} {url}", subcode=TRANSPORT_DEADLINE_EXCEEDED
                    ) from exc
                retryable = m in _IDEMPOTENT_METHODS or isinstance(exc, requests.exceptions.ConnectTimeout)
                if not retryable or attempt == attempts - 1:
                    raise TransportError(f"request timed out: {m} {url}", subcode=TRANSPORT_TIMEOUT) from exc
                self._backoff(attempt, deadline, reason=type(exc).__name__)
                continue
            except requests.exceptions.RequestException as exc:
                if deadline is not None and deadline.cancelled:
                    raise DeadlineExceededError(f"context cancelled: {m} {url}", subcode=TRANSPORT_CANCELLED) from exc
                if attempt == attempts - 1:
                    if attempts > 1:
                        _logger.warning("Giving up after %d attempts: %s %s", attempts, m, url)
                    raise TransportError(
                        f"request failed: {m} {url}: {exc}",
                        subcode=TRANSPORT_CONNECTION,
                    ) from exc
                self._backoff(attempt, deadline, reason=type(exc).__name__)
                continue

            if deadline is not None:
                deadline.check()
            if attempt < attempts - 1 and self._should_retry_status(m, response.status_code):
                self._backoff(attempt, deadline, response=response, reason=f"status {response.status_code}")
                continue
            return response

        # This should never be reached due to the logic above
        raise RuntimeError("Unexpected end of retry loop")

    def _backoff(
        self,
        attempt: int,
        deadline: Optional[Deadline],
        response: Optional[requests.Response] = None,
        reason: str = "",
    ) -> None:
        delay = self._calculate_retry_delay(attempt, response)
        _logger.debug("Retrying request (attempt %d/%d) after %s in %.2fs", attempt + 2, self.max_attempts, reason, delay)
        if deadline is not None:
            deadline.sleep(delay)
        else:
            time.sleep(delay)

    def _calculate_retry_delay(self, attempt: int, response: Optional[requests.Response] = None) -> float:
        """
        Calculate the delay before the next retry attempt.

        Priority order:

        1. ``Retry-After`` header in integer seconds, capped at ``max_backoff``.
        2. Exponential backoff ``base_delay * 2**attempt``, capped at ``max_backoff``.
        3. Optional jitter of +/-25%; the result is never negative.

        :param attempt: Zero-based retry attempt number.
        :type attempt: int
        :param response: Response whose headers may carry ``Retry-After``.
        :type response: requests.Response or None
        :return: Delay in seconds.
        :rtype: float
        """
        if response is not None and HEADER_RETRY_AFTER in response.headers:
            try:
                retry_after = int(response.headers[HEADER_RETRY_AFTER])
                return min(retry_after, self.max_backoff)
            except (ValueError, TypeError):
                pass

        delay = min(self.base_delay * (2**attempt), self.max_backoff)

        if self.jitter:
            jitter_range = delay * 0.25
            delay = max(0, delay + random.uniform(-jitter_range, jitter_range))

        return delay

    def use_session(self, session: Optional[requests.Session]) -> None:
        """Route subsequent requests through ``session`` (``None`` for standalone requests)."""
        self._session = session

    def close(self) -> None:
        """Close the pooled session, if any. Safe to call multiple times."""
        if self._session is not None:
            self._session.close()
            self._session = None


__all__ = ["HttpClient", "DEFAULT_MAX_RETRIES", "DEFAULT_MAX_RETRY_INTERVAL"]
