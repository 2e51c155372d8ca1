# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from typing import Mapping, Optional

import requests

from .common.constants import DEFAULT_SERVICE_NAME
from .core._error_codes import VALIDATION_REGION_UNSUPPORTED
from .core.auth import Authenticator
from .core.config import SqlQueryConfig, load_service_settings
from .core.deadline import Deadline
from .core.errors import ValidationError
from .core.results import OperationResult
from .data._sql_service import _SqlServiceClient
from .models.options import (
    GetSqlJobOptions,
    GetTableOptions,
    ListSqlJobsOptions,
    ListTablesOptions,
    SubmitSqlJobOptions,
)
from .models.sql_job import SqlJobInfoFull, SqlJobInfoList, SqlJobInfoShort
from .models.table_info import TableInformation, TableList
from .operations.sql_jobs import SqlJobOperations
from .operations.tables import TableOperations


def get_service_url_for_region(region: str) -> str:
    """
    Return the service URL for ``region``.

    The SQL Query API is served from a single global endpoint, so this always fails.

    :raises ValidationError: Always.
    """
    raise ValidationError(
        "service does not support regional URLs",
        subcode=VALIDATION_REGION_UNSUPPORTED,
        details={"region": region},
    )


class SqlQueryClient:
    """
    High-level client for the SQL Query service.

    Runs SQL statements against data in object storage as asynchronous jobs and
    lists or describes the tables registered in the instance's catalog. Every
    request is scoped to one instance through its CRN.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager enables connection pooling and
        releases it on exit::

            with SqlQueryClient(instance_crn, authenticator) as client:
                job = client.sql_jobs.submit("SELECT 1 INTO cos://us-geo/bucket/out STORED AS CSV")

    The client provides two API styles:

    **Namespace API**:
        - ``client.tables``: catalog operations (``list``, ``get``)
        - ``client.sql_jobs``: job operations (``submit``, ``list``, ``get``, ``wait``)

    **Options API**:
        One method per service operation, each taking a single options value:
        :meth:`list_tables`, :meth:`get_table`, :meth:`submit_sql_job`,
        :meth:`list_sql_jobs` and :meth:`get_sql_job`.

    Every call returns an :class:`~IBMCloud.SqlQuery.core.results.OperationResult`
    that behaves like the decoded model and carries the raw response, and
    raises a :class:`~IBMCloud.SqlQuery.core.errors.SqlQueryError` subclass on failure.

    :param instance_crn: CRN of the SQL Query instance.
    :type instance_crn: :class:`str`
    :param authenticator: Authenticator for all requests.
    :type authenticator: ~IBMCloud.SqlQuery.core.auth.Authenticator
    :param service_url: Base URL. Defaults to ``https://api.sql-query.cloud.ibm.com/v2``.
    :type service_url: :class:`str` or None
    :param config: HTTP tuning, retry, gzip and telemetry settings.
    :type config: ~IBMCloud.SqlQuery.core.config.SqlQueryConfig or None
    :param service_name: Name reported in the SDK analytics header.
    :type service_name: :class:`str`

    :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``instance_crn`` is empty,
        the authenticator is missing or invalid, or ``service_url`` is malformed.

    Example::

        from IBMCloud.SqlQuery import SqlQueryClient, BearerTokenAuthenticator
        from IBMCloud.SqlQuery.models.options import GetSqlJobOptions

        client = SqlQueryClient(instance_crn, BearerTokenAuthenticator(token))
        job = client.get_sql_job(GetSqlJobOptions(job_id="abc"))
        print(job.status, job.response.status_code)
    """

    def __init__(
        self,
        instance_crn: str,
        authenticator: Authenticator,
        *,
        service_url: Optional[str] = None,
        config: Optional[SqlQueryConfig] = None,
        service_name: str = DEFAULT_SERVICE_NAME,
    ) -> None:
        self._config = config or SqlQueryConfig.from_env()
        self._service = _SqlServiceClient(
            instance_crn,
            authenticator,
            service_url,
            self._config,
            service_name=service_name,
        )
        self._session: Optional[requests.Session] = None

        # Initialize operation namespaces
        self.tables = TableOperations(self)
        self.sql_jobs = SqlJobOperations(self)

    @classmethod
    def from_external_config(
        cls,
        instance_crn: str,
        *,
        service_name: str = DEFAULT_SERVICE_NAME,
        service_url: Optional[str] = None,
        authenticator: Optional[Authenticator] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "SqlQueryClient":
        """
        Build a client from ``<SERVICE_NAME>_*`` environment settings.

        The settings are read once, here. Explicit ``service_url`` and
        ``authenticator`` arguments take precedence over the external values.

        :param environ: Mapping to read instead of ``os.environ``.
        :type environ: :class:`dict` or None

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If the settings name an
            unsupported ``AUTH_TYPE`` or no authenticator is available.

        Example::

            # SQL_AUTH_TYPE=bearerToken SQL_BEARER_TOKEN=... SQL_ENABLE_RETRIES=true
            client = SqlQueryClient.from_external_config(instance_crn)
        """
        settings = load_service_settings(service_name, environ)
        return cls(
            instance_crn,
            authenticator if authenticator is not None else settings.authenticator,
            service_url=service_url if service_url is not None else settings.url,
            config=settings.config,
            service_name=service_name,
        )

    def __enter__(self) -> "SqlQueryClient":
        """
        Enter the context manager.

        Creates an HTTP session for connection pooling. All operations within
        the context reuse this session.
        """
        if self._session is None:
            self._session = requests.Session()
            self._service.http.use_session(self._session)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the pooled HTTP session, if any. Safe to call multiple times.

        The client remains usable afterwards; requests are sent without pooling.
        """
        self._service.close()
        self._session = None

    def _get_service(self) -> _SqlServiceClient:
        return self._service

    # ------------------------------------------------------------- configuration

    @property
    def instance_crn(self) -> str:
        return self._service.instance_crn

    @property
    def authenticator(self) -> Authenticator:
        return self._service.authenticator

    def set_service_url(self, url: str) -> None:
        """
        Point the client at another service URL.

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``url`` is malformed.
        """
        self._service.set_service_url(url)

    def get_service_url(self) -> str:
        return self._service.service_url

    def set_default_headers(self, headers: Optional[Mapping[str, str]]) -> None:
        """Replace the headers sent with every request (option headers still win)."""
        self._service.set_default_headers(headers)

    def set_enable_gzip_compression(self, enable_gzip: bool) -> None:
        self._service.enable_gzip = bool(enable_gzip)

    def get_enable_gzip_compression(self) -> bool:
        return self._service.enable_gzip

    def enable_retries(self, max_retries: int = 0, max_retry_interval: float = 0) -> None:
        """
        Turn on automatic retries of transient failures.

        :param max_retries: Maximum retries per call; ``0`` selects the default (4).
        :type max_retries: :class:`int`
        :param max_retry_interval: Maximum delay between retries in seconds; ``0``
            selects the default (30).
        :type max_retry_interval: :class:`float`
        """
        self._service.http.enable_retries(max_retries, max_retry_interval)

    def disable_retries(self) -> None:
        self._service.http.disable_retries()

    def clone(self) -> "SqlQueryClient":
        """
        Return an independent copy of this client.

        The copy has its own URL, default headers, gzip flag, retry policy and
        HTTP client, and shares the authenticator instance. Use one clone per
        thread when configuration is changed at runtime.
        """
        other = SqlQueryClient.__new__(SqlQueryClient)
        other._config = self._config
        other._service = self._service.clone()
        other._session = None
        other.tables = TableOperations(other)
        other.sql_jobs = SqlJobOperations(other)
        return other

    # ---------------- Options API: one method per service operation ----------------

    def list_tables(
        self, options: ListTablesOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[TableList]:
        """
        List the tables in the catalog.

        :param options: Filters and headers; use ``ListTablesOptions()`` for no filters.
        :type options: ~IBMCloud.SqlQuery.models.options.ListTablesOptions
        :param deadline: Optional deadline bounding the call.
        :type deadline: ~IBMCloud.SqlQuery.core.deadline.Deadline or None

        :rtype: :class:`~IBMCloud.SqlQuery.core.results.OperationResult` [TableList]

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``options`` is None.
        """
        return self.tables.list_with_options(options, deadline=deadline)

    def get_table(
        self, options: GetTableOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[TableInformation]:
        """
        Get the schema of one table.

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``options`` is None or
            ``table_name`` is unset.
        """
        return self.tables.get_with_options(options, deadline=deadline)

    def submit_sql_job(
        self, options: SubmitSqlJobOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[SqlJobInfoShort]:
        """
        Submit an SQL statement for asynchronous execution.

        The request body holds ``statement`` and, only when set, ``resultset_target``.

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``options`` is None or
            ``statement`` is unset.
        """
        return self.sql_jobs.submit_with_options(options, deadline=deadline)

    def list_sql_jobs(
        self, options: ListSqlJobsOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[SqlJobInfoList]:
        """List the most recent jobs of the instance."""
        return self.sql_jobs.list_with_options(options, deadline=deadline)

    def get_sql_job(
        self, options: GetSqlJobOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[SqlJobInfoFull]:
        """
        Get full information about one job.

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``options`` is None or
            ``job_id`` is unset.
        """
        return self.sql_jobs.get_with_options(options, deadline=deadline)


__all__ = ["SqlQueryClient", "get_service_url_for_region"]
