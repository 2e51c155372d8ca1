# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""SQL job operations namespace for the SQL Query SDK."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Dict, Optional

from ..core.deadline import Deadline
from ..core.results import OperationResult
from ..models.options import (
    GetSqlJobOptions,
    ListSqlJobsOptions,
    SubmitSqlJobOptions,
    validate_options,
)
from ..models.sql_job import SqlJobInfoFull, SqlJobInfoList, SqlJobInfoShort

if TYPE_CHECKING:
    from ..client import SqlQueryClient


__all__ = ["SqlJobOperations"]

_logger = logging.getLogger("IBMCloud.SqlQuery.sql_jobs")


class SqlJobOperations:
    """Namespace for SQL job operations.

    Accessed via ``client.sql_jobs``. Submits statements, lists recent jobs,
    fetches job details and waits for jobs to finish.

    :param client: The parent :class:`~IBMCloud.SqlQuery.client.SqlQueryClient` instance.
    :type client: ~IBMCloud.SqlQuery.client.SqlQueryClient

    Example::

        job = client.sql_jobs.submit(
            "SELECT * FROM cos://us-geo/sql/customers.csv "
            "INTO cos://us-geo/my-bucket/results STORED AS CSV"
        )
        final = client.sql_jobs.wait(job.job_id, deadline=Deadline(timeout=300))
        if final.is_failed:
            print(final.error, final.error_message)
        else:
            print(final.resultset_location)
    """

    def __init__(self, client: SqlQueryClient) -> None:
        self._client = client

    # ----------------------------------------------------------------- submit

    def submit(
        self,
        statement: str,
        *,
        resultset_target: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        deadline: Optional[Deadline] = None,
    ) -> OperationResult[SqlJobInfoShort]:
        """Submit an SQL statement for asynchronous execution.

        :param statement: The SQL statement. Use an ``INTO`` clause to choose the
            result location.
        :type statement: :class:`str`
        :param resultset_target: Deprecated target URI for the result set; sent only when set.
        :type resultset_target: :class:`str` or None
        :param headers: Extra request headers.
        :type headers: :class:`dict` or None
        :param deadline: Optional deadline bounding the call.
        :type deadline: ~IBMCloud.SqlQuery.core.deadline.Deadline or None

        :return: The new job's id and initial status.
        :rtype: :class:`~IBMCloud.SqlQuery.core.results.OperationResult` [SqlJobInfoShort]

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``statement`` is empty.
        :raises ~IBMCloud.SqlQuery.core.errors.HttpError: If the service rejects the statement.
        """
        options = SubmitSqlJobOptions(statement=statement, resultset_target=resultset_target, headers=headers)
        return self.submit_with_options(options, deadline=deadline)

    def submit_with_options(
        self, options: SubmitSqlJobOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[SqlJobInfoShort]:
        validate_options(options, SubmitSqlJobOptions)
        return self._client._get_service()._invoke(
            "SubmitSqlJob",
            "POST",
            "/sql_jobs",
            SqlJobInfoShort.from_dict,
            option_headers=options.headers,
            body=options.to_body(),
            deadline=deadline,
        )

    # ------------------------------------------------------------------- list

    def list(
        self,
        *,
        headers: Optional[Dict[str, str]] = None,
        deadline: Optional[Deadline] = None,
    ) -> OperationResult[SqlJobInfoList]:
        """List the most recent jobs of the instance.

        :return: Recent jobs; iterating yields
            :class:`~IBMCloud.SqlQuery.models.sql_job.SqlJobInfoShort` entries.
        :rtype: :class:`~IBMCloud.SqlQuery.core.results.OperationResult` [SqlJobInfoList]
        """
        return self.list_with_options(ListSqlJobsOptions(headers=headers), deadline=deadline)

    def list_with_options(
        self, options: ListSqlJobsOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[SqlJobInfoList]:
        validate_options(options, ListSqlJobsOptions)
        return self._client._get_service()._invoke(
            "ListSqlJobs",
            "GET",
            "/sql_jobs",
            SqlJobInfoList.from_dict,
            option_headers=options.headers,
            deadline=deadline,
        )

    # -------------------------------------------------------------------- get

    def get(
        self,
        job_id: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        deadline: Optional[Deadline] = None,
    ) -> OperationResult[SqlJobInfoFull]:
        """Get full information about one job.

        A job that failed on the service is returned normally with ``status``
        ``failed`` and the reason in ``error`` / ``error_message``.

        :param job_id: Job identifier returned by :meth:`submit`.
        :type job_id: :class:`str`

        :rtype: :class:`~IBMCloud.SqlQuery.core.results.OperationResult` [SqlJobInfoFull]

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``job_id`` is empty.
        :raises ~IBMCloud.SqlQuery.core.errors.HttpError: If the job does not exist (404)
            or the request fails.
        """
        return self.get_with_options(GetSqlJobOptions(job_id=job_id, headers=headers), deadline=deadline)

    def get_with_options(
        self, options: GetSqlJobOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[SqlJobInfoFull]:
        validate_options(options, GetSqlJobOptions)
        return self._client._get_service()._invoke(
            "GetSqlJob",
            "GET",
            "/sql_jobs/{job_id}",
            SqlJobInfoFull.from_dict,
            path_params={"job_id": options.job_id},
            option_headers=options.headers,
            deadline=deadline,
        )

    # ------------------------------------------------------------------- wait

    def wait(
        self,
        job_id: str,
        *,
        poll_interval: float = 2.0,
        headers: Optional[Dict[str, str]] = None,
        deadline: Optional[Deadline] = None,
    ) -> OperationResult[SqlJobInfoFull]:
        """Poll a job until it is ``completed`` or ``failed``.

        Without a deadline this waits indefinitely.

        :param job_id: Job identifier returned by :meth:`submit`.
        :type job_id: :class:`str`
        :param poll_interval: Seconds between polls. Must be positive.
        :type poll_interval: :class:`float`
        :param deadline: Optional deadline bounding all polls and sleeps.
        :type deadline: ~IBMCloud.SqlQuery.core.deadline.Deadline or None

        :return: The final job snapshot.
        :rtype: :class:`~IBMCloud.SqlQuery.core.results.OperationResult` [SqlJobInfoFull]

        :raises ValueError: If ``poll_interval`` is not positive.
        :raises ~IBMCloud.SqlQuery.core.errors.DeadlineExceededError: If the deadline
            expires or is cancelled before the job finishes.
        """
        if poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")
        options = GetSqlJobOptions(job_id=job_id, headers=headers)
        while True:
            result = self.get_with_options(options, deadline=deadline)
            job = result.value
            if job.is_terminal:
                return result
            _logger.debug("Job %s is %s; polling again in %.1fs", job_id, job.status, poll_interval)
            if deadline is not None:
                deadline.sleep(poll_interval)
            else:
                time.sleep(poll_interval)
