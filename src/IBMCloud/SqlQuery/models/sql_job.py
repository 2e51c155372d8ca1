# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
SQL job models for the SQL Query SDK.

Jobs are created by the service when a statement is submitted and move through
``queued -> running -> completed | failed`` on the service side. The client
only observes snapshots of a job via :class:`SqlJobInfoShort` (submit and
list results) and :class:`SqlJobInfoFull` (get result).
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from ..common.constants import (
    JOB_STATUS_COMPLETED,
    JOB_STATUS_FAILED,
    JOB_STATUS_QUEUED,
    JOB_STATUS_RUNNING,
)
from ._decode import (
    drop_none,
    ensure_object,
    format_datetime,
    read_bool,
    read_datetime,
    read_int,
    read_model_list,
    read_str,
    read_str_list,
)

if TYPE_CHECKING:
    import pandas as pd


class JobStatus(str, Enum):
    """Execution status of an SQL job."""

    QUEUED = JOB_STATUS_QUEUED
    RUNNING = JOB_STATUS_RUNNING
    COMPLETED = JOB_STATUS_COMPLETED
    FAILED = JOB_STATUS_FAILED

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


def _status(value: str) -> Any:
    # Unknown statuses are kept as plain strings
    try:
        return JobStatus(value)
    except ValueError:
        return value


def _is_terminal(status: Any) -> bool:
    return status in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass
class SqlJobInfoShort:
    """
    Abridged information about an SQL job.

    :param job_id: Identifier for an SQL job.
    :type job_id: str
    :param status: Execution status (:class:`JobStatus`, or the raw string for unknown values).
    :type status: JobStatus | str
    :param user_id: ID of the user who submitted the job.
    :type user_id: str | None
    :param submit_time: When the job was accepted by the service.
    :type submit_time: datetime.datetime | None
    :param has_hints: Whether the job has an improvement hint.
    :type has_hints: bool | None
    """

    job_id: str
    status: Any
    user_id: Optional[str] = None
    submit_time: Optional[_dt.datetime] = None
    has_hints: Optional[bool] = None

    @property
    def is_terminal(self) -> bool:
        return _is_terminal(self.status)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SqlJobInfoShort":
        """
        Decode a ``SqlJobInfoShort`` JSON object.

        :raises ~IBMCloud.SqlQuery.core.errors.DecodeError: If ``job_id`` or ``status``
            is missing, or a field has the wrong type.
        """
        name = "SqlJobInfoShort"
        data = ensure_object(data, name)
        return cls(
            job_id=read_str(data, "job_id", name, required=True),
            status=_status(read_str(data, "status", name, required=True)),
            user_id=read_str(data, "user_id", name),
            submit_time=read_datetime(data, "submit_time", name),
            has_hints=read_bool(data, "has_hints", name),
        )

    def to_dict(self) -> Dict[str, Any]:
        return drop_none(
            {
                "job_id": self.job_id,
                "status": str(getattr(self.status, "value", self.status)),
                "user_id": self.user_id,
                "submit_time": format_datetime(self.submit_time) if self.submit_time else None,
                "has_hints": self.has_hints,
            }
        )


@dataclass
class SqlJobInfoFull:
    """
    Full information about an SQL job, including output or error information.

    Required: ``job_id``, ``status``, ``user_id``, ``submit_time``, ``statement``.
    A failed job reports the failure in ``error`` and ``error_message``; this is
    service data, not an exception.

    Example::

        job = client.get_sql_job(GetSqlJobOptions(job_id)).value
        if job.status == JobStatus.FAILED:
            print(job.error, job.error_message)
        elif job.status == JobStatus.COMPLETED:
            print(job.resultset_location, job.rows_returned)
    """

    job_id: str
    status: Any
    user_id: str
    submit_time: _dt.datetime
    statement: str
    plan_id: Optional[str] = None
    resultset_format: Optional[str] = None
    resultset_location: Optional[str] = None
    end_time: Optional[_dt.datetime] = None
    rows_returned: Optional[int] = None
    rows_read: Optional[int] = None
    bytes_read: Optional[int] = None
    objects_skipped: Optional[int] = None
    objects_qualified: Optional[int] = None
    error: Optional[str] = None
    error_message: Optional[str] = None
    hints: Optional[List[str]] = None

    @property
    def is_terminal(self) -> bool:
        return _is_terminal(self.status)

    @property
    def is_failed(self) -> bool:
        return self.status == JobStatus.FAILED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SqlJobInfoFull":
        name = "SqlJobInfoFull"
        data = ensure_object(data, name)
        return cls(
            job_id=read_str(data, "job_id", name, required=True),
            status=_status(read_str(data, "status", name, required=True)),
            user_id=read_str(data, "user_id", name, required=True),
            submit_time=read_datetime(data, "submit_time", name, required=True),
            statement=read_str(data, "statement", name, required=True),
            plan_id=read_str(data, "plan_id", name),
            resultset_format=read_str(data, "resultset_format", name),
            resultset_location=read_str(data, "resultset_location", name),
            end_time=read_datetime(data, "end_time", name),
            rows_returned=read_int(data, "rows_returned", name),
            rows_read=read_int(data, "rows_read", name),
            bytes_read=read_int(data, "bytes_read", name),
            objects_skipped=read_int(data, "objects_skipped", name),
            objects_qualified=read_int(data, "objects_qualified", name),
            error=read_str(data, "error", name),
            error_message=read_str(data, "error_message", name),
            hints=read_str_list(data, "hints", name),
        )

    def to_dict(self) -> Dict[str, Any]:
        return drop_none(
            {
                "job_id": self.job_id,
                "status": str(getattr(self.status, "value", self.status)),
                "user_id": self.user_id,
                "submit_time": format_datetime(self.submit_time),
                "statement": self.statement,
                "plan_id": self.plan_id,
                "resultset_format": self.resultset_format,
                "resultset_location": self.resultset_location,
                "end_time": format_datetime(self.end_time) if self.end_time else None,
                "rows_returned": self.rows_returned,
                "rows_read": self.rows_read,
                "bytes_read": self.bytes_read,
                "objects_skipped": self.objects_skipped,
                "objects_qualified": self.objects_qualified,
                "error": self.error,
                "error_message": self.error_message,
                "hints": list(self.hints) if self.hints is not None else None,
            }
        )


@dataclass
class SqlJobInfoList:
    """List of recently submitted SQL jobs. Iterating yields :class:`SqlJobInfoShort`."""

    jobs: List[SqlJobInfoShort] = field(default_factory=list)

    def __iter__(self) -> Iterator[SqlJobInfoShort]:
        return iter(self.jobs)

    def __len__(self) -> int:
        return len(self.jobs)

    def __getitem__(self, index: int) -> SqlJobInfoShort:
        return self.jobs[index]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SqlJobInfoList":
        name = "SqlJobInfoList"
        data = ensure_object(data, name)
        return cls(jobs=read_model_list(data, "jobs", name, SqlJobInfoShort.from_dict, required=True))

    def to_dict(self) -> Dict[str, Any]:
        return {"jobs": [job.to_dict() for job in self.jobs]}

    def to_dataframe(self) -> "pd.DataFrame":
        """Return the jobs as a DataFrame, one row per job (requires ``pandas``)."""
        from ..utils._pandas import models_to_dataframe

        return models_to_dataframe(
            self.jobs,
            columns=["job_id", "status", "user_id", "submit_time", "has_hints"],
            timestamp_columns=["submit_time"],
        )


__all__ = ["JobStatus", "SqlJobInfoShort", "SqlJobInfoFull", "SqlJobInfoList"]
