# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Per-operation options for the SQL Query SDK.

Each remote operation takes exactly one options value. ``None`` fields are
unset and are left out of the request. Setters return the options object so
they can be chained::

    options = SubmitSqlJobOptions("SELECT 1 INTO cos://us-geo/bucket/out STORED AS CSV")
    options.set_headers({"X-Trace": "abc"})

    tables = ListTablesOptions().set_name_pattern("cust*").set_type("table")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type, TypeVar

from ..core._error_codes import VALIDATION_OPTIONS_MISSING, VALIDATION_REQUIRED_FIELD
from ..core.errors import ValidationError

O = TypeVar("O")


def validate_options(options: Optional[O], expected: Type[O]) -> O:
    """
    Check that ``options`` is present, of the right type, and internally valid.

    :raises ValidationError: If ``options`` is ``None``, of another type, or
        its own ``validate()`` fails.
    """
    if options is None:
        raise ValidationError(
            f"{expected.__name__} cannot be nil",
            subcode=VALIDATION_OPTIONS_MISSING,
            details={"options": expected.__name__},
        )
    if not isinstance(options, expected):
        raise ValidationError(
            f"expected {expected.__name__}, got {type(options).__name__}",
            subcode=VALIDATION_OPTIONS_MISSING,
            details={"options": expected.__name__},
        )
    options.validate()  # type: ignore[attr-defined]
    return options


def _require(options: Any, field_name: str) -> None:
    value = getattr(options, field_name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(
            f"{type(options).__name__}: {field_name} is required",
            subcode=VALIDATION_REQUIRED_FIELD,
            details={"options": type(options).__name__, "field": field_name},
        )


def _check_headers(options: Any) -> None:
    headers = options.headers
    if headers is None:
        return
    if not isinstance(headers, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in headers.items()):
        raise ValidationError(
            f"{type(options).__name__}: headers must map str to str",
            subcode=VALIDATION_REQUIRED_FIELD,
            details={"options": type(options).__name__, "field": "headers"},
        )


@dataclass
class ListTablesOptions:
    """
    Options for :meth:`~IBMCloud.SqlQuery.client.SqlQueryClient.list_tables`.

    :param name_pattern: Catalog name pattern; ``*`` matches any sequence.
    :type name_pattern: str | None
    :param type: Restrict to ``table`` or ``view`` entries.
    :type type: str | None
    :param headers: Extra request headers.
    :type headers: dict[str, str] | None
    """

    name_pattern: Optional[str] = None
    type: Optional[str] = None
    headers: Optional[Dict[str, str]] = None

    def set_name_pattern(self, name_pattern: str) -> "ListTablesOptions":
        self.name_pattern = name_pattern
        return self

    def set_type(self, type: Optional[str]) -> "ListTablesOptions":
        self.type = None if type is None else str(getattr(type, "value", type))
        return self

    def set_headers(self, headers: Dict[str, str]) -> "ListTablesOptions":
        self.headers = headers
        return self

    def validate(self) -> None:
        _check_headers(self)


@dataclass
class GetTableOptions:
    """Options for :meth:`~IBMCloud.SqlQuery.client.SqlQueryClient.get_table`. ``table_name`` is required."""

    table_name: Optional[str] = None
    headers: Optional[Dict[str, str]] = None

    def set_table_name(self, table_name: str) -> "GetTableOptions":
        self.table_name = table_name
        return self

    def set_headers(self, headers: Dict[str, str]) -> "GetTableOptions":
        self.headers = headers
        return self

    def validate(self) -> None:
        _require(self, "table_name")
        _check_headers(self)


@dataclass
class SubmitSqlJobOptions:
    """
    Options for :meth:`~IBMCloud.SqlQuery.client.SqlQueryClient.submit_sql_job`.

    :param statement: The SQL statement to run. Required.
    :type statement: str
    :param resultset_target: Deprecated. Object storage URI for the result set.
        Prefer an ``INTO`` clause in the statement. Sent only when set.
    :type resultset_target: str | None
    :param headers: Extra request headers.
    :type headers: dict[str, str] | None
    """

    statement: Optional[str] = None
    resultset_target: Optional[str] = None
    headers: Optional[Dict[str, str]] = None

    def set_statement(self, statement: str) -> "SubmitSqlJobOptions":
        self.statement = statement
        return self

    def set_resultset_target(self, resultset_target: str) -> "SubmitSqlJobOptions":
        self.resultset_target = resultset_target
        return self

    def set_headers(self, headers: Dict[str, str]) -> "SubmitSqlJobOptions":
        self.headers = headers
        return self

    def validate(self) -> None:
        _require(self, "statement")
        _check_headers(self)

    def to_body(self) -> Dict[str, Any]:
        """Return the JSON request body with only the set fields."""
        body: Dict[str, Any] = {"statement": self.statement}
        if self.resultset_target is not None:
            body["resultset_target"] = self.resultset_target
        return body


@dataclass
class ListSqlJobsOptions:
    """Options for :meth:`~IBMCloud.SqlQuery.client.SqlQueryClient.list_sql_jobs`."""

    headers: Optional[Dict[str, str]] = None

    def set_headers(self, headers: Dict[str, str]) -> "ListSqlJobsOptions":
        self.headers = headers
        return self

    def validate(self) -> None:
        _check_headers(self)


@dataclass
class GetSqlJobOptions:
    """Options for :meth:`~IBMCloud.SqlQuery.client.SqlQueryClient.get_sql_job`. ``job_id`` is required."""

    job_id: Optional[str] = None
    headers: Optional[Dict[str, str]] = None

    def set_job_id(self, job_id: str) -> "GetSqlJobOptions":
        self.job_id = job_id
        return self

    def set_headers(self, headers: Dict[str, str]) -> "GetSqlJobOptions":
        self.headers = headers
        return self

    def validate(self) -> None:
        _require(self, "job_id")
        _check_headers(self)


__all__ = [
    "ListTablesOptions",
    "GetTableOptions",
    "SubmitSqlJobOptions",
    "ListSqlJobsOptions",
    "GetSqlJobOptions",
    "validate_options",
]
