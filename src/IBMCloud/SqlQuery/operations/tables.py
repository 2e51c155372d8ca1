# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Catalog table operations namespace for the SQL Query SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from ..core.deadline import Deadline
from ..core.results import OperationResult
from ..models.options import GetTableOptions, ListTablesOptions, validate_options
from ..models.table_info import TableInformation, TableList

if TYPE_CHECKING:
    from ..client import SqlQueryClient


__all__ = ["TableOperations"]


class TableOperations:
    """Namespace for catalog table operations.

    Accessed via ``client.tables``. Lists the tables and views registered in the
    instance's catalog and describes their schemas.

    :param client: The parent :class:`~IBMCloud.SqlQuery.client.SqlQueryClient` instance.
    :type client: ~IBMCloud.SqlQuery.client.SqlQueryClient

    Example::

        client = SqlQueryClient(instance_crn, authenticator)

        # List all views whose name starts with "cust"
        tables = client.tables.list("cust*", type="view")

        # Describe one table
        info = client.tables.get("customer_address")
        for column in info.columns:
            print(column.name, column.type)
    """

    def __init__(self, client: SqlQueryClient) -> None:
        self._client = client

    # ------------------------------------------------------------------- list

    def list(
        self,
        name_pattern: Optional[str] = None,
        *,
        type: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        deadline: Optional[Deadline] = None,
    ) -> OperationResult[TableList]:
        """List the tables in the catalog.

        :param name_pattern: Optional name pattern; ``*`` matches any sequence of characters.
        :type name_pattern: :class:`str` or None
        :param type: Optional filter, ``"table"`` or ``"view"``
            (:class:`~IBMCloud.SqlQuery.models.table_info.TableType` also accepted).
        :type type: :class:`str` or None
        :param headers: Extra request headers.
        :type headers: :class:`dict` or None
        :param deadline: Optional deadline bounding the call.
        :type deadline: ~IBMCloud.SqlQuery.core.deadline.Deadline or None

        :return: The table listing. Iterating yields
            :class:`~IBMCloud.SqlQuery.models.table_info.TableMetadata` entries.
        :rtype: :class:`~IBMCloud.SqlQuery.core.results.OperationResult` [TableList]

        :raises ~IBMCloud.SqlQuery.core.errors.HttpError: If the service rejects the request.
        """
        options = ListTablesOptions(name_pattern=name_pattern, headers=headers)
        if type is not None:
            options.set_type(type)
        return self.list_with_options(options, deadline=deadline)

    def list_with_options(
        self, options: ListTablesOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[TableList]:
        """List tables using a prepared :class:`~IBMCloud.SqlQuery.models.options.ListTablesOptions`.

        ``name_pattern`` and ``type`` are sent as query parameters only when set.

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``options`` is None.
        """
        validate_options(options, ListTablesOptions)
        return self._client._get_service()._invoke(
            "ListTables",
            "GET",
            "/tables",
            TableList.from_dict,
            query={"name_pattern": options.name_pattern, "type": options.type},
            option_headers=options.headers,
            deadline=deadline,
        )

    # -------------------------------------------------------------------- get

    def get(
        self,
        table_name: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        deadline: Optional[Deadline] = None,
    ) -> OperationResult[TableInformation]:
        """Get the schema of one table.

        :param table_name: Name of the table, as listed by :meth:`list`.
        :type table_name: :class:`str`

        :return: Table name, type and columns.
        :rtype: :class:`~IBMCloud.SqlQuery.core.results.OperationResult` [TableInformation]

        :raises ~IBMCloud.SqlQuery.core.errors.ValidationError: If ``table_name`` is empty.
        :raises ~IBMCloud.SqlQuery.core.errors.HttpError: If the table does not exist (404)
            or the request fails.

        Example::

            info = client.tables.get("customer_address")
            print(info.type, [c.name for c in info.columns])
        """
        return self.get_with_options(GetTableOptions(table_name=table_name, headers=headers), deadline=deadline)

    def get_with_options(
        self, options: GetTableOptions, *, deadline: Optional[Deadline] = None
    ) -> OperationResult[TableInformation]:
        validate_options(options, GetTableOptions)
        return self._client._get_service()._invoke(
            "GetTable",
            "GET",
            "/tables/{table_name}",
            TableInformation.from_dict,
            path_params={"table_name": options.table_name},
            option_headers=options.headers,
            deadline=deadline,
        )
