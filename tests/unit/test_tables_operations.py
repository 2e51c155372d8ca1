# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Unit tests for catalog table operations."""

import pytest

from IBMCloud.SqlQuery.core.errors import HttpError, ValidationError
from IBMCloud.SqlQuery.models.options import GetTableOptions, ListTablesOptions
from IBMCloud.SqlQuery.models.table_info import TableInformation, TableList, TableType
from IBMCloud.SqlQuery.operations.tables import TableOperations

from tests.fixtures.test_data import (
    SAMPLE_INSTANCE_CRN,
    SAMPLE_TABLE_INFORMATION,
    SAMPLE_TABLE_LIST,
)


class TestListTables:
    def test_namespace_exists(self, service_client):
        assert isinstance(service_client.tables, TableOperations)

    def test_pluto_filter(self, mock_service, service_client):
        mock_service.respond(200, SAMPLE_TABLE_LIST)
        options = ListTablesOptions().set_name_pattern("pluto").set_type("table").set_headers({})

        result = service_client.list_tables(options)

        request = mock_service.last_request
        assert request.method == "GET"
        assert request.path == "/v2/tables"
        assert request.query == {
            "instance_crn": [SAMPLE_INSTANCE_CRN],
            "name_pattern": ["pluto"],
            "type": ["table"],
        }
        assert isinstance(result.value, TableList)
        assert result.tables_metadata[0].name == "customer_address"
        assert result.tables_metadata[0].type == TableType.TABLE
        assert result.response.status_code == 200

    def test_unset_filters_omitted(self, mock_service, service_client):
        mock_service.respond(200, SAMPLE_TABLE_LIST)
        service_client.list_tables(ListTablesOptions())
        assert mock_service.last_request.query == {"instance_crn": [SAMPLE_INSTANCE_CRN]}

    def test_set_type_none_not_sent(self, mock_service, service_client):
        mock_service.respond(200, SAMPLE_TABLE_LIST)
        service_client.list_tables(ListTablesOptions().set_type(None))
        assert mock_service.last_request.query == {"instance_crn": [SAMPLE_INSTANCE_CRN]}

    def test_common_headers(self, mock_service, service_client):
        mock_service.respond(200, SAMPLE_TABLE_LIST)
        service_client.set_default_headers({"X-Default": "d", "X-Override": "default"})
        service_client.list_tables(ListTablesOptions(headers={"X-Override": "option"}))

        headers = mock_service.last_request.headers
        assert headers["Accept"] == "application/json"
        assert headers["X-Default"] == "d"
        assert headers["X-Override"] == "option"
        assert headers["X-IBMCloud-SDK-Analytics"] == "service_name=sql;service_version=V2;operation_id=ListTables"
        assert headers["User-Agent"].startswith("ibmcloud-sql-query-python/")
        assert headers["X-Request-ID"]

    def test_namespace_list(self, mock_service, service_client):
        mock_service.respond(200, SAMPLE_TABLE_LIST)
        tables = service_client.tables.list("cust*", type=TableType.VIEW)
        assert mock_service.last_request.query["name_pattern"] == ["cust*"]
        assert mock_service.last_request.query["type"] == ["view"]
        assert [t.name for t in tables] == ["customer_address"]

    def test_none_options_rejected_before_request(self, mock_service, service_client):
        with pytest.raises(ValidationError):
            service_client.list_tables(None)
        assert mock_service.requests == []


class TestGetTable:
    def test_get_table(self, mock_service, service_client):
        mock_service.respond(200, SAMPLE_TABLE_INFORMATION)
        info = service_client.get_table(GetTableOptions(table_name="customer_address"))

        request = mock_service.last_request
        assert request.path == "/v2/tables/customer_address"
        assert request.query == {"instance_crn": [SAMPLE_INSTANCE_CRN]}
        assert "operation_id=GetTable" in request.headers["X-IBMCloud-SDK-Analytics"]
        assert isinstance(info.value, TableInformation)
        assert info.name == "customer_address"
        assert info.columns[0].nullable is True

    def test_table_name_is_url_quoted(self, mock_service, service_client):
        mock_service.respond(200, SAMPLE_TABLE_INFORMATION)
        service_client.tables.get("my table")
        assert mock_service.last_request.path == "/v2/tables/my%20table"

    def test_none_options(self, mock_service, service_client):
        with pytest.raises(ValidationError):
            service_client.get_table(None)
        assert mock_service.requests == []

    def test_missing_table_name(self, mock_service, service_client):
        with pytest.raises(ValidationError):
            service_client.get_table(GetTableOptions())
        assert mock_service.requests == []

    def test_not_found(self, mock_service, service_client):
        mock_service.respond(404, {"errors": [{"code": "not_found", "message": "Table not found"}]})
        with pytest.raises(HttpError) as exc:
            service_client.tables.get("missing")
        assert exc.value.status_code == 404
