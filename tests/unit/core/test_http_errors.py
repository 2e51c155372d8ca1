# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

import pytest

from IBMCloud.SqlQuery.core._error_codes import (
    DECODE_EMPTY_BODY,
    DECODE_INVALID_JSON,
    DECODE_MISSING_FIELD,
    HTTP_400,
    HTTP_404,
    HTTP_429,
    HTTP_500,
)
from IBMCloud.SqlQuery.core.errors import DecodeError, HttpError, SqlQueryError
from IBMCloud.SqlQuery.models.options import (
    GetSqlJobOptions,
    GetTableOptions,
    ListSqlJobsOptions,
    ListTablesOptions,
    SubmitSqlJobOptions,
)

from tests.fixtures.test_data import INVALID_JSON_BODY, SAMPLE_ERROR_RESPONSES, SAMPLE_JOB_ID

_OPERATIONS = {
    "ListTables": lambda c: c.list_tables(ListTablesOptions()),
    "GetTable": lambda c: c.get_table(GetTableOptions("customer_address")),
    "SubmitSqlJob": lambda c: c.submit_sql_job(SubmitSqlJobOptions("SELECT 1")),
    "ListSqlJobs": lambda c: c.list_sql_jobs(ListSqlJobsOptions()),
    "GetSqlJob": lambda c: c.get_sql_job(GetSqlJobOptions(SAMPLE_JOB_ID)),
}


class TestHttpErrorMapping:
    """Non-2xx responses become HttpError with structured details."""

    def test_404_subcode_and_message(self, mock_service, service_client):
        mock_service.respond(404, SAMPLE_ERROR_RESPONSES["404"], headers={"X-Global-Transaction-Id": "txn-1"})
        with pytest.raises(HttpError) as exc:
            service_client.get_sql_job(GetSqlJobOptions(SAMPLE_JOB_ID))
        err = exc.value
        assert err.status_code == 404
        assert err.subcode == HTTP_404
        assert err.is_transient is False
        assert "Job not found." in err.message
        assert "GetSqlJob" in err.message
        assert err.details["service_error_code"] == "not_found"
        assert err.details["service_request_id"] == "txn-1"
        assert err.response is not None
        assert err.response.status_code == 404

    def test_400_from_errors_array(self, mock_service, service_client):
        mock_service.respond(400, SAMPLE_ERROR_RESPONSES["400"])
        with pytest.raises(HttpError) as exc:
            service_client.submit_sql_job(SubmitSqlJobOptions("SELEC 1"))
        assert exc.value.subcode == HTTP_400
        assert "The statement is invalid." in exc.value.message
        assert exc.value.source == "server"

    def test_429_transient_with_retry_after(self, mock_service, service_client):
        mock_service.respond(429, SAMPLE_ERROR_RESPONSES["429"], headers={"Retry-After": "8"})
        with pytest.raises(HttpError) as exc:
            service_client.list_sql_jobs(ListSqlJobsOptions())
        assert exc.value.subcode == HTTP_429
        assert exc.value.is_transient is True
        assert exc.value.details["retry_after"] == 8
        assert "Too many requests" in exc.value.message

    def test_500_non_json_body(self, mock_service, service_client):
        mock_service.respond(500, "upstream exploded", headers={"Content-Type": "text/plain"})
        with pytest.raises(HttpError) as exc:
            service_client.list_sql_jobs(ListSqlJobsOptions())
        assert exc.value.subcode == HTTP_500
        assert exc.value.is_transient is True
        assert exc.value.details["body_excerpt"] == "upstream exploded"

    def test_unmapped_status_subcode(self, mock_service, service_client):
        mock_service.respond(418, {})
        with pytest.raises(HttpError) as exc:
            service_client.list_sql_jobs(ListSqlJobsOptions())
        assert exc.value.subcode == "http_418"

    def test_to_dict(self, mock_service, service_client):
        mock_service.respond(404, SAMPLE_ERROR_RESPONSES["404"])
        with pytest.raises(SqlQueryError) as exc:
            service_client.get_sql_job(GetSqlJobOptions(SAMPLE_JOB_ID))
        d = exc.value.to_dict()
        assert d["code"] == "http_error"
        assert d["status_code"] == 404
        assert d["timestamp"].endswith("Z")


class TestDecodeErrors:
    """2xx responses that cannot be decoded raise DecodeError with the response attached."""

    def test_invalid_json_without_retries(self, mock_service, service_client):
        mock_service.respond(200, INVALID_JSON_BODY)
        with pytest.raises(DecodeError) as exc:
            service_client.get_sql_job(GetSqlJobOptions(SAMPLE_JOB_ID))
        assert exc.value.subcode == DECODE_INVALID_JSON
        assert exc.value.response is not None
        assert exc.value.response.status_code == 200
        assert exc.value.response.raw_text == INVALID_JSON_BODY

    def test_invalid_json_with_retries(self, mock_service, service_client):
        service_client.enable_retries(2, 1)
        mock_service.respond(200, INVALID_JSON_BODY)
        with pytest.raises(DecodeError) as exc:
            service_client.get_sql_job(GetSqlJobOptions(SAMPLE_JOB_ID))
        assert exc.value.response is not None
        # Decode failures are not retried
        assert len(mock_service.requests) == 1

    @pytest.mark.parametrize("retries", [False, True], ids=["no_retries", "retries"])
    @pytest.mark.parametrize("operation", sorted(_OPERATIONS))
    def test_invalid_json_every_operation(self, mock_service, service_client, operation, retries):
        if retries:
            service_client.enable_retries(2, 1)
        mock_service.respond(200, INVALID_JSON_BODY)
        with pytest.raises(DecodeError) as exc:
            _OPERATIONS[operation](service_client)
        assert exc.value.subcode == DECODE_INVALID_JSON
        assert exc.value.response is not None
        assert exc.value.response.raw_text == INVALID_JSON_BODY
        assert exc.value.details["operation"] == operation
        assert len(mock_service.requests) == 1

    def test_empty_body(self, mock_service, service_client):
        mock_service.respond(200, "")
        with pytest.raises(DecodeError) as exc:
            service_client.list_sql_jobs(ListSqlJobsOptions())
        assert exc.value.subcode == DECODE_EMPTY_BODY
        assert exc.value.response is not None

    def test_schema_violation_gets_response(self, mock_service, service_client):
        mock_service.respond(200, {"status": "queued"})
        with pytest.raises(DecodeError) as exc:
            service_client.get_sql_job(GetSqlJobOptions(SAMPLE_JOB_ID))
        assert exc.value.subcode == DECODE_MISSING_FIELD
        assert exc.value.status_code == 200
        assert exc.value.response.status_code == 200
        assert exc.value.details["operation"] == "GetSqlJob"
