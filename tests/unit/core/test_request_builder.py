# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Tests for request construction and service URL validation."""

import gzip
import json

import pytest

from IBMCloud.SqlQuery.common.headers import get_sdk_headers, get_user_agent
from IBMCloud.SqlQuery.core._request import RequestBuilder, validate_service_url
from IBMCloud.SqlQuery.core.errors import ValidationError


class TestValidateServiceUrl:
    def test_strips_trailing_slash(self):
        assert validate_service_url("https://api.example.com/v2/") == "https://api.example.com/v2"

    @pytest.mark.parametrize(
        "url",
        ["", "   ", "api.example.com/v2", "ftp://api.example.com", "https://{region}.example.com", "https://"],
    )
    def test_invalid(self, url):
        with pytest.raises(ValidationError):
            validate_service_url(url)


class TestRequestBuilder:
    def test_path_params_are_quoted(self):
        builder = RequestBuilder("get")
        url = builder.resolve_request_url("https://api.example.com/v2", "/tables/{table_name}", {"table_name": "a b/c"})
        assert url == "https://api.example.com/v2/tables/a%20b%2Fc"
        assert builder.method == "GET"

    def test_empty_path_param_rejected(self):
        with pytest.raises(ValidationError):
            RequestBuilder("GET").resolve_request_url("https://api.example.com", "/sql_jobs/{job_id}", {"job_id": ""})

    def test_empty_service_url_rejected(self):
        with pytest.raises(ValidationError):
            RequestBuilder("GET").resolve_request_url("", "/tables")

    def test_build_without_url_rejected(self):
        with pytest.raises(ValidationError):
            RequestBuilder("GET").build()

    def test_query_and_headers(self):
        builder = RequestBuilder("GET")
        builder.resolve_request_url("https://api.example.com", "/tables")
        builder.add_query("instance_crn", "crn:1").add_header("Accept", "application/json")
        request = builder.build()
        assert request.params == [("instance_crn", "crn:1")]
        assert request.headers == {"Accept": "application/json"}
        assert request.data is None

    def test_json_body(self):
        builder = RequestBuilder("POST")
        builder.resolve_request_url("https://api.example.com", "/sql_jobs")
        builder.set_body_content_json({"statement": "SELECT 1"})
        request = builder.build()
        assert json.loads(request.data) == {"statement": "SELECT 1"}
        assert request.headers["Content-Type"] == "application/json"
        assert "Content-Encoding" not in request.headers

    def test_gzip_body(self):
        builder = RequestBuilder("POST")
        builder.enable_gzip_compression = True
        builder.resolve_request_url("https://api.example.com", "/sql_jobs")
        builder.set_body_content_json({"statement": "SELECT 1"})
        request = builder.build()
        assert request.headers["Content-Encoding"] == "gzip"
        assert json.loads(gzip.decompress(request.data)) == {"statement": "SELECT 1"}


class TestSdkHeaders:
    def test_analytics_header(self):
        headers = get_sdk_headers("sql", "V2", "ListTables")
        assert headers["X-IBMCloud-SDK-Analytics"] == "service_name=sql;service_version=V2;operation_id=ListTables"
        assert headers["User-Agent"] == get_user_agent()

    def test_user_agent(self):
        agent = get_user_agent()
        assert agent.startswith("ibmcloud-sql-query-python/")
        assert "lang=python" in agent
