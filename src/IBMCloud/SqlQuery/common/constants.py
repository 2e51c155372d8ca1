# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Constants for the SQL Query service API.

These constants define the service endpoint, the external configuration key
and the enumerated values used in request and response payloads.
"""

DEFAULT_SERVICE_URL = "https://api.sql-query.cloud.ibm.com/v2"
"""Default URL to make service requests to."""

DEFAULT_SERVICE_NAME = "sql"
"""Default key used to find external configuration information."""

SERVICE_VERSION = "V2"

# Header names
HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_ENCODING = "Content-Encoding"
HEADER_AUTHORIZATION = "Authorization"
HEADER_USER_AGENT = "User-Agent"
HEADER_SDK_ANALYTICS = "X-IBMCloud-SDK-Analytics"
HEADER_REQUEST_ID = "X-Request-ID"
HEADER_TRANSACTION_ID = "X-Global-Transaction-Id"
HEADER_RETRY_AFTER = "Retry-After"

CONTENT_TYPE_JSON = "application/json"

# SQL job execution status values
JOB_STATUS_QUEUED = "queued"
JOB_STATUS_RUNNING = "running"
JOB_STATUS_COMPLETED = "completed"
JOB_STATUS_FAILED = "failed"

# Catalog table type values (used as the ``type`` filter of list_tables)
TABLE_TYPE_TABLE = "table"
TABLE_TYPE_VIEW = "view"

# OpenTelemetry span attribute names
OTEL_ATTR_DB_SYSTEM = "db.system"
OTEL_ATTR_DB_OPERATION = "db.operation"
OTEL_ATTR_HTTP_METHOD = "http.request.method"
OTEL_ATTR_HTTP_URL = "url.full"
OTEL_ATTR_HTTP_STATUS_CODE = "http.response.status_code"
OTEL_ATTR_SQL_QUERY_INSTANCE = "sql_query.instance_crn"
OTEL_ATTR_SQL_QUERY_REQUEST_ID = "sql_query.client_request_id"
OTEL_ATTR_SQL_QUERY_SERVICE_REQUEST_ID = "sql_query.service_request_id"
