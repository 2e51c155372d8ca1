# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_409 = "http_409"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

_HTTP_STATUS_TO_SUBCODE = {
    400: HTTP_400,
    401: HTTP_401,
    403: HTTP_403,
    404: HTTP_404,
    409: HTTP_409,
    429: HTTP_429,
    500: HTTP_500,
    502: HTTP_502,
    503: HTTP_503,
    504: HTTP_504,
}

TRANSIENT_STATUS = {429, 500, 502, 503, 504}


def http_subcode(status: int) -> str:
    return _HTTP_STATUS_TO_SUBCODE.get(status, f"http_{status}")


def is_transient_status(status: int) -> bool:
    return status in TRANSIENT_STATUS


# Validation subcodes
VALIDATION_OPTIONS_MISSING = "validation_options_missing"
VALIDATION_REQUIRED_FIELD = "validation_required_field"
VALIDATION_INSTANCE_CRN_MISSING = "validation_instance_crn_missing"
VALIDATION_SERVICE_URL_INVALID = "validation_service_url_invalid"
VALIDATION_SERVICE_URL_MISSING = "validation_service_url_missing"
VALIDATION_AUTHENTICATOR_INVALID = "validation_authenticator_invalid"
VALIDATION_AUTH_TYPE_UNSUPPORTED = "validation_auth_type_unsupported"
VALIDATION_REGION_UNSUPPORTED = "validation_region_unsupported"
VALIDATION_CONFIG_VALUE = "validation_config_value"

# Decode subcodes
DECODE_EMPTY_BODY = "decode_empty_body"
DECODE_INVALID_JSON = "decode_invalid_json"
DECODE_MISSING_FIELD = "decode_missing_field"
DECODE_INVALID_FIELD = "decode_invalid_field"

# Transport subcodes
TRANSPORT_CONNECTION = "transport_connection"
TRANSPORT_TIMEOUT = "transport_timeout"
TRANSPORT_DEADLINE_EXCEEDED = "transport_deadline_exceeded"
TRANSPORT_CANCELLED = "transport_cancelled"
