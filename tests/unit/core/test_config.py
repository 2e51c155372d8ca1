# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Tests for SqlQueryConfig and external service settings."""

import pytest

from IBMCloud.SqlQuery.core._error_codes import VALIDATION_AUTH_TYPE_UNSUPPORTED, VALIDATION_CONFIG_VALUE
from IBMCloud.SqlQuery.core.auth import (
    BasicAuthenticator,
    BearerTokenAuthenticator,
    NoAuthAuthenticator,
)
from IBMCloud.SqlQuery.core.config import SqlQueryConfig, load_service_settings
from IBMCloud.SqlQuery.core.errors import ValidationError
from IBMCloud.SqlQuery.core.telemetry import TelemetryConfig


class TestSqlQueryConfig:
    def test_defaults(self):
        config = SqlQueryConfig.from_env()
        assert config.http_retries is None
        assert config.http_backoff is None
        assert config.http_max_backoff is None
        assert config.http_timeout is None
        assert config.http_jitter is None
        assert config.enable_retries is False
        assert config.enable_gzip is False
        assert config.disable_ssl_verification is False
        assert config.telemetry is None

    def test_immutability(self):
        config = SqlQueryConfig()
        with pytest.raises(AttributeError):
            config.enable_gzip = True

    def test_telemetry_ignored_for_equality(self):
        assert SqlQueryConfig(telemetry=TelemetryConfig(enable_logging=True)) == SqlQueryConfig()


class TestLoadServiceSettings:
    def test_empty_environment(self):
        settings = load_service_settings(environ={})
        assert settings.service_name == "sql"
        assert settings.url is None
        assert settings.authenticator is None
        assert settings.config == SqlQueryConfig.from_env()

    def test_url_and_bearer_token(self):
        settings = load_service_settings(
            environ={
                "SQL_URL": "https://api.sql-query.test.cloud.ibm.com/v2",
                "SQL_AUTH_TYPE": "bearerToken",
                "SQL_BEARER_TOKEN": "abc",
            }
        )
        assert settings.url == "https://api.sql-query.test.cloud.ibm.com/v2"
        assert isinstance(settings.authenticator, BearerTokenAuthenticator)
        assert settings.authenticator.bearer_token == "abc"

    def test_basic_auth(self):
        settings = load_service_settings(
            environ={"SQL_AUTH_TYPE": "BASIC", "SQL_USERNAME": "u", "SQL_PASSWORD": "p"}
        )
        assert isinstance(settings.authenticator, BasicAuthenticator)
        assert (settings.authenticator.username, settings.authenticator.password) == ("u", "p")

    def test_noauth(self):
        settings = load_service_settings(environ={"SQL_AUTH_TYPE": "noauth"})
        assert isinstance(settings.authenticator, NoAuthAuthenticator)

    def test_unsupported_auth_type(self):
        with pytest.raises(ValidationError) as exc:
            load_service_settings(environ={"SQL_AUTH_TYPE": "iam"})
        assert exc.value.subcode == VALIDATION_AUTH_TYPE_UNSUPPORTED
        assert "Unrecognized authentication type" in str(exc.value)

    def test_feature_flags(self):
        settings = load_service_settings(
            environ={
                "SQL_ENABLE_GZIP": "true",
                "SQL_DISABLE_SSL": "1",
                "SQL_ENABLE_RETRIES": "TRUE",
                "SQL_MAX_RETRIES": "3",
                "SQL_RETRY_INTERVAL": "12.5",
            }
        )
        config = settings.config
        assert config.enable_gzip is True
        assert config.disable_ssl_verification is True
        assert config.enable_retries is True
        assert config.http_retries == 3
        assert config.http_max_backoff == 12.5

    def test_zero_retry_values_mean_defaults(self):
        settings = load_service_settings(environ={"SQL_MAX_RETRIES": "0", "SQL_RETRY_INTERVAL": "0"})
        assert settings.config.http_retries is None
        assert settings.config.http_max_backoff is None

    def test_bad_boolean(self):
        with pytest.raises(ValidationError) as exc:
            load_service_settings(environ={"SQL_ENABLE_GZIP": "maybe"})
        assert exc.value.subcode == VALIDATION_CONFIG_VALUE

    def test_bad_number(self):
        with pytest.raises(ValidationError):
            load_service_settings(environ={"SQL_MAX_RETRIES": "many"})

    def test_negative_number(self):
        with pytest.raises(ValidationError):
            load_service_settings(environ={"SQL_MAX_RETRIES": "-1"})

    def test_custom_service_name_prefix(self):
        settings = load_service_settings(
            "my-sql",
            environ={"MY_SQL_URL": "https://custom.example/v2", "SQL_URL": "https://ignored.example"},
        )
        assert settings.service_name == "my-sql"
        assert settings.url == "https://custom.example/v2"

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("SQL_URL", "https://from-env.example/v2")
        assert load_service_settings().url == "https://from-env.example/v2"
