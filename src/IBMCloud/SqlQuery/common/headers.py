# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""SDK-identifying headers sent with every request."""

from __future__ import annotations

import platform
from typing import Dict

from .._version import __version__
from .constants import HEADER_SDK_ANALYTICS, HEADER_USER_AGENT

SDK_NAME = "ibmcloud-sql-query-python"


def get_system_info() -> str:
    return "lang=python; os={}; arch={}; python.version={}".format(
        platform.system().lower(),
        platform.machine().lower(),
        platform.python_version(),
    )


def get_user_agent() -> str:
    return f"{SDK_NAME}/{__version__} ({get_system_info()})"


def get_sdk_headers(service_name: str, service_version: str, operation_id: str) -> Dict[str, str]:
    """
    Return the headers that identify this SDK and the operation being invoked.

    :param service_name: Service configuration key, e.g. ``"sql"``.
    :param service_version: API version, e.g. ``"V2"``.
    :param operation_id: Operation name, e.g. ``"ListTables"``.
    :return: ``User-Agent`` and ``X-IBMCloud-SDK-Analytics`` headers.
    """
    return {
        HEADER_USER_AGENT: get_user_agent(),
        HEADER_SDK_ANALYTICS: f"service_name={service_name};service_version={service_version};operation_id={operation_id}",
    }
