# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Python client library for the SQL Query service.

Submit SQL jobs over data in object storage, follow their progress, and list
or describe the tables in the instance catalog.
"""

from ._version import __version__
from .client import SqlQueryClient, get_service_url_for_region
from .core.auth import (
    Authenticator,
    BasicAuthenticator,
    BearerTokenAuthenticator,
    NoAuthAuthenticator,
    TokenCredentialAuthenticator,
)
from .core.config import SqlQueryConfig
from .core.deadline import Deadline

__all__ = [
    "__version__",
    "SqlQueryClient",
    "SqlQueryConfig",
    "Deadline",
    "Authenticator",
    "NoAuthAuthenticator",
    "BasicAuthenticator",
    "BearerTokenAuthenticator",
    "TokenCredentialAuthenticator",
    "get_service_url_for_region",
]
