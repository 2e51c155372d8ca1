# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the SQL Query SDK.

This module contains the foundational components including authentication,
configuration, deadlines, the HTTP client and error handling.
"""

from .results import (
    DetailedResponse,
    OperationResult,
    SqlQueryResponse,
)

__all__ = [
    "DetailedResponse",
    "OperationResult",
    "SqlQueryResponse",
]
