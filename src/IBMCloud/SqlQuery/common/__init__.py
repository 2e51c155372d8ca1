# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Common utilities and constants for the SQL Query SDK.

This module contains shared constants and the SDK request headers used across the SDK.
"""

__all__ = []
