# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the SQL Query SDK.

This module contains the operation namespace classes that organize
related operations under intuitive namespaces:
- TableOperations: catalog table listing and schemas
- SqlJobOperations: submitting, listing, inspecting and waiting for SQL jobs
"""

__all__ = []
