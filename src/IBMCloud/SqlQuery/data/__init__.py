# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Low-level service access for the SQL Query SDK. Internal."""

__all__ = []
