# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Internal helpers for the SQL Query SDK."""

__all__ = []
