# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Data models and request options for the SQL Query SDK.

- :class:`~IBMCloud.SqlQuery.models.sql_job.SqlJobInfoShort`: Abridged job information.
- :class:`~IBMCloud.SqlQuery.models.sql_job.SqlJobInfoFull`: Full job information.
- :class:`~IBMCloud.SqlQuery.models.sql_job.SqlJobInfoList`: Recent jobs.
- :class:`~IBMCloud.SqlQuery.models.table_info.TableList`: Catalog table listing.
- :class:`~IBMCloud.SqlQuery.models.table_info.TableInformation`: Table schema.
- :mod:`~IBMCloud.SqlQuery.models.options`: One options class per operation.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from
    the specific module files to avoid duplicate entries in generated documentation.
"""

__all__ = []
