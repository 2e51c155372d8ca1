# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Export job history and table schemas as pandas DataFrames.

The client is configured from the environment (``SQL_URL``, ``SQL_AUTH_TYPE``,
``SQL_BEARER_TOKEN``, ...); set SQL_QUERY_CRN to the instance CRN.

Prerequisites:
- pip install "ibmcloud-sql-query[pandas]"
"""

import os
import sys

from IBMCloud.SqlQuery import SqlQueryClient


def main():
    instance_crn = os.environ.get("SQL_QUERY_CRN", "").strip()
    if not instance_crn:
        print("Set SQL_QUERY_CRN first; exiting.")
        sys.exit(1)

    with SqlQueryClient.from_external_config(instance_crn) as client:
        jobs = client.sql_jobs.list().to_dataframe()
        print(jobs.head())
        print("\nJobs per status:")
        print(jobs.groupby("status").size())

        failed = jobs[jobs["status"] == "failed"]
        print(f"\n{len(failed)} failed job(s) in the last listing")

        tables = client.tables.list().to_dataframe()
        print("\nCatalog:")
        print(tables)

        for name in tables["name"][:3]:
            print(f"\nSchema of {name}:")
            print(client.tables.get(name).to_dataframe())


if __name__ == "__main__":
    main()
