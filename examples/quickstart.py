# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Quickstart for the SQL Query SDK.

This example shows:
- Creating a client for an instance
- Submitting an SQL job and waiting for it to finish
- Listing recent jobs
- Listing catalog tables and describing one of them

Environment:
- SQL_QUERY_TOKEN: IAM access token for the account
- SQL_QUERY_CRN: CRN of the SQL Query instance
- SQL_QUERY_TARGET (optional): result location, e.g. cos://us-geo/<bucket>/<prefix>

Prerequisites:
- pip install ibmcloud-sql-query
"""

import json
import os
import sys

from IBMCloud.SqlQuery import BearerTokenAuthenticator, Deadline, SqlQueryClient
from IBMCloud.SqlQuery.core.errors import HttpError, SqlQueryError


def log_call(description):
    print(f"\n→ {description}")


def main():
    print("=" * 80)
    print("SQL Query SDK Quickstart")
    print("=" * 80)

    token = os.environ.get("SQL_QUERY_TOKEN", "").strip()
    instance_crn = os.environ.get("SQL_QUERY_CRN", "").strip()
    target = os.environ.get("SQL_QUERY_TARGET", "").strip()
    if not token or not instance_crn:
        print("Set SQL_QUERY_TOKEN and SQL_QUERY_CRN first; exiting.")
        sys.exit(1)

    statement = "SELECT * FROM cos://us-geo/sql/customers.csv"
    if target:
        statement += f" INTO {target} STORED AS CSV"

    log_call("SqlQueryClient(instance_crn, BearerTokenAuthenticator(...))")
    with SqlQueryClient(instance_crn, BearerTokenAuthenticator(token)) as client:
        # Uncomment to use another endpoint
        # client.set_service_url("https://api.sql-query.test.cloud.ibm.com/v2")
        client.enable_retries()

        try:
            # ================================================================
            # 1. Submit a job
            # ================================================================
            log_call("client.sql_jobs.submit(statement)")
            submitted = client.sql_jobs.submit(statement)
            print(json.dumps(submitted.to_dict(), indent=2))
            print(f"Request id: {submitted.response.client_request_id}")

            # ================================================================
            # 2. Wait for it
            # ================================================================
            log_call(f"client.sql_jobs.wait({submitted.job_id!r}, deadline=Deadline(timeout=300))")
            job = client.sql_jobs.wait(submitted.job_id, poll_interval=2.0, deadline=Deadline(timeout=300))
            if job.is_failed:
                print(f"Job failed: {job.error}: {job.error_message}")
            else:
                print(f"Job {job.status}: {job.rows_returned} rows written to {job.resultset_location}")

            # ================================================================
            # 3. Recent jobs
            # ================================================================
            log_call("client.sql_jobs.list()")
            jobs = client.sql_jobs.list()
            for i, entry in enumerate(jobs):
                print(i, json.dumps(entry.to_dict()))

            # ================================================================
            # 4. Catalog tables
            # ================================================================
            log_call('client.tables.list("*", type="table")')
            tables = client.tables.list("*", type="table")
            for i, table in enumerate(tables):
                print(i, table.name, table.type)

            if len(tables):
                name = tables[len(tables) - 1].name
                log_call(f"client.tables.get({name!r})")
                info = client.tables.get(name)
                for column in info.columns:
                    print(f"  {column.name}: {column.type}")
        except HttpError as ex:
            print(f"Service error {ex.status_code}: {ex.message}")
            sys.exit(1)
        except SqlQueryError as ex:
            print(f"Request failed: {ex}")
            sys.exit(1)

    print("\nDone.")


if __name__ == "__main__":
    main()
