#!/usr/bin/env python3
"""
Create the open house tables in a local DynamoDB instance.

Every table is keyed by a ``uuid`` string attribute and billed per request.
Tables that already exist are left untouched.
"""

import argparse
import sys

import boto3
from botocore.exceptions import ClientError

TABLE_NAMES = [
    "OpenHouse-Areas",
    "OpenHouse-Buildings",
    "OpenHouse-Eateries",
    "OpenHouse-Events",
    "OpenHouse-EventAttendees",
    "OpenHouse-OpenHouses",
    "OpenHouse-OpenHouseAttendees",
]


def create_table(dynamodb, table_name: str) -> bool:
    """
    Create one table.

    Returns:
        True if the table was created, False if it already existed
    """
    try:
        table = dynamodb.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": "uuid", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "uuid", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            return False
        raise

    table.wait_until_exists()
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create open house tables in local DynamoDB")
    parser.add_argument(
        "--endpoint-url",
        default="http://localhost:8000",
        help="DynamoDB endpoint URL (default: http://localhost:8000)"
    )
    parser.add_argument(
        "--region",
        default="us-east-2",
        help="AWS region (default: us-east-2)"
    )
    args = parser.parse_args()

    dynamodb = boto3.resource("dynamodb", region_name=args.region, endpoint_url=args.endpoint_url)

    try:
        for table_name in TABLE_NAMES:
            if create_table(dynamodb, table_name):
                print(f"Created table {table_name}")
            else:
                print(f"Table {table_name} already exists")
    except ClientError as e:
        print(f"Error creating tables: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
