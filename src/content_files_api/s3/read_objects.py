"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import TYPE_CHECKING, List, Optional

import boto3
from botocore.exceptions import ClientError

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import GetObjectOutputTypeDef

NOT_FOUND_ERROR_CODES = ("404", "NoSuchKey", "NoSuchBucket")


def is_not_found_error(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in NOT_FOUND_ERROR_CODES


def object_exists_in_s3(bucket_name: str, object_key: str, s3_client: Optional["S3Client"] = None) -> bool:
    """
    Check if an object exists in the S3 bucket using head_object.

    :param bucket_name: Name of the S3 bucket.
    :param object_key: Key of the object to check.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.

    :return: True if the object exists, False otherwise.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        s3_client.head_object(Bucket=bucket_name, Key=object_key)
        return True
    except ClientError as err:
        if is_not_found_error(err):
            return False
        raise


def fetch_s3_object(
    bucket_name: str,
    object_key: str,
    s3_client: Optional["S3Client"] = None,
) -> "GetObjectOutputTypeDef":
    """
    Fetch an object from an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.

    :return: The get_object response; "Body" is an unread streaming body.
    """
    s3_client = s3_client or boto3.client("s3")
    return s3_client.get_object(Bucket=bucket_name, Key=object_key)


def fetch_s3_object_keys(bucket_name: str, s3_client: Optional["S3Client"] = None) -> List[str]:
    """
    List the keys of every object in a bucket, following continuation tokens.

    :param bucket_name: The name of the S3 bucket.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    """
    s3_client = s3_client or boto3.client("s3")
    paginator = s3_client.get_paginator("list_objects_v2")
    keys = []
    for page in paginator.paginate(Bucket=bucket_name):
        keys.extend(item["Key"] for item in page.get("Contents", []))
    return keys
