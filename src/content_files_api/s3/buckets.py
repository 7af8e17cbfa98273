"""Functions for provisioning S3 buckets and their public access."""

import json
import logging
from typing import TYPE_CHECKING, Optional

import boto3
from botocore.exceptions import ClientError

from content_files_api.s3.read_objects import is_not_found_error

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

# Regions where CreateBucket must not be given a LocationConstraint
DEFAULT_REGIONS = (None, "us-east-1")

# head_bucket answers 403 for a bucket name owned by another account
FOREIGN_BUCKET_ERROR_CODES = ("403", "AccessDenied")


def bucket_exists(bucket_name: str, s3_client: Optional["S3Client"] = None) -> bool:
    """
    Check if a bucket exists and is owned by the client's account.

    Bucket names are global, so a bucket held by another account counts as absent.

    :param bucket_name: Name of the S3 bucket.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        s3_client.head_bucket(Bucket=bucket_name)
        return True
    except ClientError as err:
        if is_not_found_error(err):
            return False
        if err.response.get("Error", {}).get("Code") in FOREIGN_BUCKET_ERROR_CODES:
            logger.warning(f"Bucket {bucket_name} belongs to another account")
            return False
        raise


def create_bucket_if_absent(bucket_name: str, s3_client: Optional["S3Client"] = None) -> bool:
    """
    Create a bucket unless we already own it.

    :return: True if the bucket was created by this call.
    """
    s3_client = s3_client or boto3.client("s3")
    region = s3_client.meta.region_name
    kwargs = {"Bucket": bucket_name}
    if region not in DEFAULT_REGIONS:
        kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
    try:
        s3_client.create_bucket(**kwargs)
        logger.info(f"Created bucket {bucket_name}")
        return True
    except ClientError as err:
        if err.response.get("Error", {}).get("Code") == "BucketAlreadyOwnedByYou":
            return False
        raise


def public_read_policy(bucket_name: str) -> str:
    """Bucket policy allowing anonymous reads of every object in the bucket."""
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [
            {
                "Sid": "PublicReadGetObject",
                "Effect": "Allow",
                "Principal": "*",
                "Action": "s3:GetObject",
                "Resource": f"arn:aws:s3:::{bucket_name}/*",
            }
        ],
    })


def set_bucket_public_read(bucket_name: str, public: bool, s3_client: Optional["S3Client"] = None) -> None:
    """
    Allow or forbid anonymous reads of the objects in a bucket.

    Public buckets get the public access block lifted and a read-only bucket
    policy; private buckets get every block turned on and the policy removed.
    """
    s3_client = s3_client or boto3.client("s3")
    s3_client.put_public_access_block(
        Bucket=bucket_name,
        PublicAccessBlockConfiguration={
            "BlockPublicAcls": not public,
            "IgnorePublicAcls": not public,
            "BlockPublicPolicy": not public,
            "RestrictPublicBuckets": not public,
        },
    )
    if public:
        s3_client.put_bucket_policy(Bucket=bucket_name, Policy=public_read_policy(bucket_name))
    else:
        s3_client.delete_bucket_policy(Bucket=bucket_name)
