"""Functions for writing objects to an S3 bucket--the "C" and "U" in CRUD."""

from typing import TYPE_CHECKING, BinaryIO, Optional

import boto3

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def upload_s3_object(
    bucket_name: str,
    object_key: str,
    file_content: BinaryIO,
    content_type: Optional[str] = None,
    s3_client: Optional["S3Client"] = None,
) -> None:
    """
    Upload a file to an S3 bucket.

    The content is streamed with a managed (multipart when large) transfer,
    so it is never held in memory as a whole.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param file_content: A readable binary stream with the content of the file to upload.
    :param content_type: The MIME type of the file, e.g. "text/plain" for a text file.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    """
    content_type = content_type or DEFAULT_CONTENT_TYPE
    s3_client = s3_client or boto3.client("s3")
    s3_client.upload_fileobj(
        Fileobj=file_content,
        Bucket=bucket_name,
        Key=object_key,
        ExtraArgs={"ContentType": content_type},
    )
