"""Functions wrapping boto3 calls against S3 buckets and objects."""
