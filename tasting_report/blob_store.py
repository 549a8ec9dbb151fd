"""
S3 storage for oversized report PDFs.
Set AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_REGION, PDF_OUTPUT_BUCKET.
"""
from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from . import config

logger = logging.getLogger(__name__)


def _client():
    return boto3.client("s3", region_name=config.AWS_REGION)


def ensure_bucket(bucket: str) -> None:
    """Create the bucket if it does not exist. Failures are logged, not raised."""
    client = _client()
    try:
        client.head_bucket(Bucket=bucket)
        return
    except ClientError:
        pass
    except BotoCoreError as exc:
        logger.warning("Bucket check failed for %s: %s", bucket, exc)
        return
    try:
        if config.AWS_REGION == "us-east-1":
            client.create_bucket(Bucket=bucket)
        else:
            client.create_bucket(
                Bucket=bucket,
                CreateBucketConfiguration={"LocationConstraint": config.AWS_REGION},
            )
    except (BotoCoreError, ClientError) as exc:
        logger.warning("Bucket create failed for %s: %s", bucket, exc)


def upload_bytes(key: str, body: bytes, content_type: str, bucket: str | None = None) -> bool:
    bucket = bucket or config.PDF_OUTPUT_BUCKET
    if not bucket:
        return False
    try:
        _client().put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)
        return True
    except (BotoCoreError, ClientError) as exc:
        logger.warning("Upload failed for %s/%s: %s", bucket, key, exc)
        return False


def presigned_url(key: str, expires_in: int = config.PRESIGNED_URL_EXPIRES, bucket: str | None = None) -> str | None:
    bucket = bucket or config.PDF_OUTPUT_BUCKET
    if not bucket:
        return None
    try:
        return _client().generate_presigned_url(
            "get_object", Params={"Bucket": bucket, "Key": key}, ExpiresIn=expires_in
        )
    except (BotoCoreError, ClientError) as exc:
        logger.warning("Presign failed for %s/%s: %s", bucket, key, exc)
        return None
