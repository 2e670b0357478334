import logging
import mimetypes
from typing import Any
from urllib.parse import quote

import boto3
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


def get_s3_client(endpoint_url: str | None = None, region_name: str | None = None):
    """Create S3 client.

    ``endpoint_url`` points the client at an S3-compatible store
    (Supabase Storage, MinIO) instead of AWS.
    """
    return boto3.client("s3", endpoint_url=endpoint_url, region_name=region_name)


def build_object_key(prefix: str, reference: str, filename: str) -> str:
    """Build the object key for a property asset, namespaced by feed reference."""
    parts = [p.strip("/") for p in (prefix, reference, filename) if p and p.strip("/")]
    return "/".join(parts)


def build_public_url(
    bucket: str,
    key: str,
    public_base_url: str | None = None,
    region_name: str | None = None,
) -> str:
    """Resolve an object key to a publicly fetchable URL."""
    quoted_key = quote(key)
    if public_base_url:
        return f"{public_base_url.rstrip('/')}/{quoted_key}"
    if region_name and region_name != "us-east-1":
        return f"https://{bucket}.s3.{region_name}.amazonaws.com/{quoted_key}"
    return f"https://{bucket}.s3.amazonaws.com/{quoted_key}"


def guess_content_type(key: str) -> str:
    """Guess an image content type from the key's extension."""
    content_type, _ = mimetypes.guess_type(key)
    if content_type and content_type.startswith("image/"):
        return content_type
    return DEFAULT_CONTENT_TYPE


def upload_bytes_to_s3(
    s3: Any,
    body: bytes,
    bucket: str,
    key: str,
    content_type: str | None = None,
) -> None:
    """Upload bytes to S3.

    ``put_object`` replaces any existing object under the same key, so
    re-uploading an asset overwrites instead of duplicating it.
    """
    s3.put_object(
        Bucket=bucket,
        Key=key,
        Body=body,
        ContentType=content_type or guess_content_type(key),
    )
    logger.debug("Uploaded %d bytes to s3://%s/%s", len(body), bucket, key)
