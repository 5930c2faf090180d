import logging
import secrets
import time
from typing import Any, Optional

import boto3
import requests
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import S3Config
from ..constants import S3_CONTENT_TYPE, S3_EXTENSION
from ..errors import UploadError

logger = logging.getLogger(__name__)


def create_s3_client(config: S3Config):
    """S3 client for the configured region. Uses explicit keys when set, else boto3's default chain."""
    kwargs = {
        "region_name": config.region,
        "config": Config(signature_version="s3v4"),
    }
    if config.has_credentials:
        kwargs["aws_access_key_id"] = config.access_key_id
        kwargs["aws_secret_access_key"] = config.secret_access_key
    return boto3.client("s3", **kwargs)


class S3Uploader:
    """
    Copies a remote image into the ad bucket and returns its public URL.
    """

    def __init__(self, config: S3Config, client: Optional[Any] = None, session: Optional[requests.Session] = None):
        self.config = config
        self.client = client if client is not None else create_s3_client(config)
        self.http = session or requests.Session()

    def generate_key(self) -> str:
        timestamp_ms = time.time_ns() // 1_000_000
        return f"{self.config.prefix}{timestamp_ms}-{secrets.randbits(32)}{S3_EXTENSION}"

    def public_url(self, key: str) -> str:
        return f"https://{self.config.bucket}.s3.{self.config.region}.amazonaws.com/{key}"

    def fetch(self, source_url: str) -> bytes:
        try:
            response = self.http.get(source_url, timeout=self.config.fetch_timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            raise UploadError(f"S3 upload failed: could not fetch {source_url}: {e}")

        content_type = response.headers.get("Content-Type", "")
        if not content_type.lower().startswith("image/"):
            raise UploadError(f"S3 upload failed: {source_url} returned non-image content ({content_type or 'unknown'})")
        return response.content

    def upload(self, source_url: str) -> str:
        try:
            body = self.fetch(source_url)
            key = self.generate_key()
            self.client.put_object(
                Bucket=self.config.bucket,
                Key=key,
                Body=body,
                ContentType=S3_CONTENT_TYPE,
            )
        except UploadError as e:
            logger.error(f"Error uploading to S3: {e}")
            raise
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading to S3: {e}")
            raise UploadError(f"S3 upload failed: {e}")

        url = self.public_url(key)
        logger.info(
            f"Uploaded image to {url}",
            extra={"context": {"event_type": "s3_upload", "bucket": self.config.bucket, "key": key}},
        )
        return url
