import logging

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from course_catalog.config import Settings
from course_catalog.exceptions import (
    ListingError,
    NotFoundError,
    SigningError,
    StoreError,
)

logger = logging.getLogger(__name__)

# S3 answers AccessDenied instead of NoSuchKey when the caller may not list
# the bucket, so a denied read is treated as a missing object.
_MISSING_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound", "AccessDenied", "403"}


class S3Client:
    """Async wrapper around an ``aioboto3`` session bound to one bucket.

    Usage::

        store = S3Client.from_settings(settings)
        courses = await store.list_prefixes()            # ["COMM 200", ...]
        keys = await store.list_keys("COMM 200/")        # every object key
        text = await store.get_text("COMM 200/txt/intro.txt")
        url = await store.presign_get("COMM 200/video/intro.mp4", 3600)

    Each call opens a short-lived client from the shared session.  Credentials
    are optional; without them boto falls back to its standard provider chain
    (environment, profile, instance role).
    """

    def __init__(
        self,
        bucket: str,
        *,
        region: str = "us-east-1",
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self._endpoint_url = endpoint_url
        self._session = aioboto3.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3Client":
        return cls(
            settings.s3_bucket_name,
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
        )

    def _client(self):
        return self._session.client("s3", endpoint_url=self._endpoint_url)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    async def list_prefixes(self) -> list[str]:
        """Return the top-level ``name/`` prefixes of the bucket."""
        prefixes: list[str] = []
        try:
            async with self._client() as s3:
                paginator = s3.get_paginator("list_objects_v2")
                async for page in paginator.paginate(Bucket=self.bucket, Delimiter="/"):
                    for entry in page.get("CommonPrefixes") or []:
                        if entry.get("Prefix"):
                            prefixes.append(entry["Prefix"])
        except (ClientError, BotoCoreError) as e:
            raise ListingError(f"Failed to list bucket {self.bucket}: {e}") from e
        return prefixes

    async def list_keys(self, prefix: str) -> list[str]:
        """Return every object key under *prefix*, following continuation tokens."""
        keys: list[str] = []
        try:
            async with self._client() as s3:
                paginator = s3.get_paginator("list_objects_v2")
                async for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                    for obj in page.get("Contents") or []:
                        if obj.get("Key"):
                            keys.append(obj["Key"])
        except (ClientError, BotoCoreError) as e:
            raise ListingError(f"Failed to list prefix {prefix!r}: {e}") from e
        return keys

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------
    async def get_text(self, key: str) -> str:
        """Download *key* and decode it as UTF-8."""
        try:
            async with self._client() as s3:
                resp = await s3.get_object(Bucket=self.bucket, Key=key)
                async with resp["Body"] as stream:
                    body = await stream.read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in _MISSING_CODES:
                raise NotFoundError(f"Object not found: {key}") from e
            raise StoreError(f"Failed to read {key}: {e}") from e
        except BotoCoreError as e:
            raise StoreError(f"Failed to read {key}: {e}") from e
        return body.decode("utf-8", errors="replace")

    async def presign_get(self, key: str, expires_in: int) -> str:
        """Return a time-limited GET URL for *key*."""
        try:
            async with self._client() as s3:
                return await s3.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.bucket, "Key": key},
                    ExpiresIn=expires_in,
                )
        except (ClientError, BotoCoreError) as e:
            raise SigningError(f"Failed to sign {key}: {e}") from e
