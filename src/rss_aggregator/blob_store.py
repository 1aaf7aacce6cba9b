"""Object stores the snapshot can be written to."""

import logging
import os
import tempfile
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from rss_aggregator.errors import BlobStoreError
from rss_aggregator.interfaces.protocols import BlobStoreProtocol

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class S3BlobStore(BlobStoreProtocol):
    """
    Blob store backed by an S3 bucket.
    """

    def __init__(
        self,
        bucket: str,
        region: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        """
        Args:
            bucket: Name of the bucket holding the blobs.
            region: AWS region of the bucket; boto3 resolves it from the environment if None.
            client: A preconfigured S3 client, created lazily if None.
        """
        self.bucket = bucket
        self.region = region
        self._client = client

    def _get_client(self):
        if self._client is None:
            client_kwargs = {}
            if self.region:
                client_kwargs["region_name"] = self.region
            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    def put(self, key: str, body: str, content_type: str, cache_control: str) -> None:
        try:
            self._get_client().put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body.encode("utf-8"),
                ContentType=content_type,
                CacheControl=cache_control,
            )
        except (BotoCoreError, ClientError) as e:
            raise BlobStoreError(f"Failed to put s3://{self.bucket}/{key}: {e}") from e
        logging.info(f"Saved s3://{self.bucket}/{key}")

    def get(self, key: str) -> Optional[str]:
        try:
            response = self._get_client().get_object(Bucket=self.bucket, Key=key)
            return response["Body"].read().decode("utf-8")
        except UnicodeDecodeError as e:
            raise BlobStoreError(f"s3://{self.bucket}/{key} is not valid UTF-8: {e}") from e
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES:
                return None
            raise BlobStoreError(f"Failed to get s3://{self.bucket}/{key}: {e}") from e
        except BotoCoreError as e:
            raise BlobStoreError(f"Failed to get s3://{self.bucket}/{key}: {e}") from e


class LocalBlobStore(BlobStoreProtocol):
    """
    Blob store writing each blob to a file in a local directory.

    Content type and cache control have no meaning on disk and are ignored.
    """

    def __init__(self, directory: str):
        self.directory = os.path.abspath(directory)

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, key)

    def put(self, key: str, body: str, content_type: str, cache_control: str) -> None:
        path = self.path_for(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            # Readers see either the old or the new file, never a partial one
            fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(path), suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(body)
                os.replace(tmp_path, path)
            except BaseException:
                os.unlink(tmp_path)
                raise
        except OSError as e:
            raise BlobStoreError(f"Failed to write \"{path}\": {e}") from e
        logging.info(f"Saved \"{path}\"")

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise BlobStoreError(f"Failed to read \"{path}\": {e}") from e
        except UnicodeDecodeError as e:
            raise BlobStoreError(f"\"{path}\" is not valid UTF-8: {e}") from e
