"""Binary storage for apartment images."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import httpx

from dirot.config import settings
from dirot.errors import UploadError

logger = logging.getLogger(__name__)


class BlobStorage(ABC):
    """Stores a binary blob under a bucket/path and returns its public URL."""

    @abstractmethod
    def upload(
        self, bucket: str, path: str, data: bytes, content_type: str | None = None
    ) -> str:
        """
        Upload a blob.

        Args:
            bucket: Bucket identifier
            path: Path inside the bucket
            data: File contents
            content_type: MIME type, if known

        Returns:
            Publicly reachable URL

        Raises:
            UploadError: If the bucket rejects the upload
        """
        ...

    def close(self) -> None:
        """Release any held resources."""


class LocalBlobStorage(BlobStorage):
    """Writes blobs below a local directory, one sub-directory per bucket."""

    def __init__(self, root: Path, buckets: list[str] | None = None) -> None:
        """
        Initialize local storage.

        Args:
            root: Directory holding the buckets
            buckets: Buckets that exist; None accepts any bucket
        """
        self.root = root
        self.buckets = buckets

    def upload(
        self, bucket: str, path: str, data: bytes, content_type: str | None = None
    ) -> str:
        if self.buckets is not None and bucket not in self.buckets:
            raise UploadError(f"Bucket not found: {bucket}")

        target = self.root / bucket / path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise UploadError(f"Could not write {target}: {e}") from e
        return target.resolve().as_uri()


class SupabaseBlobStorage(BlobStorage):
    """Supabase storage API client."""

    def __init__(self, base_url: str, api_key: str, timeout: float | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            timeout=timeout or settings.request_timeout,
            headers={"apikey": api_key, "Authorization": f"Bearer {api_key}"},
        )

    def upload(
        self, bucket: str, path: str, data: bytes, content_type: str | None = None
    ) -> str:
        url = f"{self.base_url}/storage/v1/object/{bucket}/{path}"
        headers = {"Content-Type": content_type or "application/octet-stream"}
        try:
            response = self.client.post(url, content=data, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UploadError(
                f"Upload to {bucket} failed with HTTP {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise UploadError(f"Upload to {bucket} failed: {e}") from e

        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        self.client.close()


__all__ = ["BlobStorage", "LocalBlobStorage", "SupabaseBlobStorage"]
