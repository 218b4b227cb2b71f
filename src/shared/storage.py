"""
Supabase Storage gateway used to delete images a record no longer references.

Expects env: SUPABASE_URL, SUPABASE_KEY; optional STORAGE_BUCKET.
"""

import os
from enum import Enum
from typing import Optional
from urllib.parse import unquote, urlsplit

from aws_lambda_powertools import Logger
from shared.database import get_supabase_client

logger = Logger(service="image-storage")

DEFAULT_BUCKET = "site-images"
OBJECT_PREFIX = "/storage/v1/object/"
ACCESS_MODES = ("public", "sign", "authenticated")


class DeletionResult(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    SKIPPED = "skipped"
    ERROR = "error"

    @property
    def is_success(self) -> bool:
        return self in (DeletionResult.DELETED, DeletionResult.NOT_FOUND)


class ImageStorageGateway:
    """Removes objects from the image bucket given the public URL stored in a record."""

    def __init__(self, bucket: Optional[str] = None, client=None, base_url: Optional[str] = None) -> None:
        self.bucket = bucket or os.environ.get("STORAGE_BUCKET") or DEFAULT_BUCKET
        self.db = client if client is not None else get_supabase_client()
        base_url = base_url or os.environ.get("SUPABASE_URL") or ""
        self.host = urlsplit(base_url).netloc.lower()

    def extract_object_key(self, reference: str) -> Optional[str]:
        """
        Extracts the object key relative to the bucket from a storage URL.

        Example:
            https://x.supabase.co/storage/v1/object/public/site-images/blog/a.png?t=1
            -> 'blog/a.png'

        Only absolute URLs on the project's Supabase host, under
        /storage/v1/object/<public|sign|authenticated>/<bucket>/, yield a key.
        Returns None for everything else (other hosts, relative or local
        paths, empty values), and without a configured host.
        """
        if not reference or not isinstance(reference, str) or not self.host:
            return None
        parts = urlsplit(reference.strip())
        if parts.scheme not in ("http", "https") or parts.netloc.lower() != self.host:
            return None
        for mode in ACCESS_MODES:
            prefix = f"{OBJECT_PREFIX}{mode}/{self.bucket}/"
            if parts.path.startswith(prefix):
                key = unquote(parts.path[len(prefix):]).strip("/")
                return key or None
        return None

    def delete(self, reference: str) -> DeletionResult:
        """
        Deletes the object behind `reference`. Never raises.

        NOT_FOUND is a successful outcome, so deleting twice is harmless.
        """
        key = self.extract_object_key(reference)
        if not key:
            logger.warning("Image reference outside bucket, skipping", extra={"reference": reference, "bucket": self.bucket})
            return DeletionResult.SKIPPED
        try:
            removed = self.db.storage.from_(self.bucket).remove([key])
        except Exception as e:
            if _is_not_found(e):
                logger.warning("Image not found in storage", extra={"reference": reference, "key": key})
                return DeletionResult.NOT_FOUND
            logger.error(f"Failed to delete image: {e}", extra={"reference": reference, "key": key})
            return DeletionResult.ERROR

        if not removed:
            logger.warning("Image not found in storage", extra={"reference": reference, "key": key})
            return DeletionResult.NOT_FOUND
        logger.info("Image deleted", extra={"reference": reference, "key": key})
        return DeletionResult.DELETED


def _is_not_found(error: Exception) -> bool:
    status = getattr(error, "status", None) or getattr(error, "status_code", None)
    if str(status) == "404":
        return True
    return "not found" in str(error).lower()
