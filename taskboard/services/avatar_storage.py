"""
Avatar blob storage.

Stores uploaded images on the local filesystem and hands out public URLs
under AVATAR_PUBLIC_BASE_URL (served by the app as static files).
"""

import asyncio
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class AvatarStorageError(Exception):
    """Upload to blob storage failed."""


class LocalAvatarStorage:
    """Filesystem-backed object storage keyed by relative path."""

    def __init__(self, root: Union[str, Path], public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _resolve(self, object_path: str) -> Path:
        target = (self.root / object_path).resolve()
        root = self.root.resolve()
        if root != target and root not in target.parents:
            raise AvatarStorageError(f"Invalid object path: {object_path}")
        return target

    async def upload(self, object_path: str, content: bytes, upsert: bool = True) -> None:
        """Write content at object_path, replacing an existing object when upsert is set."""
        target = self._resolve(object_path)
        if target.exists() and not upsert:
            raise AvatarStorageError(f"Object already exists: {object_path}")

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise AvatarStorageError(f"Could not store {object_path}") from exc
        logger.debug("Stored avatar object %s (%s bytes)", object_path, len(content))

    def public_url(self, object_path: str) -> str:
        return f"{self.public_base_url}/{object_path.lstrip('/')}"
