"""
Image storage for venue and event uploads.

Images are opaque blobs: services only hand ``UploadFile`` objects to
an ``ImageStorage`` and keep the returned reference string.  The
default ``LocalImageStorage`` writes each file into a single upload
directory under its client‑supplied base name, so two uploads with the
same filename overwrite each other.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from fastapi import UploadFile


class ImageStorage(ABC):
    """Interface for persisting uploaded images."""

    @abstractmethod
    async def save(self, upload: UploadFile) -> str:
        """Persist one upload and return its reference."""

    async def save_all(self, uploads: Sequence[UploadFile]) -> List[str]:
        """Persist every upload in order and return their references."""
        return [await self.save(upload) for upload in uploads]


class LocalImageStorage(ImageStorage):
    """Write uploads to ``directory`` and reference them as ``<directory>/<name>``."""

    def __init__(self, directory: str) -> None:
        self.directory = Path(directory)

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def save(self, upload: UploadFile) -> str:
        logger = logging.getLogger(__name__)
        # Strip any client supplied directories from the name.
        filename = Path(upload.filename or "upload").name
        self.ensure_directory()
        target = self.directory / filename
        content = await upload.read()
        target.write_bytes(content)
        logger.debug("Stored upload %s (%d bytes)", target, len(content))
        return str(target)
