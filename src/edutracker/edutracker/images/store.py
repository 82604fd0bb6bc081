from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from werkzeug.utils import secure_filename

from ..core.constants import MAX_IMAGE_BYTES
from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic"}


class ImageStoreError(DomainError):
    """Raised when the image backend cannot store or remove an image."""


@dataclass(frozen=True)
class ImageRef:
    """Where a photograph lives: public URL plus the backend's identifier."""

    url: str
    public_id: str

    def to_dict(self) -> dict:
        return {"url": self.url, "public_id": self.public_id}


class ImageStore(Protocol):
    def save(self, data: bytes, *, filename: str, folder: str) -> ImageRef:
        raise NotImplementedError

    def destroy(self, public_id: str) -> bool:
        """Remove an image. Returns False if it was already gone."""

        raise NotImplementedError


class LocalImageStore(ImageStore):
    """Stores photographs under a directory served at ``base_url``."""

    def __init__(self, root_dir: str | Path, *, base_url: str = "/uploads"):
        self._root = Path(root_dir).resolve()
        self._base_url = base_url.rstrip("/")

    def _path_for(self, public_id: str) -> Path:
        path = (self._root / public_id).resolve()
        if self._root not in path.parents:
            raise ImageStoreError(f"Image id escapes the upload directory: {public_id!r}")
        return path

    def save(self, data: bytes, *, filename: str, folder: str) -> ImageRef:
        if not data:
            raise ValidationError("Image file is empty")
        if len(data) > MAX_IMAGE_BYTES:
            raise ValidationError(f"Image exceeds {MAX_IMAGE_BYTES // (1024 * 1024)}MB limit")

        ext = Path(secure_filename(filename or "")).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError("Only image files are allowed")

        safe_folder = "/".join(secure_filename(p) for p in folder.split("/") if secure_filename(p))
        public_id = f"{safe_folder}/{uuid.uuid4().hex}{ext}" if safe_folder else f"{uuid.uuid4().hex}{ext}"
        path = self._path_for(public_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise ImageStoreError(f"Could not store image: {e}") from e

        logger.debug("Stored image %s (%d bytes)", public_id, len(data))
        return ImageRef(url=f"{self._base_url}/{public_id}", public_id=public_id)

    def destroy(self, public_id: str) -> bool:
        path = self._path_for(public_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ImageStoreError(f"Could not delete image {public_id}: {e}") from e
        return True

    def open_path(self, public_id: str) -> Optional[Path]:
        path = self._path_for(public_id)
        return path if path.is_file() else None
