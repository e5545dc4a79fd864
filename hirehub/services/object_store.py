"""Object store adapter: physical files behind CVs, photos and project files."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shutil
import time
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import BinaryIO, Protocol
from urllib.parse import unquote, urlparse
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

from hirehub.core.config import Settings
from hirehub.core.errors import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_COPY_CHUNK = 1024 * 1024


class StoredObject(BaseModel):
    """Reference to one persisted object."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str
    size_bytes: int


class ObjectStore(Protocol):
    """Protocol for the blob store backing profile assets."""

    async def put(
        self,
        stream: BinaryIO,
        content_type: str,
        *,
        category: str,
        owner_id: str,
        original_filename: str,
    ) -> StoredObject:
        """Persist one stream and return its key and size."""

    async def delete(self, key: str) -> bool:
        """Delete one object; a missing key is not an error. Returns existed flag."""

    def url_for(self, key: str) -> str:
        """Absolute URL under which the object is served."""

    def key_from_url(self, url: str) -> str:
        """Recover an object key from an absolute URL, relative URL or bare key."""


def sanitize_filename(filename: str) -> str:
    """Replace anything outside [a-zA-Z0-9.-] so names are safe in keys and URLs."""
    cleaned = _UNSAFE_CHARS.sub("_", os.path.basename(filename or "")).strip(".")
    return cleaned or "file"


class LocalObjectStore:
    """Store objects on local disk under ``<root>/<category>/<name>``."""

    def __init__(self, *, root_dir: str, base_url: str, url_prefix: str = "/uploads"):
        self._root = Path(root_dir).expanduser().resolve()
        self._base_url = base_url.rstrip("/")
        self._url_prefix = "/" + url_prefix.strip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalObjectStore":
        return cls(
            root_dir=settings.upload_dir,
            base_url=settings.uploads_base_url,
            url_prefix=settings.uploads_url_prefix,
        )

    @property
    def root(self) -> Path:
        return self._root

    def build_key(self, *, category: str, owner_id: str, original_filename: str) -> str:
        """Key layout: ``<category>/<millis>-<owner>-<suffix>-<sanitized name>``."""
        timestamp = int(time.time() * 1000)
        owner = sanitize_filename(str(owner_id))
        return f"{category}/{timestamp}-{owner}-{uuid4().hex[:8]}-{sanitize_filename(original_filename)}"

    def resolve_path(self, key: str) -> Path:
        """Resolve a key to its file path, refusing keys that escape the root."""
        path = (self._root / key).resolve()
        if path == self._root or self._root not in path.parents:
            raise StorageError(f"Invalid object key: {key}")
        return path

    async def put(
        self,
        stream: BinaryIO,
        content_type: str,
        *,
        category: str,
        owner_id: str,
        original_filename: str,
    ) -> StoredObject:
        key = self.build_key(category=category, owner_id=owner_id, original_filename=original_filename)
        try:
            size = await asyncio.to_thread(self._write, key, stream)
        except StorageError:
            raise
        except OSError as exc:
            logger.error("Object write failed key=%s content_type=%s: %s", key, content_type, exc)
            raise StorageError("Could not store uploaded file") from exc
        logger.info("Stored object key=%s size=%d content_type=%s", key, size, content_type)
        return StoredObject(key=key, size_bytes=size)

    def _write(self, key: str, stream: BinaryIO) -> int:
        path = self.resolve_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="wb",
                prefix=".upload-",
                suffix=".tmp",
                dir=path.parent,
                delete=False,
            ) as handle:
                tmp_path = Path(handle.name)
                shutil.copyfileobj(stream, handle, _COPY_CHUNK)
                handle.flush()
                size = handle.tell()
            os.replace(tmp_path, path)
            return size
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink(missing_ok=True)

    async def delete(self, key: str) -> bool:
        path = self.resolve_path(key)
        existed = await asyncio.to_thread(self._unlink, path)
        if existed:
            logger.info("Deleted object key=%s", key)
        else:
            logger.info("Object already absent key=%s", key)
        return existed

    @staticmethod
    def _unlink(path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def exists(self, key: str) -> bool:
        return self.resolve_path(key).is_file()

    def url_for(self, key: str) -> str:
        return f"{self._base_url}/{key.lstrip('/')}"

    def key_from_url(self, url: str) -> str:
        """
        Accepts any of:
            http://host/uploads/cv/123-a-resume.pdf?x=1
            /uploads/cv/123-a-resume.pdf
            cv/123-a-resume.pdf
        and returns ``cv/123-a-resume.pdf``.
        The path of the store's base URL is stripped first, so a store
        served under a sub-path still recovers its own keys.
        """
        path = unquote(urlparse(url).path) if "://" in url else url.split("?", 1)[0].split("#", 1)[0]
        path = "/" + path.lstrip("/")
        base_path = urlparse(self._base_url).path.rstrip("/")
        for prefix in (base_path + "/", self._url_prefix + "/"):
            if prefix != "/" and path.startswith(prefix):
                return path[len(prefix):].lstrip("/")
        return path.lstrip("/")
