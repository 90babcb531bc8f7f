"""Local-disk storage for book attachment files.

All files live directly under one configured directory. File names are opaque
``<uuid4 hex><extension>`` tokens; nothing user-supplied ends up in a path
except a whitelisted extension.
"""

from __future__ import annotations

import mimetypes
import os
import uuid
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from src.app.core.errors import PayloadTooLarge, StorageIOError, UnsupportedMediaType
from src.app.runtime.config.config_data import AttachmentConfig


def normalize_mime_type(declared: str | None) -> str:
    """Drop parameters and case from a declared content type."""
    if not declared:
        return ""
    return declared.split(";", 1)[0].strip().lower()


@dataclass(frozen=True)
class AttachmentStream:
    """Readable handle on a stored attachment."""

    path: Path
    size_bytes: int
    media_type: str
    chunk_size: int = 64 * 1024

    def read(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise StorageIOError(f"Failed to read attachment: {e}") from e

    def iter_chunks(self, chunk_size: int | None = None) -> Iterator[bytes]:
        size = chunk_size or self.chunk_size
        try:
            with open(self.path, "rb") as fh:
                while chunk := fh.read(size):
                    yield chunk
        except OSError as e:
            raise StorageIOError(f"Failed to read attachment: {e}") from e


class AttachmentStore:
    """Writes, opens and removes attachment files in a single directory."""

    def __init__(self, config: AttachmentConfig) -> None:
        self._root = Path(config.directory).expanduser()
        self._max_size_bytes = config.max_size_bytes
        self._accepted_mime_types = {normalize_mime_type(m) for m in config.accepted_mime_types}
        self._accepted_extensions = {ext.lower() for ext in config.accepted_extensions}
        self._default_extension = config.default_extension
        self._chunk_size = config.chunk_size

    @property
    def root(self) -> Path:
        return self._root

    @property
    def max_size_bytes(self) -> int:
        return self._max_size_bytes

    def ensure_root(self) -> Path:
        self._root.mkdir(parents=True, exist_ok=True)
        return self._root

    def check_upload(self, size_bytes: int, declared_mime_type: str | None) -> None:
        """Reject unsupported or oversized uploads before anything touches the disk."""
        mime_type = normalize_mime_type(declared_mime_type)
        if mime_type not in self._accepted_mime_types:
            raise UnsupportedMediaType(
                f"Unsupported file type '{mime_type or 'unknown'}'; "
                f"accepted: {', '.join(sorted(self._accepted_mime_types))}"
            )
        if size_bytes > self._max_size_bytes:
            raise PayloadTooLarge(size_bytes, self._max_size_bytes)

    def new_storage_path(self, original_filename: str | None = None) -> str:
        suffix = Path(original_filename).suffix.lower() if original_filename else ""
        if suffix not in self._accepted_extensions:
            suffix = self._default_extension
        return f"{uuid.uuid4().hex}{suffix}"

    def resolve(self, storage_path: str) -> Path:
        """Map a stored name onto the attachment directory, refusing anything else."""
        if not storage_path or Path(storage_path).name != storage_path:
            raise StorageIOError(f"Invalid attachment path: {storage_path!r}")
        return self._root / storage_path

    def write(self, storage_path: str, data: bytes) -> int:
        """Write ``data`` to a new file; a failed write leaves nothing behind."""
        target = self.resolve(storage_path)
        created = False
        try:
            self.ensure_root()
            with open(target, "xb") as fh:
                created = True
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
        except OSError as e:
            if created:
                self.remove_quietly(storage_path)
            raise StorageIOError(f"Failed to store attachment: {e}") from e

        logger.debug("Stored attachment {} ({} bytes)", storage_path, len(data))
        return len(data)

    def size_of(self, storage_path: str) -> int | None:
        try:
            return self.resolve(storage_path).stat().st_size
        except (OSError, StorageIOError):
            return None

    def open_stream(self, storage_path: str, expected_size: int) -> AttachmentStream | None:
        """Return a stream if the file exists with the expected size, else ``None``."""
        size = self.size_of(storage_path)
        if size is None or size != expected_size:
            return None
        path = self.resolve(storage_path)
        media_type, _ = mimetypes.guess_type(path.name)
        return AttachmentStream(
            path=path,
            size_bytes=size,
            media_type=media_type or "application/octet-stream",
            chunk_size=self._chunk_size,
        )

    def remove_quietly(self, storage_path: str) -> bool:
        """Best-effort removal: failures are logged, never raised."""
        try:
            self.resolve(storage_path).unlink()
        except FileNotFoundError:
            logger.debug("Attachment {} already absent", storage_path)
            return False
        except (OSError, StorageIOError) as e:
            logger.warning("Failed to remove attachment {}: {}", storage_path, e)
            return False
        logger.debug("Removed attachment {}", storage_path)
        return True

    def is_writable(self) -> bool:
        try:
            root = self.ensure_root()
        except OSError:
            return False
        return os.access(root, os.W_OK)

    def list_stored(self) -> list[str]:
        """Names of all files currently in the attachment directory."""
        if not self._root.is_dir():
            return []
        return sorted(entry.name for entry in self._root.iterdir() if entry.is_file())
