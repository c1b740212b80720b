"""Blob storage for the persisted application state.

State is a single small JSON document rewritten in full on every change.
Files are written atomically (temp file, fsync, rename) with owner-only
permissions so a crash mid-write never leaves a truncated state file.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

# Owner-only directory permissions for the data directory.
_DATA_DIR_MODE = 0o700

# Owner-only file permissions for stored blobs.
_BLOB_FILE_MODE = 0o600


class BlobStore(Protocol):
    """Protocol for reading and writing named blobs."""

    def read(self, name: str) -> bytes | None: ...

    def write(self, name: str, data: bytes) -> None: ...


class LocalBlobStore:
    """Stores blobs as files under a root directory.

    `read` returns None for a missing blob; any other I/O failure
    propagates as OSError. `write` raises OSError on failure and never
    leaves temp files behind.
    """

    def __init__(self, root_dir: str | Path) -> None:
        self._root_dir = Path(root_dir).expanduser().resolve()

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def _resolve(self, name: str) -> Path:
        target = (self._root_dir / name).resolve()
        if not target.is_relative_to(self._root_dir) or target == self._root_dir:
            raise ValueError(f"Path traversal rejected: '{name}' resolves outside data directory")
        return target

    def read(self, name: str) -> bytes | None:
        """Return the blob contents, or None when no blob exists under that name."""
        target = self._resolve(name)
        if not target.is_file():
            return None
        return target.read_bytes()

    def write(self, name: str, data: bytes) -> None:
        """Atomically replace the blob under the configured directory.

        Creates the directory lazily on first write with owner-only
        permissions (0o700).
        """
        target = self._resolve(name)
        target.parent.mkdir(mode=_DATA_DIR_MODE, parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=str(target.parent), suffix=".tmp", prefix=f".{target.stem}_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _BLOB_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("wrote blob", name=name, path=str(target), size=len(data))
