"""Filesystem storage adapter.

Each address maps to one file named after the SHA-256 of the address. The
file's modification time is the entry's last-write time, so no metadata
record is kept next to the payload. Writes go to a temporary file in the
same directory and are renamed into place with ``os.replace``, which is
atomic on POSIX and Windows.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
import tempfile
from pathlib import Path

from fetchguard.types import CacheEntry

logger = logging.getLogger(__name__)

_SUFFIX = ".cache"


def _file_name(address: str) -> str:
    """Generate a stable file name for an address."""
    return hashlib.sha256(address.encode("utf-8")).hexdigest() + _SUFFIX


class AsyncFileStore:
    """Async filesystem storage adapter with atomic replace."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, address: str) -> Path:
        """Return the file that holds the entry for an address."""
        return self._directory / _file_name(address)

    async def read(self, address: str) -> CacheEntry | None:
        """Get the entry for an address."""
        return await asyncio.to_thread(self._read, address)

    async def write(self, address: str, payload: str) -> None:
        """Atomically replace the entry for an address."""
        await asyncio.to_thread(self._write, address, payload)

    async def delete(self, address: str) -> None:
        """Delete the entry for an address."""
        await asyncio.to_thread(self.path_for(address).unlink, missing_ok=True)

    async def clear(self) -> None:
        """Delete all entries."""
        await asyncio.to_thread(self._clear)

    async def disconnect(self) -> None:
        """Disconnect from the storage backend (no-op for files)."""
        pass

    def _read(self, address: str) -> CacheEntry | None:
        path = self.path_for(address)
        try:
            payload = path.read_bytes().decode("utf-8")
            modified_at = int(path.stat().st_mtime * 1000)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Unreadable cache file %s: %s", path, exc)
            return None
        return CacheEntry(address=address, payload=payload, modified_at=modified_at)

    def _write(self, address: str, payload: str) -> None:
        path = self.path_for(address)
        self._directory.mkdir(parents=True, exist_ok=True)

        fd = None
        tmp_path: str | None = None
        try:
            fd = tempfile.NamedTemporaryFile(
                mode="w",
                dir=self._directory,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
                newline="",
            )
            tmp_path = fd.name
            fd.write(payload)
            fd.flush()
            os.fsync(fd.fileno())
            fd.close()
            fd = None
            os.replace(tmp_path, path)
        except BaseException:
            if fd is not None:
                fd.close()
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug("Cached %s in %s", address, path.name)

    def _clear(self) -> None:
        if not self._directory.exists():
            return
        for path in self._directory.glob(f"*{_SUFFIX}"):
            path.unlink(missing_ok=True)
