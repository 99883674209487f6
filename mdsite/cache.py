"""A JSON-backed cache of file modification times and content hashes."""

from __future__ import annotations

import hashlib
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_NANOS_PER_SECOND = 1_000_000_000


def _hash_bytes(data: bytes) -> str:
    return hashlib.blake2b(data, digest_size=32).hexdigest()


@dataclass(frozen=True)
class FileMetadata:
    """Modification time (nanoseconds since the epoch) and content hash of a file."""

    modified: int
    hash: str | None = None

    def to_json(self) -> dict[str, Any]:
        secs, nanos = divmod(self.modified, _NANOS_PER_SECOND)
        return {
            "modified": {"secs_since_epoch": secs, "nanos_since_epoch": nanos},
            "hash": self.hash,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> FileMetadata:
        try:
            modified = data["modified"]
            nanos = int(modified["secs_since_epoch"]) * _NANOS_PER_SECOND + int(
                modified["nanos_since_epoch"]
            )
            return cls(modified=nanos, hash=data.get("hash"))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"malformed file metadata: {data!r}") from exc


@dataclass
class FileCache:
    """Cached metadata keyed by file path."""

    file_data: dict[Path, FileMetadata] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {
            "file_data": {str(path): meta.to_json() for path, meta in self.file_data.items()}
        }

    @classmethod
    def from_json(cls, data: Any) -> FileCache:
        try:
            entries = data["file_data"]
            return cls(
                file_data={Path(key): FileMetadata.from_json(value) for key, value in entries.items()}
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError("malformed cache document") from exc


def save_cache(cache: FileCache, path: str | os.PathLike[str]) -> None:
    """Write the cache to ``path`` as JSON."""
    Path(path).write_text(json.dumps(cache.to_json()), encoding="utf-8")


def load_cache(path: str | os.PathLike[str]) -> FileCache:
    """Read a cache previously written by :func:`save_cache`."""
    return FileCache.from_json(json.loads(Path(path).read_text(encoding="utf-8")))


def compute_file_metadata(path: str | os.PathLike[str]) -> FileMetadata:
    """Return the modification time and content hash of the file at ``path``."""
    file_path = Path(path)
    modified = file_path.stat().st_mtime_ns
    return FileMetadata(modified=modified, hash=_hash_bytes(file_path.read_bytes()))


@dataclass
class CacheContext:
    """A cache bound to the JSON file it is stored in."""

    path: Path
    cache: FileCache = field(default_factory=FileCache)

    @classmethod
    def load_or_default(cls, path: str | os.PathLike[str]) -> CacheContext:
        """Load the cache at ``path``, or start an empty one if the file is absent."""
        cache_path = Path(path)
        cache = load_cache(cache_path) if cache_path.exists() else FileCache()
        return cls(path=cache_path, cache=cache)

    def _differs(self, path: Path, current: FileMetadata) -> bool:
        cached = self.cache.file_data.get(path)
        if cached is None:
            return True
        return not (cached.modified == current.modified or cached.hash == current.hash)

    def has_file_changed(self, path: str | os.PathLike[str]) -> bool:
        """Return True unless the cached modification time or hash still matches."""
        file_path = Path(path)
        return self._differs(file_path, compute_file_metadata(file_path))

    def update_file_if_changed(self, file_path: str | os.PathLike[str]) -> bool:
        """Record a changed file and persist the cache; return whether it changed."""
        path = Path(file_path)
        metadata = compute_file_metadata(path)
        if not self._differs(path, metadata):
            logger.info("Skipping unchanged file: %s", path)
            return False
        self.cache.file_data[path] = metadata
        logger.info("File path %s with cache path as %s", path, self.path)
        try:
            save_cache(self.cache, self.path)
        except OSError as exc:
            logger.warning("Could not save cache %s: %s", self.path, exc)
        return True