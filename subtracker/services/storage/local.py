"""
Local Storage Implementations

Two backends that need no network:

- InMemoryKeyValueStore: a dict. Used by tests, and as the fallback when
  the configured backend cannot be reached.
- FileKeyValueStore: one file per key in a data directory. This is the
  default and plays the role of the device's preferences store.

TRADEOFFS:
- The file backend writes to a temporary file and renames it over the
  old one, so a crash leaves either the old or the new value, never a
  mix. There is no locking between processes.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from subtracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    validate_key,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Key-value storage held in process memory. Lost on exit."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(validate_key(key))

    def set(self, key: str, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise StorageError(f"Values must be bytes, got {type(value).__name__}")
        self._data[validate_key(key)] = bytes(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(validate_key(key), None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value storage backed by a directory.

    Each key maps to `<data_dir>/<quoted key>.bin`. The directory is
    created on first write.
    """

    SUFFIX = ".bin"

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir).expanduser()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        return self._data_dir / f"{quote(validate_key(key), safe='')}{self.SUFFIX}"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def set(self, key: str, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise StorageError(f"Values must be bytes, got {type(value).__name__}")

        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                # Leave no half-written temp files behind
                try:
                    os.unlink(tmp_name)
                except FileNotFoundError:
                    pass
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}")
