from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterator, Optional
from urllib.parse import quote, unquote
import logging
import os
import tempfile
import threading

from portal.core.config import Settings

logger = logging.getLogger(__name__)

class KeyValueBackend(ABC):
    """Flat string-keyed store holding serialized text values."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def keys(self) -> Iterator[str]:
        pass

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

class InMemoryBackend(KeyValueBackend):
    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

class JsonFileBackend(KeyValueBackend):
    """One file per key under `root`; writes go through a temp file and os.replace."""

    SUFFIX = ".json"

    def __init__(self, root):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / (quote(key, safe="") + self.SUFFIX)

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, self._path(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> Iterator[str]:
        for path in sorted(self.root.glob("*" + self.SUFFIX)):
            yield unquote(path.name[: -len(self.SUFFIX)])

def build_backend(settings: Settings) -> KeyValueBackend:
    if settings.STORAGE_BACKEND == "file":
        logger.info(f"Storage configured for directory: {settings.STORAGE_DIR}")
        return JsonFileBackend(settings.STORAGE_DIR)
    if settings.STORAGE_BACKEND != "memory":
        logger.warning(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}', using memory")
    return InMemoryBackend()
