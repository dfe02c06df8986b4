"""Key/value storage backends for the persisted finance document.

A backend stores one text value per key. ``get`` returns None for a
missing key and may raise ``OSError`` for an unreadable one (including
content that is not valid UTF-8); ``set`` may raise ``OSError``. The
store decides what to do with those errors.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class JsonFileStorage:
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        target = self.path_for(key)
        if not target.exists():
            return None
        try:
            with target.open("r", encoding="utf-8") as handle:
                return handle.read()
        except UnicodeDecodeError as e:
            raise OSError(f"{target} is not valid UTF-8: {e}") from e

    def set(self, key: str, value: str) -> None:
        target = self.path_for(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        # atomic replace
        tmp = target.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            handle.write(value)
        tmp.replace(target)
        logger.debug("Wrote %d chars to %s", len(value), target)


class MemoryStorage:
    """Dict-backed storage, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
