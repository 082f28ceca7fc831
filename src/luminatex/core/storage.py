"""Verbatim persistence of source documents.

Sources are stored as-is in a single JSON file keyed by a caller-chosen name.
Nothing is interpreted on the way in or out: a restored source is just a fresh
string for the pipeline.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import RLock

from slugify import slugify

from .exceptions import StoreError


logger = logging.getLogger(__name__)

_LOCK = RLock()


def normalise_key(key: str) -> str:
    """Return the storage key used for a caller-chosen name."""
    cleaned = slugify(key, regex_pattern=r"[^\w.\-]+", lowercase=False)
    if not cleaned:
        raise StoreError(f"Invalid storage key '{key}'.")
    return cleaned


class SourceStore:
    """JSON-backed mapping from keys to raw source documents."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Unable to read source store '{self.path}'.") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Source store '{self.path}' is corrupted.")
        return {str(key): str(value) for key, value in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Unable to write source store '{self.path}'.") from exc

    def save(self, key: str, source: str) -> str:
        """Persist ``source`` under ``key`` and return the normalised key."""
        if not isinstance(source, str):
            raise StoreError("Only text sources can be persisted.")
        name = normalise_key(key)
        with _LOCK:
            data = self._read()
            data[name] = source
            self._write(data)
        logger.debug("Saved %d characters under '%s'", len(source), name)
        return name

    def load(self, key: str) -> str:
        """Return the source stored under ``key``."""
        name = normalise_key(key)
        with _LOCK:
            data = self._read()
        try:
            return data[name]
        except KeyError:
            raise StoreError(f"No source stored under '{name}'.") from None

    def delete(self, key: str) -> bool:
        """Remove ``key`` from the store, returning whether it existed."""
        name = normalise_key(key)
        with _LOCK:
            data = self._read()
            if name not in data:
                return False
            del data[name]
            self._write(data)
        return True

    def keys(self) -> list[str]:
        with _LOCK:
            return sorted(self._read())


__all__ = ["SourceStore", "normalise_key"]
