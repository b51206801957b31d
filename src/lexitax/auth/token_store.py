"""
Scoped key-value stores for the credential.

The memory store lives as long as the process; the file store keeps the
credential in a JSON file so it survives restarts until it is cleared.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

from lexitax.utils.logger import logger


class TokenStore(ABC):
    """Abstract key-value store holding credential values."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""
        pass


class MemoryTokenStore(TokenStore):
    """Process-scoped in-memory store."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class FileTokenStore(TokenStore):
    """Store backed by a JSON object in a single file.

    Every call reads the file again, so a change written by another
    store instance on the same path is picked up immediately. Writes go
    through an owner-only temporary file that replaces the store in one
    step.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(
                "Ignoring unreadable token store", path=str(self.path), error=str(e)
            )
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, values: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        tmp_path.unlink(missing_ok=True)
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(values, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self._save(values)

    def delete(self, key: str) -> None:
        values = self._load()
        if key in values:
            del values[key]
            self._save(values)
