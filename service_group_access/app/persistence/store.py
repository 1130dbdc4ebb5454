"""
Settings persistence for the Group Access Service.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from shared.errors import PersistenceError
from shared.logging import get_logger


class SettingsStore(Protocol):
    """Durable storage for setting values keyed by setting name."""

    def load(self) -> Dict[str, Any]:
        ...

    def save(self, values: Dict[str, Any]) -> None:
        ...


class InMemorySettingsStore:
    """Settings store kept in process memory."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values: Dict[str, Any] = dict(values or {})
        self.save_count = 0

    def load(self) -> Dict[str, Any]:
        return dict(self.values)

    def save(self, values: Dict[str, Any]) -> None:
        self.values = dict(values)
        self.save_count += 1


class JsonFileSettingsStore:
    """Settings store backed by a single JSON document.

    Saving writes a temporary file next to the target and renames it over
    the previous document, so readers never observe a partial write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = get_logger("group_access.persistence.json")

    def load(self) -> Dict[str, Any]:
        """Load persisted values; a missing file means nothing was saved yet."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r') as f:
                values = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error("Failed to load settings", path=str(self.path), error=str(e))
            raise PersistenceError(f"Unable to load settings from {self.path}", {"error": str(e)})

        if not isinstance(values, dict):
            raise PersistenceError(f"Settings file {self.path} must contain a JSON object")

        self.logger.debug("Settings loaded", path=str(self.path), count=len(values))
        return values

    def save(self, values: Dict[str, Any]) -> None:
        """Atomically replace the persisted values."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".settings-", suffix=".json")
            try:
                with os.fdopen(fd, 'w') as f:
                    json.dump(values, f, indent=2, sort_keys=True)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            self.logger.error("Failed to save settings", path=str(self.path), error=str(e))
            raise PersistenceError(f"Unable to save settings to {self.path}", {"error": str(e)})

        self.logger.info("Settings saved", path=str(self.path), count=len(values))
