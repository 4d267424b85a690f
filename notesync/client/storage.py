"""
Device key-value storage.

One JSON document per key inside a directory, the on-device equivalent of
an app's async key-value store. Reads never fail: a missing or unreadable
entry is reported as absent. Writes raise LocalStorageError since nothing
sits below this tier.
"""

import json
import logging
import os
import tempfile
from urllib.parse import quote

logger = logging.getLogger("notesync.client.storage")

NOTES_KEY = "@notes_app_storage"
TOKEN_KEY = "authToken"
USER_KEY = "userData"
SKIPPED_KEY = "authSkipped"
THEME_KEY = "@notes_app_theme"


class LocalStorageError(Exception):
    """The device tier failed to hold the data."""

    tier = "device"


class FileStorage:
    def __init__(self, directory: str) -> None:
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, quote(key, safe="") + ".json")

    def get_item(self, key: str):
        path = self._path(key)
        try:
            with open(path, encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.warning("storage_read_failed", extra={"key": key}, exc_info=True)
            return None

    def set_item(self, key: str, value) -> None:
        tmp = None
        try:
            os.makedirs(self.directory, exist_ok=True)
            # écriture atomique: fichier temporaire puis rename
            fd, tmp = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(value, fh)
            os.replace(tmp, self._path(key))
        except (OSError, TypeError, ValueError) as e:
            if tmp is not None and os.path.exists(tmp):
                os.remove(tmp)
            raise LocalStorageError(f"Could not write {key!r} to device storage: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
        except OSError as e:
            raise LocalStorageError(f"Could not remove {key!r} from device storage: {e}") from e


class ThemePreference:
    """Dark-mode flag, stored as "dark" / "light"."""

    def __init__(self, storage: FileStorage) -> None:
        self.storage = storage

    def is_dark_mode(self) -> bool:
        return self.storage.get_item(THEME_KEY) == "dark"

    def set_dark_mode(self, enabled: bool) -> None:
        self.storage.set_item(THEME_KEY, "dark" if enabled else "light")

    def toggle(self) -> bool:
        enabled = not self.is_dark_mode()
        self.set_dark_mode(enabled)
        return enabled
