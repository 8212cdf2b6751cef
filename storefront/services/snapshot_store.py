# storefront/services/snapshot_store.py
import hashlib
import json
import os
import threading
from typing import Any, Dict, List

from storefront.utils.settings import SNAPSHOT_DIR
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SnapshotStore:
    """
    Ostatnia potwierdzona przez serwer lista (koszyk / wishlista) per uzytkownik,
    trzymana w plikach JSON. Sluzy tylko do szybkiego startu zanim przyjdzie fetch.
    """

    def __init__(self, directory: str | None = None):
        self.directory = SNAPSHOT_DIR if directory is None else directory
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.directory)

    def _path(self, kind: str, email: str) -> str:
        digest = hashlib.sha1(email.lower().encode("utf-8")).hexdigest()[:16]
        return os.path.join(self.directory, f"{kind}-{digest}.json")

    def load(self, kind: str, email: str) -> List[Dict[str, Any]]:
        if not self.enabled:
            return []
        path = self._path(kind, email)
        try:
            with self._lock, open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable {kind} snapshot {path}: {e}")
            return []

        if not isinstance(data, dict) or data.get("email") != email:
            return []
        items = data.get("items")
        return items if isinstance(items, list) else []

    def save(self, kind: str, email: str, items: List[Dict[str, Any]]) -> None:
        if not self.enabled:
            return
        path = self._path(kind, email)
        tmp = f"{path}.tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with self._lock:
                with open(tmp, "w", encoding="utf-8") as f:
                    json.dump({"email": email, "items": items}, f)
                os.replace(tmp, path)
        except OSError as e:
            logger.warning(f"Failed to write {kind} snapshot {path}: {e}")
