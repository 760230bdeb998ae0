import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

# Durable keys (one JSON document holds all of them)
DETECTIONS_KEY = "marvinDetections"
PRO_MODE_KEY = "marvinProMode"


class JsonStore:
    """
    Small durable key-value store backed by one JSON file.
    Every set() rewrites the file, so values survive a restart.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Store %s unreadable, starting empty: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(self.path)


class MemoryStore:
    """In-process stand-in with the same interface, for tests and throwaway sessions."""

    def __init__(self, data: Dict[str, Any] = None):
        self.data = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        # round-trip through JSON so callers see what a file store would return
        self.data[key] = json.loads(json.dumps(value))
