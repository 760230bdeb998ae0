from datetime import datetime, timezone
from typing import List, Optional, Sequence

from marvin.bus.messages import Detection, DetectionLogEntry
from marvin.storage.kv import DETECTIONS_KEY

MAX_ENTRIES = 50


class DetectionLog:
    """Bounded durable log of detection snapshots. Oldest entries are evicted first."""

    def __init__(self, store, key: str = DETECTIONS_KEY, capacity: int = MAX_ENTRIES):
        self.store = store
        self.key = key
        self.capacity = capacity

    def entries(self) -> List[DetectionLogEntry]:
        raw = self.store.get(self.key) or []
        return [DetectionLogEntry(**e) for e in raw]

    def append(self, detections: Sequence[Detection], timestamp: Optional[str] = None) -> DetectionLogEntry:
        entry = DetectionLogEntry(
            timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
            detections=list(detections),
        )
        raw = list(self.store.get(self.key) or [])
        raw.append(entry.model_dump())
        if len(raw) > self.capacity:
            del raw[: len(raw) - self.capacity]
        self.store.set(self.key, raw)
        return entry

    def clear(self) -> None:
        self.store.set(self.key, [])
