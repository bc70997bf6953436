"""Storage collaborators: raw payload archives and canonical feed sinks."""

import json
import logging
import re
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence

from diskcache import Cache

from ..core.constants import FileConstants
from ..core.models import FeedbackItem
from ..utils.data_prep import to_jsonable

logger = logging.getLogger(__name__)

RUN_DIR_RE = re.compile(r"^run(\d+)$")


class RawPayloadStore(Protocol):
    """Anything that can archive a raw payload under a name prefix."""

    def save(self, prefix: str, payload: Any) -> str:
        ...


class FeedbackSink(Protocol):
    """Persistence collaborator receiving canonical feed batches."""

    def store_batch(self, items: Sequence[FeedbackItem]) -> None:
        ...


class FileStorage:
    """
    Writes JSON files to ``<output_dir>/run<N>/scraped-data/``.

    Each instance claims the next free run number on construction, so one
    storage object corresponds to one collection run.
    """

    def __init__(self, output_dir: str = FileConstants.OUTPUT_DIR):
        self.output_dir = Path(output_dir)
        self.run_number = self._next_run_number()
        self._lock = threading.Lock()
        self._sequence = 0

    def _next_run_number(self) -> int:
        if not self.output_dir.is_dir():
            return 1
        numbers = []
        for entry in self.output_dir.iterdir():
            match = RUN_DIR_RE.match(entry.name)
            if match and entry.is_dir():
                numbers.append(int(match.group(1)))
        return max(numbers, default=0) + 1

    @property
    def run_dir(self) -> Path:
        return self.output_dir / f"run{self.run_number}" / "scraped-data"

    def save(self, prefix: str, payload: Any) -> str:
        """Save payload as JSON and return the file path."""
        with self._lock:
            self._sequence += 1
            sequence = self._sequence
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%f")
        path = self.run_dir / f"{prefix}_{timestamp}_{sequence:03d}.json"

        self.run_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False, default=to_jsonable)
        logger.debug(f"Saved {prefix} payload to {path}")
        return str(path)

    def store_batch(self, items: Sequence[FeedbackItem]) -> None:
        self.save("canonical_feed", [item.to_dict() for item in items])


class DiskCacheStorage:
    """Raw payload archive backed by diskcache, entries expire after a TTL."""

    def __init__(self, cache_dir: str = FileConstants.CACHE_DIR,
                 ttl_hours: float = FileConstants.CACHE_TTL_HOURS):
        self.cache = Cache(cache_dir)
        self.expire = ttl_hours * 3600

    def save(self, prefix: str, payload: Any) -> str:
        key = f"{prefix}:{datetime.now(timezone.utc).isoformat()}:{uuid.uuid4().hex[:8]}"
        # Store the JSON form so cached payloads never pickle vendor objects
        self.cache.set(key, json.dumps(payload, default=to_jsonable), expire=self.expire)
        return key

    def load(self, key: str) -> Optional[Any]:
        raw = self.cache.get(key)
        return json.loads(raw) if raw is not None else None

    def keys(self, prefix: str = "") -> list:
        return sorted(k for k in self.cache.iterkeys() if str(k).startswith(prefix))

    def close(self) -> None:
        self.cache.close()
