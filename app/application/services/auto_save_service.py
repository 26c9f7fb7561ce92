import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from ..ports.analysis_repo import AnalysisRepository
from ...utils import utcnow

logger = logging.getLogger(__name__)

SAVED = "saved"
SKIPPED = "skipped"


@dataclass(frozen=True)
class SaveOutcome:
    status: str
    saved_id: Optional[int] = None
    reason: Optional[str] = None

    @classmethod
    def saved(cls, saved_id: int) -> "SaveOutcome":
        return cls(status=SAVED, saved_id=saved_id)

    @classmethod
    def skipped(cls, reason: str) -> "SaveOutcome":
        return cls(status=SKIPPED, reason=reason)


class _KeyedLocks:
    """One lock per key, dropped again once nobody holds or waits for it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[Any, threading.Lock] = {}
        self._users: Dict[Any, int] = defaultdict(int)

    def acquire(self, key: Any) -> threading.Lock:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] += 1
        lock.acquire()
        return lock

    def release(self, key: Any, lock: threading.Lock) -> None:
        lock.release()
        with self._guard:
            self._users[key] -= 1
            if self._users[key] <= 0:
                self._locks.pop(key, None)
                self._users.pop(key, None)


@dataclass
class AutoSaveService:
    """
    Decides whether a freshly computed analysis is written to the user's history.

    At most one record is auto-saved per (user, stored file name) inside the
    rolling window. Check-then-insert is serialised per key inside this
    process only; separate worker processes can still race each other.
    The caller must pass an already authenticated user id.
    """

    analysis_repo: AnalysisRepository
    window: timedelta = timedelta(minutes=5)
    clock: Callable[[], datetime] = field(default=utcnow)
    _locks: _KeyedLocks = field(default_factory=_KeyedLocks, init=False, repr=False)

    def attempt(self, user_id: int, analysis: Dict[str, Any], image_info: Dict[str, Any]) -> SaveOutcome:
        if user_id is None:
            raise ValueError("auto-save requires an authenticated user id")
        stored_name = image_info.get("storedName")
        if not stored_name:
            raise ValueError("image_info.storedName is required")

        key: Tuple[int, str] = (user_id, stored_name)
        lock = self._locks.acquire(key)
        try:
            now = self.clock()
            existing = self.analysis_repo.find_recent(user_id, stored_name, since=now - self.window)
            if existing:
                logger.info(f"Duplicate analysis detected for user {user_id} ({stored_name}), skipping auto-save")
                return SaveOutcome.skipped("duplicate")

            record = self.analysis_repo.create(user_id, analysis, image_info, saved_at=now)
            logger.info(f"Auto-saved analysis {record.id} for user {user_id}")
            return SaveOutcome.saved(record.id)
        finally:
            self._locks.release(key, lock)
