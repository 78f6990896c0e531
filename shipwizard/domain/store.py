"""In-memory configuration store.

Holds the single configuration record, the pending-confirmation flag
and the last commit receipt. One re-entrant lock covers all of it;
callers that read, decide and write hold `store.lock` for the whole
sequence.
"""

import copy
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4


@dataclass(frozen=True)
class CommitReceipt:
    """Sealed configuration produced by a confirmed commit.

    Attributes:
        commit_id: Unique identifier for this commit.
        committed_at: Timestamp when the commit was confirmed (UTC).
        snapshot: Step id -> stored value at commit time.
    """

    committed_at: datetime
    snapshot: dict[str, dict[str, Any]]
    commit_id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict[str, Any]:
        return {
            "commit_id": str(self.commit_id),
            "committed_at": self.committed_at.isoformat(),
            "snapshot": copy.deepcopy(self.snapshot),
        }


class ConfigStore:
    """Configuration record keyed by step id.

    Writing any step (set or clear) disarms a pending finalize, since
    the configuration may have changed since it was reviewed.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._record: dict[str, dict[str, Any]] = {}
        self._pending_confirmation = False
        self._last_commit: CommitReceipt | None = None

    def get(self, step_id: str) -> dict[str, Any] | None:
        with self.lock:
            value = self._record.get(step_id)
            return copy.deepcopy(value) if value is not None else None

    def has(self, step_id: str) -> bool:
        with self.lock:
            return step_id in self._record

    def set(self, step_id: str, value: dict[str, Any]) -> None:
        """Store a validated value, overwriting any previous one."""
        with self.lock:
            self._record[step_id] = copy.deepcopy(value)
            self._pending_confirmation = False

    def clear(self) -> None:
        """Drop every stored step, the pending flag and the last commit."""
        with self.lock:
            self._record.clear()
            self._pending_confirmation = False
            self._last_commit = None

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Deep copy of the record, safe to hand to callers."""
        with self.lock:
            return copy.deepcopy(self._record)

    @property
    def pending_confirmation(self) -> bool:
        with self.lock:
            return self._pending_confirmation

    def arm(self) -> None:
        with self.lock:
            self._pending_confirmation = True

    def disarm(self) -> None:
        with self.lock:
            self._pending_confirmation = False

    @property
    def last_commit(self) -> CommitReceipt | None:
        with self.lock:
            return self._last_commit

    def record_commit(self, receipt: CommitReceipt) -> None:
        with self.lock:
            self._last_commit = receipt
