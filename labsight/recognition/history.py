"""
History Ledger - Bounded temporal log of winning identities.

Each tick appends the winning identity with a weighted confidence.
The ledger keeps the most recent records only (FIFO, capacity 50 by
default) and derives a "most likely over time" verdict:

    score(identity) = count(identity) * mean(confidence for identity)

Ties keep the identity that was seen first.
History is session-scoped and never persisted.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Mapping
import time


@dataclass(frozen=True)
class HistoryRecord:
    """One winning identity from one tick."""
    identity: str
    confidence: float
    timestamp: float


@dataclass(frozen=True)
class HistoryVerdict:
    """Aggregate verdict over the ledger. identity is None when empty."""
    identity: str | None
    score: float


@dataclass
class HistoryStatistics:
    """Read-only snapshot of the ledger and current posteriors."""
    total_count: int
    unique_identity_count: int
    most_likely: HistoryVerdict
    current_posteriors: dict[str, float] = field(default_factory=dict)


class HistoryLedger:
    """
    FIFO ledger of past winning identities.

    Usage:
        ledger = HistoryLedger()
        ledger.add("beaker", 0.72)
        ledger.add("flask", 0.31)
        ledger.most_likely()  # HistoryVerdict(identity="beaker", score=0.72)
    """

    DEFAULT_CAPACITY = 50

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], float] = time.time,
    ):
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._clock = clock
        self._records: deque[HistoryRecord] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[HistoryRecord, ...]:
        """Records oldest first."""
        return tuple(self._records)

    def add(self, identity: str, confidence: float) -> HistoryRecord:
        """Append a record; the oldest one is evicted once over capacity."""
        record = HistoryRecord(
            identity=identity,
            confidence=confidence,
            timestamp=self._clock(),
        )
        self._records.append(record)
        return record

    def most_likely(self) -> HistoryVerdict:
        """Identity with the highest count * average confidence."""
        counts: dict[str, int] = {}
        totals: dict[str, float] = {}

        for record in self._records:
            counts[record.identity] = counts.get(record.identity, 0) + 1
            totals[record.identity] = totals.get(record.identity, 0.0) + record.confidence

        best_identity = None
        best_score = 0.0
        for identity, count in counts.items():
            score = count * (totals[identity] / count)
            if best_identity is None or score > best_score:
                best_identity = identity
                best_score = score

        return HistoryVerdict(identity=best_identity, score=best_score)

    def statistics(
        self,
        posteriors: Mapping[str, float] | None = None,
    ) -> HistoryStatistics:
        """Snapshot of the ledger, with a copy of the given posteriors."""
        return HistoryStatistics(
            total_count=len(self._records),
            unique_identity_count=len({r.identity for r in self._records}),
            most_likely=self.most_likely(),
            current_posteriors=dict(posteriors or {}),
        )

    def clear(self) -> None:
        """Drop all records."""
        self._records.clear()
