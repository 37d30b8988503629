"""Phase tracking for a report run.

Each pipeline stage runs as a named phase stamped with wall-clock UTC
times.  The ``fetch`` phase doubles as the scan clock: its start and end
become the report's scan window.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PhaseStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PhaseProgress:
    phase: str
    started: datetime
    status: PhaseStatus = PhaseStatus.RUNNING
    finished: datetime | None = None
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.finished is None:
            return None
        return round((self.finished - self.started).total_seconds(), 2)


class ProgressTracker:
    """Ordered record of the phases of one run."""

    def __init__(self, clock: Clock = utc_now) -> None:
        self.phases: list[PhaseProgress] = []
        self._by_name: dict[str, PhaseProgress] = {}
        self._clock = clock

    def start_phase(self, phase: str) -> PhaseProgress:
        p = PhaseProgress(phase=phase, started=self._clock())
        self.phases.append(p)
        self._by_name[phase] = p
        self._notify(p)
        return p

    def complete_phase(self, phase: str, detail: str = "") -> None:
        self._finish(phase, PhaseStatus.COMPLETED, detail=detail)

    def fail_phase(self, phase: str, error: str) -> None:
        self._finish(phase, PhaseStatus.FAILED, error=error)

    @contextmanager
    def phase(self, name: str) -> Iterator[PhaseProgress]:
        """Run a block as phase *name*.

        The phase completes when the block exits, unless the block already
        completed it with a detail.  An exception marks it failed and
        propagates.
        """
        p = self.start_phase(name)
        try:
            yield p
        except Exception as e:
            self.fail_phase(name, str(e))
            raise
        if p.status is PhaseStatus.RUNNING:
            self.complete_phase(name)

    def get(self, phase: str) -> PhaseProgress | None:
        return self._by_name.get(phase)

    def window(self, phase: str) -> tuple[datetime, datetime]:
        """Start and end time of a completed phase."""
        p = self._by_name.get(phase)
        if p is None or p.status is not PhaseStatus.COMPLETED or p.finished is None:
            raise LookupError(f"phase {phase!r} has not completed")
        return p.started, p.finished

    def get_summary(self) -> dict[str, Any]:
        return {
            "phases": [
                {
                    "phase": p.phase,
                    "status": p.status.value,
                    "started": p.started.isoformat(),
                    "duration": p.duration,
                    "detail": p.detail,
                    "error": p.error,
                }
                for p in self.phases
            ],
            "total_duration": round(sum(p.duration or 0 for p in self.phases), 2),
        }

    def _finish(
        self, phase: str, status: PhaseStatus, detail: str = "", error: str | None = None
    ) -> None:
        p = self._by_name.get(phase)
        if p is None:
            return
        p.status = status
        p.finished = self._clock()
        p.detail = detail or p.detail
        p.error = error
        self._notify(p)

    def _notify(self, p: PhaseProgress) -> None:
        logger.debug("phase %s %s", p.phase, p.status.value)
