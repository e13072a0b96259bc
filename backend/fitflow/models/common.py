from __future__ import annotations
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class TrackedStateMixin:
    """
    Pending -> InProgress -> Completed | Skipped, for blocks and exercises.

    completed_at and skipped are never both set: whichever transition ran
    last wins, so a skipped block can be completed later and vice versa.
    Completing without starting first is allowed.
    """

    def start(self, now: datetime | None = None) -> None:
        if self.started_at is None:
            self.started_at = now or utcnow()

    def complete(self, now: datetime | None = None) -> None:
        self.completed_at = now or utcnow()
        self.skipped = False

    def skip(self) -> None:
        self.skipped = True
        self.completed_at = None

    @property
    def is_done(self) -> bool:
        return self.completed_at is not None or bool(self.skipped)
