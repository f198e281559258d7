from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ...core.enums import AbsensiStatus
from .base import PunctualityStrategy, StatusDecision


class LateStrategy(PunctualityStrategy):
    """Late check-in: still hadir, annotated with the minutes after school start."""

    def decide_checkin(self, *, now: datetime, today: date, school_start: Optional[time], grace_minutes: int) -> StatusDecision:
        if school_start is None:
            return StatusDecision(status=AbsensiStatus.HADIR)
        late_minutes = int((now - datetime.combine(today, school_start)).total_seconds() // 60)
        return StatusDecision(status=AbsensiStatus.HADIR, note=f"Terlambat {late_minutes} menit")

    def decide_checkout(self, *, now: datetime, today: date, school_end: Optional[time], current: AbsensiStatus) -> StatusDecision:
        return StatusDecision(status=current)
