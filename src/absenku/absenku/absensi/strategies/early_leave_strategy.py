from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ...core.enums import AbsensiStatus
from .base import PunctualityStrategy, StatusDecision


class EarlyLeaveStrategy(PunctualityStrategy):
    """Check-out before school ends."""

    def decide_checkin(self, *, now: datetime, today: date, school_start: Optional[time], grace_minutes: int) -> StatusDecision:
        return StatusDecision(status=AbsensiStatus.HADIR)

    def decide_checkout(self, *, now: datetime, today: date, school_end: Optional[time], current: AbsensiStatus) -> StatusDecision:
        return StatusDecision(status=current, note="Pulang lebih awal")
