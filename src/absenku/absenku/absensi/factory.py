from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.enums import AbsensiStatus
from .strategies.base import PunctualityStrategy
from .strategies.early_leave_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class PunctualityStrategyFactory:
    """Factory Pattern: choose the strategy from the school timetable."""

    def for_checkin(self, *, now: datetime, today: date, school_start: Optional[time], grace_minutes: int) -> PunctualityStrategy:
        if not school_start:
            return OnTimeStrategy()

        start = datetime.combine(today, school_start)
        if now <= start + timedelta(minutes=grace_minutes):
            return OnTimeStrategy()
        return LateStrategy()

    def for_checkout(self, *, now: datetime, today: date, school_end: Optional[time], current_status: AbsensiStatus) -> PunctualityStrategy:
        if not school_end:
            return OnTimeStrategy()

        end = datetime.combine(today, school_end)
        if now < end and current_status == AbsensiStatus.HADIR:
            return EarlyLeaveStrategy()
        return OnTimeStrategy()
