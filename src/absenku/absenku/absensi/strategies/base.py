from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ...core.enums import AbsensiStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AbsensiStatus
    note: Optional[str] = None


class PunctualityStrategy(ABC):
    """Strategy Pattern: decide status and note for a check-in / check-out."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, today: date, school_start: Optional[time], grace_minutes: int) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, now: datetime, today: date, school_end: Optional[time], current: AbsensiStatus) -> StatusDecision:
        raise NotImplementedError
