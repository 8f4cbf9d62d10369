from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    grace_minutes: int = 15

    def for_times(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        opening: Optional[datetime],
        scheduled_hours: float,
    ) -> AttendanceStrategy:
        if check_out is not None and (check_out - check_in) < timedelta(hours=scheduled_hours / 2):
            return HalfDayStrategy()

        if opening is not None and check_in > opening + timedelta(minutes=self.grace_minutes):
            return LateStrategy()
        return PresentStrategy()
