from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Completed day shorter than half the scheduled hours."""

    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        opening: Optional[datetime],
        scheduled_hours: float,
    ) -> StatusDecision:
        worked = (check_out - check_in).total_seconds() / 3600 if check_out else 0.0
        return StatusDecision(
            status=AttendanceStatus.HALF_DAY,
            note=f"Worked {worked:.2f}h of {scheduled_hours:g}h scheduled",
        )
