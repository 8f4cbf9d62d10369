from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Checked in after opening time plus grace."""

    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        opening: Optional[datetime],
        scheduled_hours: float,
    ) -> StatusDecision:
        note = None
        if opening is not None:
            minutes = int((check_in - opening).total_seconds() // 60)
            note = f"Late by {minutes} minutes"
        return StatusDecision(status=AttendanceStatus.LATE, note=note)
