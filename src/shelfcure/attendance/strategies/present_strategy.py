from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """On time (or no opening hours to compare against)."""

    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        opening: Optional[datetime],
        scheduled_hours: float,
    ) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
