from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we derive a status from check-in/out times."""

    @abstractmethod
    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        opening: Optional[datetime],
        scheduled_hours: float,
    ) -> StatusDecision:
        raise NotImplementedError
