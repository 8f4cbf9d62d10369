from datetime import datetime

from shelfcure.attendance.factory import AttendanceStrategyFactory
from shelfcure.attendance.strategies.half_day_strategy import HalfDayStrategy
from shelfcure.attendance.strategies.late_strategy import LateStrategy
from shelfcure.attendance.strategies.present_strategy import PresentStrategy
from shelfcure.core.enums import AttendanceStatus

OPENING = datetime(2025, 6, 16, 9, 0)


def test_factory_checkin_on_time_within_grace():
    factory = AttendanceStrategyFactory(grace_minutes=15)
    strategy = factory.for_times(
        check_in=datetime(2025, 6, 16, 9, 14, 59), check_out=None, opening=OPENING, scheduled_hours=8
    )

    assert isinstance(strategy, PresentStrategy)


def test_factory_checkin_late_after_grace():
    factory = AttendanceStrategyFactory(grace_minutes=15)
    check_in = datetime(2025, 6, 16, 9, 40)
    strategy = factory.for_times(check_in=check_in, check_out=None, opening=OPENING, scheduled_hours=8)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide(check_in=check_in, check_out=None, opening=OPENING, scheduled_hours=8)
    assert decision.status == AttendanceStatus.LATE
    assert decision.note == "Late by 40 minutes"


def test_factory_short_day_is_half_day_even_when_late():
    factory = AttendanceStrategyFactory()
    check_in = datetime(2025, 6, 16, 10, 0)
    check_out = datetime(2025, 6, 16, 13, 0)
    strategy = factory.for_times(check_in=check_in, check_out=check_out, opening=OPENING, scheduled_hours=8)

    assert isinstance(strategy, HalfDayStrategy)
    assert strategy.decide(
        check_in=check_in, check_out=check_out, opening=OPENING, scheduled_hours=8
    ).status == AttendanceStatus.HALF_DAY


def test_factory_without_opening_hours_is_present():
    strategy = AttendanceStrategyFactory().for_times(
        check_in=datetime(2025, 6, 22, 13, 0), check_out=None, opening=None, scheduled_hours=8
    )

    assert isinstance(strategy, PresentStrategy)
