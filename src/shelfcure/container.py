from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_TOKEN_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLSalaryConfigRepository, MySQLStaffSalaryRepository
from .payroll.repository import SalaryConfigRepository, StaffSalaryRepository
from .payroll.service import PayrollService
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffRepository
from .staff.service import StaffService
from .stores.mysql_store_repository import MySQLStoreRepository
from .stores.repository import StoreRepository
from .stores.service import StoreService
from .subscriptions.mysql_subscription_repository import MySQLSubscriptionRepository
from .subscriptions.repository import SubscriptionRepository
from .subscriptions.service import SubscriptionService
from .users.guards import Guards
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, TokenSettings


@dataclass(frozen=True)
class AppSettings:
    jwt_secret: str
    jwt_expire_days: int = DEFAULT_TOKEN_DAYS
    default_staff_password: str = "staff123"
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    stores_repo: StoreRepository
    subscriptions_repo: SubscriptionRepository
    staff_repo: StaffRepository
    attendance_repo: AttendanceRepository
    salary_configs_repo: SalaryConfigRepository
    salaries_repo: StaffSalaryRepository

    auth_service: AuthService
    subscription_service: SubscriptionService
    store_service: StoreService
    staff_service: StaffService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    guards: Guards


def wire(
    *,
    settings: AppSettings,
    users_repo: UserRepository,
    stores_repo: StoreRepository,
    subscriptions_repo: SubscriptionRepository,
    staff_repo: StaffRepository,
    attendance_repo: AttendanceRepository,
    salary_configs_repo: SalaryConfigRepository,
    salaries_repo: StaffSalaryRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services over any set of repositories (MySQL in the app, in-memory in tests)."""

    auth_service = AuthService(
        users_repo,
        stores_repo,
        tokens=TokenSettings(secret=settings.jwt_secret, expire_days=settings.jwt_expire_days),
    )
    subscription_service = SubscriptionService(subscriptions_repo)
    store_service = StoreService(
        stores_repo,
        subscription_service,
        users_repo,
        staff_repo,
        attendance_repo,
        salaries_repo,
        default_password=settings.default_staff_password,
    )
    staff_service = StaffService(
        staff_repo,
        users_repo,
        salary_configs_repo,
        default_password=settings.default_staff_password,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        staff_repo,
        strategy_factory=AttendanceStrategyFactory(grace_minutes=settings.late_grace_minutes),
    )
    payroll_service = PayrollService(
        salaries_repo,
        salary_configs_repo,
        staff_repo,
        attendance_repo,
        stores_repo,
        calculator=StandardPayrollCalculator(),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        stores_repo=stores_repo,
        subscriptions_repo=subscriptions_repo,
        staff_repo=staff_repo,
        attendance_repo=attendance_repo,
        salary_configs_repo=salary_configs_repo,
        salaries_repo=salaries_repo,
        auth_service=auth_service,
        subscription_service=subscription_service,
        store_service=store_service,
        staff_service=staff_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        guards=Guards(auth_service, store_service, subscription_service),
    )


def build_container(*, db_config: dict, settings: AppSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        settings=settings,
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        stores_repo=MySQLStoreRepository(conn),
        subscriptions_repo=MySQLSubscriptionRepository(conn),
        staff_repo=MySQLStaffRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        salary_configs_repo=MySQLSalaryConfigRepository(conn),
        salaries_repo=MySQLStaffSalaryRepository(conn),
    )
