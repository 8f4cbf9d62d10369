from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Authentication roles used for route guards."""

    SUPERADMIN = "superadmin"
    STORE_OWNER = "store_owner"
    STORE_MANAGER = "store_manager"
    STAFF = "staff"
    CASHIER = "cashier"


class StaffRole(str, Enum):
    STORE_MANAGER = "store_manager"
    PHARMACIST = "pharmacist"
    ASSISTANT = "assistant"
    CASHIER = "cashier"
    INVENTORY_MANAGER = "inventory_manager"
    SALES_EXECUTIVE = "sales_executive"
    SUPERVISOR = "supervisor"


class Department(str, Enum):
    PHARMACY = "pharmacy"
    SALES = "sales"
    INVENTORY = "inventory"
    ADMINISTRATION = "administration"
    CUSTOMER_SERVICE = "customer_service"


class WorkingHours(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACT = "contract"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


class AttendanceStatus(str, Enum):
    """Attendance status stored per staff member per day."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    LATE = "late"
    SICK_LEAVE = "sick_leave"
    CASUAL_LEAVE = "casual_leave"
    HOLIDAY = "holiday"


class CheckMethod(str, Enum):
    MANUAL = "manual"
    BIOMETRIC = "biometric"
    MOBILE_APP = "mobile_app"
    WEB = "web"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    UPI = "upi"
    OTHER = "other"


class ApprovalStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class SalaryType(str, Enum):
    MONTHLY = "monthly"
    DAILY = "daily"
    HOURLY = "hourly"


class ConfigStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class Plan(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    TRIAL = "trial"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    SUSPENDED = "suspended"


class BillingDuration(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
