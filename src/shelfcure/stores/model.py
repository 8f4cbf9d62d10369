from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def default_store_settings() -> dict:
    return {
        "defaultUnitType": "both",
        "preferredUnitForSales": "auto",
        "lowStockThreshold": 10,
        "expiryAlertDays": 30,
        "autoReorderEnabled": False,
        "allowNegativeStock": False,
        "requirePrescription": True,
        "printReceiptByDefault": True,
        "defaultTaxRate": 18,
        "includeTaxInPrice": True,
        "currency": "INR",
        "currencySymbol": "₹",
        "decimalPlaces": 2,
        "notifications": {"lowStock": True, "expiry": True, "sales": False, "purchases": False},
    }


def default_operating_hours() -> dict:
    hours = {day: {"open": "09:00", "close": "21:00", "closed": False} for day in WEEKDAYS}
    hours["sunday"] = {"open": "", "close": "", "closed": True}
    return hours


@dataclass(frozen=True)
class Store:
    """Domain entity: a physical pharmacy location owned by a store owner."""

    store_id: int
    owner_id: int
    name: str
    code: str
    phone: str
    street: str
    city: str
    state: str
    pincode: str
    license_number: str
    country: str = "India"
    description: Optional[str] = None
    email: Optional[str] = None
    gst_number: Optional[str] = None
    drug_license_number: Optional[str] = None
    establishment_year: Optional[int] = None
    settings: dict = field(default_factory=default_store_settings)
    operating_hours: dict = field(default_factory=default_operating_hours)
    is_active: bool = True
    total_sales: float = 0.0
    total_customers: int = 0
    total_products: int = 0
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def opening_time(self, weekday: int) -> Optional[str]:
        """Opening HH:MM for ``date.weekday()``; None when closed that day."""

        day = self.operating_hours.get(WEEKDAYS[weekday]) or {}
        if day.get("closed") or not day.get("open"):
            return None
        return day["open"]
