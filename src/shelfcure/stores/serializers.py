from __future__ import annotations

from .model import Store
from .service import StoreOverview


def store_to_dict(store: Store) -> dict:
    return {
        "id": store.store_id,
        "owner": store.owner_id,
        "name": store.name,
        "code": store.code,
        "description": store.description,
        "contact": {"phone": store.phone, "email": store.email},
        "address": {
            "street": store.street,
            "city": store.city,
            "state": store.state,
            "country": store.country,
            "pincode": store.pincode,
        },
        "business": {
            "licenseNumber": store.license_number,
            "gstNumber": store.gst_number,
            "drugLicenseNumber": store.drug_license_number,
            "establishmentYear": store.establishment_year,
        },
        "settings": store.settings,
        "operatingHours": store.operating_hours,
        "isActive": store.is_active,
        "stats": {
            "totalSales": store.total_sales,
            "totalCustomers": store.total_customers,
            "totalProducts": store.total_products,
        },
        "createdAt": store.created_at.isoformat() if store.created_at else None,
    }


def overview_to_dict(overview: StoreOverview) -> dict:
    data = store_to_dict(overview.store)
    data["staffCount"] = overview.staff_count
    data["attendanceRate"] = overview.attendance_rate
    return data
