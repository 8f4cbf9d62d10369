from __future__ import annotations

from .model import Staff


def staff_brief(member: Staff) -> dict:
    """Fields shown next to attendance and payroll rows."""

    return {
        "id": member.staff_id,
        "name": member.name,
        "email": member.email,
        "phone": member.phone,
        "employeeId": member.employee_id,
        "role": member.role.value,
        "department": member.department.value,
    }


def staff_to_dict(member: Staff) -> dict:
    data = staff_brief(member)
    data.update(
        {
            "store": member.store_id,
            "dateOfJoining": member.date_of_joining.isoformat(),
            "salary": member.salary,
            "workingHours": member.working_hours.value,
            "status": member.status.value,
            "hasSystemAccess": member.has_system_access,
            "userAccount": member.user_account_id,
            "address": member.address,
            "dateOfBirth": member.date_of_birth.isoformat() if member.date_of_birth else None,
            "emergencyContact": member.emergency_contact,
            "permissions": list(member.permissions),
            "performanceRating": member.performance_rating,
            "createdAt": member.created_at.isoformat() if member.created_at else None,
        }
    )
    return data
