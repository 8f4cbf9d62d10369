from __future__ import annotations

from typing import Optional

from ..staff.model import Staff
from ..staff.serializers import staff_brief
from .model import (
    SalaryConfig,
    StaffSalary,
    allowance_breakdown_to_json,
    allowances_to_json,
    attendance_data_to_json,
    deduction_breakdown_to_json,
    deductions_to_json,
    overtime_to_json,
    standard_hours_to_json,
)
from .service import Payslip


def _iso(value):
    return value.isoformat() if value else None


def salary_to_dict(salary: StaffSalary, staff: Optional[Staff] = None) -> dict:
    return {
        "id": salary.salary_id,
        "staff": staff_brief(staff) if staff else salary.staff_id,
        "store": salary.store_id,
        "month": salary.month,
        "year": salary.year,
        "baseSalary": salary.base_salary,
        "allowances": allowance_breakdown_to_json(salary.allowances),
        "deductions": deduction_breakdown_to_json(salary.deductions),
        "attendanceData": attendance_data_to_json(salary.attendance_data),
        "totalAllowances": salary.total_allowances,
        "totalDeductions": salary.total_deductions,
        "grossSalary": salary.gross_salary,
        "netSalary": salary.net_salary,
        "paymentStatus": salary.payment_status.value,
        "paymentDate": _iso(salary.payment_date),
        "paymentMethod": salary.payment_method.value,
        "paymentReference": salary.payment_reference,
        "approvalStatus": salary.approval_status.value,
        "approvedBy": salary.approved_by,
        "approvedAt": _iso(salary.approved_at),
        "rejectionReason": salary.rejection_reason,
        "notes": salary.notes,
        "payslipGenerated": salary.payslip_generated,
    }


def config_to_dict(config: SalaryConfig) -> dict:
    return {
        "id": config.config_id,
        "staff": config.staff_id,
        "store": config.store_id,
        "baseSalary": config.base_salary,
        "salaryType": config.salary_type.value,
        "currency": config.currency,
        "standardHours": standard_hours_to_json(config.standard_hours),
        "overtime": overtime_to_json(config.overtime),
        "allowances": allowances_to_json(config.allowances),
        "deductions": deductions_to_json(config.deductions),
        "hourlyRate": round(config.hourly_rate, 2),
        "dailyRate": round(config.daily_rate, 2),
        "status": config.status.value,
        "effectiveFrom": _iso(config.effective_from),
        "effectiveTo": _iso(config.effective_to),
    }


def payslip_to_dict(slip: Payslip) -> dict:
    s = slip.salary
    store = slip.store
    return {
        "payrollId": s.salary_id,
        "staff": staff_brief(slip.staff) if slip.staff else s.staff_id,
        "store": {
            "id": store.store_id,
            "name": store.name,
            "phone": store.phone,
            "email": store.email,
            "address": {
                "street": store.street,
                "city": store.city,
                "state": store.state,
                "pincode": store.pincode,
                "country": store.country,
            },
        },
        "salaryPeriod": slip.period,
        "month": s.month,
        "year": s.year,
        "generatedDate": slip.generated_at.isoformat(),
        "baseSalary": s.base_salary,
        "allowances": allowance_breakdown_to_json(s.allowances),
        "totalAllowances": s.total_allowances,
        "grossSalary": s.gross_salary,
        "deductions": deduction_breakdown_to_json(s.deductions),
        "totalDeductions": s.total_deductions,
        "netSalary": s.net_salary,
        "attendanceData": attendance_data_to_json(s.attendance_data),
        "paymentStatus": s.payment_status.value,
        "paymentDate": _iso(s.payment_date),
        "paymentMethod": s.payment_method.value,
        "paymentReference": s.payment_reference,
    }
