from __future__ import annotations

from flask import Flask, g, request

from ..common.http import json_body, ok
from ..container import Container
from ..core.enums import Role
from ..staff.serializers import staff_brief
from .serializers import config_to_dict, payslip_to_dict, salary_to_dict


def register(app: Flask, container: Container) -> None:
    manager = container.guards.store_manager("staff")
    owner_only = container.guards.authorize(Role.STORE_OWNER)
    payroll = container.payroll_service

    @app.route("/api/store-manager/payroll", methods=["GET"], endpoint="payroll_list")
    @manager
    def payroll_list():
        month, year, rows = payroll.list_payroll(g.store.store_id, month=request.args.get("month"))
        data = [salary_to_dict(r.salary, r.staff) for r in rows]
        return ok(data, count=len(data), month=month, year=year)

    @app.route("/api/store-manager/payroll/stats", methods=["GET"], endpoint="payroll_stats")
    @manager
    def payroll_stats():
        month, year, stats = payroll.stats(g.store.store_id, month=request.args.get("month"))
        return ok(stats, month=month, year=year)

    @app.route("/api/store-manager/payroll/process", methods=["POST"], endpoint="payroll_process")
    @manager
    def payroll_process():
        result = payroll.process(g.store, g.user.user_id, json_body())
        return ok(
            result,
            message=f"Payroll processed: {len(result['successful'])} successful, {len(result['errors'])} errors",
        )

    @app.route("/api/store-manager/payroll/salary-configs", methods=["GET"], endpoint="payroll_salary_configs")
    @manager
    def payroll_salary_configs():
        data = [
            {
                **staff_brief(member),
                "salaryConfig": config_to_dict(config) if config else None,
                "hasConfig": config is not None,
            }
            for member, config in payroll.salary_configs(g.store.store_id)
        ]
        return ok(data, count=len(data))

    @app.route("/api/store-manager/payroll/salary-config", methods=["POST"], endpoint="payroll_save_salary_config")
    @manager
    def payroll_save_salary_config():
        member, config, was_created = payroll.save_salary_config(g.store.store_id, g.user.user_id, json_body())
        action = "created" if was_created else "updated"
        return ok(config_to_dict(config), message=f"Salary configuration {action} for {member.name}")

    @app.route("/api/store-manager/payroll/init-salary-configs", methods=["POST"], endpoint="payroll_init_salary_configs")
    @manager
    def payroll_init_salary_configs():
        result = payroll.init_default_configs(g.store.store_id, g.user.user_id)
        return ok(
            result,
            message=(
                f"Salary configurations initialized: {len(result['successful'])} successful, "
                f"{len(result['errors'])} errors"
            ),
        )

    @app.route("/api/store-manager/payroll/<int:salary_id>/status", methods=["PUT"], endpoint="payroll_update_status")
    @manager
    def payroll_update_status(salary_id: int):
        data = json_body()
        row = payroll.update_status(g.store.store_id, salary_id, g.user.user_id, data)
        name = row.staff.name if row.staff else f"staff {row.salary.staff_id}"
        return ok(salary_to_dict(row.salary, row.staff), message=f"Payroll {data.get('status')} for {name}")

    @app.route("/api/store-manager/payroll/<int:salary_id>/payslip", methods=["GET"], endpoint="payroll_payslip")
    @manager
    def payroll_payslip(salary_id: int):
        slip = payroll.payslip(g.store, salary_id, g.user.user_id)
        name = slip.staff.name if slip.staff else f"staff {slip.salary.staff_id}"
        return ok(payslip_to_dict(slip), message=f"Payslip generated for {name}")

    @app.route("/api/store-owner/payroll/summary", methods=["GET"], endpoint="payroll_owner_summary")
    @owner_only
    def payroll_owner_summary():
        return ok(payroll.owner_summary(g.user.user_id, month=request.args.get("month")))
