from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import now_local, parse_month
from ..common.http import json_body, ok, query_filter
from ..container import Container
from ..staff.serializers import staff_brief
from .serializers import attendance_to_dict, summary_to_dict


def register(app: Flask, container: Container) -> None:
    manager = container.guards.store_manager("staff")
    attendance = container.attendance_service
    staff_repo = container.staff_repo

    def _staff_by_id(records):
        ids = {r.staff_id for r in records}
        if not ids:
            return {}
        members, _ = staff_repo.list_in_store(g.store.store_id, staff_ids=ids)
        return {m.staff_id: m for m in members}

    @app.route("/api/store-manager/attendance", methods=["GET"], endpoint="attendance_list")
    @manager
    def attendance_list():
        records = attendance.list_attendance(
            g.store.store_id,
            on=request.args.get("date"),
            start=request.args.get("startDate"),
            end=request.args.get("endDate"),
            status=query_filter("status"),
        )
        staff = _staff_by_id(records)
        data = [attendance_to_dict(r, staff.get(r.staff_id)) for r in records]
        data.sort(key=lambda d: (d["date"], d["staff"]["name"].lower() if isinstance(d["staff"], dict) else ""))
        return ok(data, count=len(data))

    @app.route("/api/store-manager/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @manager
    def attendance_mark():
        member, record = attendance.mark(g.store.store_id, g.user.user_id, json_body())
        return ok(attendance_to_dict(record, member), message=f"Attendance marked as {record.status.value} for {member.name}")

    @app.route("/api/store-manager/attendance/bulk", methods=["POST"], endpoint="attendance_bulk")
    @manager
    def attendance_bulk():
        successful, errors = attendance.bulk_mark(g.store.store_id, g.user.user_id, json_body())
        return ok(
            {"successful": successful, "errors": errors},
            message=f"Bulk attendance processed: {len(successful)} successful, {len(errors)} errors",
        )

    @app.route("/api/store-manager/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @manager
    def attendance_stats():
        day, stats = attendance.daily_stats(g.store.store_id, on=request.args.get("date"))
        return ok(stats, date=day.isoformat())

    @app.route("/api/store-manager/attendance/staff-list", methods=["GET"], endpoint="attendance_staff_list")
    @manager
    def attendance_staff_list():
        day, rows = attendance.staff_with_attendance(g.store.store_id, on=request.args.get("date"))
        data = [
            {
                **staff_brief(row.staff),
                "attendance": attendance_to_dict(row.record) if row.record else None,
                "attendanceStatus": row.status,
            }
            for row in rows
        ]
        return ok(data, date=day.isoformat(), count=len(data))

    @app.route("/api/store-manager/attendance/history", methods=["GET"], endpoint="attendance_history")
    @manager
    def attendance_history():
        member, records, summary = attendance.history(
            g.store.store_id,
            request.args.get("staffId"),
            month=request.args.get("month"),
        )
        return ok(
            {
                "staff": staff_brief(member),
                "records": [attendance_to_dict(r) for r in records],
                "summary": summary_to_dict(summary),
            }
        )

    @app.route("/api/store-manager/attendance/manual-time", methods=["POST"], endpoint="attendance_manual_time")
    @manager
    def attendance_manual_time():
        member, record = attendance.set_manual_time(g.store, g.user.user_id, json_body())
        return ok(attendance_to_dict(record, member), message=f"Time recorded for {member.name}")

    @app.route("/api/store-manager/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @manager
    def attendance_summary():
        year, month = parse_month(request.args.get("month"), today=now_local().date())
        rows = attendance.store_monthly_summary(g.store.store_id, year=year, month=month)
        data = [{"staff": staff_brief(r.staff), **summary_to_dict(r.summary)} for r in rows]
        return ok(data, month=month, year=year, count=len(data))
