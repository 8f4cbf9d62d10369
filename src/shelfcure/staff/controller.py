from __future__ import annotations

from flask import Flask, g, request

from ..common.http import created, json_body, ok, pagination, query_filter, query_int
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from .serializers import staff_to_dict


def register(app: Flask, container: Container) -> None:
    manager = container.guards.store_manager("staff")
    staff = container.staff_service

    @app.route("/api/store-manager/staff", methods=["GET"], endpoint="staff_list")
    @manager
    def staff_list():
        staff.ensure_manager_record(g.store.store_id, g.user)
        page = query_int("page", 1)
        limit = query_int("limit", DEFAULT_PAGE_SIZE)
        members, total = staff.list_staff(
            g.store.store_id,
            page=page,
            limit=limit,
            search=(request.args.get("search") or "").strip() or None,
            role=query_filter("role"),
            department=query_filter("department"),
            status=(request.args.get("status") or "").strip() or None,
        )
        return ok(
            [staff_to_dict(m) for m in members],
            count=len(members),
            pagination=pagination(page, limit, total),
        )

    @app.route("/api/store-manager/staff", methods=["POST"], endpoint="staff_create")
    @manager
    def staff_create():
        member = staff.create_staff(g.store.store_id, g.user.user_id, json_body())
        return created(staff_to_dict(member), message="Staff member created successfully")

    @app.route("/api/store-manager/staff/stats", methods=["GET"], endpoint="staff_stats")
    @manager
    def staff_stats():
        return ok(staff.stats(g.store.store_id))

    @app.route("/api/store-manager/staff/<int:staff_id>", methods=["GET"], endpoint="staff_get")
    @manager
    def staff_get(staff_id: int):
        return ok(staff_to_dict(staff.get_staff(g.store.store_id, staff_id)))

    @app.route("/api/store-manager/staff/<int:staff_id>", methods=["PUT"], endpoint="staff_update")
    @manager
    def staff_update(staff_id: int):
        member = staff.update_staff(g.store.store_id, staff_id, g.user.user_id, json_body())
        return ok(staff_to_dict(member), message="Staff member updated successfully")

    @app.route("/api/store-manager/staff/<int:staff_id>", methods=["DELETE"], endpoint="staff_delete")
    @manager
    def staff_delete(staff_id: int):
        staff.deactivate_staff(g.store.store_id, staff_id, g.user.user_id)
        return ok(message="Staff member deactivated successfully")
