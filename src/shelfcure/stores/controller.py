from __future__ import annotations

from flask import Flask, g, request

from ..common.http import created, json_body, ok, pagination, query_filter, query_int
from ..container import Container
from ..core.constants import DEFAULT_STORE_PAGE_SIZE
from ..core.enums import Role
from ..users.serializers import user_to_dict
from .serializers import overview_to_dict, store_to_dict


def register(app: Flask, container: Container) -> None:
    owner_only = container.guards.authorize(Role.STORE_OWNER)
    stores = container.store_service

    @app.route("/api/store-owner/stores", methods=["GET"], endpoint="stores_list")
    @owner_only
    def stores_list():
        page = query_int("page", 1)
        limit = query_int("limit", DEFAULT_STORE_PAGE_SIZE)
        overviews, total = stores.list_stores(
            g.user.user_id,
            page=page,
            limit=limit,
            search=(request.args.get("search") or "").strip() or None,
            status=query_filter("status"),
        )
        return ok(
            [overview_to_dict(o) for o in overviews],
            count=len(overviews),
            pagination=pagination(page, limit, total),
        )

    @app.route("/api/store-owner/stores", methods=["POST"], endpoint="stores_create")
    @owner_only
    def stores_create():
        store = stores.create_store(g.user.user_id, json_body())
        return created(store_to_dict(store), message="Store created successfully")

    @app.route("/api/store-owner/stores/generate-code", methods=["GET"], endpoint="stores_generate_code")
    @owner_only
    def stores_generate_code():
        return ok({"code": stores.generate_code()})

    @app.route("/api/store-owner/stores/<int:store_id>", methods=["GET"], endpoint="stores_get")
    @owner_only
    def stores_get(store_id: int):
        store, statistics = stores.get_store(g.user.user_id, store_id)
        data = store_to_dict(store)
        data["statistics"] = statistics
        return ok(data)

    @app.route("/api/store-owner/stores/<int:store_id>", methods=["PUT"], endpoint="stores_update")
    @owner_only
    def stores_update(store_id: int):
        store = stores.update_store(g.user.user_id, store_id, json_body())
        return ok(store_to_dict(store), message="Store updated successfully")

    @app.route("/api/store-owner/stores/<int:store_id>", methods=["DELETE"], endpoint="stores_delete")
    @owner_only
    def stores_delete(store_id: int):
        stores.delete_store(g.user.user_id, store_id)
        return ok(message="Store deactivated successfully")

    @app.route("/api/store-owner/stores/<int:store_id>/users", methods=["POST"], endpoint="stores_create_user")
    @owner_only
    def stores_create_user(store_id: int):
        user = stores.create_store_user(g.user.user_id, store_id, json_body())
        return created(user_to_dict(user), message="Store user created successfully")
