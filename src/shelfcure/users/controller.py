from __future__ import annotations

from flask import Flask, g

from ..common.http import created, json_body, ok
from ..container import Container
from .serializers import user_to_dict


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    auth = container.auth_service

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        result = auth.register(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
            phone=data.get("phone"),
            role=data.get("role"),
        )
        return created({"token": result.token, "user": user_to_dict(result.user)}, message="User registered successfully")

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        result = auth.login((data.get("email") or "").strip().lower(), data.get("password") or "")
        app.logger.info("User %s logged in", result.user.email)
        return ok({"token": result.token, "user": user_to_dict(result.user)}, message="Login successful")

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @guards.protect
    def auth_me():
        return ok(user_to_dict(g.user))

    @app.route("/api/auth/change-password", methods=["PUT"], endpoint="auth_change_password")
    @guards.protect
    def auth_change_password():
        data = json_body()
        auth.change_password(
            g.user.user_id,
            current_password=data.get("currentPassword") or "",
            new_password=data.get("newPassword") or "",
        )
        return ok(message="Password updated successfully")

    @app.route("/api/auth/profile", methods=["PUT"], endpoint="auth_profile")
    @guards.protect
    def auth_profile():
        data = json_body()
        user = auth.update_profile(g.user.user_id, name=data.get("name"), phone=data.get("phone"))
        return ok(user_to_dict(user), message="Profile updated successfully")

    @app.route("/api/auth/switch-store", methods=["PUT"], endpoint="auth_switch_store")
    @guards.protect
    def auth_switch_store():
        store = auth.switch_store(g.user.user_id, json_body().get("storeId"))
        return ok({"currentStore": store}, message="Store switched successfully")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @guards.protect
    def auth_logout():
        # Tokens are stateless; the client drops its copy.
        return ok(message="Logged out successfully")
