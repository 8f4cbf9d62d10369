from __future__ import annotations

from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import ValidationError


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200, **extra):
    """Success envelope shared by every endpoint: ``{success, message, data}``."""

    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body.update(extra)
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def created(data: Any = None, *, message: Optional[str] = None, **extra):
    return ok(data, message=message, status=201, **extra)


def fail(message: str, *, status: int = 400, **extra):
    body: dict[str, Any] = {"success": False, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
    return max(value, minimum)


def query_filter(name: str) -> Optional[str]:
    """Query filter where empty and ``all`` both mean no filter."""

    value = (request.args.get(name) or "").strip()
    if not value or value == "all":
        return None
    return value


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit if limit else 0,
    }
