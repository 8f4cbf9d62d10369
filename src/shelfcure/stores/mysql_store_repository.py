from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, placeholders
from .model import Store, default_operating_hours, default_store_settings
from .repository import StoreRepository

_COLUMNS = """
    store_id, owner_id, name, code, description, phone, email, street, city, state, country, pincode,
    license_number, gst_number, drug_license_number, establishment_year, settings, operating_hours,
    is_active, total_sales, total_customers, total_products, created_by, updated_by, created_at
"""

# Store attribute -> column for writable fields.
_WRITABLE = {
    "name": "name",
    "code": "code",
    "description": "description",
    "phone": "phone",
    "email": "email",
    "street": "street",
    "city": "city",
    "state": "state",
    "country": "country",
    "pincode": "pincode",
    "license_number": "license_number",
    "gst_number": "gst_number",
    "drug_license_number": "drug_license_number",
    "establishment_year": "establishment_year",
    "settings": "settings",
    "operating_hours": "operating_hours",
}
_JSON_FIELDS = {"settings", "operating_hours"}


def _row_to_store(r: dict) -> Store:
    return Store(
        store_id=int(r["store_id"]),
        owner_id=int(r["owner_id"]),
        name=r["name"],
        code=r["code"],
        description=r.get("description"),
        phone=r["phone"],
        email=r.get("email"),
        street=r["street"],
        city=r["city"],
        state=r["state"],
        country=r.get("country") or "India",
        pincode=r["pincode"],
        license_number=r["license_number"],
        gst_number=r.get("gst_number"),
        drug_license_number=r.get("drug_license_number"),
        establishment_year=r.get("establishment_year"),
        settings=load_json(r.get("settings"), None) or default_store_settings(),
        operating_hours=load_json(r.get("operating_hours"), None) or default_operating_hours(),
        is_active=bool(r.get("is_active", True)),
        total_sales=float(r.get("total_sales") or 0),
        total_customers=int(r.get("total_customers") or 0),
        total_products=int(r.get("total_products") or 0),
        created_by=r.get("created_by"),
        updated_by=r.get("updated_by"),
        created_at=r.get("created_at"),
    )


def _column_values(fields: dict) -> tuple[list[str], list]:
    cols, values = [], []
    for key, value in fields.items():
        column = _WRITABLE.get(key)
        if column is None:
            continue
        cols.append(column)
        values.append(dump_json(value) if key in _JSON_FIELDS else value)
    return cols, values


class MySQLStoreRepository(StoreRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, store_id: int) -> Optional[Store]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM stores WHERE store_id=%s", (int(store_id),))
            r = fetchone(cur)
            return _row_to_store(r) if r else None

    def get_for_owner(self, store_id: int, owner_id: int) -> Optional[Store]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM stores WHERE store_id=%s AND owner_id=%s",
                (int(store_id), int(owner_id)),
            )
            r = fetchone(cur)
            return _row_to_store(r) if r else None

    def list_for_owner(
        self,
        owner_id: int,
        *,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[Sequence[Store], int]:
        where = ["owner_id=%s"]
        params: list = [int(owner_id)]
        if search:
            where.append("(name LIKE %s OR code LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like])
        if is_active is not None:
            where.append("is_active=%s")
            params.append(1 if is_active else 0)
        where_sql = " AND ".join(where)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM stores WHERE {where_sql}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)

            sql = f"SELECT {_COLUMNS} FROM stores WHERE {where_sql} ORDER BY created_at DESC, store_id DESC"
            if limit is not None:
                sql += " LIMIT %s OFFSET %s"
                params.extend([int(limit), int(offset)])
            cur.execute(sql, tuple(params))
            return [_row_to_store(r) for r in fetchall(cur)], total

    def list_by_ids(self, store_ids: Iterable[int]) -> Sequence[Store]:
        ids = [int(s) for s in store_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM stores WHERE store_id IN ({placeholders(len(ids))}) ORDER BY store_id",
                tuple(ids),
            )
            return [_row_to_store(r) for r in fetchall(cur)]

    def code_exists(self, code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM stores WHERE code=%s LIMIT 1", (code,))
            return fetchone(cur) is not None

    def list_codes_with_prefix(self, prefix: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT code FROM stores WHERE code LIKE %s", (f"{prefix}%",))
            return [r["code"] for r in fetchall(cur)]

    def create(self, *, owner_id: int, fields: dict) -> int:
        cols, values = _column_values(fields)
        cols += ["owner_id", "created_by"]
        values += [int(owner_id), int(owner_id)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO stores ({', '.join(cols)}) VALUES ({placeholders(len(cols))})",
                tuple(values),
            )
            return int(cur.lastrowid)

    def update(self, store_id: int, *, fields: dict, updated_by: int) -> bool:
        cols, values = _column_values(fields)
        cols.append("updated_by")
        values.append(int(updated_by))
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE stores SET {assignments} WHERE store_id=%s", (*values, int(store_id)))
            return cur.rowcount > 0

    def set_active(self, store_id: int, *, is_active: bool, updated_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE stores SET is_active=%s, updated_by=%s WHERE store_id=%s",
                (1 if is_active else 0, int(updated_by), int(store_id)),
            )
            return cur.rowcount > 0
