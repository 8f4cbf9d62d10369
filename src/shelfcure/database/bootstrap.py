from __future__ import annotations

import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..stores.model import default_operating_hours, default_store_settings
from ..subscriptions.plans import plan_features
from .connection import DBConfig, DatabaseConnection
from .mysql_base import dump_json

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

DEMO_ACCOUNTS = (
    {"name": "System Administrator", "email": "admin@shelfcure.com", "password": "admin123", "role": "superadmin"},
    {"name": "Demo Owner", "email": "owner@shelfcure.com", "password": "owner123", "role": "store_owner"},
    {"name": "Demo Manager", "email": "manager@shelfcure.com", "password": "manager123", "role": "store_manager"},
)


def _connect(db_config: dict, *, with_database: bool = True):
    return DatabaseConnection(DBConfig.from_mapping(db_config)).connect(with_database=with_database)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for the schema file (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.strip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _strip_create_db_and_use(sql: str) -> str:
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_data(db_config: dict) -> None:
    """Upsert a demo superadmin, store owner (with subscription and store) and store manager."""

    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(name: str, email: str, password: str, role: str) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE users
                    SET name=%s, password_hash=%s, role=%s, is_active=1, login_attempts=0, lock_until=NULL
                    WHERE user_id=%s
                    """,
                    (name, password_hash, role, existing["user_id"]),
                )
                return int(existing["user_id"])
            cur.execute(
                "INSERT INTO users (name, email, phone, password_hash, role) VALUES (%s, %s, %s, %s, %s)",
                (name, email, "9876543210", password_hash, role),
            )
            return int(cur.lastrowid)

        ids = {account["role"]: upsert_user(**account) for account in DEMO_ACCOUNTS}
        owner_id = ids["store_owner"]
        manager_id = ids["store_manager"]

        cur.execute("SELECT subscription_id FROM subscriptions WHERE store_owner_id=%s", (owner_id,))
        if not cur.fetchone():
            plan = plan_features("standard")
            now = datetime.now()
            cur.execute(
                """
                INSERT INTO subscriptions
                    (store_owner_id, plan, status, billing_duration, start_date, end_date,
                     store_count_limit, current_store_count, features, limits, pricing, payment_status)
                VALUES (%s, 'standard', 'active', 'monthly', %s, %s, %s, 0, %s, %s, %s, 'paid')
                """,
                (
                    owner_id,
                    now,
                    now + timedelta(days=365),
                    plan.store_count_limit,
                    dump_json(plan.features),
                    dump_json(plan.limits),
                    dump_json({"amount": plan.amount, "currency": plan.currency, "totalAmount": plan.amount}),
                ),
            )

        cur.execute("SELECT store_id FROM stores WHERE code='DEMO01'")
        row = cur.fetchone()
        if row:
            store_id = int(row["store_id"])
        else:
            cur.execute(
                """
                INSERT INTO stores
                    (owner_id, name, code, phone, street, city, state, country, pincode,
                     license_number, settings, operating_hours, created_by)
                VALUES (%s, 'Demo Pharmacy', 'DEMO01', '9876543210', 'MG Road', 'Bengaluru', 'Karnataka',
                        'India', '560001', 'DL-DEMO-0001', %s, %s, %s)
                """,
                (owner_id, dump_json(default_store_settings()), dump_json(default_operating_hours()), owner_id),
            )
            store_id = int(cur.lastrowid)
            cur.execute(
                "UPDATE subscriptions SET current_store_count = current_store_count + 1 WHERE store_owner_id=%s",
                (owner_id,),
            )

        cur.execute("INSERT IGNORE INTO user_stores (user_id, store_id) VALUES (%s, %s)", (manager_id, store_id))
        cur.execute("UPDATE users SET current_store_id=%s WHERE user_id=%s", (store_id, manager_id))

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
