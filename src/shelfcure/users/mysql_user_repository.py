from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, name, email, phone, password_hash, role, is_active, current_store_id,
    login_attempts, lock_until, last_login
"""


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}", params)
            row = fetchone(cur)
            if not row:
                return None
            cur.execute("SELECT store_id FROM user_stores WHERE user_id=%s ORDER BY store_id", (row["user_id"],))
            store_ids = tuple(int(r["store_id"]) for r in fetchall(cur))
            return User(
                user_id=int(row["user_id"]),
                name=row["name"],
                email=row["email"],
                phone=row.get("phone"),
                password_hash=row["password_hash"],
                role=Role(row["role"]),
                is_active=bool(row.get("is_active", True)),
                current_store_id=row.get("current_store_id"),
                store_ids=store_ids,
                login_attempts=int(row.get("login_attempts") or 0),
                lock_until=row.get("lock_until"),
                last_login=row.get("last_login"),
            )

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._load("user_id=%s", (int(user_id),))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._load("email=%s", (email.strip().lower(),))

    def create_user(
        self,
        *,
        name: str,
        email: str,
        phone: Optional[str],
        password_hash: str,
        role: Role,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, phone, password_hash, role, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, email.strip().lower(), phone, password_hash, role.value),
            )
            return int(cur.lastrowid)

    def record_failed_login(self, user_id: int, *, attempts: int, lock_until: Optional[datetime]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET login_attempts=%s, lock_until=%s WHERE user_id=%s",
                (int(attempts), lock_until, int(user_id)),
            )

    def record_successful_login(self, user_id: int, *, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET login_attempts=0, lock_until=NULL, last_login=%s WHERE user_id=%s",
                (at, int(user_id)),
            )

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def update_profile(self, user_id: int, *, name: Optional[str], phone: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET name=COALESCE(%s, name), phone=COALESCE(%s, phone)
                WHERE user_id=%s
                """,
                (name, phone, int(user_id)),
            )
            return cur.rowcount > 0

    def set_current_store(self, user_id: int, store_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET current_store_id=%s WHERE user_id=%s", (int(store_id), int(user_id)))
            return cur.rowcount > 0

    def add_store(self, user_id: int, store_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO user_stores (user_id, store_id) VALUES (%s, %s)",
                (int(user_id), int(store_id)),
            )
