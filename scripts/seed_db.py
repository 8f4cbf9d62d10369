"""Apply the schema, then upsert the demo admin, owner, manager and store."""

from __future__ import annotations

from _env import active_db_config

from shelfcure.database.bootstrap import DEMO_ACCOUNTS, apply_schema, ensure_demo_data
from shelfcure.database.connection import DBConfig


def main() -> None:
    db_config = active_db_config()
    apply_schema(db_config)
    ensure_demo_data(db_config)

    print(f"Demo data seeded on {DBConfig.from_mapping(db_config).describe()}")
    for account in DEMO_ACCOUNTS:
        print(f"  {account['role']:<14} {account['email']} / {account['password']}")


if __name__ == "__main__":
    main()
