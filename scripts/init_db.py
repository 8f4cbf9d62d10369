"""Create the ShelfCure database and apply schema.sql (safe to re-run)."""

from __future__ import annotations

from _env import active_db_config

from shelfcure.database.bootstrap import apply_schema, list_tables
from shelfcure.database.connection import DBConfig


def main() -> None:
    db_config = active_db_config()
    apply_schema(db_config)

    tables = list_tables(db_config)
    print(f"Schema ready on {DBConfig.from_mapping(db_config).describe()}: {', '.join(sorted(tables))}")


if __name__ == "__main__":
    main()
