"""Shared setup for the database scripts: import paths, .env and the active DB_CONFIG."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv


def active_db_config() -> dict:
    load_dotenv(REPO_ROOT / ".env")

    from config import get_settings_module

    settings = importlib.import_module(get_settings_module())
    return dict(settings.DB_CONFIG)
