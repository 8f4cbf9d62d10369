import pytest

from config import env_flag, get_settings_module, mysql_settings
from shelfcure.database.connection import DBConfig


@pytest.mark.parametrize(
    "env, expected",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("test", "config.testing"),
        ("dev", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_settings_module_from_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_env_flag(monkeypatch):
    monkeypatch.setenv("AUTO_INIT_DB", "yes")
    assert env_flag("AUTO_INIT_DB") is True
    monkeypatch.setenv("AUTO_INIT_DB", "0")
    assert env_flag("AUTO_INIT_DB", True) is False
    monkeypatch.setenv("AUTO_INIT_DB", " ")
    assert env_flag("AUTO_INIT_DB", True) is True


def test_mysql_settings_reads_db_variables(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "3307")
    monkeypatch.delenv("DB_NAME", raising=False)

    raw = mysql_settings(default_database="shelfcure_test")
    assert raw["host"] == "db.internal"
    assert raw["port"] == 3307
    assert raw["database"] == "shelfcure_test"


def test_db_config_from_mapping_fills_defaults():
    config = DBConfig.from_mapping({"host": "", "user": "app", "port": "3310"})

    assert config.host == "localhost"
    assert config.port == 3310
    assert config.database == "shelfcure"
    assert config.charset == "utf8mb4"
    assert config.describe() == "app@localhost:3310/shelfcure"
