import os

from config import env_flag, mysql_settings

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DEBUG = False

DB_CONFIG = mysql_settings()

# Falls back to SECRET_KEY so tokens are never signed with a published default.
JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "7"))
DEFAULT_STAFF_PASSWORD = os.getenv("DEFAULT_STAFF_PASSWORD", "staff123")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB")
AUTO_SEED_DB = False
