import os

from config import env_flag, mysql_settings

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DEBUG = True

DB_CONFIG = mysql_settings()

# Bearer tokens for the /api routes
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "7"))

# Initial password for staff members granted system access
DEFAULT_STAFF_PASSWORD = os.getenv("DEFAULT_STAFF_PASSWORD", "staff123")

# Apply schema.sql at startup (CREATE ... IF NOT EXISTS, safe to repeat)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB")
