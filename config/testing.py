from config import env_flag, mysql_settings

SECRET_KEY = "test-secret"
DEBUG = False
TESTING = True

DB_CONFIG = mysql_settings(default_database="shelfcure_test")

JWT_SECRET = "test-jwt-secret"
JWT_EXPIRE_DAYS = 7
DEFAULT_STAFF_PASSWORD = "staff123"

AUTO_INIT_DB = env_flag("AUTO_INIT_DB")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB")
