import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worktime_db"),
}

DEBUG = True

# Apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# "Today" for deadlines and reports is computed in this zone
REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "UTC")

BATCH_WRITE_INTERVAL_SECONDS = float(os.getenv("BATCH_WRITE_INTERVAL_SECONDS", "0.1"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
