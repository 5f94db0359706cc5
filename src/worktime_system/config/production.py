import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worktime_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "UTC")

BATCH_WRITE_INTERVAL_SECONDS = float(os.getenv("BATCH_WRITE_INTERVAL_SECONDS", "0.1"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
