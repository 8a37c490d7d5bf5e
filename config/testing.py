import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "digitization_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

MAX_IMPORT_BYTES = 1024 * 1024
TIMEZONE = "Asia/Karachi"

BASE_SALARIES = {
    "I.T & Scanning-Employee": 25000,
    "Library-Employee": 22000,
}
SALARY_DAYS_PER_MONTH = 30
