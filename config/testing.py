import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "station_checkin_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "test-password"

KIOSK_INVITE_PEPPER = "test-pepper"
CHECKOUT_TOLERANCE_MINUTES = 10
VISITOR_END_MAX_FUTURE_HOURS = 6

SESSION_COOKIE_SECURE = False
