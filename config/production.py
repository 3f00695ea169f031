import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "station_checkin"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# No defaults: login is refused until both are set.
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

KIOSK_INVITE_PEPPER = os.getenv("KIOSK_INVITE_PEPPER", "")
CHECKOUT_TOLERANCE_MINUTES = int(os.getenv("CHECKOUT_TOLERANCE_MINUTES", "10"))
VISITOR_END_MAX_FUTURE_HOURS = int(os.getenv("VISITOR_END_MAX_FUTURE_HOURS", "6"))

SESSION_COOKIE_SECURE = bool(int(os.getenv("SESSION_COOKIE_SECURE", "1")))
