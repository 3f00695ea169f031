import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "station_checkin"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

KIOSK_INVITE_PEPPER = os.getenv("KIOSK_INVITE_PEPPER", "dev-pepper")
CHECKOUT_TOLERANCE_MINUTES = int(os.getenv("CHECKOUT_TOLERANCE_MINUTES", "10"))
VISITOR_END_MAX_FUTURE_HOURS = int(os.getenv("VISITOR_END_MAX_FUTURE_HOURS", "6"))

SESSION_COOKIE_SECURE = False
