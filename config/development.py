import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "staff_scheduler"),
}

# SMTP transport for assignment letters; an empty EMAIL_HOST disables sending
MAIL_CONFIG = {
    "host": os.getenv("EMAIL_HOST", ""),
    "port": int(os.getenv("EMAIL_PORT", "587")),
    "username": os.getenv("EMAIL_USER", ""),
    "password": os.getenv("EMAIL_PASSWORD", ""),
    "sender": os.getenv("EMAIL_FROM", ""),
    "use_tls": bool(int(os.getenv("EMAIL_USE_TLS", "1"))),
    "timeout_seconds": float(os.getenv("EMAIL_TIMEOUT", "30")),
    "enabled": bool(int(os.getenv("EMAIL_ENABLED", "1"))),
}
EMAIL_SEND_DELAY_SECONDS = float(os.getenv("EMAIL_SEND_DELAY_SECONDS", "0.5"))

# Reject a booking when any selected staff member is already booked
STRICT_AVAILABILITY_DEFAULT = bool(int(os.getenv("STRICT_AVAILABILITY_DEFAULT", "1")))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
