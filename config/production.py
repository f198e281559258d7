import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "absenku_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SCHOOL_START_TIME = os.getenv("SCHOOL_START_TIME", "07:00")
SCHOOL_END_TIME = os.getenv("SCHOOL_END_TIME", "14:00")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "10"))

# Comma separated list in production, e.g. "https://absenku.sch.id"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

ENFORCE_ROLES = bool(int(os.getenv("ENFORCE_ROLES", "1")))
