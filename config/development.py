import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "absenku_db"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo kelas and accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# School day; check-in after start + grace is "late", check-out before end is "early"
SCHOOL_START_TIME = os.getenv("SCHOOL_START_TIME", "07:00")
SCHOOL_END_TIME = os.getenv("SCHOOL_END_TIME", "14:00")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "10"))

# Comma separated; cookies are sent cross-origin, so never "*"
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if o.strip()
]

# Check session role on every RPC procedure
ENFORCE_ROLES = bool(int(os.getenv("ENFORCE_ROLES", "0")))
