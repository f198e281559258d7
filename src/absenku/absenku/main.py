from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .common.datetime_utils import now_local, parse_hhmm
from .core.constants import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_SCHOOL_END,
    DEFAULT_SCHOOL_START,
)
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .rpc import ProcedureRegistry
from .rpc.controller import register as register_rpc
from .rpc.json_provider import AbsenkuJSONProvider

from .container import Container, build_container
from .absensi.controller import register as register_absensi
from .assignments.controller import register as register_assignments
from .dashboard.controller import register as register_dashboard
from .guru.controller import register as register_guru
from .kelas.controller import register as register_kelas
from .leave_requests.controller import register as register_leave_requests
from .reports.controller import register as register_reports
from .siswa.controller import register as register_siswa
from .users.controller import register as register_users

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Pass ``container`` to run against ready-made services (tests use in-memory
    repositories); otherwise a MySQL-backed container is built from settings.
    """
    load_dotenv(override=False)
    app = Flask(__name__)
    app.json = AbsenkuJSONProvider(app)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ENFORCE_ROLES"] = bool(getattr(settings, "ENFORCE_ROLES", False))

    app.config["CORS_ORIGINS"] = list(getattr(settings, "CORS_ORIGINS", None) or DEFAULT_CORS_ORIGINS)
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    if container is None:
        if app.config["DEBUG"]:
            print(
                "[absenku] settings=", settings_module,
                " db=", DBConfig.from_dict(db_config).describe(),
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            if app.config["DEBUG"]:
                print(f"[absenku] schema ready (tables={len(list_tables(db_config))})")
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            if app.config["DEBUG"]:
                print("[absenku] demo seed ready")

        container = build_container(
            db_config=db_config,
            school_start=parse_hhmm(getattr(settings, "SCHOOL_START_TIME", DEFAULT_SCHOOL_START)),
            school_end=parse_hhmm(getattr(settings, "SCHOOL_END_TIME", DEFAULT_SCHOOL_END)),
            grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        )

    registry = ProcedureRegistry()
    register_rpc(app, registry)

    @registry.query("healthcheck")
    def healthcheck():
        return {"status": "ok", "timestamp": now_local()}

    register_users(app, container)
    register_guru(app, container)
    register_kelas(app, container)
    register_siswa(app, container)
    register_assignments(app, container)
    register_absensi(app, container)
    register_leave_requests(app, container)
    register_dashboard(app, container)
    register_reports(app, container)

    return app
