from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.absenku.absenku.database.bootstrap import apply_seed_sql, ensure_demo_users
from src.absenku.absenku.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_users(db_config)

    print(f"OK: seeded kelas and demo accounts -> {DBConfig.from_dict(db_config).describe()}")
    print("  admin / admin123, guru.demo / guru123, siswa.demo / siswa123")


if __name__ == "__main__":
    main()
