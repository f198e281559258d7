from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

import pytest

from src.absenku.absenku.core.enums import Role
from src.absenku.absenku.guru.model import Guru
from src.absenku.absenku.kelas.model import Kelas
from src.absenku.absenku.siswa.model import Siswa

from tests.fakes import Repos

SCHOOL_START = time(7, 0)
SCHOOL_END = time(14, 0)


@dataclass
class School:
    wali: Guru
    other_guru: Guru
    kelas: Kelas
    other_kelas: Kelas
    siti: Siswa
    andi: Siswa
    budi: Siswa


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 3, 2, 7, 5, 0)


@pytest.fixture
def repos() -> Repos:
    return Repos.empty()


@pytest.fixture
def school(repos: Repos) -> School:
    repos.add_user("admin", "admin123", Role.ADMIN)
    wali = repos.add_guru("198001012005011001", "Budi Santoso")
    other_guru = repos.add_guru("198502022010012002", "Rina Wati")
    kelas = repos.add_kelas("X IPA 1", wali=wali)
    other_kelas = repos.add_kelas("X IPA 2")
    return School(
        wali=wali,
        other_guru=other_guru,
        kelas=kelas,
        other_kelas=other_kelas,
        siti=repos.add_siswa("0051234567", "Siti Aminah", kelas),
        andi=repos.add_siswa("0051234568", "Andi Pratama", kelas),
        budi=repos.add_siswa("0051234569", "Budi Hartono", other_kelas),
    )


@pytest.fixture
def container(repos: Repos):
    return repos.container(school_start=SCHOOL_START, school_end=SCHOOL_END, grace_minutes=10)


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.absenku.absenku.main import create_app

    app = create_app(container=container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
