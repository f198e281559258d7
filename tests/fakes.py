from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from src.absenku.absenku.absensi.model import Absensi, AbsensiFilter, NewAbsensi
from src.absenku.absenku.assignments.model import TeacherAssignment
from src.absenku.absenku.container import Container, build_services
from src.absenku.absenku.core.enums import AbsensiStatus, JenisPengajuan, LeaveRequestStatus, Role
from src.absenku.absenku.core.exceptions import ValidationError
from src.absenku.absenku.guru.model import Guru
from src.absenku.absenku.kelas.model import Kelas
from src.absenku.absenku.leave_requests.model import LeaveRequest
from src.absenku.absenku.siswa.model import Siswa
from src.absenku.absenku.users.model import User

CREATED_AT = datetime(2026, 3, 1, 6, 0, 0)


@dataclass
class InMemoryDB:
    users: dict[int, User] = field(default_factory=dict)
    gurus: dict[int, Guru] = field(default_factory=dict)
    kelas: dict[int, Kelas] = field(default_factory=dict)
    siswas: dict[int, Siswa] = field(default_factory=dict)
    assignments: dict[int, TeacherAssignment] = field(default_factory=dict)
    absensi: dict[int, Absensi] = field(default_factory=dict)
    leave_requests: dict[int, LeaveRequest] = field(default_factory=dict)
    _ids: dict[str, int] = field(default_factory=dict)

    def next_id(self, table: str) -> int:
        self._ids[table] = self._ids.get(table, 0) + 1
        return self._ids[table]


class InMemoryUsers:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._db.users.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._db.users.values() if u.username == username), None)

    def list_all(self) -> Sequence[User]:
        return sorted(self._db.users.values(), key=lambda u: u.id)

    def list_by_role(self, role: Role) -> Sequence[User]:
        return [u for u in self.list_all() if u.role == role]

    def create(self, *, username: str, password_hash: str, role: Role) -> int:
        user_id = self._db.next_id("users")
        self._db.users[user_id] = User(
            id=user_id, username=username, password_hash=password_hash, role=Role(role), created_at=CREATED_AT
        )
        return user_id

    def update(self, user_id: int, *, fields: dict) -> bool:
        user = self._db.users.get(int(user_id))
        if not user:
            return False
        self._db.users[user.id] = replace(user, **fields)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        if self._db.users.pop(int(user_id), None) is None:
            return False
        # ON DELETE CASCADE
        for guru in [g for g in self._db.gurus.values() if g.user_id == int(user_id)]:
            InMemoryGurus(self._db).delete_by_id(guru.id)
        for siswa in [s for s in self._db.siswas.values() if s.user_id == int(user_id)]:
            InMemorySiswas(self._db).delete_by_id(siswa.id)
        return True


class InMemoryGurus:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def get_by_id(self, guru_id: int) -> Optional[Guru]:
        return self._db.gurus.get(int(guru_id))

    def get_by_user_id(self, user_id: int) -> Optional[Guru]:
        return next((g for g in self._db.gurus.values() if g.user_id == int(user_id)), None)

    def get_by_nip(self, nip: str) -> Optional[Guru]:
        return next((g for g in self._db.gurus.values() if g.nip == nip), None)

    def list_all(self) -> Sequence[Guru]:
        return sorted(self._db.gurus.values(), key=lambda g: g.nama)

    def create(self, *, user_id: int, nip: str, nama: str, foto: Optional[str]) -> int:
        guru_id = self._db.next_id("guru")
        self._db.gurus[guru_id] = Guru(id=guru_id, user_id=user_id, nip=nip, nama=nama, foto=foto, created_at=CREATED_AT)
        return guru_id

    def update(self, guru_id: int, *, fields: dict) -> bool:
        guru = self._db.gurus.get(int(guru_id))
        if not guru:
            return False
        self._db.gurus[guru.id] = replace(guru, **fields)
        return True

    def delete_by_id(self, guru_id: int) -> bool:
        guru_id = int(guru_id)
        if self._db.gurus.pop(guru_id, None) is None:
            return False
        for k in list(self._db.kelas.values()):
            if k.wali_kelas_id == guru_id:
                self._db.kelas[k.id] = replace(k, wali_kelas_id=None)
        for a in list(self._db.assignments.values()):
            if a.guru_id == guru_id:
                del self._db.assignments[a.id]
        for r in list(self._db.absensi.values()):
            if r.guru_id == guru_id:
                self._db.absensi[r.id] = replace(r, guru_id=None)
        return True

    def count(self) -> int:
        return len(self._db.gurus)


class InMemoryKelas:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def _joined(self, k: Kelas) -> Kelas:
        wali = self._db.gurus.get(k.wali_kelas_id) if k.wali_kelas_id else None
        return replace(
            k,
            wali_kelas_nama=wali.nama if wali else None,
            jumlah_siswa=sum(1 for s in self._db.siswas.values() if s.kelas_id == k.id),
        )

    def get_by_id(self, kelas_id: int) -> Optional[Kelas]:
        k = self._db.kelas.get(int(kelas_id))
        return self._joined(k) if k else None

    def get_by_name(self, nama_kelas: str) -> Optional[Kelas]:
        k = next((k for k in self._db.kelas.values() if k.nama_kelas == nama_kelas), None)
        return self._joined(k) if k else None

    def list_all(self) -> Sequence[Kelas]:
        return [self._joined(k) for k in sorted(self._db.kelas.values(), key=lambda k: k.nama_kelas)]

    def list_by_wali_kelas(self, guru_id: int) -> Sequence[Kelas]:
        return [k for k in self.list_all() if k.wali_kelas_id == int(guru_id)]

    def list_by_teacher(self, guru_id: int) -> Sequence[Kelas]:
        assigned = {a.kelas_id for a in self._db.assignments.values() if a.guru_id == int(guru_id)}
        return [k for k in self.list_all() if k.wali_kelas_id == int(guru_id) or k.id in assigned]

    def create(self, *, nama_kelas: str, wali_kelas_id: Optional[int]) -> int:
        kelas_id = self._db.next_id("kelas")
        self._db.kelas[kelas_id] = Kelas(
            id=kelas_id, nama_kelas=nama_kelas, wali_kelas_id=wali_kelas_id, created_at=CREATED_AT
        )
        return kelas_id

    def update(self, kelas_id: int, *, fields: dict) -> bool:
        k = self._db.kelas.get(int(kelas_id))
        if not k:
            return False
        self._db.kelas[k.id] = replace(k, **fields)
        return True

    def delete_by_id(self, kelas_id: int) -> bool:
        kelas_id = int(kelas_id)
        if self._db.kelas.pop(kelas_id, None) is None:
            return False
        for s in [s for s in self._db.siswas.values() if s.kelas_id == kelas_id]:
            InMemorySiswas(self._db).delete_by_id(s.id)
        for r in [r for r in self._db.absensi.values() if r.kelas_id == kelas_id]:
            del self._db.absensi[r.id]
        for a in [a for a in self._db.assignments.values() if a.kelas_id == kelas_id]:
            del self._db.assignments[a.id]
        return True

    def count(self) -> int:
        return len(self._db.kelas)


class InMemorySiswas:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def _joined(self, s: Siswa) -> Siswa:
        k = self._db.kelas.get(s.kelas_id)
        return replace(s, nama_kelas=k.nama_kelas if k else None)

    def get_by_id(self, siswa_id: int) -> Optional[Siswa]:
        s = self._db.siswas.get(int(siswa_id))
        return self._joined(s) if s else None

    def get_by_user_id(self, user_id: int) -> Optional[Siswa]:
        s = next((s for s in self._db.siswas.values() if s.user_id == int(user_id)), None)
        return self._joined(s) if s else None

    def get_by_nisn(self, nisn: str) -> Optional[Siswa]:
        s = next((s for s in self._db.siswas.values() if s.nisn == nisn), None)
        return self._joined(s) if s else None

    def list_all(self) -> Sequence[Siswa]:
        return [self._joined(s) for s in sorted(self._db.siswas.values(), key=lambda s: s.nama)]

    def list_by_kelas(self, kelas_ids: Sequence[int]) -> Sequence[Siswa]:
        ids = {int(i) for i in kelas_ids}
        return [s for s in self.list_all() if s.kelas_id in ids]

    def create(self, *, user_id: int, nisn: str, nama: str, kelas_id: int, foto: Optional[str]) -> int:
        siswa_id = self._db.next_id("siswa")
        self._db.siswas[siswa_id] = Siswa(
            id=siswa_id, user_id=user_id, nisn=nisn, nama=nama, kelas_id=kelas_id, foto=foto, created_at=CREATED_AT
        )
        return siswa_id

    def update(self, siswa_id: int, *, fields: dict) -> bool:
        s = self._db.siswas.get(int(siswa_id))
        if not s:
            return False
        self._db.siswas[s.id] = replace(s, **fields)
        return True

    def delete_by_id(self, siswa_id: int) -> bool:
        siswa_id = int(siswa_id)
        if self._db.siswas.pop(siswa_id, None) is None:
            return False
        for r in [r for r in self._db.absensi.values() if r.siswa_id == siswa_id]:
            del self._db.absensi[r.id]
        for lr in [lr for lr in self._db.leave_requests.values() if lr.siswa_id == siswa_id]:
            del self._db.leave_requests[lr.id]
        return True

    def count(self, kelas_ids: Optional[Sequence[int]] = None) -> int:
        if kelas_ids is None:
            return len(self._db.siswas)
        return len(self.list_by_kelas(kelas_ids))


class InMemoryAssignments:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def _joined(self, a: TeacherAssignment) -> TeacherAssignment:
        guru = self._db.gurus.get(a.guru_id)
        kelas = self._db.kelas.get(a.kelas_id)
        return replace(a, guru_nama=guru.nama if guru else None, nama_kelas=kelas.nama_kelas if kelas else None)

    def get(self, *, guru_id: int, kelas_id: int) -> Optional[TeacherAssignment]:
        a = next(
            (a for a in self._db.assignments.values() if a.guru_id == int(guru_id) and a.kelas_id == int(kelas_id)),
            None,
        )
        return self._joined(a) if a else None

    def list_by_guru(self, guru_id: int) -> Sequence[TeacherAssignment]:
        return [self._joined(a) for a in self._db.assignments.values() if a.guru_id == int(guru_id)]

    def list_by_kelas(self, kelas_id: int) -> Sequence[TeacherAssignment]:
        return [self._joined(a) for a in self._db.assignments.values() if a.kelas_id == int(kelas_id)]

    def create(self, *, guru_id: int, kelas_id: int, is_homeroom: bool) -> int:
        if self.get(guru_id=guru_id, kelas_id=kelas_id):
            raise ValidationError("Guru sudah ditugaskan di kelas ini")
        assignment_id = self._db.next_id("guru_kelas")
        self._db.assignments[assignment_id] = TeacherAssignment(
            id=assignment_id, guru_id=guru_id, kelas_id=kelas_id, is_homeroom=is_homeroom, assigned_at=CREATED_AT
        )
        return assignment_id

    def set_homeroom(self, assignment_id: int, *, is_homeroom: bool) -> bool:
        a = self._db.assignments.get(int(assignment_id))
        if not a:
            return False
        self._db.assignments[a.id] = replace(a, is_homeroom=is_homeroom)
        return True

    def delete_by_id(self, assignment_id: int) -> bool:
        return self._db.assignments.pop(int(assignment_id), None) is not None


class InMemoryAbsensi:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def _joined(self, r: Absensi) -> Absensi:
        siswa = self._db.siswas.get(r.siswa_id)
        kelas = self._db.kelas.get(r.kelas_id)
        guru = self._db.gurus.get(r.guru_id) if r.guru_id else None
        return replace(
            r,
            siswa_nama=siswa.nama if siswa else None,
            nisn=siswa.nisn if siswa else None,
            nama_kelas=kelas.nama_kelas if kelas else None,
            guru_nama=guru.nama if guru else None,
        )

    @staticmethod
    def _matches(r: Absensi, flt: AbsensiFilter) -> bool:
        if flt.kelas_ids is not None and r.kelas_id not in set(flt.kelas_ids):
            return False
        if flt.kelas_id is not None and r.kelas_id != flt.kelas_id:
            return False
        if flt.siswa_id is not None and r.siswa_id != flt.siswa_id:
            return False
        if flt.start_date is not None and r.tanggal < flt.start_date:
            return False
        if flt.end_date is not None and r.tanggal > flt.end_date:
            return False
        if flt.status is not None and r.status != flt.status:
            return False
        return True

    def get_by_id(self, absensi_id: int) -> Optional[Absensi]:
        r = self._db.absensi.get(int(absensi_id))
        return self._joined(r) if r else None

    def get_for_siswa_and_date(self, siswa_id: int, tanggal: date) -> Optional[Absensi]:
        r = next(
            (r for r in self._db.absensi.values() if r.siswa_id == int(siswa_id) and r.tanggal == tanggal),
            None,
        )
        return self._joined(r) if r else None

    def find(self, flt: AbsensiFilter, *, limit: Optional[int] = None) -> Sequence[Absensi]:
        items = [self._joined(r) for r in self._db.absensi.values() if self._matches(r, flt)]
        items.sort(key=lambda r: (r.tanggal, r.id), reverse=True)
        return items[:limit] if limit else items

    def create(self, record: NewAbsensi) -> int:
        if self.get_for_siswa_and_date(record.siswa_id, record.tanggal):
            # UNIQUE (siswa_id, tanggal)
            raise ValidationError("Absensi siswa untuk tanggal ini sudah ada")
        absensi_id = self._db.next_id("absensi")
        self._db.absensi[absensi_id] = Absensi(
            id=absensi_id,
            siswa_id=record.siswa_id,
            kelas_id=record.kelas_id,
            status=record.status,
            tanggal=record.tanggal,
            guru_id=record.guru_id,
            waktu_masuk=record.waktu_masuk,
            waktu_pulang=record.waktu_pulang,
            keterangan=record.keterangan,
            jenis_pengajuan=record.jenis_pengajuan,
            created_at=CREATED_AT,
        )
        return absensi_id

    def create_many(self, records: Sequence[NewAbsensi]) -> list[int]:
        return [self.create(r) for r in records]

    def update(self, absensi_id: int, *, fields: dict) -> bool:
        r = self._db.absensi.get(int(absensi_id))
        if not r:
            return False
        self._db.absensi[r.id] = replace(r, **fields)
        return True

    def delete_by_id(self, absensi_id: int) -> bool:
        return self._db.absensi.pop(int(absensi_id), None) is not None

    def count_by_status(self, flt: AbsensiFilter) -> dict[str, int]:
        counts = {s.value: 0 for s in AbsensiStatus}
        for r in self._db.absensi.values():
            if self._matches(r, flt):
                counts[r.status.value] += 1
        return counts


class InMemoryLeaveRequests:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def _joined(self, lr: LeaveRequest) -> LeaveRequest:
        siswa = self._db.siswas.get(lr.siswa_id)
        kelas = self._db.kelas.get(siswa.kelas_id) if siswa else None
        return replace(lr, siswa_nama=siswa.nama if siswa else None, nama_kelas=kelas.nama_kelas if kelas else None)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        lr = self._db.leave_requests.get(int(request_id))
        return self._joined(lr) if lr else None

    def find(
        self,
        *,
        status: Optional[LeaveRequestStatus] = None,
        siswa_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        items = [
            self._joined(lr)
            for lr in self._db.leave_requests.values()
            if (status is None or lr.status == status) and (siswa_id is None or lr.siswa_id == siswa_id)
        ]
        items.sort(key=lambda lr: lr.id, reverse=True)
        return items

    def create(self, *, siswa_id: int, jenis: JenisPengajuan, start_date: date, end_date: date, alasan: str) -> int:
        request_id = self._db.next_id("pengajuan_izin")
        self._db.leave_requests[request_id] = LeaveRequest(
            id=request_id,
            siswa_id=siswa_id,
            jenis=jenis,
            start_date=start_date,
            end_date=end_date,
            alasan=alasan,
            status=LeaveRequestStatus.PENDING,
            created_at=CREATED_AT,
        )
        return request_id

    def decide(self, request_id: int, *, status: LeaveRequestStatus, approved_by: int, approved_at: datetime) -> bool:
        lr = self._db.leave_requests.get(int(request_id))
        if not lr or lr.status != LeaveRequestStatus.PENDING:
            return False
        if int(approved_by) not in self._db.users:
            raise ValidationError("Data referensi tidak ditemukan")
        self._db.leave_requests[lr.id] = replace(lr, status=status, approved_by=approved_by, approved_at=approved_at)
        return True

    def delete_by_id(self, request_id: int) -> bool:
        return self._db.leave_requests.pop(int(request_id), None) is not None


@dataclass
class Repos:
    db: InMemoryDB
    users: InMemoryUsers
    gurus: InMemoryGurus
    kelas: InMemoryKelas
    siswas: InMemorySiswas
    assignments: InMemoryAssignments
    absensi: InMemoryAbsensi
    leave_requests: InMemoryLeaveRequests

    @classmethod
    def empty(cls) -> "Repos":
        db = InMemoryDB()
        return cls(
            db=db,
            users=InMemoryUsers(db),
            gurus=InMemoryGurus(db),
            kelas=InMemoryKelas(db),
            siswas=InMemorySiswas(db),
            assignments=InMemoryAssignments(db),
            absensi=InMemoryAbsensi(db),
            leave_requests=InMemoryLeaveRequests(db),
        )

    def container(self, **kwargs) -> Container:
        return build_services(
            users_repo=self.users,
            guru_repo=self.gurus,
            kelas_repo=self.kelas,
            siswa_repo=self.siswas,
            assignments_repo=self.assignments,
            absensi_repo=self.absensi,
            leave_requests_repo=self.leave_requests,
            **kwargs,
        )

    # ---- seeding helpers ----
    def add_user(self, username: str, password: str, role: Role, *, is_active: bool = True) -> int:
        user_id = self.users.create(username=username, password_hash=generate_password_hash(password), role=role)
        if not is_active:
            self.users.update(user_id, fields={"is_active": False})
        return user_id

    def add_guru(self, nip: str, nama: str, *, password: str = "guru123") -> Guru:
        user_id = self.add_user(f"guru.{nip}", password, Role.GURU)
        return self.gurus.get_by_id(self.gurus.create(user_id=user_id, nip=nip, nama=nama, foto=None))

    def add_kelas(self, nama_kelas: str, *, wali: Optional[Guru] = None) -> Kelas:
        kelas_id = self.kelas.create(nama_kelas=nama_kelas, wali_kelas_id=wali.id if wali else None)
        if wali:
            self.assignments.create(guru_id=wali.id, kelas_id=kelas_id, is_homeroom=True)
        return self.kelas.get_by_id(kelas_id)

    def add_siswa(self, nisn: str, nama: str, kelas: Kelas, *, password: str = "siswa123") -> Siswa:
        user_id = self.add_user(f"siswa.{nisn}", password, Role.SISWA)
        siswa_id = self.siswas.create(user_id=user_id, nisn=nisn, nama=nama, kelas_id=kelas.id, foto=None)
        return self.siswas.get_by_id(siswa_id)

    def add_absensi(self, siswa: Siswa, tanggal: date, status: AbsensiStatus, **kwargs) -> Absensi:
        absensi_id = self.absensi.create(
            NewAbsensi(siswa_id=siswa.id, kelas_id=siswa.kelas_id, status=status, tanggal=tanggal, **kwargs)
        )
        return self.absensi.get_by_id(absensi_id)
