from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..absensi.model import NewAbsensi
from ..absensi.repository import AbsensiRepository
from ..common.datetime_utils import iter_days, now_local
from ..common.validators import require_non_empty
from ..core.enums import JenisPengajuan, LeaveRequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..guru.repository import GuruRepository
from ..siswa.model import Siswa
from ..siswa.repository import SiswaRepository
from ..users.repository import UserRepository
from .model import LeaveRequest
from .repository import LeaveRequestRepository


class LeaveRequestService:
    def __init__(
        self,
        requests: LeaveRequestRepository,
        siswas: SiswaRepository,
        absensi: AbsensiRepository,
        gurus: GuruRepository,
        users: UserRepository,
    ):
        self._requests = requests
        self._siswas = siswas
        self._absensi = absensi
        self._gurus = gurus
        self._users = users

    def _require_request(self, request_id: int) -> LeaveRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Pengajuan izin tidak ditemukan")
        return req

    def create(
        self,
        *,
        siswa_id: int,
        start_date: date,
        end_date: date,
        reason: str,
        jenis: JenisPengajuan = JenisPengajuan.IZIN,
    ) -> LeaveRequest:
        reason = require_non_empty(reason, "Alasan")
        if not self._siswas.get_by_id(int(siswa_id)):
            raise NotFoundError("Siswa tidak ditemukan")
        if end_date < start_date:
            raise ValidationError("Tanggal mulai harus sebelum atau sama dengan tanggal selesai")

        request_id = self._requests.create(
            siswa_id=int(siswa_id),
            jenis=JenisPengajuan(jenis),
            start_date=start_date,
            end_date=end_date,
            alasan=reason,
        )
        return self._require_request(request_id)

    def approve(
        self,
        *,
        request_id: int,
        approved_by: int,
        status: LeaveRequestStatus,
        now: datetime | None = None,
    ) -> LeaveRequest:
        """Approve or reject a pending request.

        On approval every day of the range without an absensi record gets an
        izin/sakit record; days that already have one are left untouched.
        Everything is checked before the first write.
        """
        status = LeaveRequestStatus(status)
        if status == LeaveRequestStatus.PENDING:
            raise ValidationError("Status keputusan harus approved atau rejected")

        req = self._require_request(request_id)
        if req.status != LeaveRequestStatus.PENDING:
            raise ValidationError("Pengajuan izin sudah diproses")
        if not self._users.get_by_id(int(approved_by)):
            raise NotFoundError("User penyetuju tidak ditemukan")
        siswa = self._siswas.get_by_id(req.siswa_id)
        if status == LeaveRequestStatus.APPROVED and not siswa:
            raise NotFoundError("Siswa tidak ditemukan")

        decided = self._requests.decide(
            req.id,
            status=status,
            approved_by=int(approved_by),
            approved_at=now or now_local(),
        )
        if not decided:
            raise ValidationError("Pengajuan izin sudah diproses")

        if status == LeaveRequestStatus.APPROVED:
            self._record_leave_days(req, siswa, approved_by=int(approved_by))
        return self._require_request(req.id)

    def _record_leave_days(self, req: LeaveRequest, siswa: Siswa, *, approved_by: int) -> None:
        guru = self._gurus.get_by_user_id(approved_by)
        new_records = [
            NewAbsensi(
                siswa_id=siswa.id,
                kelas_id=siswa.kelas_id,
                status=req.jenis.as_status(),
                tanggal=day,
                guru_id=guru.id if guru else None,
                keterangan=req.alasan,
                jenis_pengajuan=req.jenis,
            )
            for day in iter_days(req.start_date, req.end_date)
            if not self._absensi.get_for_siswa_and_date(siswa.id, day)
        ]
        if new_records:
            self._absensi.create_many(new_records)

    def get_all(self) -> Sequence[LeaveRequest]:
        return self._requests.find()

    def get_pending(self) -> Sequence[LeaveRequest]:
        return self._requests.find(status=LeaveRequestStatus.PENDING)

    def get_by_status(self, status: LeaveRequestStatus) -> Sequence[LeaveRequest]:
        return self._requests.find(status=LeaveRequestStatus(status))

    def get_by_student(self, siswa_id: int) -> Sequence[LeaveRequest]:
        if not self._siswas.get_by_id(int(siswa_id)):
            raise NotFoundError("Siswa tidak ditemukan")
        return self._requests.find(siswa_id=int(siswa_id))

    def delete(self, request_id: int) -> dict:
        req = self._require_request(request_id)
        if req.status != LeaveRequestStatus.PENDING:
            raise ValidationError("Hanya pengajuan berstatus pending yang dapat dihapus")
        self._requests.delete_by_id(req.id)
        return {"success": True}
