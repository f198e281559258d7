"""Absenku: school attendance service.

Organized by feature modules (users, guru, kelas, siswa, absensi, ...), each
with a repository/service layer and a thin controller that registers RPC
procedures.
"""
