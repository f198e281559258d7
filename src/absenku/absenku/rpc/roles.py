from ..core.enums import Role

# Role sets used by procedures when ENFORCE_ROLES is on.
ADMIN_ONLY = (Role.ADMIN,)
STAFF = (Role.ADMIN, Role.GURU)
ANY_ROLE = (Role.ADMIN, Role.GURU, Role.SISWA)
