import logging

from lms_admin.config import Settings
from lms_admin.model.enums import StaffPermission
from lms_admin.repositories.role_repo import RoleRepository

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, role_repository: RoleRepository, settings: Settings):
        self._role_repository = role_repository
        self._settings = settings

    async def seed_system_roles(self) -> dict[str, list[str]]:
        """
        Create the system roles and staff permissions, granting every staff
        permission to the super admin role. Safe to run repeatedly.

        Returns:
            Mapping of role name to the permission names it holds
        """
        try:
            super_admin = await self._role_repository.get_or_create(
                self._settings.super_admin_role_name, commit=False
            )
            staff = await self._role_repository.get_or_create(
                self._settings.staff_role_name, commit=False
            )
            permissions = [
                await self._role_repository.get_or_create_permission(permission.value, commit=False)
                for permission in StaffPermission
            ]
            await self._role_repository.give_permissions(super_admin, permissions, commit=False)
            await self._role_repository.commit()
        except Exception:
            await self._role_repository.rollback()
            logger.exception("RoleService --> seed_system_roles")
            raise

        logger.info(f"Seeded roles {super_admin.name}, {staff.name}")
        seeded = {}
        for role in (super_admin, staff):
            permissions = await self._role_repository.load_permissions(role)
            seeded[role.name] = sorted(permission.name for permission in permissions)
        return seeded
