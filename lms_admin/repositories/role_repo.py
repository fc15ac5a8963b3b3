"""
Role Repository - roles, permissions and their assignment to users
"""
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lms_admin.model.user_models import Role, Permission, User
from lms_admin.repositories.base_repo import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """
    Repository for Role entity and role/permission bookkeeping
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Role, session)

    async def get_custom_roles(self) -> Sequence[Role]:
        """Roles staff administrators may assign, by name."""
        query = select(Role).where(Role.custom_role.is_(True)).order_by(Role.name)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_custom_role(self, role_id: int) -> Optional[Role]:
        query = select(Role).where(Role.id == role_id).where(Role.custom_role.is_(True))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_or_create(self, name: str, custom_role: bool = False, commit: bool = True) -> Role:
        """
        Get a role by name, creating it when missing.
        """
        role = await self.get_by_field("name", name)
        if role is None:
            role = await self.create({"name": name, "custom_role": custom_role}, commit=commit)
        return role

    async def get_or_create_permission(self, name: str, commit: bool = True) -> Permission:
        result = await self.session.execute(select(Permission).where(Permission.name == name))
        permission = result.scalar_one_or_none()
        if permission is None:
            permission = Permission(name=name)
            self.session.add(permission)
            await self._finish(commit)
        return permission

    async def give_permissions(self, role: Role, permissions: Sequence[Permission], commit: bool = True):
        """Grant permissions to a role, skipping ones it already has."""
        await self.session.refresh(role, attribute_names=["permissions"])
        for permission in permissions:
            if permission not in role.permissions:
                role.permissions.append(permission)
        await self._finish(commit)

    async def sync_roles(self, user: User, roles: Sequence[Role], commit: bool = True):
        """Replace every role of a user with ``roles``."""
        await self.session.refresh(user, attribute_names=["roles"])
        user.roles = list(dict.fromkeys(roles))
        await self._finish(commit)

    async def swap_role(self, user: User, old_role: Optional[Role], new_role: Role, commit: bool = True):
        """
        Remove ``old_role`` from a user and assign ``new_role``; every other
        role the user holds is left in place.
        """
        await self.session.refresh(user, attribute_names=["roles"])
        if old_role is not None and old_role in user.roles:
            user.roles.remove(old_role)
        if new_role not in user.roles:
            user.roles.append(new_role)
        await self._finish(commit)

    async def load_permissions(self, role: Role) -> Sequence[Permission]:
        await self.session.refresh(role, attribute_names=["permissions"])
        return role.permissions
