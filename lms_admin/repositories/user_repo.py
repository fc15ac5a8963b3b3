"""
User Repository - Data access layer for users and the staff listing
"""
from typing import Optional, Sequence

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lms_admin.model.user_models import User, Role
from lms_admin.repositories.base_repo import BaseRepository

# Columns the staff table may be sorted by
SORTABLE_COLUMNS = ("id", "name", "email", "is_active", "created_at", "updated_at", "deleted_at")


class UserRepository(BaseRepository[User]):
    """
    Repository for User entity, including staff search and role loading
    """

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_with_roles(self, user_id: int, include_deleted: bool = False) -> Optional[User]:
        """
        Get a user with roles (and their permissions) eagerly loaded.

        Args:
            user_id: ID of the user
            include_deleted: Whether soft-deleted users are returned

        Returns:
            User instance or None
        """
        query = (
            select(User)
            .options(selectinload(User.roles).selectinload(Role.permissions))
            .where(User.id == user_id)
        )
        query = self._live_only(query, include_deleted)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    def _staff_query(self, only_deleted: bool, search: Optional[str]):
        query = select(User).where(User.roles.any(Role.custom_role.is_(True)))

        if only_deleted:
            query = query.where(User.deleted_at.is_not(None))
        else:
            query = query.where(User.deleted_at.is_(None))

        if search:
            pattern = f"%{search}%"
            query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

        return query

    async def search_staff(
            self,
            offset: int = 0,
            limit: int = 10,
            sort: str = "id",
            order_desc: bool = True,
            only_deleted: bool = False,
            search: Optional[str] = None,
    ) -> tuple[int, Sequence[User]]:
        """
        Page through users holding a custom role.

        Args:
            offset: Number of rows to skip
            limit: Maximum number of rows to return
            sort: Column to sort by, falls back to ``id`` when not sortable
            order_desc: Sort descending
            only_deleted: Return only soft-deleted users instead of only live ones
            search: Case-insensitive substring matched against name or email

        Returns:
            Tuple of (total matching rows, page of users with roles loaded)
        """
        base_query = self._staff_query(only_deleted, search)

        count_query = select(func.count()).select_from(base_query.subquery())
        total = (await self.session.execute(count_query)).scalar() or 0

        sort_column = getattr(User, sort if sort in SORTABLE_COLUMNS else "id")
        page_query = (
            base_query
            .options(selectinload(User.roles))
            .order_by(sort_column.desc() if order_desc else sort_column.asc(), User.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(page_query)
        return total, result.scalars().all()

    async def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        return await self.exists_by_field("email", email, exclude_id=exclude_id)

    async def slug_taken(self, slug: str) -> bool:
        return await self.exists_by_field("slug", slug)
