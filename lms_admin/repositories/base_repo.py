from typing import TypeVar, Generic, Type, Optional, Any, Sequence

from sqlalchemy import select, update, func, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from lms_admin.model.base import Base

# Generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class with common CRUD operations.

    Write methods commit by default. Pass ``commit=False`` to only flush, so
    the caller can group several writes into one transaction and commit or
    roll back itself.

    Usage:
        class UserRepository(BaseRepository[User]):
            def __init__(self, session: AsyncSession):
                super().__init__(User, session)
    """
    model: Type[ModelType]

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    def _soft_deletes(self) -> bool:
        return hasattr(self.model, 'deleted_at')

    def _live_only(self, query: Select, include_deleted: bool) -> Select:
        if not include_deleted and self._soft_deletes():
            query = query.where(self.model.deleted_at.is_(None))
        return query

    async def _finish(self, commit: bool):
        if commit:
            await self.session.commit()
        else:
            await self.session.flush()

    # ==================== CREATE ====================

    async def create(self, obj_in: dict | ModelType, commit: bool = True) -> ModelType:
        """
        Create a new record.

        Args:
            obj_in: Dictionary or model instance with data to create
            commit: Commit immediately, or only flush inside the caller's transaction

        Returns:
            Created model instance
        """
        if isinstance(obj_in, dict):
            db_obj = self.model(**obj_in)
        else:
            db_obj = obj_in

        self.session.add(db_obj)
        await self._finish(commit)
        await self.session.refresh(db_obj)
        return db_obj

    # ==================== READ ====================

    async def get_by_id(self, id: int, include_deleted: bool = False) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Args:
            id: Primary key ID
            include_deleted: Whether to include soft-deleted records

        Returns:
            Model instance or None if not found
        """
        query = select(self.model).where(self.model.id == id)
        query = self._live_only(query, include_deleted)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_field(
        self,
        field: str,
        value: Any,
        include_deleted: bool = False
    ) -> Optional[ModelType]:
        """
        Get a single record by a specific field value.

        Args:
            field: Field name to filter by
            value: Value to match
            include_deleted: Whether to include soft-deleted records

        Returns:
            Model instance or None if not found
        """
        query = select(self.model).where(getattr(self.model, field) == value)
        query = self._live_only(query, include_deleted)

        result = await self.session.execute(query)
        return result.scalars().first()

    async def get_by_ids(self, ids: list[int]) -> Sequence[ModelType]:
        """Get every record whose primary key is in ``ids``."""
        if not ids:
            return []
        result = await self.session.execute(
            select(self.model).where(self.model.id.in_(ids))
        )
        return result.scalars().all()

    # ==================== UPDATE ====================

    async def update(self, db_obj: ModelType, obj_in: dict, commit: bool = True) -> ModelType:
        """
        Update an already loaded record.

        Args:
            db_obj: Model instance to update
            obj_in: Dictionary with fields to update
            commit: Commit immediately, or only flush

        Returns:
            Updated model instance
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self._finish(commit)
        await self.session.refresh(db_obj)
        return db_obj

    async def bulk_update(self, conditions: list, obj_in: dict, commit: bool = True) -> int:
        """
        Bulk update records matching SQL conditions.

        Args:
            conditions: SQLAlchemy boolean expressions combined with AND
            obj_in: Dictionary with fields to update
            commit: Commit immediately, or only flush

        Returns:
            Number of records updated
        """
        stmt = (
            update(self.model)
            .where(and_(*conditions))
            .values(**obj_in)
        )

        result = await self.session.execute(stmt)
        await self._finish(commit)
        return result.rowcount

    # ==================== DELETE ====================

    async def delete(self, db_obj: ModelType, hard_delete: bool = False, commit: bool = True):
        """
        Delete a loaded record (soft delete when the model supports it).

        Args:
            db_obj: Model instance to delete
            hard_delete: If True, permanently delete the record
            commit: Commit immediately, or only flush
        """
        if not hard_delete and self._soft_deletes():
            db_obj.soft_delete()
        else:
            await self.session.delete(db_obj)

        await self._finish(commit)

    # ==================== EXISTS ====================

    async def exists_by_field(
        self,
        field: str,
        value: Any,
        include_deleted: bool = True,
        exclude_id: Optional[int] = None,
    ) -> bool:
        """
        Check if a record exists by a specific field value.

        Soft-deleted rows are counted by default because they still hold
        their unique values.

        Args:
            field: Field name to filter by
            value: Value to match
            include_deleted: Whether to include soft-deleted records
            exclude_id: Ignore the record with this primary key

        Returns:
            True if exists, False otherwise
        """
        query = select(func.count(self.model.id)).where(getattr(self.model, field) == value)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        query = self._live_only(query, include_deleted)

        result = await self.session.execute(query)
        return (result.scalar() or 0) > 0

    # ==================== TRANSACTIONS ====================

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
