from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, func
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


# --- Mixin ---
class TimestampMixin:
    """Mixin adding created_at and updated_at columns."""

    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, default=func.now(), onupdate=func.now(), nullable=False
    )


class SoftDeleteMixin:
    """Mixin adding a deleted_at timestamp for soft deletes."""

    deleted_at = Column(DateTime, nullable=True, index=True)

    def soft_delete(self):
        self.deleted_at = datetime.now(timezone.utc).replace(tzinfo=None)


# --- Base class for all models ---
class BaseMixin(TimestampMixin):
    """Base class combining the integer ID and timestamps."""

    id = Column(Integer, primary_key=True, index=True)

    # Default table name: User -> users
    @declared_attr
    def __tablename__(cls):
        return cls.__name__.lower() + "s"

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id})>"
