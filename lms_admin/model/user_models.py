"""
User, role and permission models.

Roles and permissions follow the usual role-based layout: users hold roles
through ``model_has_roles`` and roles grant permissions through
``role_has_permissions``.
"""

from sqlalchemy import (
    Column,
    String,
    Boolean,
    Integer,
    ForeignKey,
    Table,
)
from sqlalchemy.orm import relationship

from lms_admin.model.base import Base, BaseMixin, SoftDeleteMixin

model_has_roles = Table(
    "model_has_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

role_has_permissions = Table(
    "role_has_permissions",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "permission_id",
        Integer,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Permission(Base, BaseMixin):
    __tablename__ = "permissions"

    name = Column(String(125), unique=True, nullable=False)

    def __repr__(self):
        return f"<Permission(id={self.id}, name={self.name})>"


class Role(Base, BaseMixin):
    """
    A named role. ``custom_role`` roles are created and assigned by staff
    administrators; the others are fixed system roles.
    """

    __tablename__ = "roles"

    name = Column(String(125), unique=True, nullable=False)
    custom_role = Column(Boolean, default=False, nullable=False)

    permissions = relationship(
        "Permission",
        secondary=role_has_permissions,
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Role(id={self.id}, name={self.name}, custom={self.custom_role})>"


class User(Base, BaseMixin, SoftDeleteMixin):
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    roles = relationship("Role", secondary=model_has_roles)

    def has_permission(self, name: str) -> bool:
        return any(
            permission.name == name
            for role in self.roles
            for permission in role.permissions
        )

    def has_any_permission(self, *names: str) -> bool:
        return any(self.has_permission(name) for name in names)

    @property
    def custom_role(self):
        """The single staff-assignable role held by this user, if any"""
        return next((role for role in self.roles if role.custom_role), None)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
