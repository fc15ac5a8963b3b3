"""
Staff Service - back office accounts holding a custom role.

Every staff member holds exactly one custom role (picked by an
administrator) plus the fixed system Staff role. Writes that touch several
rows run in one transaction: on failure it is rolled back, the error is
logged and an OperationFailedException is raised.
"""

import logging
from typing import Callable, List, Optional, Sequence

from lms_admin.config import Settings
from lms_admin.model.user_models import Role, User
from lms_admin.repositories.role_repo import RoleRepository
from lms_admin.repositories.user_repo import UserRepository
from lms_admin.schemas.staff import (
    ChangePasswordRequest,
    StaffCreateRequest,
    StaffRow,
    StaffTableResponse,
    StaffUpdateRequest,
)
from lms_admin.services.table_service import delete_button, edit_button
from lms_admin.utils.exceptions import (
    OperationFailedException,
    ResourceNotFoundException,
    ValidationException,
)
from lms_admin.utils.security import default_password_for, hash_password
from lms_admin.utils.slug_utils import generate_unique_slug

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "The email has already been taken."


class StaffService:
    def __init__(
            self,
            user_repository: UserRepository,
            role_repository: RoleRepository,
            settings: Settings,
    ):
        self._user_repository = user_repository
        self._role_repository = role_repository
        self._settings = settings

    async def get_custom_roles(self) -> Sequence[Role]:
        return await self._role_repository.get_custom_roles()

    # ==================== TABLE ====================

    async def staff_table(
            self,
            url_for: Callable[..., str],
            offset: int = 0,
            limit: Optional[int] = None,
            sort: str = "id",
            order: str = "DESC",
            show_deleted: bool = False,
            search: Optional[str] = None,
    ) -> StaffTableResponse:
        """
        Build one page of the staff table.

        Args:
            url_for: Resolves a route name and path params to a URL
            offset: Rows to skip
            limit: Page size, defaults to ``default_page_limit``
            sort: Column to sort by
            order: ``ASC`` or ``DESC`` (case-insensitive)
            show_deleted: Only soft-deleted staff instead of only live staff
            search: Substring of name or email

        Returns:
            ``{total, rows}`` where each row carries status, role_id and
            the operate buttons
        """
        total, users = await self._user_repository.search_staff(
            offset=offset,
            limit=limit if limit is not None else self._settings.default_page_limit,
            sort=sort,
            order_desc=order.upper() != "ASC",
            only_deleted=show_deleted,
            search=search,
        )
        return StaffTableResponse(
            total=total,
            rows=[self._to_row(user, url_for) for user in users],
        )

    @staticmethod
    def _to_row(user: User, url_for: Callable[..., str]) -> StaffRow:
        operate = (
            edit_button(url_for("staffs.update", id=user.id), modal=True)
            + edit_button(
                url_for("staffs.change-password", id=user.id),
                modal=True,
                data_target="#resetPasswordModel",
                row_id=user.id,
                icon_class="fas fa-key",
            )
            + delete_button(url_for("staffs.destroy", id=user.id))
        )

        row = StaffRow.model_validate(user)
        row.status = user.deleted_at is None
        custom_role = user.custom_role
        row.role_id = custom_role.id if custom_role else None
        row.operate = str(operate)
        return row

    # ==================== WRITES ====================

    async def create_staff(self, request: StaffCreateRequest) -> User:
        """
        Create a staff account. The initial password is the local part of
        the email; roles are the requested custom role and the Staff role.

        Raises:
            ValidationException: Email already used or role is not a custom role
            OperationFailedException: The transaction failed and was rolled back
        """
        if await self._user_repository.email_taken(request.email):
            raise ValidationException.for_field("email", EMAIL_TAKEN_MESSAGE)

        role = await self._role_repository.get_custom_role(request.role)
        if not role:
            raise ValidationException.for_field("role", "The selected role is invalid.")

        try:
            staff_role = await self._role_repository.get_or_create(
                self._settings.staff_role_name, commit=False
            )
            slug = await generate_unique_slug(request.name, self._user_repository.slug_taken)
            user = await self._user_repository.create(
                {
                    "name": request.name,
                    "email": request.email,
                    "password": hash_password(default_password_for(request.email)),
                    "slug": slug,
                    "is_active": request.is_active,
                },
                commit=False,
            )
            await self._role_repository.sync_roles(user, [role, staff_role], commit=False)
            await self._user_repository.commit()
        except Exception:
            await self._user_repository.rollback()
            logger.exception("StaffService --> store")
            raise OperationFailedException()

        logger.info(f"Created staff {user.id} with role {role.name}")
        return user

    async def update_staff(self, user_id: int, request: StaffUpdateRequest) -> User:
        """
        Update a staff member, soft-deleted ones included. A new email also
        resets the password to its local part. Only the custom role is
        swapped; the Staff role stays.
        """
        user = await self._user_repository.get_with_roles(user_id, include_deleted=True)
        if not user:
            raise ResourceNotFoundException(f"Staff not found with ID: {user_id}")

        if await self._user_repository.email_taken(request.email, exclude_id=user_id):
            raise ValidationException.for_field("email", EMAIL_TAKEN_MESSAGE)

        new_role = await self._role_repository.get_custom_role(request.role_id)
        if not new_role:
            raise ValidationException.for_field("role_id", "The selected role id is invalid.")

        old_role = user.custom_role
        try:
            data = {"name": request.name, "email": request.email}
            if request.email != user.email:
                data["password"] = hash_password(default_password_for(request.email))
            user = await self._user_repository.update(user, data, commit=False)

            if old_role is None or old_role.id != new_role.id:
                await self._role_repository.swap_role(user, old_role, new_role, commit=False)

            await self._user_repository.commit()
        except Exception:
            await self._user_repository.rollback()
            logger.exception("StaffService --> update")
            raise OperationFailedException()

        return user

    async def delete_staff(self, user_id: int):
        """Soft delete a staff member"""
        user = await self._user_repository.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundException(f"Staff not found with ID: {user_id}")

        try:
            await self._user_repository.delete(user)
        except Exception:
            await self._user_repository.rollback()
            logger.exception("StaffService --> delete")
            raise OperationFailedException("Failed to delete staff")

        logger.info(f"Soft deleted staff {user_id}")

    async def change_password(self, user_id: int, request: ChangePasswordRequest):
        user = await self._user_repository.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundException(f"Staff not found with ID: {user_id}")

        try:
            await self._user_repository.update(
                user, {"password": hash_password(request.confirm_password)}
            )
        except Exception:
            await self._user_repository.rollback()
            logger.exception("StaffService -> change_password")
            raise OperationFailedException()


def custom_role_options(roles: Sequence[Role]) -> List[dict]:
    """Role choices for the staff forms"""
    return [{"id": role.id, "name": role.name} for role in roles]
