import logging
from functools import lru_cache
from typing import Optional, Type, TypeVar

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from lms_admin.config import get_settings
from lms_admin.dependencies.db import get_database
from lms_admin.model.course_models import Chapter
from lms_admin.model.user_models import User
from lms_admin.repositories.course_repo import CourseRepository
from lms_admin.repositories.lecture_repo import LectureRepository
from lms_admin.repositories.role_repo import RoleRepository
from lms_admin.repositories.user_repo import UserRepository
from lms_admin.services.auth_service import AuthService
from lms_admin.services.course_policy import CoursePolicy
from lms_admin.services.lecture_service import LectureService
from lms_admin.services.staff_service import StaffService
from lms_admin.utils.exceptions import PermissionDeniedException, UnauthorizedException

logger = logging.getLogger(__name__)

PayloadType = TypeVar("PayloadType", bound=BaseModel)


# =============================
#   Repository Dependencies
# =============================
async def get_user_repository(
        session: AsyncSession = Depends(get_database),
) -> UserRepository:
    return UserRepository(session)


async def get_role_repository(
        session: AsyncSession = Depends(get_database),
) -> RoleRepository:
    return RoleRepository(session)


async def get_course_repository(
        session: AsyncSession = Depends(get_database),
) -> CourseRepository:
    return CourseRepository(session)


async def get_lecture_repository(
        session: AsyncSession = Depends(get_database),
) -> LectureRepository:
    return LectureRepository(session)


# =============================
#   Services (Per-Request)
# =============================
async def get_lecture_service(
        lecture_repository: LectureRepository = Depends(get_lecture_repository),
        course_repository: CourseRepository = Depends(get_course_repository),
) -> LectureService:
    """
    Get LectureService instance with all dependencies injected.

    Both repositories share the request's database session.
    """
    return LectureService(
        lecture_repository=lecture_repository,
        course_repository=course_repository,
        course_policy=CoursePolicy(course_repository),
    )


async def get_staff_service(
        user_repository: UserRepository = Depends(get_user_repository),
        role_repository: RoleRepository = Depends(get_role_repository),
) -> StaffService:
    return StaffService(
        user_repository=user_repository,
        role_repository=role_repository,
        settings=get_settings(),
    )


# =============================
#   Authentication & Authorization
# =============================
async def get_current_user(
        user_id: int = Depends(AuthService.get_current_user),
        user_repository: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Load the authenticated user with roles and permissions.
    Unknown and soft-deleted users are rejected.
    """
    user = await user_repository.get_with_roles(user_id)
    if not user:
        logger.warning(f"Token refers to unknown or deleted user {user_id}")
        raise UnauthorizedException("Unauthenticated")
    return user


def require_permissions(*permissions: str):
    """
    Dependency factory passing when the current user holds any of
    ``permissions``.

    Usage:
        @router.get("", dependencies=[Depends(require_permissions("staff-list"))])
    """

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.has_any_permission(*permissions):
            logger.warning(f"User {user.id} lacks any of {permissions}")
            raise PermissionDeniedException()
        return user

    return dependency


@lru_cache
def course_chapter(action: Optional[str] = None):
    """
    Dependency factory resolving the ``{course}``/``{chapter}`` path.

    With ``action`` the user must be allowed to modify the course. The same
    callable is returned per ``action``, so FastAPI resolves it once per
    request however many dependencies ask for it.
    """

    async def dependency(
            course: int,
            chapter: int,
            user: User = Depends(get_current_user),
            lecture_service: LectureService = Depends(get_lecture_service),
    ) -> Chapter:
        return await lecture_service.resolve_chapter(course, chapter, user, action)

    return dependency


def chapter_payload(model: Type[PayloadType], action: str):
    """
    Dependency factory parsing the JSON body into ``model`` once
    ``course_chapter(action)`` has passed.

    Usage:
        payload: LectureCreateRequest = Depends(
            chapter_payload(LectureCreateRequest, "add lectures to this course")
        )
    """

    async def dependency(
            request: Request,
            chapter: Chapter = Depends(course_chapter(action)),
    ) -> PayloadType:
        body = await request.body()
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False), body=body)

    return dependency
