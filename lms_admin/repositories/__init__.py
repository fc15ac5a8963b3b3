"""
Repository package - Data access layer
"""

from lms_admin.repositories.base_repo import BaseRepository
from lms_admin.repositories.commission_repo import CommissionRepository
from lms_admin.repositories.course_repo import CourseRepository
from lms_admin.repositories.lecture_repo import LectureRepository
from lms_admin.repositories.rating_repo import RatingRepository
from lms_admin.repositories.role_repo import RoleRepository
from lms_admin.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "CommissionRepository",
    "CourseRepository",
    "LectureRepository",
    "RatingRepository",
    "RoleRepository",
    "UserRepository",
]
