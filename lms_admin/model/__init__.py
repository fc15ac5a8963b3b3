"""
Model package - Database models and enums
"""
from lms_admin.model.base import Base, BaseMixin, TimestampMixin, SoftDeleteMixin
from lms_admin.model.enums import (
    CommissionStatus,
    LectureType,
    QuestionType,
    RateableType,
    StaffPermission,
)
from lms_admin.model.user_models import User, Role, Permission
from lms_admin.model.course_models import Course, CourseTeamMember, Chapter, Lecture
from lms_admin.model.content_models import LectureVideo, LectureDocument, LectureAssignment
from lms_admin.model.quiz_models import Quiz, QuizQuestion, QuizAnswer
from lms_admin.model.rating_models import Rating
from lms_admin.model.affiliate_models import AffiliateCommission

__all__ = [
    # Base classes
    'Base',
    'BaseMixin',
    'TimestampMixin',
    'SoftDeleteMixin',
    # Enums
    'CommissionStatus',
    'LectureType',
    'QuestionType',
    'RateableType',
    'StaffPermission',
    # Users
    'User',
    'Role',
    'Permission',
    # Course models
    'Course',
    'CourseTeamMember',
    'Chapter',
    'Lecture',
    # Lecture content
    'LectureVideo',
    'LectureDocument',
    'LectureAssignment',
    'Quiz',
    'QuizQuestion',
    'QuizAnswer',
    # Ratings
    'Rating',
    # Affiliates
    'AffiliateCommission',
]
