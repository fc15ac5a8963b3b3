"""
Enums shared by models and schemas
"""
from enum import Enum


class LectureType(str, Enum):
    """Which single content payload a lecture owns"""
    VIDEO = "video"
    DOCUMENT = "document"
    QUIZ = "quiz"
    ASSIGNMENT = "assignment"


class QuestionType(str, Enum):
    """Type of quiz question"""
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"


class RateableType(str, Enum):
    """Entities a rating can be attached to"""
    COURSE = "course"
    INSTRUCTOR = "instructor"


class CommissionStatus(str, Enum):
    """Affiliate commission lifecycle"""
    PENDING = "pending"
    AVAILABLE = "available"
    WITHDRAWN = "withdrawn"


class StaffPermission(str, Enum):
    """Permissions guarding the staff back office"""
    LIST = "staff-list"
    CREATE = "staff-create"
    EDIT = "staff-edit"
    DELETE = "staff-delete"
