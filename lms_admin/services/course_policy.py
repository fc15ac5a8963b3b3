from lms_admin.model.course_models import Course
from lms_admin.model.user_models import User
from lms_admin.repositories.course_repo import CourseRepository

NOT_AUTHORIZED_MESSAGE = (
    "You are not authorized to {action}. "
    "Only course owners and team members can modify course content."
)


class CoursePolicy:
    """Decides who may change a course's chapters and lectures"""

    def __init__(self, course_repository: CourseRepository):
        self._course_repository = course_repository

    async def can_modify(self, user: User, course: Course) -> bool:
        if course.user_id == user.id:
            return True
        return await self._course_repository.is_team_member(course.id, user.id)

    @staticmethod
    def denied_message(action: str) -> str:
        return NOT_AUTHORIZED_MESSAGE.format(action=action)
