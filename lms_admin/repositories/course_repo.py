"""
Course Repository - Data access layer for courses, their team and chapters
"""

from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from lms_admin.model.course_models import Course, CourseTeamMember, Chapter
from lms_admin.repositories.base_repo import BaseRepository


class CourseRepository(BaseRepository[Course]):
    """
    Repository for Course entity
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Course, session)

    async def is_team_member(self, course_id: int, user_id: int) -> bool:
        """
        Check whether a user belongs to a course's editing team.

        Args:
            course_id: ID of the course
            user_id: ID of the user

        Returns:
            True if the user is on the team
        """
        query = (
            select(func.count(CourseTeamMember.id))
            .where(CourseTeamMember.course_id == course_id)
            .where(CourseTeamMember.user_id == user_id)
        )
        result = await self.session.execute(query)
        return (result.scalar() or 0) > 0

    async def get_chapter(self, course_id: int, chapter_id: int) -> Optional[Chapter]:
        """
        Get a chapter scoped to its course.

        Args:
            course_id: ID of the course the chapter must belong to
            chapter_id: ID of the chapter

        Returns:
            Chapter instance or None when missing or owned by another course
        """
        query = (
            select(Chapter)
            .where(Chapter.id == chapter_id)
            .where(Chapter.course_id == course_id)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
