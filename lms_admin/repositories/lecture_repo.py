"""
Lecture Repository - Data access layer for chapter lectures and their content
"""
from collections import defaultdict
from typing import Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lms_admin.model.course_models import Lecture
from lms_admin.model.enums import LectureType
from lms_admin.repositories.base_repo import BaseRepository

# Lecture type -> relationship holding that type's content
CONTENT_RELATIONS: dict[LectureType, str] = {
    LectureType.VIDEO: "video",
    LectureType.DOCUMENT: "document",
    LectureType.QUIZ: "quiz",
    LectureType.ASSIGNMENT: "assignment",
}


class LectureRepository(BaseRepository[Lecture]):
    """
    Repository for Lecture entity scoped by chapter
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Lecture, session)

    async def get_lectures_by_chapter_id(self, chapter_id: int) -> Sequence[Lecture]:
        """
        Get all lectures of a chapter ordered by their ``order`` value.

        Args:
            chapter_id: ID of the chapter

        Returns:
            List of Lecture instances, ties broken by ID
        """
        query = (
            select(Lecture)
            .where(Lecture.course_chapter_id == chapter_id)
            .order_by(Lecture.order, Lecture.id)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_in_chapter(self, chapter_id: int, lecture_id: int) -> Optional[Lecture]:
        """
        Get a lecture only if it belongs to the given chapter.
        """
        query = (
            select(Lecture)
            .where(Lecture.id == lecture_id)
            .where(Lecture.course_chapter_id == chapter_id)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_max_order(self, chapter_id: int) -> int:
        """
        Highest ``order`` in a chapter, 0 when the chapter has no lectures.
        """
        query = select(func.max(Lecture.order)).where(Lecture.course_chapter_id == chapter_id)
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def load_content(self, lectures: Sequence[Lecture]) -> Sequence[Lecture]:
        """
        Eager load each lecture's content relationship chosen by its type.

        Lectures are grouped by type so every type costs one extra query
        instead of one per lecture. A quiz brings its questions and answers
        along through their selectin loaders.

        Args:
            lectures: Lectures already attached to this session

        Returns:
            The same lectures, with content loaded
        """
        ids_by_type: dict[LectureType, list[int]] = defaultdict(list)
        for lecture in lectures:
            ids_by_type[lecture.lecture_type].append(lecture.id)

        for lecture_type, ids in ids_by_type.items():
            relation = getattr(Lecture, CONTENT_RELATIONS[lecture_type])
            query = (
                select(Lecture)
                .options(selectinload(relation))
                .where(Lecture.id.in_(ids))
                .execution_options(populate_existing=True)
            )
            await self.session.execute(query)

        return lectures

    async def get_content(self, lecture: Lecture, lecture_type: Optional[LectureType] = None):
        """
        Load and return the content payload for ``lecture_type``
        (defaults to the lecture's current type), or None.
        """
        relation = CONTENT_RELATIONS[lecture_type or lecture.lecture_type]
        await self.session.refresh(lecture, attribute_names=[relation])
        return getattr(lecture, relation)

    async def delete_content(
            self,
            lecture: Lecture,
            lecture_type: Optional[LectureType] = None,
            commit: bool = True,
    ) -> bool:
        """
        Delete the content payload of one type. Deleting a quiz removes its
        answers and questions first through the ORM cascade.

        Returns:
            True if a payload existed and was deleted
        """
        lecture_type = lecture_type or lecture.lecture_type
        payload = await self.get_content(lecture, lecture_type)
        if payload is None:
            return False

        await self.session.delete(payload)
        await self._finish(commit)
        self.session.expire(lecture, [CONTENT_RELATIONS[lecture_type]])
        return True

    async def delete_with_content(self, lecture: Lecture, commit: bool = True):
        """
        Delete a lecture together with the content matching its type.
        The payload is loaded first so the ORM cascade removes it (and a
        quiz's answers and questions) before the lecture row.
        """
        await self.get_content(lecture)
        await self.session.delete(lecture)
        await self._finish(commit)
